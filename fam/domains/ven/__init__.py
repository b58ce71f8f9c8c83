# fam/domains/ven/__init__.py
