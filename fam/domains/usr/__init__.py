# fam/domains/usr/__init__.py
