# fam/domains/shared/__init__.py
