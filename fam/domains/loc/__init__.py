# fam/domains/loc/__init__.py
