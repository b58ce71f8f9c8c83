# fam/domains/asset/__init__.py
