# fam/domains/__init__.py
