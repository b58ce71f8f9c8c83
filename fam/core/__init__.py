# fam/core/__init__.py
