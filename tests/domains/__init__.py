# tests/domains/__init__.py
