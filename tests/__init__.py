"""
Only the root tests directory carries an __init__.py.

It makes pytest treat tests/ as a package, which keeps imports consistent
across environments. Subdirectories rely on implicit namespace packages
(PEP 420), so every test module needs a unique file name.
"""
