# a11y_page_checker/__init__.py
"""
A11y Page Checker package initializer.
Defines package version.
"""
__version__ = "0.1.0"
