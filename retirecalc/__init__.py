"""Retirement savings calculator: projection engine, web form and lead relay."""

__version__ = "0.1.0"
