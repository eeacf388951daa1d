"""Health Links: cited health information behind a global daily quota."""

__version__ = "0.1.0"
