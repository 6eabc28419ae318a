"""Bulk-update records (body fields and sublist lines) from a CSV of changes."""

__version__ = "0.1.0"
