"""Concurrent spreadsheet entry validator.

Reads medicine delivery records from an Excel workbook, parses and validates
each row in a worker pool, and separates valid entries from line-tagged errors.
"""

__version__ = "0.1.0"
