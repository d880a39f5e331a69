"""Bulk verification of directory-user tables (Create / Update) in Excel workbooks."""

__version__ = "0.1.0"
