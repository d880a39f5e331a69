from .reader import MissingColumnsError, NoInputTable, SheetHeaderError, TableRows, read_table_rows

__all__ = [
    "MissingColumnsError",
    "NoInputTable",
    "SheetHeaderError",
    "TableRows",
    "read_table_rows",
]
