from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.table_spec import TableSpec
from ..models.verifier_config import CellValue

"""Workbook reader: locate a user table and hand back positional rows.

Sheet layout follows the add-in template: row 1 title, row 2 description,
header row (default row 3), data rows below. The reader is read-only; it
never writes highlights or notes back into the workbook.
"""

__all__ = [
    "SheetHeaderError",
    "MissingColumnsError",
    "NoInputTable",
    "TableRows",
    "open_workbook",
    "read_table_rows",
    "rows_from_frame",
]


class SheetHeaderError(Exception):
    """Raised when the header row contains duplicated header texts."""


class MissingColumnsError(Exception):
    """Raised when expected table headers are missing in the sheet."""


@dataclass(frozen=True)
class NoInputTable:
    """The table could not be located (sheet absent or no header row)."""
    sheet_name: str
    reason: str


@dataclass(frozen=True)
class TableRows:
    sheet_name: str
    rows: list[tuple[CellValue, ...]]  # positional, ordered as TableSpec.headers
    row_numbers: list[int]  # 1-based Excel row number per entry in rows


def open_workbook(path: Path) -> pd.ExcelFile:
    return pd.ExcelFile(path)


def _cell(value: Any) -> CellValue:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, (int, float)):
        return value
    # numpy scalars, datetimes, ...: keep the text an operator would see
    if hasattr(value, "item"):
        return value.item()
    return str(value)


def rows_from_frame(df: pd.DataFrame, table: TableSpec) -> TableRows | NoInputTable:
    """Convert a header-less raw DataFrame of one sheet into positional rows."""
    header_index = table.header_row - 1
    if df.shape[0] <= header_index:
        return NoInputTable(table.sheet_name, f"no header row {table.header_row}")

    header_series = df.iloc[header_index]
    columns = ["" if pd.isna(c) else str(c).strip() for c in header_series.tolist()]
    if all(c == "" for c in columns):
        return NoInputTable(table.sheet_name, f"header row {table.header_row} is empty")

    missing = [h for h in table.headers if h not in columns]
    if missing:
        raise MissingColumnsError(f"sheet '{table.sheet_name}' missing columns: {missing}")
    duplicated = sorted({h for h in table.headers if columns.count(h) > 1})
    if duplicated:
        raise SheetHeaderError(f"sheet '{table.sheet_name}' has duplicated headers: {duplicated}")

    positions = [columns.index(h) for h in table.headers]
    rows: list[tuple[CellValue, ...]] = []
    row_numbers: list[int] = []
    for offset, raw in enumerate(df.iloc[header_index + 1:].itertuples(index=False)):
        values = tuple(_cell(raw[p]) for p in positions)
        # 完全空行はテーブル外 (Excel table body 末尾の空行) として無視
        if all(v is None or (isinstance(v, str) and v.strip() == "") for v in values):
            continue
        rows.append(values)
        row_numbers.append(table.first_data_row + offset)
    return TableRows(sheet_name=table.sheet_name, rows=rows, row_numbers=row_numbers)


def read_table_rows(workbook: pd.ExcelFile | Path, table: TableSpec) -> TableRows | NoInputTable:
    """Read the rows of ``table`` from a workbook.

    Returns NoInputTable when the sheet does not exist or has no header row.
    Raises MissingColumnsError / SheetHeaderError for a malformed header.
    """
    if not isinstance(workbook, pd.ExcelFile):
        with open_workbook(workbook) as xls:
            return read_table_rows(xls, table)
    xls = workbook
    if table.sheet_name not in [str(n) for n in xls.sheet_names]:
        return NoInputTable(table.sheet_name, "sheet not found")
    # 書式は文字列扱い: dtype=object で Excel の値をそのまま受け取る
    df = xls.parse(table.sheet_name, header=None, dtype=object)
    return rows_from_frame(df, table)
