from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from ..models.problem import ProblemKind, RowProblem
from ..models.verifier_config import ColumnRef, Row
from .rules import cell_text

"""Batch uniqueness detector.

Values are compared trimmed and lower-cased. Empty cells never take part in
grouping, so any number of blank cells in a unique column is fine.
"""

__all__ = [
    "find_duplicate_row_indices",
    "describe_row_duplicates",
    "collect_duplicate_problems",
]


def _duplicate_key(row: Row, index: int) -> str | None:
    value = cell_text(row, index)
    if value == "":
        return None
    return value.lower()


def find_duplicate_row_indices(rows: Sequence[Row], unique_columns: Sequence[ColumnRef]) -> set[int]:
    """Return indices of all rows sharing a unique-column value with another row."""
    duplicate_indices: set[int] = set()
    for col in unique_columns:
        groups: dict[str, list[int]] = defaultdict(list)
        for i, row in enumerate(rows):
            key = _duplicate_key(row, col.index)
            if key is not None:
                groups[key].append(i)
        for indices in groups.values():
            if len(indices) > 1:
                duplicate_indices.update(indices)
    return duplicate_indices


def collect_duplicate_problems(
    rows: Sequence[Row], row_index: int, unique_columns: Sequence[ColumnRef]
) -> list[RowProblem]:
    """Duplicate problems of one row, one per offending column, in column order."""
    if row_index < 0 or row_index >= len(rows):
        return []
    row = rows[row_index]
    problems: list[RowProblem] = []
    for col in unique_columns:
        key = _duplicate_key(row, col.index)
        if key is None:
            continue
        matches = sum(1 for other in rows if _duplicate_key(other, col.index) == key)
        if matches > 1:
            problems.append(RowProblem(ProblemKind.DUPLICATE_VIOLATION, f"Duplicate value in '{col.name}'"))
    return problems


def describe_row_duplicates(
    rows: Sequence[Row], row_index: int, unique_columns: Sequence[ColumnRef]
) -> list[str]:
    return [p.message for p in collect_duplicate_problems(rows, row_index, unique_columns)]
