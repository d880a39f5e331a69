from __future__ import annotations

from collections.abc import Iterable

from ..models.verify_result import VerifyResult

"""Batch summary builder: fold flagged row indices into a VerifyResult."""

__all__ = [
    "build_verify_result",
]


def build_verify_result(total_rows: int, problem_indices: Iterable[int], max_rows: int) -> VerifyResult:
    """Build a VerifyResult from the union of flagged row indices.

    Indices are deduplicated and sorted. Exceeding ``max_rows`` only clears
    ``success``; the rows are still counted and classified normally.
    """
    problem_row_indices = tuple(sorted(set(problem_indices)))
    problem_count = len(problem_row_indices)
    over_max_rows = total_rows > max_rows
    return VerifyResult(
        success=problem_count == 0 and not over_max_rows,
        total_rows=total_rows,
        ok_count=total_rows - problem_count,
        problem_count=problem_count,
        problem_row_indices=problem_row_indices,
    )
