from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""VerifyResult model: aggregate outcome of verifying one batch of rows."""

__all__ = [
    "VerifyResult",
    "no_input_table_result",
]


@dataclass(frozen=True)
class VerifyResult:
    """Counts, flagged rows and the overall success flag for one batch.

    Invariants:
        ok_count + problem_count == total_rows
        problem_row_indices is strictly increasing, 0-based and deduplicated
        success is True only when there are no problem rows and the batch
        does not exceed the row ceiling
    """
    success: bool
    total_rows: int
    ok_count: int
    problem_count: int
    problem_row_indices: tuple[int, ...]  # 0-based indices into the rows sequence
    no_input_table: bool = False  # caller could not locate the table at all

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase shape consumed by the grid binding."""
        data: dict[str, Any] = {
            "success": self.success,
            "totalRows": self.total_rows,
            "okCount": self.ok_count,
            "problemCount": self.problem_count,
            "problemRowIndices": list(self.problem_row_indices),
        }
        if self.no_input_table:
            data["noInputTable"] = True
        return data


def no_input_table_result() -> VerifyResult:
    """Sentinel result for "the table was not found", distinct from zero rows."""
    return VerifyResult(
        success=False,
        total_rows=0,
        ok_count=0,
        problem_count=0,
        problem_row_indices=(),
        no_input_table=True,
    )
