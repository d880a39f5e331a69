from __future__ import annotations

from collections.abc import Sequence

from ..models.problem import RowProblem
from ..models.verifier_config import Row, VerifierConfig
from ..models.verify_result import VerifyResult
from .duplicates import collect_duplicate_problems, find_duplicate_row_indices
from .row_evaluator import collect_row_problems
from .summary import build_verify_result

"""Verifier factory shared by the Create and Update tables.

A Verifier is bound to one immutable VerifierConfig and holds no other state,
so one instance can serve any number of concurrent callers.
"""

__all__ = [
    "Verifier",
    "create_verifier",
    "PROBLEM_MESSAGE_SEPARATOR",
]

PROBLEM_MESSAGE_SEPARATOR = "\n"


class Verifier:
    """Batch verifier for one column configuration.

    ``verify`` is the only place row-level and duplicate problems are
    merged: a row without any row-level error is still flagged when it takes
    part in a cross-row duplicate.
    """

    def __init__(self, config: VerifierConfig) -> None:
        self._config = config

    @property
    def config(self) -> VerifierConfig:
        return self._config

    def verify(self, rows: Sequence[Row]) -> VerifyResult:
        problem_indices = {i for i, row in enumerate(rows) if collect_row_problems(row, self._config)}
        problem_indices |= find_duplicate_row_indices(rows, self._config.unique_columns)
        return build_verify_result(len(rows), problem_indices, self._config.settings.max_data_rows)

    def row_problems(self, rows: Sequence[Row], row_index: int) -> list[RowProblem]:
        """Validation problems of one row followed by its duplicate problems."""
        if row_index < 0 or row_index >= len(rows):
            return []
        problems = collect_row_problems(rows[row_index], self._config)
        problems += collect_duplicate_problems(rows, row_index, self._config.unique_columns)
        return problems

    def describe_row_problem(self, rows: Sequence[Row], row_index: int) -> str:
        """Newline-joined problem text for one row, or "" when it has none."""
        return PROBLEM_MESSAGE_SEPARATOR.join(p.message for p in self.row_problems(rows, row_index))


def create_verifier(config: VerifierConfig) -> Verifier:
    return Verifier(config)
