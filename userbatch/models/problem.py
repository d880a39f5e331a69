from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Problem taxonomy for row and batch diagnostics.

Every condition the verifier finds is data, never an exception. RowProblem
pairs the operator-facing message with its category so the problem log can
classify it without parsing text.
"""

__all__ = [
    "ProblemKind",
    "RowProblem",
]


class ProblemKind(Enum):
    """Classification of verification problems.

    - MISSING_REQUIRED: a required column is empty
    - FORMAT_VIOLATION: BMS ID, address or identifier format rule failed
    - DOMAIN_VIOLATION: address is well-formed but its domain is not allowed
    - CONSISTENCY_VIOLATION: UPN and Mail local parts disagree
    - DUPLICATE_VIOLATION: a unique column value recurs in another row
    - BATCH_SIZE_VIOLATION: the batch exceeds the row ceiling (table level)
    - NO_INPUT_TABLE: the table could not be located (table level)
    """
    MISSING_REQUIRED = "MISSING_REQUIRED"
    FORMAT_VIOLATION = "FORMAT_VIOLATION"
    DOMAIN_VIOLATION = "DOMAIN_VIOLATION"
    CONSISTENCY_VIOLATION = "CONSISTENCY_VIOLATION"
    DUPLICATE_VIOLATION = "DUPLICATE_VIOLATION"
    BATCH_SIZE_VIOLATION = "BATCH_SIZE_VIOLATION"
    NO_INPUT_TABLE = "NO_INPUT_TABLE"


@dataclass(frozen=True)
class RowProblem:
    kind: ProblemKind
    message: str
