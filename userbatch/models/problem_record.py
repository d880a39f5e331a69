from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ProblemRecord model for the problem log.

This module defines the ProblemRecord dataclass written as JSON Lines by
ProblemLogBuffer. It supports row=-1 as a sentinel for table-level problems
(no input table, batch too large) where no single row is at fault.

The record adheres to the JSON schema contract in
contracts/problem_log_schema.json.
"""

__all__ = [
    "ProblemRecord",
    "TABLE_LEVEL_ROW",
]

TABLE_LEVEL_ROW = -1


@dataclass(frozen=True)
class ProblemRecord:
    """Structured problem record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook filename being verified
        sheet: sheet name within the workbook
        row: Excel row number (1-based). Use -1 for table-level problems
        error_type: ProblemKind value in UPPER_SNAKE_CASE format
        message: operator-facing diagnostic text
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ProblemRecord:
        """Create a new ProblemRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ProblemRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line without extra keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
