from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from .verify_result import VerifyResult

"""Report models for workbook verification runs.

TableReport carries one table's VerifyResult plus the per-row annotation
text a grid binding would attach as notes. WorkbookReport groups the tables
of one file and VerificationRun aggregates a whole run for the SUMMARY line.
"""

__all__ = [
    "WorkbookStatus",
    "TableReport",
    "WorkbookReport",
    "VerificationRun",
]


class WorkbookStatus(Enum):
    """Outcome of verifying one workbook.

    - VERIFIED: every configured table verified successfully
    - PROBLEMS: at least one table is unsuccessful
    - FAILED: the workbook could not be read
    """
    VERIFIED = "verified"
    PROBLEMS = "problems"
    FAILED = "failed"


@dataclass(frozen=True)
class TableReport:
    table: str  # TableSpec.key
    sheet: str
    result: VerifyResult
    # Excel row number -> newline-joined problem text
    annotations: dict[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkbookReport:
    path: Path
    name: str
    status: WorkbookStatus
    tables: list[TableReport] = field(default_factory=list)
    error: str | None = None  # read failure reason

    @property
    def success(self) -> bool:
        return self.status == WorkbookStatus.VERIFIED


@dataclass(frozen=True)
class VerificationRun:
    """Aggregated results of one CLI run over one or more workbooks."""
    workbooks: list[WorkbookReport]
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def table_reports(self) -> list[TableReport]:
        return [t for wb in self.workbooks for t in wb.tables]

    @property
    def total_rows(self) -> int:
        return sum(t.result.total_rows for t in self.table_reports)

    @property
    def ok_rows(self) -> int:
        return sum(t.result.ok_count for t in self.table_reports)

    @property
    def problem_rows(self) -> int:
        return sum(t.result.problem_count for t in self.table_reports)

    @property
    def failed_tables(self) -> int:
        return sum(1 for t in self.table_reports if not t.result.success)

    @property
    def failed_workbooks(self) -> int:
        return sum(1 for wb in self.workbooks if wb.status == WorkbookStatus.FAILED)

    @property
    def success(self) -> bool:
        return all(wb.success for wb in self.workbooks)
