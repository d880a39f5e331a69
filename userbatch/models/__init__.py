"""Domain models for the user batch verifier.

This package contains the configuration, result and report types shared by
the verification engine, the workbook reader and the CLI.
"""

from .problem import ProblemKind, RowProblem
from .problem_record import ProblemRecord
from .report import TableReport, VerificationRun, WorkbookReport, WorkbookStatus
from .table_spec import TableSpec
from .verifier_config import (
    ColumnRef,
    FieldRoles,
    IdentifierPair,
    RuleSettings,
    VerifierConfig,
)
from .verify_result import VerifyResult, no_input_table_result

__all__ = [
    # Configuration models
    "ColumnRef",
    "FieldRoles",
    "IdentifierPair",
    "RuleSettings",
    "TableSpec",
    "VerifierConfig",
    # Result models
    "ProblemKind",
    "ProblemRecord",
    "RowProblem",
    "VerifyResult",
    "no_input_table_result",
    # Run reports
    "TableReport",
    "VerificationRun",
    "WorkbookReport",
    "WorkbookStatus",
]
