from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import VerifyConfig
from ..excel.reader import (
    MissingColumnsError,
    NoInputTable,
    SheetHeaderError,
    TableRows,
    open_workbook,
    read_table_rows,
)
from ..logging.problem_log import ProblemLogBuffer
from ..models.problem import ProblemKind
from ..models.problem_record import TABLE_LEVEL_ROW, ProblemRecord
from ..models.report import TableReport, VerificationRun, WorkbookReport, WorkbookStatus
from ..models.table_spec import TableSpec
from ..models.verify_result import no_input_table_result
from ..verify.core import PROBLEM_MESSAGE_SEPARATOR, Verifier
from ..verify.tables import build_verifiers
from .progress import ProgressTracker

"""Verification orchestration over workbooks.

Scans the source directory (or takes explicit paths), reads each configured
table, runs its verifier, collects annotations and problem records, and
returns a VerificationRun for the SUMMARY line. A workbook that cannot be
read is reported as failed; the run continues with the next one.
"""

__all__ = [
    "VerificationError",
    "scan_excel_files",
    "verify_table",
    "verify_workbook",
    "verify_all",
]

logger = logging.getLogger(__name__)

WORKBOOK_READ_ERROR = "WORKBOOK_READ_ERROR"
TABLE_HEADER_ERROR = "TABLE_HEADER_ERROR"


class VerificationError(Exception):
    """Fatal error that prevents a verification run."""


def scan_excel_files(directory: Path) -> list[Path]:
    """Return the .xlsx files directly inside ``directory``, sorted by name.

    Raises:
        VerificationError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise VerificationError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise VerificationError(f"Path is not a directory: {directory}")
    try:
        # "~$" は Excel のロックファイル
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix == ".xlsx" and not p.name.startswith("~$")
        )
    except OSError as e:
        raise VerificationError(f"Error reading directory {directory}: {e}") from e


def verify_table(
    file_name: str,
    table: TableSpec,
    data: TableRows | NoInputTable,
    verifier: Verifier,
    problem_log: ProblemLogBuffer,
) -> TableReport:
    """Verify one located table and record its problems."""
    if isinstance(data, NoInputTable):
        logger.warning(f"{file_name}: table '{table.key}' not found ({data.reason})")
        problem_log.append(ProblemRecord.create(
            file=file_name,
            sheet=table.sheet_name,
            row=TABLE_LEVEL_ROW,
            error_type=ProblemKind.NO_INPUT_TABLE.value,
            message=data.reason,
        ))
        return TableReport(table=table.key, sheet=table.sheet_name, result=no_input_table_result())

    result = verifier.verify(data.rows)
    annotations: dict[int, str] = {}
    for index in result.problem_row_indices:
        excel_row = data.row_numbers[index]
        problems = verifier.row_problems(data.rows, index)
        annotations[excel_row] = PROBLEM_MESSAGE_SEPARATOR.join(p.message for p in problems)
        logger.warning(
            f"{file_name}:{data.sheet_name} row {excel_row}: " + " | ".join(p.message for p in problems)
        )
        for p in problems:
            problem_log.append(ProblemRecord.create(
                file=file_name,
                sheet=data.sheet_name,
                row=excel_row,
                error_type=p.kind.value,
                message=p.message,
            ))

    max_rows = verifier.config.settings.max_data_rows
    if result.total_rows > max_rows:
        message = f"{result.total_rows} rows exceed the maximum of {max_rows} rows per batch"
        logger.warning(f"{file_name}:{data.sheet_name} {message}")
        problem_log.append(ProblemRecord.create(
            file=file_name,
            sheet=data.sheet_name,
            row=TABLE_LEVEL_ROW,
            error_type=ProblemKind.BATCH_SIZE_VIOLATION.value,
            message=message,
        ))

    return TableReport(table=table.key, sheet=data.sheet_name, result=result, annotations=annotations)


def verify_workbook(
    path: Path,
    tables: Iterable[TableSpec],
    verifiers: Mapping[str, Verifier],
    problem_log: ProblemLogBuffer,
) -> WorkbookReport:
    """Verify every table of one workbook."""
    try:
        workbook = open_workbook(path)
    except Exception as e:
        # pandas / openpyxl raise a wide range of types for unreadable files
        logger.error(f"{path.name}: cannot read workbook: {e}")
        problem_log.append(ProblemRecord.create(
            file=path.name,
            sheet="<WORKBOOK>",
            row=TABLE_LEVEL_ROW,
            error_type=WORKBOOK_READ_ERROR,
            message=str(e),
        ))
        return WorkbookReport(path=path, name=path.name, status=WorkbookStatus.FAILED, error=str(e))

    reports: list[TableReport] = []
    errors: list[str] = []
    with workbook:
        for table in tables:
            try:
                data = read_table_rows(workbook, table)
            except (MissingColumnsError, SheetHeaderError) as e:
                logger.error(f"{path.name}: {e}")
                problem_log.append(ProblemRecord.create(
                    file=path.name,
                    sheet=table.sheet_name,
                    row=TABLE_LEVEL_ROW,
                    error_type=TABLE_HEADER_ERROR,
                    message=str(e),
                ))
                errors.append(str(e))
                continue
            reports.append(verify_table(path.name, table, data, verifiers[table.key], problem_log))

    if errors:
        status = WorkbookStatus.FAILED
    elif all(r.result.success for r in reports):
        status = WorkbookStatus.VERIFIED
    else:
        status = WorkbookStatus.PROBLEMS
    return WorkbookReport(
        path=path,
        name=path.name,
        status=status,
        tables=reports,
        error="; ".join(errors) if errors else None,
    )


def verify_all(
    config: VerifyConfig,
    paths: list[Path] | None = None,
    table_keys: Iterable[str] | None = None,
    problem_log: ProblemLogBuffer | None = None,
) -> VerificationRun:
    """Verify the selected tables of every workbook.

    Args:
        config: loaded configuration (source directory, rules, tables)
        paths: explicit workbook paths; None scans ``config.source_directory``
        table_keys: subset of table keys ("create", "update"); None = all
        problem_log: buffer receiving problem records; flushed once at the end

    Raises:
        VerificationError: the source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    problem_log = problem_log if problem_log is not None else ProblemLogBuffer()
    keys = list(table_keys) if table_keys is not None else list(config.tables)
    unknown = [k for k in keys if k not in config.tables]
    if unknown:
        raise VerificationError(f"unknown table keys: {unknown}")
    tables = [config.tables[k] for k in keys]
    verifiers = build_verifiers(config.rules)

    file_paths = paths if paths is not None else scan_excel_files(Path(config.source_directory))
    workbooks: list[WorkbookReport] = []

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            report = verify_workbook(file_path, tables, verifiers, problem_log)
            workbooks.append(report)
            progress.set_postfix(
                verified=sum(1 for wb in workbooks if wb.status == WorkbookStatus.VERIFIED),
                problems=sum(1 for wb in workbooks if wb.status != WorkbookStatus.VERIFIED),
            )
            progress.finish_file()

    log_path = problem_log.flush()
    if log_path is not None:
        logger.info(f"problem log written: {log_path}")

    end_time = datetime.now(UTC)
    return VerificationRun(
        workbooks=workbooks,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
