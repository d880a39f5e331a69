from __future__ import annotations

from ..models.report import TableReport, VerificationRun

"""SUMMARY / per-table line rendering.

Format:
SUMMARY files={files} tables={tables} rows={rows} ok={ok} problems={problems}
failed_tables={failed} elapsed_sec={elapsed}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
    "render_table_line",
]


def format_seconds(value: float) -> str:
    """Render seconds without scientific notation; whole numbers lose the decimal."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(run: VerificationRun) -> str:
    """Render the SUMMARY line for a whole run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2026, 1, 1, tzinfo=timezone.utc)
        >>> render_summary_line(VerificationRun([], t, t, 0.0))
        'SUMMARY files=0 tables=0 rows=0 ok=0 problems=0 failed_tables=0 elapsed_sec=0'
    """
    return (
        f"SUMMARY files={len(run.workbooks)} "
        f"tables={len(run.table_reports)} "
        f"rows={run.total_rows} "
        f"ok={run.ok_rows} "
        f"problems={run.problem_rows} "
        f"failed_tables={run.failed_tables} "
        f"elapsed_sec={format_seconds(run.elapsed_seconds)}"
    )


def render_table_line(file_name: str, report: TableReport) -> str:
    r = report.result
    if r.no_input_table:
        return f"file={file_name} table={report.table} sheet={report.sheet} no_input_table=true"
    return (
        f"file={file_name} table={report.table} sheet={report.sheet} "
        f"total={r.total_rows} ok={r.ok_count} problems={r.problem_count} "
        f"success={str(r.success).lower()}"
    )
