from __future__ import annotations

from ..models.problem import ProblemKind, RowProblem
from ..models.verifier_config import ColumnRef, Row, VerifierConfig
from .rules import (
    cell_text,
    is_address_format_valid,
    is_domain_allowed,
    is_empty,
    is_valid_numeric_identifier,
    parse_address,
)

"""Row evaluator: ordered per-row diagnostics.

Checks run as an explicit pipeline; message order is stable:

    1. required columns, in configuration order
    2. extra validators, in list order
    3. identifier pair both empty
    4. BMS ID format
    5. UPN format / domain
    6. Mail format / allowed domains
    7. UPN / Mail local part match

Every check runs; nothing short-circuits.
"""

__all__ = [
    "collect_row_problems",
    "evaluate_row",
]


def _required_problems(row: Row, config: VerifierConfig) -> list[RowProblem]:
    return [
        RowProblem(ProblemKind.MISSING_REQUIRED, f"Required field '{col.name}' is empty")
        for col in config.required_columns
        if is_empty(cell_text(row, col.index))
    ]


def _extra_problems(row: Row, config: VerifierConfig) -> list[RowProblem]:
    problems: list[RowProblem] = []
    for validator in config.extra_validators:
        problems.extend(RowProblem(ProblemKind.FORMAT_VIOLATION, m) for m in validator(row))
    return problems


def _identifier_problems(row: Row, config: VerifierConfig) -> list[RowProblem]:
    problems: list[RowProblem] = []
    pair = config.either_or_pair
    if pair is not None:
        if is_empty(cell_text(row, pair.first.index)) and is_empty(cell_text(row, pair.second.index)):
            problems.append(RowProblem(
                ProblemKind.MISSING_REQUIRED,
                f"{pair.first.name} and {pair.second.name} are both empty",
            ))

    bms = config.roles.bms_id
    bms_value = cell_text(row, bms.index)
    if not is_empty(bms_value) and not is_valid_numeric_identifier(bms_value):
        problems.append(RowProblem(
            ProblemKind.FORMAT_VIOLATION,
            f"{bms.name} must be a number (digits only, no leading zero)",
        ))
    return problems


def _address_problems(value: str, col: ColumnRef, allowed: tuple[str, ...], domain_text: str) -> list[RowProblem]:
    # empty -> nothing to check (required rule reports absence)
    if is_empty(value):
        return []
    if not is_address_format_valid(value):
        return [RowProblem(ProblemKind.FORMAT_VIOLATION, f"{col.name}: invalid format")]
    parsed = parse_address(value)
    if parsed is not None and not is_domain_allowed(parsed.domain, allowed):
        return [RowProblem(ProblemKind.DOMAIN_VIOLATION, f"{col.name}: domain must be {domain_text}")]
    return []


def _consistency_problems(upn: str, mail: str, config: VerifierConfig) -> list[RowProblem]:
    if is_empty(upn) or is_empty(mail):
        return []
    upn_parsed = parse_address(upn)
    mail_parsed = parse_address(mail)
    if upn_parsed is None or mail_parsed is None:
        return []
    if upn_parsed.local.lower() == mail_parsed.local.lower():
        return []
    roles = config.roles
    return [RowProblem(
        ProblemKind.CONSISTENCY_VIOLATION,
        f"{roles.user_principal_name.name} and {roles.mail.name} local part do not match",
    )]


def collect_row_problems(row: Row, config: VerifierConfig) -> list[RowProblem]:
    """Return every problem of ``row`` in the fixed category order."""
    roles = config.roles
    settings = config.settings
    upn = cell_text(row, roles.user_principal_name.index)
    mail = cell_text(row, roles.mail.index)

    problems: list[RowProblem] = []
    problems += _required_problems(row, config)
    problems += _extra_problems(row, config)
    problems += _identifier_problems(row, config)
    problems += _address_problems(
        upn, roles.user_principal_name, (settings.upn_domain,), settings.upn_domain
    )
    problems += _address_problems(
        mail, roles.mail, settings.mail_domains, f"one of {', '.join(settings.mail_domains)}"
    )
    problems += _consistency_problems(upn, mail, config)
    return problems


def evaluate_row(row: Row, config: VerifierConfig) -> list[str]:
    """Return the ordered problem messages for one row (empty = valid)."""
    return [p.message for p in collect_row_problems(row, config)]
