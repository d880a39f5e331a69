from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..models.verifier_config import Row

"""Field rule library: atomic, stateless checks on single cell values.

All functions take text already produced by ``cell_text`` (trimmed) and never
raise on malformed input; they answer with a bool or ``None``.
"""

__all__ = [
    "ParsedAddress",
    "cell_text",
    "is_empty",
    "is_address_format_valid",
    "parse_address",
    "is_valid_numeric_identifier",
    "is_valid_uuid",
    "is_domain_allowed",
]

ADDRESS_SEPARATOR = "@"
# "0" or a non-zero digit followed by digits: no sign, no decimal point
NUMERIC_ID_PATTERN = re.compile(r"0|[1-9][0-9]*")
UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedAddress:
    local: str
    domain: str  # lower-cased


def cell_text(row: Row, index: int) -> str:
    """Return the trimmed text of ``row[index]``; absent cells become "".

    This is the single coercion point between grid cells and the rules.
    Whole-number floats render without a decimal part ("123", not "123.0")
    because spreadsheet readers hand numeric cells back as floats.
    """
    if index < 0 or index >= len(row):
        return ""
    raw = row[index]
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float):
        if math.isnan(raw):
            return ""
        if raw.is_integer():
            return str(int(raw))
    return str(raw).strip()


def is_empty(value: str) -> bool:
    return value.strip() == ""


def is_address_format_valid(value: str) -> bool:
    """True iff ``value`` is exactly ``local@domain`` with both parts non-empty.

    Empty input is invalid; callers gate on emptiness separately.
    """
    if not value:
        return False
    parts = value.split(ADDRESS_SEPARATOR)
    return len(parts) == 2 and len(parts[0]) > 0 and len(parts[1]) > 0


def parse_address(value: str) -> ParsedAddress | None:
    parts = value.split(ADDRESS_SEPARATOR)
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        return None
    return ParsedAddress(local=parts[0].strip(), domain=parts[1].strip().lower())


def is_valid_numeric_identifier(value: str) -> bool:
    """BMS ID format: "0" / "123" ok, "01" / "007" / "-1" / "1.5" invalid.

    Empty is valid here; absence is handled by the either-or rule.
    """
    if value == "":
        return True
    return NUMERIC_ID_PATTERN.fullmatch(value) is not None


def is_valid_uuid(value: str) -> bool:
    """Canonical 8-4-4-4-12 hex UUID, either case. Empty is valid."""
    if value == "":
        return True
    return UUID_PATTERN.fullmatch(value) is not None


def is_domain_allowed(domain: str, allowed: Iterable[str]) -> bool:
    return domain.lower() in {d.lower() for d in allowed}
