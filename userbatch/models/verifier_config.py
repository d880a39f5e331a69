from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

"""Column configuration models for the user batch verifier.

A VerifierConfig is the immutable bundle that parameterizes one verifier
instance: which positions the shared field rules read, which columns are
required or unique, the domain rules and any extra per-row validators.

Create and Update tables share every rule; they differ only in column
positions (Update prepends an Object ID column) and in their required /
unique / extra validator lists. That difference lives here, in data.
"""

__all__ = [
    "CellValue",
    "Row",
    "RowValidator",
    "ColumnRef",
    "FieldRoles",
    "IdentifierPair",
    "RuleSettings",
    "VerifierConfig",
    "DEFAULT_UPN_DOMAIN",
    "DEFAULT_MAIL_DOMAINS",
    "DEFAULT_MAX_DATA_ROWS",
]

# A grid cell as delivered by the table binding: text, number or absent
CellValue = str | int | float | None
Row = Sequence[CellValue]
# Extra validators return zero or more messages for one row
RowValidator = Callable[[Row], list[str]]

DEFAULT_UPN_DOMAIN = "majorel.com"
DEFAULT_MAIL_DOMAINS: tuple[str, ...] = ("majorel.com", "mj.teleperformance.com")
DEFAULT_MAX_DATA_ROWS = 100


@dataclass(frozen=True)
class ColumnRef:
    """Positional column plus the display name used in diagnostics."""
    index: int  # 0-based position within the row
    name: str  # header text shown to the operator


@dataclass(frozen=True)
class FieldRoles:
    """Positions of the logical columns the shared rules operate on."""
    user_principal_name: ColumnRef  # identity address (single required domain)
    mail: ColumnRef  # contact address (list of allowed domains)
    bms_id: ColumnRef  # numeric business identifier
    local_hr_id: ColumnRef  # secondary HR identifier


@dataclass(frozen=True)
class IdentifierPair:
    """Two columns of which at least one must carry a value."""
    first: ColumnRef
    second: ColumnRef


@dataclass(frozen=True)
class RuleSettings:
    """Domain and batch-size rules shared by every table configuration."""
    upn_domain: str = DEFAULT_UPN_DOMAIN
    mail_domains: tuple[str, ...] = DEFAULT_MAIL_DOMAINS
    max_data_rows: int = DEFAULT_MAX_DATA_ROWS


@dataclass(frozen=True)
class VerifierConfig:
    """Immutable parameter bundle for one verifier.

    ``identifier_pair`` defaults to (BMS ID, Local HR ID) taken from ``roles``
    when left as ``None``; pass ``require_identifier=False`` to disable the
    either-or check entirely.
    """
    roles: FieldRoles
    required_columns: tuple[ColumnRef, ...]
    unique_columns: tuple[ColumnRef, ...]
    extra_validators: tuple[RowValidator, ...] = ()
    settings: RuleSettings = field(default_factory=RuleSettings)
    identifier_pair: IdentifierPair | None = None
    require_identifier: bool = True

    @property
    def either_or_pair(self) -> IdentifierPair | None:
        """The column pair checked by the "at least one identifier" rule."""
        if not self.require_identifier:
            return None
        if self.identifier_pair is not None:
            return self.identifier_pair
        return IdentifierPair(first=self.roles.bms_id, second=self.roles.local_hr_id)
