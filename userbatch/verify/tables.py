from __future__ import annotations

from collections.abc import Sequence

from ..models.table_spec import TableSpec
from ..models.verifier_config import (
    ColumnRef,
    FieldRoles,
    Row,
    RowValidator,
    RuleSettings,
    VerifierConfig,
)
from ..models.verify_result import VerifyResult, no_input_table_result
from .core import Verifier, create_verifier
from .rules import cell_text, is_valid_uuid

"""Create / Update table definitions and their verifier configurations.

Column positions are derived from the header tuples, so the Update table
(Object ID prepended) reuses every shared rule with its roles shifted by one.
"""

__all__ = [
    "USERS_TABLE_HEADERS",
    "UPDATE_TABLE_HEADERS",
    "CREATE_TABLE",
    "UPDATE_TABLE",
    "TABLES",
    "build_create_config",
    "build_update_config",
    "build_verifiers",
    "uuid_column_validator",
    "CREATE_CONFIG",
    "UPDATE_CONFIG",
    "CREATE_VERIFIER",
    "UPDATE_VERIFIER",
    "NO_INPUT_TABLE_VERIFY_RESULT",
    "NO_INPUT_TABLE_UPDATE_VERIFY_RESULT",
    "verify_users",
    "describe_user_row_problem",
    "verify_update_users",
    "describe_update_row_problem",
]

USERS_TABLE_HEADERS: tuple[str, ...] = (
    "User Principal Name",
    "Mail",
    "BMS ID",
    "Local HR ID",
    "SN Ticket ID",
    "First Name",
    "Last Name",
    "Display Name",
    "Country",
    "City",
    "Job Title",
    "Office Location",
    "Street Address",
    "State",
    "Postal Code",
    "Business Phone",
    "Mobile Phone",
    "Company Name",
    "Department",
)
UPDATE_TABLE_HEADERS: tuple[str, ...] = ("Object ID", *USERS_TABLE_HEADERS)

CREATE_TABLE = TableSpec(key="create", sheet_name="Create", headers=USERS_TABLE_HEADERS)
UPDATE_TABLE = TableSpec(key="update", sheet_name="Update", headers=UPDATE_TABLE_HEADERS)
TABLES: dict[str, TableSpec] = {t.key: t for t in (CREATE_TABLE, UPDATE_TABLE)}

_REQUIRED_USER_FIELDS = (
    "User Principal Name",
    "Mail",
    "First Name",
    "Last Name",
    "Display Name",
    "Country",
    "City",
)
_UNIQUE_USER_FIELDS = ("User Principal Name", "Mail", "BMS ID", "Local HR ID")


def _col(headers: Sequence[str], name: str) -> ColumnRef:
    return ColumnRef(index=headers.index(name), name=name)


def _roles(headers: Sequence[str]) -> FieldRoles:
    return FieldRoles(
        user_principal_name=_col(headers, "User Principal Name"),
        mail=_col(headers, "Mail"),
        bms_id=_col(headers, "BMS ID"),
        local_hr_id=_col(headers, "Local HR ID"),
    )


def uuid_column_validator(column: ColumnRef) -> RowValidator:
    """Extra validator: ``column`` must hold a canonical UUID when non-empty."""
    def validate(row: Row) -> list[str]:
        if is_valid_uuid(cell_text(row, column.index)):
            return []
        return [f"{column.name} must be a valid UUID"]
    return validate


def build_create_config(settings: RuleSettings | None = None) -> VerifierConfig:
    headers = USERS_TABLE_HEADERS
    return VerifierConfig(
        roles=_roles(headers),
        required_columns=tuple(_col(headers, n) for n in _REQUIRED_USER_FIELDS),
        unique_columns=tuple(_col(headers, n) for n in _UNIQUE_USER_FIELDS),
        settings=settings or RuleSettings(),
    )


def build_update_config(settings: RuleSettings | None = None) -> VerifierConfig:
    headers = UPDATE_TABLE_HEADERS
    object_id = _col(headers, "Object ID")
    return VerifierConfig(
        roles=_roles(headers),
        required_columns=(object_id, *(_col(headers, n) for n in _REQUIRED_USER_FIELDS)),
        unique_columns=(object_id, *(_col(headers, n) for n in _UNIQUE_USER_FIELDS)),
        extra_validators=(uuid_column_validator(object_id),),
        settings=settings or RuleSettings(),
    )


def build_verifiers(settings: RuleSettings | None = None) -> dict[str, Verifier]:
    """Verifier per table key, all sharing the same rule settings."""
    return {
        CREATE_TABLE.key: create_verifier(build_create_config(settings)),
        UPDATE_TABLE.key: create_verifier(build_update_config(settings)),
    }


CREATE_CONFIG = build_create_config()
UPDATE_CONFIG = build_update_config()
CREATE_VERIFIER = create_verifier(CREATE_CONFIG)
UPDATE_VERIFIER = create_verifier(UPDATE_CONFIG)

NO_INPUT_TABLE_VERIFY_RESULT: VerifyResult = no_input_table_result()
NO_INPUT_TABLE_UPDATE_VERIFY_RESULT: VerifyResult = no_input_table_result()

verify_users = CREATE_VERIFIER.verify
describe_user_row_problem = CREATE_VERIFIER.describe_row_problem
verify_update_users = UPDATE_VERIFIER.verify
describe_update_row_problem = UPDATE_VERIFIER.describe_row_problem
