# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from userbatch.logging.init import reset_logging
from userbatch.verify.tables import UPDATE_TABLE_HEADERS, USERS_TABLE_HEADERS

VALID_USER: dict[str, Any] = {
    "User Principal Name": "a.b@majorel.com",
    "Mail": "a.b@mj.teleperformance.com",
    "BMS ID": "123",
    "Local HR ID": "",
    "SN Ticket ID": "",
    "First Name": "Anna",
    "Last Name": "Berg",
    "Display Name": "Anna Berg",
    "Country": "DE",
    "City": "Berlin",
}
VALID_OBJECT_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("USERBATCH_CONFIG", raising=False)
    return tmp_path


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
rules:
  upn_domain: majorel.com
  mail_domains: [majorel.com, mj.teleperformance.com]
  max_data_rows: 100
tables:
  create:
    sheet: Create
  update:
    sheet: Update
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "verify.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def create_row() -> Callable[..., list[Any]]:
    """Build a Create-table row from header-name overrides."""
    def make(**overrides: Any) -> list[Any]:
        values = {**VALID_USER, **overrides}
        return [values.get(h, "") for h in USERS_TABLE_HEADERS]
    return make


@pytest.fixture()
def update_row() -> Callable[..., list[Any]]:
    """Build an Update-table row; "Object ID" defaults to a valid UUID."""
    def make(**overrides: Any) -> list[Any]:
        values = {**VALID_USER, "Object ID": VALID_OBJECT_ID, **overrides}
        return [values.get(h, "") for h in UPDATE_TABLE_HEADERS]
    return make


def _sheet_rows(headers: tuple[str, ...], rows: list[list[Any]], title: str) -> list[list[Any]]:
    return [[title], ["Description"], list(headers), *rows]


@pytest.fixture()
def make_workbook() -> Callable[..., Path]:
    """Write a workbook laid out like the add-in template.

    ``sheets`` maps sheet name -> (headers, data rows). Row 1 title, row 2
    description, row 3 headers.
    """
    def make(path: Path, sheets: dict[str, tuple[tuple[str, ...], list[list[Any]]]]) -> Path:
        with pd.ExcelWriter(path) as writer:
            for name, (headers, rows) in sheets.items():
                df = pd.DataFrame(_sheet_rows(headers, rows, name))
                df.to_excel(writer, sheet_name=name, header=False, index=False)
        return path
    return make
