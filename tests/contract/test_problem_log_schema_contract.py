from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from userbatch.models.problem import ProblemKind
from userbatch.models.problem_record import ProblemRecord

"""Problem log JSON schema contract."""

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "contracts" / "problem_log_schema.json"


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_accepts_created_records(schema):
    for kind in ProblemKind:
        rec = ProblemRecord.create("batch.xlsx", "Create", 4, kind.value, "message")
        jsonschema.validate(json.loads(rec.to_json_line()), schema)


def test_schema_accepts_table_level_row(schema):
    rec = ProblemRecord.create("batch.xlsx", "Update", -1, "NO_INPUT_TABLE", "sheet not found")
    jsonschema.validate(json.loads(rec.to_json_line()), schema)


def test_schema_rejects_extra_key(schema):
    record = {
        "timestamp": "2026-10-18T10:12:33Z",
        "file": "batch.xlsx",
        "sheet": "Create",
        "row": 4,
        "error_type": "DUPLICATE_VIOLATION",
        "message": "Duplicate value in 'Mail'",
        "extra": "not allowed",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, schema)


def test_schema_rejects_lowercase_error_type(schema):
    record = {
        "timestamp": "2026-10-18T10:12:33Z",
        "file": "batch.xlsx",
        "sheet": "Create",
        "row": 4,
        "error_type": "duplicate",
        "message": "x",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, schema)
