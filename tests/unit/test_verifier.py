from __future__ import annotations

from userbatch.models.verifier_config import RuleSettings
from userbatch.verify.core import create_verifier
from userbatch.verify.summary import build_verify_result
from userbatch.verify.tables import (
    CREATE_VERIFIER,
    build_create_config,
    describe_user_row_problem,
    verify_users,
)


def _distinct_rows(create_row, count: int) -> list[list[object]]:
    return [
        create_row(**{
            "User Principal Name": f"user{i}@majorel.com",
            "Mail": f"user{i}@majorel.com",
            "BMS ID": str(i + 1),
        })
        for i in range(count)
    ]


def test_empty_batch():
    result = verify_users([])
    assert result.success is True
    assert result.total_rows == 0
    assert result.ok_count == 0
    assert result.problem_count == 0
    assert result.problem_row_indices == ()
    assert result.no_input_table is False


def test_all_valid(create_row):
    result = verify_users(_distinct_rows(create_row, 3))
    assert result.success is True
    assert (result.total_rows, result.ok_count, result.problem_count) == (3, 3, 0)


def _three_rows(create_row, display_name: str) -> list[list[object]]:
    return [
        create_row(),
        create_row(**{
            "User Principal Name": "c.d@majorel.com",
            "Mail": "c.d@majorel.com",
            "BMS ID": "2",
            "Display Name": display_name,
        }),
        # shares row 0's User Principal Name
        create_row(**{"Mail": "a.b@majorel.com", "BMS ID": "3"}),
    ]


def test_duplicate_pair_flags_both_rows(create_row):
    result = verify_users(_three_rows(create_row, "C D"))
    assert result.total_rows == 3
    assert result.ok_count == 1
    assert result.problem_count == 2
    assert result.problem_row_indices == (0, 2)
    assert result.success is False


def test_missing_field_and_duplicate_pair(create_row):
    result = verify_users(_three_rows(create_row, ""))
    assert result.total_rows == 3
    assert result.ok_count == 0
    assert result.problem_count == 3
    assert result.problem_row_indices == (0, 1, 2)
    assert result.success is False


def test_three_row_descriptions(create_row):
    rows = _three_rows(create_row, "")
    assert describe_user_row_problem(rows, 0) == "Duplicate value in 'User Principal Name'"
    assert describe_user_row_problem(rows, 1) == "Required field 'Display Name' is empty"
    assert describe_user_row_problem(rows, 2) == "Duplicate value in 'User Principal Name'"


def test_row_flagged_only_for_duplicate(create_row):
    rows = [create_row(), create_row(**{"BMS ID": "999"})]
    result = verify_users(rows)
    assert result.problem_row_indices == (0, 1)
    assert describe_user_row_problem(rows, 1) == (
        "Duplicate value in 'User Principal Name'\nDuplicate value in 'Mail'"
    )


def test_empty_unique_values_not_flagged(create_row):
    rows = _distinct_rows(create_row, 2)
    for row in rows:
        row[3] = ""  # Local HR ID empty in both rows
    assert verify_users(rows).success is True


def test_ceiling_exceeded_marks_unsuccessful(create_row):
    result = verify_users(_distinct_rows(create_row, 101))
    assert result.problem_count == 0
    assert result.ok_count == 101
    assert result.success is False


def test_ceiling_is_inclusive(create_row):
    assert verify_users(_distinct_rows(create_row, 100)).success is True


def test_ceiling_from_settings(create_row):
    verifier = create_verifier(build_create_config(RuleSettings(max_data_rows=2)))
    assert verifier.verify(_distinct_rows(create_row, 2)).success is True
    assert verifier.verify(_distinct_rows(create_row, 3)).success is False


def test_verify_is_idempotent_and_does_not_mutate(create_row):
    rows = [create_row(), create_row(City=""), create_row(Mail="x@majorel.com")]
    snapshot = [list(r) for r in rows]
    first = verify_users(rows)
    second = verify_users(rows)
    assert first == second
    assert rows == snapshot


def test_counts_invariant(create_row):
    rows = [create_row(**{"BMS ID": str(i % 3)}) for i in range(7)]
    result = verify_users(rows)
    assert result.ok_count + result.problem_count == result.total_rows
    indices = list(result.problem_row_indices)
    assert indices == sorted(set(indices))


def test_describe_missing_field_then_duplicate_mail(create_row):
    rows = [
        create_row(**{"First Name": ""}),
        create_row(**{"User Principal Name": "z@majorel.com", "Mail": "a.b@mj.teleperformance.com", "BMS ID": "7"}),
    ]
    text = CREATE_VERIFIER.describe_row_problem(rows, 0)
    assert text == "Required field 'First Name' is empty\nDuplicate value in 'Mail'"


def test_describe_row_problem_valid_or_absent(create_row):
    rows = [create_row()]
    assert describe_user_row_problem(rows, 0) == ""
    assert describe_user_row_problem(rows, 1) == ""
    assert describe_user_row_problem(rows, -1) == ""
    assert describe_user_row_problem([], 0) == ""


def test_build_verify_result_sorts_and_dedupes():
    result = build_verify_result(5, [3, 1, 3, 0], max_rows=100)
    assert result.problem_row_indices == (0, 1, 3)
    assert result.problem_count == 3
    assert result.ok_count == 2
    assert result.success is False


def test_build_verify_result_over_ceiling():
    result = build_verify_result(3, [], max_rows=2)
    assert result.problem_count == 0
    assert result.success is False
