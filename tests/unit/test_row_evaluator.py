from __future__ import annotations

from dataclasses import replace

from userbatch.models.problem import ProblemKind
from userbatch.models.verifier_config import ColumnRef, IdentifierPair, RuleSettings
from userbatch.verify.row_evaluator import collect_row_problems, evaluate_row
from userbatch.verify.tables import CREATE_CONFIG, build_create_config


def test_valid_row_has_no_messages(create_row):
    assert evaluate_row(create_row(), CREATE_CONFIG) == []


def test_valid_row_with_local_hr_id_only(create_row):
    assert evaluate_row(create_row(**{"BMS ID": "", "Local HR ID": "HR-42"}), CREATE_CONFIG) == []


def test_missing_required_fields_in_config_order(create_row):
    row = create_row(**{"City": "", "First Name": "  ", "Display Name": None})
    assert evaluate_row(row, CREATE_CONFIG) == [
        "Required field 'First Name' is empty",
        "Required field 'Display Name' is empty",
        "Required field 'City' is empty",
    ]


def test_each_missing_required_field_reported_once(create_row):
    for name in ("First Name", "Last Name", "Display Name", "Country", "City"):
        messages = evaluate_row(create_row(**{name: ""}), CREATE_CONFIG)
        assert messages == [f"Required field '{name}' is empty"]


def test_identifier_pair_both_empty(create_row):
    row = create_row(**{"BMS ID": "", "Local HR ID": ""})
    assert evaluate_row(row, CREATE_CONFIG) == ["BMS ID and Local HR ID are both empty"]


def test_bms_id_format(create_row):
    assert evaluate_row(create_row(**{"BMS ID": "0"}), CREATE_CONFIG) == []
    assert evaluate_row(create_row(**{"BMS ID": "007"}), CREATE_CONFIG) == [
        "BMS ID must be a number (digits only, no leading zero)"
    ]


def test_bms_id_numeric_cell(create_row):
    assert evaluate_row(create_row(**{"BMS ID": 123}), CREATE_CONFIG) == []
    assert evaluate_row(create_row(**{"BMS ID": 123.0}), CREATE_CONFIG) == []


def test_upn_invalid_format(create_row):
    row = create_row(**{"User Principal Name": "a.b.majorel.com"})
    assert evaluate_row(row, CREATE_CONFIG) == ["User Principal Name: invalid format"]


def test_upn_wrong_domain(create_row):
    row = create_row(**{"User Principal Name": "a.b@mj.teleperformance.com"})
    assert evaluate_row(row, CREATE_CONFIG) == ["User Principal Name: domain must be majorel.com"]


def test_upn_domain_case_insensitive(create_row):
    assert evaluate_row(create_row(**{"User Principal Name": "A.B@MAJOREL.COM"}), CREATE_CONFIG) == []


def test_mail_wrong_domain_lists_allowed(create_row):
    row = create_row(Mail="a.b@gmail.com")
    assert evaluate_row(row, CREATE_CONFIG) == [
        "Mail: domain must be one of majorel.com, mj.teleperformance.com"
    ]


def test_mail_invalid_format_skips_consistency(create_row):
    row = create_row(Mail="x.y@@majorel.com")
    assert evaluate_row(row, CREATE_CONFIG) == ["Mail: invalid format"]


def test_local_part_match_case_insensitive(create_row):
    row = create_row(**{"User Principal Name": "a.b@majorel.com", "Mail": "A.B@mj.teleperformance.com"})
    assert evaluate_row(row, CREATE_CONFIG) == []


def test_local_part_mismatch(create_row):
    row = create_row(Mail="x.y@majorel.com")
    assert evaluate_row(row, CREATE_CONFIG) == ["User Principal Name and Mail local part do not match"]


def test_consistency_checked_even_when_domain_wrong(create_row):
    row = create_row(Mail="x.y@gmail.com")
    assert evaluate_row(row, CREATE_CONFIG) == [
        "Mail: domain must be one of majorel.com, mj.teleperformance.com",
        "User Principal Name and Mail local part do not match",
    ]


def test_all_categories_in_fixed_order(create_row):
    row = create_row(**{
        "User Principal Name": "a.b@example.com",
        "Mail": "c.d@example.com",
        "BMS ID": "01",
        "Country": "",
    })
    assert evaluate_row(row, CREATE_CONFIG) == [
        "Required field 'Country' is empty",
        "BMS ID must be a number (digits only, no leading zero)",
        "User Principal Name: domain must be majorel.com",
        "Mail: domain must be one of majorel.com, mj.teleperformance.com",
        "User Principal Name and Mail local part do not match",
    ]


def test_empty_addresses_only_report_required(create_row):
    row = create_row(**{"User Principal Name": "", "Mail": ""})
    assert evaluate_row(row, CREATE_CONFIG) == [
        "Required field 'User Principal Name' is empty",
        "Required field 'Mail' is empty",
    ]


def test_short_row_treated_as_empty_cells():
    messages = evaluate_row([], CREATE_CONFIG)
    assert messages[0] == "Required field 'User Principal Name' is empty"
    assert "BMS ID and Local HR ID are both empty" in messages


def test_problem_kinds(create_row):
    row = create_row(**{"City": "", "Mail": "x.y@gmail.com"})
    kinds = [p.kind for p in collect_row_problems(row, CREATE_CONFIG)]
    assert kinds == [
        ProblemKind.MISSING_REQUIRED,
        ProblemKind.DOMAIN_VIOLATION,
        ProblemKind.CONSISTENCY_VIOLATION,
    ]


def test_extra_validators_run_after_required(create_row):
    def no_berlin(row):
        return ["City must not be Berlin"] if row[9] == "Berlin" else []

    config = replace(build_create_config(), extra_validators=(no_berlin,))
    row = create_row(**{"Country": "", "BMS ID": "01"})
    assert evaluate_row(row, config) == [
        "Required field 'Country' is empty",
        "City must not be Berlin",
        "BMS ID must be a number (digits only, no leading zero)",
    ]


def test_custom_rule_settings(create_row):
    config = build_create_config(RuleSettings(upn_domain="example.org", mail_domains=("example.org",)))
    row = create_row(**{"User Principal Name": "a.b@example.org", "Mail": "a.b@example.org"})
    assert evaluate_row(row, config) == []
    assert evaluate_row(create_row(), config) == [
        "User Principal Name: domain must be example.org",
        "Mail: domain must be one of example.org",
    ]


def test_identifier_pair_is_configurable(create_row):
    pair = IdentifierPair(first=ColumnRef(4, "SN Ticket ID"), second=ColumnRef(3, "Local HR ID"))
    config = replace(build_create_config(), identifier_pair=pair)
    row = create_row(**{"BMS ID": "", "Local HR ID": "", "SN Ticket ID": ""})
    assert evaluate_row(row, config) == ["SN Ticket ID and Local HR ID are both empty"]
    assert evaluate_row(create_row(**{"BMS ID": "", "SN Ticket ID": "INC1"}), config) == []


def test_identifier_pair_can_be_disabled(create_row):
    config = replace(build_create_config(), require_identifier=False)
    assert evaluate_row(create_row(**{"BMS ID": "", "Local HR ID": ""}), config) == []
