"""Row verification engine for Create / Update user tables."""

from .core import PROBLEM_MESSAGE_SEPARATOR, Verifier, create_verifier
from .duplicates import describe_row_duplicates, find_duplicate_row_indices
from .row_evaluator import collect_row_problems, evaluate_row
from .summary import build_verify_result
from .tables import (
    CREATE_VERIFIER,
    UPDATE_VERIFIER,
    build_create_config,
    build_update_config,
    build_verifiers,
    describe_update_row_problem,
    describe_user_row_problem,
    verify_update_users,
    verify_users,
)

__all__ = [
    "PROBLEM_MESSAGE_SEPARATOR",
    "Verifier",
    "create_verifier",
    "describe_row_duplicates",
    "find_duplicate_row_indices",
    "collect_row_problems",
    "evaluate_row",
    "build_verify_result",
    "CREATE_VERIFIER",
    "UPDATE_VERIFIER",
    "build_create_config",
    "build_update_config",
    "build_verifiers",
    "describe_update_row_problem",
    "describe_user_row_problem",
    "verify_update_users",
    "verify_users",
]
