"""Evaluate declared checks against a normalized response."""

import json
from typing import Any

from api_smoke.models.test_definition import (
    BodyContainsCheck,
    BodyFieldCheck,
    BodyNotContainsCheck,
    Check,
    HeaderContainsCheck,
    StatusCheck,
)
from api_smoke.models.test_result import AssertionOutcome, NormalizedResponse

_MISSING = object()


def values_equal(actual: Any, expected: Any) -> bool:
    """Compare decoded JSON values structurally.

    Booleans only equal booleans, numbers compare by value, mappings by
    key set and values, sequences element-wise.
    """
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if isinstance(actual, dict) and isinstance(expected, dict):
        return actual.keys() == expected.keys() and all(
            values_equal(actual[key], expected[key]) for key in expected
        )
    if isinstance(actual, list | tuple) and isinstance(expected, list | tuple):
        return len(actual) == len(expected) and all(
            values_equal(a, e) for a, e in zip(actual, expected, strict=True)
        )
    if isinstance(actual, dict | list | tuple) or isinstance(
        expected, dict | list | tuple
    ):
        return False
    return bool(actual == expected)


def _show(value: Any) -> str:
    if value is _MISSING:
        return "(missing)"
    return json.dumps(value, default=str)


def _outcome(description: str, passed: bool, detail: str) -> AssertionOutcome:
    return AssertionOutcome(
        description=description, passed=passed, detail=None if passed else detail
    )


def _check_status(check: StatusCheck, response: NormalizedResponse) -> AssertionOutcome:
    return _outcome(
        f"Status is {check.expected}",
        response.status_code == check.expected,
        f"Got {response.status_code}",
    )


def _check_body_field(
    check: BodyFieldCheck, response: NormalizedResponse
) -> AssertionOutcome:
    body = response.parsed_body
    actual = body.get(check.field, _MISSING) if isinstance(body, dict) else _MISSING
    passed = actual is not _MISSING and values_equal(actual, check.expected)
    return _outcome(
        f"body.{check.field} == {_show(check.expected)}",
        passed,
        f"Got {_show(actual)}",
    )


def _check_body_contains(
    check: BodyContainsCheck, response: NormalizedResponse
) -> AssertionOutcome:
    return _outcome(
        f'Body contains "{check.term}"',
        check.term in response.raw_body,
        "Not found in response body",
    )


def _check_body_not_contains(
    check: BodyNotContainsCheck, response: NormalizedResponse
) -> AssertionOutcome:
    return _outcome(
        f'Body doesn\'t contain "{check.term}"',
        check.term not in response.raw_body,
        "Found in response body",
    )


def _check_header_contains(
    check: HeaderContainsCheck, response: NormalizedResponse
) -> AssertionOutcome:
    actual = response.headers.get(check.header.lower())
    description = f'Header {check.header} contains "{check.expected}"'
    if actual is None:
        return _outcome(description, False, "Header missing")
    return _outcome(description, check.expected in actual, f'Got "{actual}"')


def evaluate_check(check: Check, response: NormalizedResponse) -> AssertionOutcome:
    """Evaluate a single check. Never raises for missing data."""
    if isinstance(check, StatusCheck):
        return _check_status(check, response)
    if isinstance(check, BodyFieldCheck):
        return _check_body_field(check, response)
    if isinstance(check, BodyContainsCheck):
        return _check_body_contains(check, response)
    if isinstance(check, BodyNotContainsCheck):
        return _check_body_not_contains(check, response)
    return _check_header_contains(check, response)


def evaluate(
    checks: list[Check], response: NormalizedResponse
) -> list[AssertionOutcome]:
    """Evaluate every check, in order, without short-circuiting."""
    return [evaluate_check(check, response) for check in checks]
