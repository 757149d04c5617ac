"""Data models for test definitions, environments, and results."""

from api_smoke.models.test_definition import (
    BodyContainsCheck,
    BodyFieldCheck,
    BodyNotContainsCheck,
    Check,
    EnvironmentConfig,
    EnvironmentContext,
    Expectations,
    HeaderContainsCheck,
    RunMode,
    SmokeConfig,
    StatusCheck,
    TestDefinition,
)
from api_smoke.models.test_result import (
    AssertionOutcome,
    NormalizedResponse,
    SuiteReport,
    TestVerdict,
)

__all__ = [
    "AssertionOutcome",
    "BodyContainsCheck",
    "BodyFieldCheck",
    "BodyNotContainsCheck",
    "Check",
    "EnvironmentConfig",
    "EnvironmentContext",
    "Expectations",
    "HeaderContainsCheck",
    "NormalizedResponse",
    "RunMode",
    "SmokeConfig",
    "StatusCheck",
    "SuiteReport",
    "TestDefinition",
    "TestVerdict",
]
