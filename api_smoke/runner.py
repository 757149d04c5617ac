"""Run a single smoke test and produce its verdict."""

import logging
import time

import aiohttp

from api_smoke.assertions import evaluate
from api_smoke.models.test_definition import EnvironmentContext, TestDefinition
from api_smoke.models.test_result import TestVerdict
from api_smoke.request_executor import TransportError, execute

logger = logging.getLogger(__name__)


def resolve_url(test: TestDefinition, environment: EnvironmentContext) -> str:
    """Concatenate base URL and path as authored."""
    return f"{environment.base_url}{test.path}"


def merge_headers(
    test: TestDefinition, environment: EnvironmentContext
) -> dict[str, str]:
    """Per-test headers override environment defaults."""
    return {**environment.default_headers, **test.headers}


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


async def run_test(
    session: aiohttp.ClientSession,
    test: TestDefinition,
    environment: EnvironmentContext,
    timeout_ms: int,
) -> TestVerdict:
    """Execute one test against the environment.

    Transport failures become a failed verdict with ``error`` set and no
    assertion outcomes.
    """
    url = resolve_url(test, environment)
    headers = merge_headers(test, environment)

    start = time.perf_counter()
    try:
        response = await execute(
            session, url, test.method, headers, test.body, timeout_ms
        )
    except TransportError as e:
        return TestVerdict(
            name=test.name,
            passed=False,
            expected_status=test.expected_status,
            elapsed_ms=_elapsed_ms(start),
            error=str(e),
        )
    elapsed_ms = _elapsed_ms(start)

    outcomes = evaluate(test.checks(), response)
    passed = all(outcome.passed for outcome in outcomes)
    logger.debug(
        f"{test.name}: {response.status_code} in {elapsed_ms}ms "
        f"({'passed' if passed else 'failed'})"
    )
    return TestVerdict(
        name=test.name,
        passed=passed,
        status=response.status_code,
        expected_status=test.expected_status,
        elapsed_ms=elapsed_ms,
        assertions=outcomes,
    )
