"""Suite orchestrator for running smoke tests sequentially or in parallel."""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence

import aiohttp

from api_smoke.models.test_definition import (
    EnvironmentContext,
    RunMode,
    TestDefinition,
)
from api_smoke.models.test_result import SuiteReport, TestVerdict
from api_smoke.runner import run_test

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10000

VerdictCallback = Callable[[TestVerdict], None]


class SuiteOrchestrator:
    """Drives the test runner over a suite and aggregates the verdicts."""

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        """Initialize orchestrator with the per-request timeout."""
        self.timeout_ms = timeout_ms

    async def run_suite(
        self,
        tests: Sequence[TestDefinition],
        environment: EnvironmentContext,
        mode: RunMode,
        on_verdict: VerdictCallback | None = None,
    ) -> SuiteReport:
        """Run the tests and return the aggregate report.

        Args:
            tests: Tests in authored order
            environment: Resolved environment
            mode: Sequential or parallel, with optional bail
            on_verdict: Called with each verdict as it completes
                (sequential mode only)

        Returns:
            Report with verdicts in authored order

        """
        logger.info(
            f"Running {len(tests)} tests against {environment.name} "
            f"({'parallel' if mode.parallel else 'sequential'}"
            f"{', bail' if mode.bail else ''})"
        )
        start = time.perf_counter()

        connector = aiohttp.TCPConnector(limit=0)
        async with aiohttp.ClientSession(connector=connector) as session:
            if mode.parallel:
                verdicts = await self._run_parallel(session, tests, environment)
            else:
                verdicts = await self._run_sequential(
                    session, tests, environment, mode.bail, on_verdict
                )

        duration_ms = round((time.perf_counter() - start) * 1000)
        report = SuiteReport.from_verdicts(
            environment.name, environment.base_url, verdicts, duration_ms
        )
        logger.info(
            f"Suite finished: {report.passed}/{report.total} passed "
            f"in {duration_ms}ms"
        )
        return report

    async def _run_sequential(
        self,
        session: aiohttp.ClientSession,
        tests: Sequence[TestDefinition],
        environment: EnvironmentContext,
        bail: bool,
        on_verdict: VerdictCallback | None,
    ) -> list[TestVerdict]:
        """Run tests one at a time, stopping at the first failure if bailing."""
        verdicts: list[TestVerdict] = []
        for test in tests:
            try:
                verdict = await run_test(session, test, environment, self.timeout_ms)
            except Exception as e:
                verdict = self._error_verdict(test, e)
            verdicts.append(verdict)

            if on_verdict is not None:
                on_verdict(verdict)

            if bail and not verdict.passed:
                logger.info(f"Bailing out after failure of {test.name!r}")
                break
        return verdicts

    async def _run_parallel(
        self,
        session: aiohttp.ClientSession,
        tests: Sequence[TestDefinition],
        environment: EnvironmentContext,
    ) -> list[TestVerdict]:
        """Dispatch every test at once and wait for all of them."""
        results = await asyncio.gather(
            *(run_test(session, test, environment, self.timeout_ms) for test in tests),
            return_exceptions=True,
        )
        return self._process_results(tests, list(results))

    def _process_results(
        self,
        tests: Sequence[TestDefinition],
        results: list[TestVerdict | BaseException],
    ) -> list[TestVerdict]:
        """Pair gathered results with their tests, converting exceptions."""
        verdicts: list[TestVerdict] = []
        for test, result in zip(tests, results, strict=True):
            if isinstance(result, TestVerdict):
                verdicts.append(result)
            elif isinstance(result, Exception):
                verdicts.append(self._error_verdict(test, result))
            else:
                raise result
        return verdicts

    @staticmethod
    def _error_verdict(test: TestDefinition, error: Exception) -> TestVerdict:
        logger.error(
            f"Test execution error in {test.name!r}: {type(error).__name__}: {error}",
            exc_info=error,
        )
        return TestVerdict(
            name=test.name,
            passed=False,
            expected_status=test.expected_status,
            elapsed_ms=0,
            error=str(error) or type(error).__name__,
        )
