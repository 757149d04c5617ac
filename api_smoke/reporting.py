"""Console and JSON rendering of smoke test results."""

import json

import typer

from api_smoke.models.test_definition import EnvironmentContext, RunMode
from api_smoke.models.test_result import SuiteReport, TestVerdict

PASS_MARK = "✓"
FAIL_MARK = "✗"


def _mark(passed: bool) -> str:
    if passed:
        return typer.style(PASS_MARK, fg=typer.colors.GREEN)
    return typer.style(FAIL_MARK, fg=typer.colors.RED)


def _dim(text: str) -> str:
    return typer.style(text, dim=True)


def _label(text: str) -> str:
    return typer.style(text, fg=typer.colors.CYAN)


def print_banner() -> None:
    """Print the tool banner."""
    typer.secho(
        "\n  api-smoke: API smoke test runner\n", fg=typer.colors.CYAN, bold=True
    )


def print_run_header(
    environment: EnvironmentContext, test_count: int, mode: RunMode
) -> None:
    """Print environment, base URL, test count and mode before a run."""
    typer.echo(f"  {_label('Environment:')} {environment.name}")
    if environment.base_url:
        typer.echo(f"  {_label('Base URL:')} {environment.base_url}")
    typer.echo(f"  {_label('Tests:')} {test_count}")
    mode_text = "parallel" if mode.parallel else "sequential"
    if mode.bail:
        mode_text += " (bail on failure)"
    typer.echo(f"  {_label('Mode:')} {mode_text}\n")


def print_verdict(verdict: TestVerdict, verbose: bool = False) -> None:
    """Print one verdict, with its assertions when failed or verbose."""
    name = typer.style(verdict.name, bold=True)
    typer.echo(f"  {_mark(verdict.passed)} {name}  {_dim(f'{verdict.elapsed_ms}ms')}")

    if verdict.error:
        typer.secho(f"    Error: {verdict.error}", fg=typer.colors.RED)
        return

    if verdict.passed and not verbose:
        return

    for outcome in verdict.assertions:
        line = f"    {_mark(outcome.passed)} {outcome.description}"
        if outcome.detail:
            line += f" {_dim(f'({outcome.detail})')}"
        typer.echo(line)


def print_bail_notice() -> None:
    """Print the notice shown when a sequential run stops early."""
    typer.secho("\n  Bailing out after first failure.", fg=typer.colors.RED)


def print_summary(report: SuiteReport) -> None:
    """Print totals and the final pass/fail line."""
    typer.secho("\n--- Results ---", fg=typer.colors.CYAN, bold=True)
    typer.echo(
        f"  Tests: {report.total}  |  "
        f"{typer.style(f'Passed: {report.passed}', fg=typer.colors.GREEN)}  |  "
        f"{typer.style(f'Failed: {report.failed}', fg=typer.colors.RED)}  |  "
        f"Duration: {_dim(f'{report.duration_ms}ms')}"
    )
    if report.failed == 0:
        typer.secho("\n  All tests passed!\n", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho(
            f"\n  {report.failed} test(s) failed.\n", fg=typer.colors.RED, bold=True
        )


def report_to_dict(report: SuiteReport) -> dict[str, object]:
    """Convert a report to its JSON document shape."""
    return report.model_dump(mode="json", by_alias=True)


def render_json(report: SuiteReport) -> str:
    """Render a report as an indented JSON document."""
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)
