"""CLI entry point for the API smoke test runner."""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

import typer

from api_smoke.config_loader import (
    DEFAULT_ENVIRONMENT,
    ConfigError,
    load_config,
    resolve_environment,
    validate_config,
)
from api_smoke.models.test_definition import RunMode
from api_smoke.models.test_result import TestVerdict
from api_smoke.orchestrator import DEFAULT_TIMEOUT_MS, SuiteOrchestrator
from api_smoke.reporting import (
    print_bail_notice,
    print_banner,
    print_run_header,
    print_summary,
    print_verdict,
    render_json,
)
from api_smoke.sample_config import DEFAULT_SAMPLE_PATH, write_sample_config


def resolve_log_level(value: str) -> int:
    """Map a level name to its number, WARNING when unknown."""
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


# Configure logging on stderr, stdout carries the report
logging.basicConfig(
    level=resolve_log_level(os.environ.get("API_SMOKE_LOG_LEVEL", "WARNING")),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Run HTTP smoke tests declared in a YAML config file.")


@app.command()
def run(
    config_file: Path = typer.Argument(..., help="Path to the YAML config file"),  # noqa: B008
    env: str = typer.Option(
        DEFAULT_ENVIRONMENT,
        "--env",
        "-e",
        envvar="API_SMOKE_ENV",
        help="Environment from the config to run against",
    ),
    parallel: bool = typer.Option(
        False, "--parallel", "-p", help="Run all tests concurrently"
    ),
    bail: bool = typer.Option(
        False, "--bail", "-b", help="Stop on first failure (sequential mode)"
    ),
    timeout: int = typer.Option(
        DEFAULT_TIMEOUT_MS,
        "--timeout",
        "-t",
        min=1,
        envvar="API_SMOKE_TIMEOUT",
        help="Request timeout in milliseconds",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show assertions for passed tests too"
    ),
) -> None:
    """Run smoke tests from a config file."""
    try:
        config = load_config(config_file)
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    environment = resolve_environment(config, env)
    mode = RunMode(parallel=parallel, bail=bail)

    if not json_output:
        print_banner()
        print_run_header(environment, len(config.tests), mode)

    def show_verdict(verdict: TestVerdict) -> None:
        print_verdict(verdict, verbose)

    stream = not json_output and not mode.parallel
    orchestrator = SuiteOrchestrator(timeout_ms=timeout)

    try:
        report = asyncio.run(
            orchestrator.run_suite(
                config.tests,
                environment,
                mode,
                on_verdict=show_verdict if stream else None,
            )
        )
    except Exception as e:
        logger.exception("Suite execution failed")
        typer.echo(f"Error running tests: {e}", err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(render_json(report))
    else:
        if mode.parallel:
            for verdict in report.results:
                print_verdict(verdict, verbose)
        elif mode.bail and report.failed:
            print_bail_notice()
        print_summary(report)

    if report.exit_code:
        raise typer.Exit(code=report.exit_code)


@app.command()
def init(
    output: Path = typer.Option(  # noqa: B008
        DEFAULT_SAMPLE_PATH, "--output", "-o", help="Where to write the sample config"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Generate a sample config file."""
    try:
        path = write_sample_config(output, force=force)
    except FileExistsError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.secho(f"  ✓ Created {path}", fg=typer.colors.GREEN)
    typer.secho(f"  Edit the file, then run: api-smoke run {path}\n", dim=True)


@app.command()
def validate(
    config_file: Path = typer.Argument(..., help="Path to the YAML config file"),  # noqa: B008
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
) -> None:
    """Validate config syntax and schema."""
    try:
        config = load_config(config_file)
    except ConfigError as e:
        if json_output:
            typer.echo(json.dumps({"valid": False, "error": str(e)}))
        else:
            typer.echo(f"Invalid config: {e}", err=True)
        raise typer.Exit(code=1)

    warnings = validate_config(config)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "valid": True,
                    "tests": len(config.tests),
                    "environments": list(config.environments),
                    "warnings": warnings,
                }
            )
        )
        return

    for warning in warnings:
        typer.secho(f"  Warning: {warning}", fg=typer.colors.YELLOW)
    typer.secho("  ✓ Config is valid", fg=typer.colors.GREEN)
    typer.echo(f"  Tests: {len(config.tests)}")
    if config.environments:
        typer.echo(f"  Environments: {', '.join(config.environments)}")
    if warnings:
        typer.secho(f"  Warnings: {len(warnings)}", fg=typer.colors.YELLOW)


if __name__ == "__main__":  # pragma: no cover
    app()
