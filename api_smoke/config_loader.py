"""Load and validate smoke test config files."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from api_smoke.models.test_definition import EnvironmentContext, SmokeConfig

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "default"


class ConfigError(ValueError):
    """Config file is missing, unreadable, or malformed."""


def load_config(config_path: Path) -> SmokeConfig:
    """Load a smoke test config file.

    Args:
        config_path: Path to the YAML config file

    Returns:
        Parsed config

    Raises:
        ConfigError: If the file doesn't exist, isn't valid YAML, or
            doesn't match the schema

    """
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Unable to read {config_path}: {e}") from e

    if data is None:
        raise ConfigError(f"Empty config file: {config_path}")

    if not isinstance(data, dict) or not isinstance(data.get("tests"), list):
        raise ConfigError(f"Config must have a 'tests' array: {config_path}")

    try:
        config = SmokeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config schema in {config_path}: {e}") from e

    logger.info(f"Loaded {len(config.tests)} tests from {config_path}")
    return config


def resolve_environment(config: SmokeConfig, name: str) -> EnvironmentContext:
    """Resolve the named environment, falling back to ``default``.

    Without either, the base URL is empty and no default headers apply.
    """
    environment = config.environments.get(name)
    if environment is None:
        environment = config.environments.get(DEFAULT_ENVIRONMENT)
        if environment is not None and name != DEFAULT_ENVIRONMENT:
            logger.warning(
                f"Environment {name!r} not found, using {DEFAULT_ENVIRONMENT!r}"
            )

    if environment is None:
        return EnvironmentContext(name=name)

    return EnvironmentContext(
        name=name,
        base_url=environment.base_url,
        default_headers=dict(environment.headers),
    )


def validate_config(config: SmokeConfig) -> list[str]:
    """Return warnings for tests that are valid but likely mistakes."""
    warnings: list[str] = []
    for index, test in enumerate(config.tests, start=1):
        label = test.name or f"#{index}"
        if not test.name:
            warnings.append(f"Test #{index} doesn't have a name.")
        if test.expect is None:
            warnings.append(f'Test "{label}" has no expectations.')
    return warnings
