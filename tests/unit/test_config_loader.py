"""Tests for config loading and validation."""

from pathlib import Path

import pytest

from api_smoke.config_loader import (
    ConfigError,
    load_config,
    resolve_environment,
    validate_config,
)
from api_smoke.models.test_definition import SmokeConfig

VALID_CONFIG = """
environments:
  default:
    baseUrl: https://api.example.com
    headers:
      Authorization: "Bearer token"
  staging:
    baseUrl: https://staging.api.example.com

tests:
  - name: Health check
    path: /health
    expect:
      status: 200
      body:
        status: "ok"

  - name: Create user
    path: /users
    method: post
    headers:
      Content-Type: application/json
    body:
      name: "Test User"
    expect:
      status: 201
      bodyContains: "id"
"""


def _write(tmp_path: Path, text: str) -> Path:
    config_file = tmp_path / "smoke.yaml"
    config_file.write_text(text)
    return config_file


def test_load_config_valid(tmp_path: Path) -> None:
    """load_config parses environments and tests."""
    config = load_config(_write(tmp_path, VALID_CONFIG))

    assert list(config.environments) == ["default", "staging"]
    assert config.environments["default"].base_url == "https://api.example.com"
    assert config.environments["default"].headers == {
        "Authorization": "Bearer token"
    }
    assert [t.name for t in config.tests] == ["Health check", "Create user"]

    health, create = config.tests
    assert health.method == "GET"
    assert health.expect is not None
    assert health.expect.body == {"status": "ok"}
    assert create.method == "POST"
    assert create.body == {"name": "Test User"}
    assert create.expect is not None
    assert create.expect.body_contains == "id"


def test_load_config_missing_file(tmp_path: Path) -> None:
    """load_config raises ConfigError when the file doesn't exist."""
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / "missing.yaml")


def test_load_config_invalid_yaml(tmp_path: Path) -> None:
    """load_config raises ConfigError on malformed YAML."""
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(_write(tmp_path, "tests: [\n  - name: x\n    path: {"))


def test_load_config_empty_file(tmp_path: Path) -> None:
    """load_config raises ConfigError on an empty file."""
    with pytest.raises(ConfigError, match="Empty config file"):
        load_config(_write(tmp_path, ""))


@pytest.mark.parametrize(
    "text",
    [
        "environments: {}\n",
        "tests: {name: x}\n",
        "- name: x\n",
    ],
)
def test_load_config_requires_tests_array(tmp_path: Path, text: str) -> None:
    """load_config requires a top-level tests list."""
    with pytest.raises(ConfigError, match="'tests' array"):
        load_config(_write(tmp_path, text))


def test_load_config_schema_error(tmp_path: Path) -> None:
    """load_config wraps schema violations in ConfigError."""
    with pytest.raises(ConfigError, match="Invalid config schema") as exc_info:
        load_config(_write(tmp_path, "tests:\n  - name: no path\n"))
    assert "path" in str(exc_info.value)


def test_load_config_bad_expectation_type(tmp_path: Path) -> None:
    """load_config rejects an expectation of the wrong type."""
    text = "tests:\n  - path: /x\n    expect:\n      status: not-a-number\n"
    with pytest.raises(ConfigError, match="Invalid config schema"):
        load_config(_write(tmp_path, text))


def test_resolve_environment_named() -> None:
    """resolve_environment returns the requested environment."""
    config = SmokeConfig.model_validate(
        {
            "environments": {
                "default": {"baseUrl": "https://default"},
                "staging": {"baseUrl": "https://staging", "headers": {"X": "1"}},
            },
            "tests": [],
        }
    )

    env = resolve_environment(config, "staging")

    assert env.name == "staging"
    assert env.base_url == "https://staging"
    assert env.default_headers == {"X": "1"}


def test_resolve_environment_falls_back_to_default() -> None:
    """Unknown environments fall back to default, keeping the requested name."""
    config = SmokeConfig.model_validate(
        {"environments": {"default": {"baseUrl": "https://default"}}, "tests": []}
    )

    env = resolve_environment(config, "qa")

    assert env.name == "qa"
    assert env.base_url == "https://default"


def test_resolve_environment_without_environments() -> None:
    """Without environments, the base URL is empty."""
    config = SmokeConfig.model_validate({"tests": []})

    env = resolve_environment(config, "default")

    assert env.base_url == ""
    assert env.default_headers == {}


def test_validate_config_warnings() -> None:
    """validate_config warns about unnamed tests and tests without expectations."""
    config = SmokeConfig.model_validate(
        {
            "tests": [
                {"name": "ok", "path": "/", "expect": {"status": 200}},
                {"path": "/unnamed", "expect": {"status": 200}},
                {"name": "loose", "path": "/loose"},
            ]
        }
    )

    assert validate_config(config) == [
        "Test #2 doesn't have a name.",
        'Test "loose" has no expectations.',
    ]


def test_validate_config_clean() -> None:
    """validate_config returns no warnings for a complete config."""
    config = SmokeConfig.model_validate(
        {"tests": [{"name": "ok", "path": "/", "expect": {"status": 200}}]}
    )
    assert validate_config(config) == []


def test_load_config_numeric_header_and_date_body(tmp_path: Path) -> None:
    """Unquoted numbers in headers load as strings; dates stay in the body."""
    text = """
environments:
  default:
    baseUrl: https://api.example.com
    headers:
      X-Api-Version: 2
tests:
  - name: Versioned
    path: /reports
    method: POST
    headers:
      X-Page-Size: 50
    body:
      since: 2024-01-01
"""
    config = load_config(_write(tmp_path, text))

    assert config.environments["default"].headers == {"X-Api-Version": "2"}
    assert config.tests[0].headers == {"X-Page-Size": "50"}
    assert str(config.tests[0].body["since"]) == "2024-01-01"
