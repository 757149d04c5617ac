"""Sample config written by ``api-smoke init``."""

from pathlib import Path

DEFAULT_SAMPLE_PATH = Path("smoke-tests.yaml")

SAMPLE_CONFIG = """\
# api-smoke configuration
# Run with: api-smoke run smoke-tests.yaml

environments:
  default:
    baseUrl: https://api.example.com
    headers:
      Authorization: "Bearer your-token-here"
  staging:
    baseUrl: https://staging.api.example.com
  production:
    baseUrl: https://api.example.com

tests:
  - name: Health check
    path: /health
    method: GET
    expect:
      status: 200
      body:
        status: "ok"

  - name: List users
    path: /users
    method: GET
    expect:
      status: 200
      bodyContains: "id"

  - name: Create user
    path: /users
    method: POST
    headers:
      Content-Type: application/json
    body:
      name: "Smoke Test User"
      email: "smoke@test.com"
    expect:
      status: 201
      bodyContains: "id"
      bodyNotContains: "error"
      headerContains:
        Content-Type: "application/json"

  - name: Not found returns 404
    path: /nonexistent
    method: GET
    expect:
      status: 404
"""


def write_sample_config(path: Path, force: bool = False) -> Path:
    """Write the sample config.

    Raises:
        FileExistsError: If the file exists and ``force`` is not set

    """
    if path.exists() and not force:
        raise FileExistsError(f"{path} already exists (use --force to overwrite)")
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path
