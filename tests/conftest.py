"""Shared test fixtures for specscope.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specscope.models import Endpoint, HTTPMethod, Spec
from specscope.output import OutputFormat, OutputManager, reset_output, set_output
from specscope.parser.loader import parse_spec


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def markets_raw() -> dict[str, Any]:
    """Load the raw Markets API spec dict."""
    with open(FIXTURES_DIR / "markets_api.json") as f:
        return json.load(f)


@pytest.fixture
def markets_spec(markets_raw: dict[str, Any]) -> Spec:
    """Parsed Markets API spec."""
    return parse_spec(markets_raw)


@pytest.fixture
def markets_spec_path(tmp_path: Path) -> Path:
    """Copy of the Markets API spec in tmp_path."""
    spec_path = tmp_path / "markets_api.json"
    spec_path.write_text((FIXTURES_DIR / "markets_api.json").read_text())
    return spec_path


def _make_endpoint(spec: Spec, method: str, path: str) -> Endpoint:
    http_method = HTTPMethod(method.lower())
    operation = spec.paths[path].operation(http_method)
    assert operation is not None
    return Endpoint(path=path, method=http_method, operation=operation)


def _minimal_spec(**overrides: Any) -> Spec:
    raw: dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0"},
        "paths": {},
    }
    raw.update(overrides)
    return parse_spec(raw)


@pytest.fixture
def make_endpoint():
    """Factory building the Endpoint for a method and path directly from a spec."""
    return _make_endpoint


@pytest.fixture
def minimal_spec():
    """Factory for a parsed spec with only the required fields plus overrides."""
    return _minimal_spec


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all SPECSCOPE_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["SPECSCOPE_SPEC", "SPECSCOPE_BASE_URL", "SPECSCOPE_API_KEY"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
