"""End-to-end tests for the specscope CLI via Typer's CliRunner."""

from __future__ import annotations

import json
import shlex
import sys
from pathlib import Path

import httpx
import pytest

from specscope import __version__
from specscope.app import app, main
from specscope.commands.playground import parse_param_options
from specscope.exceptions import (
    EndpointNotFoundError,
    InvalidUsageError,
    NotFoundError,
    RequestFailedError,
    SchemaNotFoundError,
    SpecLoadError,
)
from specscope.exit_codes import EXIT_NOT_FOUND, EXIT_SPEC_LOAD_ERROR


@pytest.fixture
def run(cli_runner, isolated_config: Path, markets_spec_path: Path):
    """Invoke the CLI against the Markets API fixture with JSON output."""

    def invoke(*args: str, transport=None, api_key: str | None = None):
        argv = ["--spec", str(markets_spec_path), "--json", "--quiet"]
        if api_key is not None:
            argv += ["--api-key", api_key]
        obj = {"transport": transport} if transport is not None else None
        return cli_runner.invoke(app, [*argv, *args], obj=obj)

    return invoke


class TestGlobalOptions:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"specscope {__version__}" in result.output

    def test_missing_spec_fails_to_load(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--spec", str(isolated_config / "nope.json"), "info"])
        assert isinstance(result.exception, SpecLoadError)

    def test_spec_from_project_config(self, cli_runner, isolated_config: Path, markets_spec_path: Path) -> None:
        (isolated_config / "specscope.json").write_text(json.dumps({"spec": str(markets_spec_path)}))
        result = cli_runner.invoke(app, ["--json", "info"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["title"] == "Markets API"


class TestBrowseCommands:
    def test_info(self, run) -> None:
        result = run("info")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["title"] == "Markets API"
        assert data["version"] == "1.2.0"
        assert data["servers"] == ["https://api.markets.test/v1"]
        assert data["endpoints"] == 6
        assert data["tags"] == ["Markets", "Health", "Other"]

    def test_endpoints(self, run) -> None:
        result = run("endpoints")
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [(r["Group"], r["Method"], r["Path"]) for r in rows] == [
            ("Markets", "GET", "/markets"),
            ("Markets", "POST", "/markets"),
            ("Markets", "GET", "/markets/{id}"),
            ("Markets", "DELETE", "/markets/{id}"),
            ("Health", "GET", "/ping"),
            ("Other", "GET", "/reports"),
        ]

    def test_endpoints_filtered_by_tag(self, run) -> None:
        rows = json.loads(run("endpoints", "--tag", "Health").stdout)
        assert rows == [{"Group": "Health", "Method": "GET", "Path": "/ping", "Summary": "Ping"}]

    def test_show(self, run) -> None:
        result = run("show", "get", "/markets")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["method"] == "GET"
        assert [p["name"] for p in data["parameters"]] == ["limit", "status"]
        assert data["parameters"][0]["type"] == "integer"
        assert data["response_example"][0]["question"] == "string"
        assert "request_body_example" not in data
        assert data["response_fields"][0] == {
            "name": "id",
            "type": "integer",
            "description": "Market identifier",
            "required": True,
        }

    def test_show_request_body(self, run) -> None:
        data = json.loads(run("show", "POST", "/markets").stdout)
        assert data["request_body_example"]["question"] == "Will it rain tomorrow?"

    def test_show_unknown_endpoint(self, run) -> None:
        result = run("show", "GET", "/nope")
        assert isinstance(result.exception, EndpointNotFoundError)

    def test_schema(self, run) -> None:
        data = json.loads(run("schema", "User").stdout)
        assert data["fields"] == [
            {"name": "name", "type": "string", "description": None, "required": False}
        ]
        assert data["example"] == {"name": "string"}

    def test_unknown_schema(self, run) -> None:
        error = run("schema", "Nope").exception
        assert isinstance(error, SchemaNotFoundError)
        assert not isinstance(error, EndpointNotFoundError)
        assert isinstance(error, NotFoundError)
        assert error.exit_code == EXIT_NOT_FOUND


class TestPlaygroundCommands:
    def test_curl_with_defaults(self, run) -> None:
        result = run("curl", "GET", "/markets/{id}", api_key="k")
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == (
            "curl -X GET \\\n"
            "  https://api.markets.test/v1/markets/42 \\\n"
            "  -H 'X-API-Key: k'"
        )

    def test_curl_param_override_and_empty_query(self, run) -> None:
        result = run("curl", "GET", "/markets", "-P", "limit=5", "-P", "status=")
        assert "https://api.markets.test/v1/markets?limit=5" in result.stdout
        assert "status" not in result.stdout

    def test_curl_without_body_omits_it(self, run) -> None:
        result = run("curl", "POST", "/markets")
        assert result.exit_code == 0, result.output
        tokens = shlex.split(result.stdout.replace("\\\n", ""))
        assert "-d" not in tokens
        assert "Content-Type: application/json" not in tokens

    def test_curl_explicit_body(self, run) -> None:
        result = run("curl", "POST", "/markets", "--body", '{"question": "Snow?"}')
        assert "-d '{\"question\": \"Snow?\"}'" in result.stdout

    def test_invalid_param_option(self, run) -> None:
        result = run("curl", "GET", "/markets", "-P", "limit")
        assert isinstance(result.exception, InvalidUsageError)

    def test_try_sends_request(self, run) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": 42, "question": "Rain?"})

        result = run(
            "try", "GET", "/markets/{id}", transport=httpx.MockTransport(handler), api_key="secret"
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"id": 42, "question": "Rain?"}
        assert str(seen[0].url) == "https://api.markets.test/v1/markets/42"
        assert seen[0].headers["X-API-Key"] == "secret"

    def test_try_without_body_sends_empty_content(self, run) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"id": 1})

        result = run("try", "POST", "/markets", transport=httpx.MockTransport(handler))
        assert result.exit_code == 0, result.output
        assert seen[0].content == b""
        assert "Content-Type" not in seen[0].headers

    def test_try_sends_explicit_body(self, run) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"id": 1})

        result = run(
            "try", "POST", "/markets", "--body", '{"question": "Snow?"}',
            transport=httpx.MockTransport(handler),
        )
        assert result.exit_code == 0, result.output
        assert seen[0].content == b'{"question": "Snow?"}'
        assert seen[0].headers["Content-Type"] == "application/json"

    def test_try_error_status_is_not_a_failure(self, run) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"detail": "Not found"})

        result = run("try", "GET", "/markets/{id}", "-P", "id=9", transport=httpx.MockTransport(handler))
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"detail": "Not found"}

    def test_try_transport_failure(self, run) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        result = run("try", "GET", "/ping", transport=httpx.MockTransport(handler))
        assert isinstance(result.exception, RequestFailedError)
        assert "Connection refused" in str(result.exception)


class TestParseParamOptions:
    def test_parses_pairs(self) -> None:
        assert parse_param_options(["a=1", "b=", "c=x=y"]) == {"a": "1", "b": "", "c": "x=y"}

    def test_none(self) -> None:
        assert parse_param_options(None) == {}

    @pytest.mark.parametrize("option", ["novalue", "=1"])
    def test_rejects_malformed(self, option: str) -> None:
        with pytest.raises(InvalidUsageError):
            parse_param_options([option])


class TestMain:
    """The console-script entry point maps errors to exit codes."""

    @pytest.fixture(autouse=True)
    def _no_signal_handlers(self, monkeypatch) -> None:
        monkeypatch.setattr("specscope.app._setup_signal_handlers", lambda: None)

    def test_not_found_exit_code(self, isolated_config, markets_spec_path, monkeypatch, capsys) -> None:
        monkeypatch.setattr(sys, "argv", ["specscope", "--spec", str(markets_spec_path), "show", "GET", "/nope"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == EXIT_NOT_FOUND
        assert "No endpoint GET /nope" in capsys.readouterr().err

    def test_spec_load_exit_code(self, isolated_config, monkeypatch) -> None:
        monkeypatch.setattr(sys, "argv", ["specscope", "--spec", "missing.json", "endpoints"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == EXIT_SPEC_LOAD_ERROR
