import importlib
import io
import json
import logging

import httpx
import pytest

from api_client import ApiClient, ApiClientError
from cli.auth_handlers import parse_params
from cli.status_display import print_api_error
from utils.debug_console import DebugCapturingConsole, create_debug_console
from utils.storage import MemoryCredentialStore
from helpers import FakeBackend, envelope, error_envelope

# The cli package re-exports main(), shadowing the submodule attribute
cli_main = importlib.import_module("cli.main")

BASE_URL = "http://testserver"


@pytest.fixture
def cli_store():
    return MemoryCredentialStore()


@pytest.fixture
def use_backend(monkeypatch, cli_store):
    """Point the CLI's ApiClient at a MockTransport handler"""

    def install(handler):
        def client_factory(base_url=None):
            return ApiClient(
                base_url=base_url or BASE_URL,
                storage=cli_store,
                transport=httpx.MockTransport(handler),
            )

        monkeypatch.setattr(cli_main, "ApiClient", client_factory)

    return install


def lux_backend(requests):
    def handler(request):
        requests.append(request)
        path = request.url.path
        if path == "/api/v1/auth/login":
            return httpx.Response(200, json=envelope({
                "user": {"id": "u1", "name": "Ada Lovelace"},
                "tokens": {"accessToken": "A1", "refreshToken": "R1"},
            }))
        if path == "/api/v1/auth/logout":
            return httpx.Response(200, json=envelope(None, message="Logged out"))
        if path == "/api/v1/events/missing":
            return httpx.Response(404, json=error_envelope("NOT_FOUND", "Event not found"))
        return httpx.Response(200, json=envelope({"path": path, "query": str(request.url.query, "ascii")}))

    return handler


def test_status_when_logged_out(use_backend, capsys):
    use_backend(lux_backend([]))

    assert cli_main.main(["status"]) == 0

    out = capsys.readouterr().out
    assert "Session Status" in out
    assert "No" in out
    assert "memory" in out


def test_login_stores_tokens_and_greets_user(use_backend, cli_store, capsys):
    requests = []
    use_backend(lux_backend(requests))

    assert cli_main.main(["login", "-e", "ada@example.com", "-p", "secret"]) == 0

    assert "Logged in as Ada Lovelace" in capsys.readouterr().out
    assert json.loads(requests[0].content) == {"email": "ada@example.com", "password": "secret"}
    assert (cli_store.get_access_token(), cli_store.get_refresh_token()) == ("A1", "R1")


def test_logout_clears_tokens(use_backend, cli_store, capsys):
    cli_store.set_tokens("A1", "R1")
    use_backend(lux_backend([]))

    assert cli_main.main(["logout"]) == 0

    assert "Logged out" in capsys.readouterr().out
    assert cli_store.has_tokens() is False


def test_logout_when_not_logged_in(use_backend, capsys):
    requests = []
    use_backend(lux_backend(requests))

    assert cli_main.main(["logout"]) == 0

    assert "Not logged in" in capsys.readouterr().out
    assert requests == []


def test_request_prints_envelope(use_backend, cli_store, capsys):
    cli_store.set_tokens("A1", "R1")
    requests = []
    use_backend(lux_backend(requests))

    assert cli_main.main(["request", "get", "events", "-q", "page=2", "-q", "status=PUBLISHED"]) == 0

    printed = json.loads(capsys.readouterr().out)
    assert printed["success"] is True
    assert printed["data"]["path"] == "/api/v1/events"
    assert requests[0].headers["Authorization"] == "Bearer A1"
    assert dict(requests[0].url.params) == {"page": "2", "status": "PUBLISHED"}


def test_request_sends_json_body(use_backend, capsys):
    requests = []
    use_backend(lux_backend(requests))

    assert cli_main.main(["request", "POST", "/events", "--data", '{"title": "Demo"}']) == 0

    assert requests[0].method == "POST"
    assert json.loads(requests[0].content) == {"title": "Demo"}


def test_request_with_bad_body_is_usage_error(use_backend, capsys):
    requests = []
    use_backend(lux_backend(requests))

    assert cli_main.main(["request", "POST", "/events", "--data", "{oops"]) == 2
    assert requests == []


def test_api_error_exits_with_code_1(use_backend, capsys):
    use_backend(lux_backend([]))

    assert cli_main.main(["request", "GET", "/events/missing"]) == 1

    assert "ERROR [NOT_FOUND]: Event not found" in capsys.readouterr().out


def test_refresh_command_rotates_tokens(use_backend, cli_store, capsys):
    cli_store.set_tokens("A1", "R1")
    use_backend(FakeBackend(valid_access={"A1"}, rotations={"R1": ("A2", "R2")}))

    assert cli_main.main(["refresh"]) == 0

    assert "Session tokens refreshed" in capsys.readouterr().out
    assert cli_store.get_refresh_token() == "R2"


def test_refresh_command_without_session_fails(use_backend, capsys):
    use_backend(FakeBackend())

    assert cli_main.main(["refresh"]) == 1

    assert "Session expired" in capsys.readouterr().out


def test_parse_params_rejects_missing_separator():
    assert parse_params(["a=1", "b=x=y", "c="]) == {"a": "1", "b": "x=y", "c": ""}
    with pytest.raises(ValueError):
        parse_params(["page"])


def test_print_api_error_lists_field_errors():
    buffer = io.StringIO()
    console = create_debug_console()
    console.file = buffer
    error = ApiClientError(
        "Invalid event", "VALIDATION_ERROR", 422, {"title": ["Required"], "startDate": ["Must be in the future"]}
    )

    print_api_error(error, console)

    out = buffer.getvalue()
    assert "ERROR [VALIDATION_ERROR]: Invalid event" in out
    assert "Validation Errors" in out
    assert "Must be in the future" in out


def test_debug_console_mirrors_output_to_logger(caplog):
    logger = logging.getLogger("lux.test.console")
    caplog.set_level(logging.DEBUG, logger="lux.test.console")
    console = DebugCapturingConsole(logger, file=io.StringIO(), force_terminal=True)

    console.print("[green][OK][/green] Logged in as Ada")

    assert "[CONSOLE] [OK] Logged in as Ada" in caplog.messages


@pytest.fixture
def restore_package_loggers():
    names = ("api_client", "endpoints", "utils", "config", "lux.debug")
    saved = {
        name: (logging.getLogger(name).level, logging.getLogger(name).propagate, list(logging.getLogger(name).handlers))
        for name in names
    }
    yield
    for name, (level, propagate, handlers) in saved.items():
        package_logger = logging.getLogger(name)
        for handler in package_logger.handlers[:]:
            if handler not in handlers:
                package_logger.removeHandler(handler)
                handler.close()
        package_logger.setLevel(level)
        package_logger.propagate = propagate


def test_debug_mode_keeps_verbose_logs_off_the_terminal(monkeypatch, tmp_path, capsys, restore_package_loggers):
    log_file = tmp_path / "lux_debug.log"
    monkeypatch.setattr(cli_main.settings, "DEBUG_LOG_FILE", str(log_file))

    terminal = io.StringIO()
    terminal_handler = logging.StreamHandler(terminal)
    root = logging.getLogger()
    root.addHandler(terminal_handler)
    try:
        cli_main.configure_logging(True)
        logging.getLogger("api_client.client").debug("GET http://testserver/api/v1/events")
    finally:
        root.removeHandler(terminal_handler)

    assert "GET http://testserver/api/v1/events" not in terminal.getvalue()
    assert "GET http://testserver/api/v1/events" not in capsys.readouterr().err
    assert "DEBUG - GET http://testserver/api/v1/events" in log_file.read_text()
