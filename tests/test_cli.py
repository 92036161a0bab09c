"""CLI tests: commands run against a mocked HTTP transport."""

import json

import httpx
import pytest
from click.testing import CliRunner

from messagely import __version__
from messagely.cli import main as cli


@pytest.fixture()
def api(monkeypatch):
    """Route the CLI's httpx client through a handler; record requests."""
    calls = []
    responses = {}

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        key = (request.method, request.url.path)
        status, body = responses.get(key, (404, {"detail": "Not found"}))
        return httpx.Response(status, json=body)

    def fake_client(token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url="http://test",
            headers=headers,
        )

    monkeypatch.setattr(cli, "_client", fake_client)
    monkeypatch.delenv("MESSAGELY_TOKEN", raising=False)
    return calls, responses


def test_version():
    result = CliRunner().invoke(cli.main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_login_prints_token(api):
    calls, responses = api
    responses[("POST", "/auth/login")] = (200, {"token": "tok-123"})

    result = CliRunner().invoke(cli.main, ["login", "alice"], input="password_123\n")
    assert result.exit_code == 0
    assert "tok-123" in result.output
    assert json.loads(calls[0].content) == {"username": "alice", "password": "password_123"}


def test_send_requires_token(api):
    result = CliRunner().invoke(cli.main, ["send", "bob", "hi"])
    assert result.exit_code == 1
    assert "--token required" in result.output


def test_send_uses_bearer_token(api):
    calls, responses = api
    responses[("POST", "/messages")] = (
        201,
        {"message": {"id": 7, "from_username": "alice", "to_username": "bob",
                     "body": "hi", "sent_at": "2026-10-19T10:00:00"}},
    )

    result = CliRunner().invoke(cli.main, ["send", "bob", "hi", "--token", "tok-123"])
    assert result.exit_code == 0
    assert "Message #7 sent to bob" in result.output
    assert calls[0].headers["Authorization"] == "Bearer tok-123"


def test_inbox_lists_messages(api):
    _, responses = api
    responses[("GET", "/users/bob/to")] = (
        200,
        {"messages": [{
            "id": 3,
            "body": "lunch?",
            "sent_at": "2026-10-19T10:00:00",
            "read_at": None,
            "from_user": {"username": "alice", "first_name": "Alice",
                          "last_name": "L", "phone": "555"},
        }]},
    )

    result = CliRunner().invoke(cli.main, ["inbox", "bob"], env={"MESSAGELY_TOKEN": "t"})
    assert result.exit_code == 0
    assert "alice" in result.output
    assert "lunch?" in result.output


def test_api_error_is_reported(api):
    _, responses = api
    responses[("GET", "/messages/5")] = (
        401, {"detail": "You do not have permission to view this message"}
    )

    result = CliRunner().invoke(cli.main, ["show", "5", "--token", "t"])
    assert result.exit_code == 1
    assert "Error 401" in result.output
