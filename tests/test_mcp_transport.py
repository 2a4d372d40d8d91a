"""End-to-end tests for the MCP endpoint served by the FastAPI app."""

import pytest
from fastapi.testclient import TestClient

import app.main as main_module
import app.mcp.server as mcp_module
from app.core.config import Settings
from app.models.question import Question

MCP_HEADERS = {"Accept": "application/json, text/event-stream"}


def tools_call(name, arguments, request_id=1):
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


@pytest.fixture
def mcp_app(monkeypatch, engine, session_factory):
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(mcp_module, "SessionLocal", session_factory)
    return main_module.create_app


class TestMcpEndpoint:
    def test_tools_call_captures_turn(self, mcp_app, db):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("capture_chat_turn", {"user_message": "What is a monad?", "assistant_message": "A monoid in the category of endofunctors.", "language": "hs"}),
                headers=MCP_HEADERS,
            )

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["isError"] is False
        assert "Captured chat turn (q:" in result["content"][0]["text"]
        assert db.query(Question).count() == 1

    def test_post_is_answered_without_redirect(self, mcp_app):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("capture_chat_turn", {"user_message": "q", "assistant_message": "a"}),
                headers=MCP_HEADERS,
                follow_redirects=False,
            )
        assert response.status_code == 200

    def test_previous_tool_name_still_works(self, mcp_app, db):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("chat-turn/capture", {"user_message": "q", "assistant_message": "a"}),
                headers=MCP_HEADERS,
            )
        assert response.json()["result"]["isError"] is False
        assert db.query(Question).count() == 1

    def test_tools_list_includes_capture(self, mcp_app):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "id": 7, "method": "tools/list", "params": {}},
                headers=MCP_HEADERS,
            )
        names = {tool["name"] for tool in response.json()["result"]["tools"]}
        assert {"capture_chat_turn", "chat-turn/capture"} <= names

    def test_invalid_arguments_are_tool_errors(self, mcp_app, db):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("capture_chat_turn", {"user_message": "q", "assistant_message": "a", "github_repo": "not a url"}),
                headers=MCP_HEADERS,
            )

        assert response.status_code == 200
        result = response.json()["result"]
        assert result["isError"] is True
        assert "Failed to capture chat turn" in result["content"][0]["text"]
        assert db.query(Question).count() == 0

    def test_remote_host_is_accepted_by_default(self, mcp_app):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("capture_chat_turn", {"user_message": "q", "assistant_message": "a"}),
                headers={**MCP_HEADERS, "Host": "insights.internal:8000"},
            )
        assert response.status_code == 200
        assert response.json()["result"]["isError"] is False

    def test_app_can_start_twice(self, mcp_app):
        for request_id in (1, 2):
            with TestClient(mcp_app()) as client:
                response = client.post(
                    "/mcp",
                    json=tools_call("capture_chat_turn", {"user_message": "q", "assistant_message": "a"}, request_id),
                    headers=MCP_HEADERS,
                )
            assert response.status_code == 200


class TestMcpHostAllowList:
    @pytest.fixture(autouse=True)
    def _restrict_hosts(self, monkeypatch):
        restricted = Settings(
            _env_file=None,
            MCP_ALLOWED_HOSTS=["insights.internal:*"],
            MCP_ALLOWED_ORIGINS=["https://insights.internal"],
        )
        monkeypatch.setattr(mcp_module, "settings", restricted)

    def test_listed_host_is_accepted(self, mcp_app):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("capture_chat_turn", {"user_message": "q", "assistant_message": "a"}),
                headers={**MCP_HEADERS, "Host": "insights.internal:8000"},
            )
        assert response.status_code == 200

    def test_unlisted_host_is_rejected(self, mcp_app, db):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("capture_chat_turn", {"user_message": "q", "assistant_message": "a"}),
                headers={**MCP_HEADERS, "Host": "attacker.example"},
            )
        assert response.status_code == 421
        assert db.query(Question).count() == 0

    def test_unlisted_origin_is_rejected(self, mcp_app):
        with TestClient(mcp_app()) as client:
            response = client.post(
                "/mcp",
                json=tools_call("capture_chat_turn", {"user_message": "q", "assistant_message": "a"}),
                headers={**MCP_HEADERS, "Host": "insights.internal:8000", "Origin": "https://attacker.example"},
            )
        assert response.status_code == 403
