"""Tests for the HTTP server: system routes and the MCP transports."""

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from rulemcp.config import Config
from rulemcp.rule_engine.models import GlobalRule, Project, Rule
from rulemcp.server.app import create_app


@pytest.fixture
def app():
    return create_app(db_path=":memory:", config=Config())


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        db = app.state.db
        db.create_project(Project(project_id="p1", name="P1", language="javascript"))
        db.create_project(Project(project_id="default", name="Default"))
        db.save_rule(
            Rule(
                rule_id="no-eval",
                project_id="p1",
                name="No eval",
                severity="error",
                pattern=r"eval\(",
                message="eval is forbidden",
            )
        )
        db.save_global_rule(
            GlobalRule(
                rule_id="no-var",
                language="javascript",
                name="No var",
                severity="warning",
                pattern="var ",
                message="prefer let or const",
            )
        )
        yield c


def _envelope(method: str, params=None, request_id: str = "1") -> dict:
    return {"id": request_id, "method": method, "params": params or {}}


class TestSystemRoutes:
    def test_health(self, client: TestClient):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_version(self, client: TestClient):
        resp = client.get("/api/version")
        assert resp.status_code == 200
        assert "version" in resp.json()

    def test_stats(self, client: TestClient):
        client.post("/mcp/request", json=_envelope("tools/list"))
        resp = client.get("/api/stats")
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_projects"] == 2
        assert data["total_rules"] == 1
        assert data["total_global_rules"] == 1
        assert data["mcp_requests_24h"] == 1
        assert data["mcp_methods"][0]["method"] == "tools/list"


class TestMCPRequest:
    def test_tools_list(self, client: TestClient):
        resp = client.post("/mcp/request", json=_envelope("tools/list"))
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == "1"
        assert "error" not in data
        assert len(data["result"]["tools"]) == 5

    def test_validate_code(self, client: TestClient):
        resp = client.post(
            "/mcp/request",
            json=_envelope("validateCode", {"project_id": "p1", "code": "eval(x); var y=1;"}),
        )
        result = resp.json()["result"]
        assert result["is_valid"] is False
        assert [i["severity"] for i in result["issues"]] == ["error", "warning"]

    def test_error_envelope_is_http_200(self, client: TestClient):
        resp = client.post("/mcp/request", json=_envelope("getRules", {"project_id": "nope"}))
        assert resp.status_code == 200
        data = resp.json()
        assert "result" not in data
        assert data["error"]["code"] == 4040

    def test_unknown_method(self, client: TestClient):
        resp = client.post("/mcp/request", json=_envelope("frobnicate", request_id="x"))
        assert resp.status_code == 200
        assert resp.json() == {
            "id": "x",
            "error": {"code": 4040, "message": "Method not found: frobnicate"},
        }

    @pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b'{"id": 5}', b""])
    def test_malformed_body(self, client: TestClient, body: bytes):
        resp = client.post(
            "/mcp/request", content=body, headers={"content-type": "application/json"}
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "id": "",
            "error": {"code": 4000, "message": "Invalid request format"},
        }

    def test_get_only_post_allowed(self, client: TestClient):
        resp = client.get("/mcp/request")
        assert resp.status_code == 405


class TestMCPWebSocket:
    def test_request_response(self, client: TestClient):
        with client.websocket_connect("/mcp/ws") as ws:
            ws.send_json(_envelope("getRules", {"project_id": "p1"}))
            data = ws.receive_json()
        assert data["id"] == "1"
        assert [r["rule_id"] for r in data["result"]["rules"]] == ["no-eval", "no-var"]

    def test_responses_in_request_order(self, client: TestClient):
        with client.websocket_connect("/mcp/ws") as ws:
            for i in range(5):
                ws.send_json(_envelope("tools/list", request_id=f"r{i}"))
            ids = [ws.receive_json()["id"] for _ in range(5)]
        assert ids == ["r0", "r1", "r2", "r3", "r4"]

    def test_errors_keep_connection_open(self, client: TestClient):
        with client.websocket_connect("/mcp/ws") as ws:
            ws.send_json(_envelope("nope", request_id="a"))
            first = ws.receive_json()
            ws.send_json(_envelope("tools/list", request_id="b"))
            second = ws.receive_json()
        assert first["error"]["code"] == 4040
        assert second["id"] == "b"

    def test_undecodable_frame_closes_connection(self, client: TestClient):
        with client.websocket_connect("/mcp/ws") as ws:
            ws.send_text("this is not json")
            with pytest.raises(WebSocketDisconnect) as exc_info:
                ws.receive_json()
        assert exc_info.value.code == 1003

    def test_dispatch_is_metered(self, app, client: TestClient):
        with client.websocket_connect("/mcp/ws") as ws:
            ws.send_json(_envelope("tools/list"))
            ws.receive_json()
        assert app.state.metrics.get_request_count() == 1
