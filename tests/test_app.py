"""End-to-end tests of the HTTP and websocket surface."""

import json
import time

import pytest
from fastapi.testclient import TestClient

from googol.main import create_app


def _receive_until(ws, predicate, limit: int = 200) -> dict:
    for _ in range(limit):
        payload = ws.receive_json()
        if predicate(payload):
            return payload
    raise AssertionError("expected broadcast never arrived")


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "counter.json"


@pytest.fixture
def client(state_file, tmp_path):
    app = create_app(
        state_file=str(state_file),
        view_dir=str(tmp_path / "missing-view"),
        tick_interval=0.01,
    )
    with TestClient(app) as c:
        yield c


class TestHttp:
    def test_count_is_plain_text(self, client) -> None:
        response = client.get("/count")
        assert response.status_code == 200
        assert response.text == "0"
        assert response.headers["content-type"].startswith("text/plain")

    def test_state_is_json(self, client) -> None:
        payload = client.get("/state").json()
        assert payload["count"]["value"] == "0"
        assert payload["poll"] is None

    def test_status(self, client) -> None:
        payload = client.get("/status").json()
        assert payload["clients"] == 0
        assert payload["ticks"] >= 0

    def test_root_without_view_returns_status(self, client) -> None:
        payload = client.get("/").json()
        assert "node" in payload


class TestWebSocket:
    def test_initial_state_on_connect(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            payload = ws.receive_json()
            assert payload["count"]["value"] == "0"

    def test_increment_moves_count(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text("increment")
            payload = _receive_until(ws, lambda p: int(p["count"]["value"]) > 0)
            assert payload["count"]["meter"]["increment"] == 1

    def test_unknown_command_is_ignored(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text("multiply")
            ws.send_text("x" * 10_000)
            ws.send_bytes(b"increment")
            ws.send_text("decrement")
            payload = _receive_until(ws, lambda p: p["count"]["meter"]["decrement"] == 1)
            assert payload["count"]["value"] == "0"
            assert payload["count"]["meter"]["increment"] == 0


def test_state_saved_on_shutdown(tmp_path) -> None:
    state_file = tmp_path / "counter.json"
    app = create_app(state_file=str(state_file), view_dir=str(tmp_path / "none"), tick_interval=0.01)
    with TestClient(app) as c:
        with c.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text("increment")
            _receive_until(ws, lambda p: int(p["count"]["value"]) >= 3)

    saved = json.loads(state_file.read_text())
    assert int(saved["count"]["value"]) >= 3


def test_root_redirects_to_view(tmp_path) -> None:
    view = tmp_path / "view"
    view.mkdir()
    (view / "index.html").write_text("<h1>one googol</h1>")
    app = create_app(state_file=str(tmp_path / "counter.json"), view_dir=str(view), tick_interval=0.01)
    with TestClient(app) as c:
        response = c.get("/", follow_redirects=False)
        assert response.status_code in (302, 307)
        assert c.get("/ui/").text == "<h1>one googol</h1>"


def test_closed_socket_leaves_no_subscriber(client) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        assert client.app.state.broadcaster.subscriber_count == 1

    for _ in range(100):
        if client.app.state.broadcaster.subscriber_count == 0:
            break
        time.sleep(0.01)
    assert client.app.state.broadcaster.subscriber_count == 0
    assert client.get("/status").json()["clients"] == 0
