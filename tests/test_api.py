import pytest
from fastapi.testclient import TestClient

from conftest import FailingSessionStore, ScriptedOracle
from core.localization.templates import TEMPLATES
from runtime.api.server import build_controller, create_app


@pytest.fixture
def controller():
    return build_controller(oracle=ScriptedOracle(), persist=False)


@pytest.fixture
def client(controller):
    with TestClient(create_app(controller)) as test_client:
        yield test_client


def post(client, content, user_id="+919876543210", **extra):
    payload = {"user_id": user_id, "content": content}
    payload.update(extra)
    return client.post("/webhook/message", json=payload)


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_first_message_returns_language_menu(client):
    response = post(client, "Hi")

    assert response.status_code == 200
    body = response.json()
    assert body["intent"] == "greeting"
    assert body["state"] == "language_selection"
    assert body["replies"][0]["type"] == "options"
    assert [o["id"] for o in body["replies"][0]["options"]][0] == "lang_en"


def test_session_lifecycle(client):
    user = "+919876543210"
    assert client.get(f"/sessions/{user}").status_code == 404

    post(client, "Hi", user_id=user)
    post(client, "english", user_id=user)

    snapshot = client.get(f"/sessions/{user}").json()
    assert snapshot["state"] == "main_menu"
    assert snapshot["language"] == "en"
    assert snapshot["expires_at"] is not None

    reset = client.delete(f"/sessions/{user}")
    assert reset.json() == {"user_id": user, "cleared": True}
    assert client.get(f"/sessions/{user}").status_code == 404


def test_interactive_selector_payload(client):
    response = post(client, "lang_hi", kind="interactive")

    body = response.json()
    assert body["intent"] == "language_select"
    assert body["state"] == "script_selection"


def test_empty_user_id_is_rejected(client):
    assert post(client, "Hi", user_id="").status_code == 422


def test_unexpected_error_still_replies(client, controller, monkeypatch):
    async def explode(user_id, message):
        raise RuntimeError("boom")

    monkeypatch.setattr(controller, "handle_turn", explode)

    response = post(client, "Hi", language="hi")

    assert response.status_code == 200
    body = response.json()
    assert body["state"] == "uninitialized"
    assert body["replies"] == [
        {"type": "text", "text": TEMPLATES["error"]["hi"], "title": None, "options": []}
    ]


def test_session_storage_outage(make_controller, cache):
    app = create_app(make_controller(session_store=FailingSessionStore(cache)))
    with TestClient(app) as client:
        assert client.get("/sessions/u1").status_code == 503

        # Turns still get a reply while storage is down.
        response = post(client, "Hi", user_id="u1")
        assert response.status_code == 200
        assert response.json()["replies"]
