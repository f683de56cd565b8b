import base64
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import asyncpg
import pytest
from svix.webhooks import Webhook

from profiles import repository as profiles_repository
from webhooks import service

WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"peptide-admin-webhook-test-secret").decode()
WEBHOOK_PATH = "/api/webhook/clerk"


@pytest.fixture(autouse=True)
def webhook_env(monkeypatch):
    monkeypatch.setenv("CLERK_WEBHOOK_SECRET", WEBHOOK_SECRET)


@pytest.fixture
def repo(monkeypatch):
    mocks = {
        "insert_profile": AsyncMock(return_value={"clerk_user_id": "user_new"}),
        "update_email": AsyncMock(return_value={"clerk_user_id": "user_new"}),
        "delete_profile": AsyncMock(return_value=True),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(profiles_repository, name, mock)
    return mocks


def _signed(event, *, msg_id: str = "msg_2abc", secret: str = WEBHOOK_SECRET) -> tuple[str, dict]:
    body = json.dumps(event)
    timestamp = datetime.now(tz=timezone.utc)
    signature = Webhook(secret).sign(msg_id, timestamp, body)
    headers = {
        "svix-id": msg_id,
        "svix-timestamp": str(int(timestamp.timestamp())),
        "svix-signature": signature,
        "content-type": "application/json",
    }
    return body, headers


def _user_event(event_type: str, **data) -> dict:
    user = {
        "id": "user_new",
        "email_addresses": [{"id": "idn_1", "email_address": "new@example.com"}],
    }
    user.update(data)
    return {"type": event_type, "object": "event", "data": user}


def test_missing_svix_headers(client, repo):
    response = client.post(WEBHOOK_PATH, content=json.dumps(_user_event("user.created")))

    assert response.status_code == 400
    assert response.json()["detail"] == "Error: Missing Svix headers"
    repo["insert_profile"].assert_not_awaited()


def test_bad_signature(client, repo):
    other_secret = "whsec_" + base64.b64encode(b"a-completely-different-secret!!").decode()
    body, headers = _signed(_user_event("user.created"), secret=other_secret)

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 400
    repo["insert_profile"].assert_not_awaited()


def test_tampered_body(client, repo):
    body, headers = _signed(_user_event("user.created"))

    response = client.post(WEBHOOK_PATH, content=body.replace("user_new", "user_evil"), headers=headers)

    assert response.status_code == 400


def test_user_created_inserts_public_profile(client, repo):
    body, headers = _signed(_user_event("user.created"))

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    repo["insert_profile"].assert_awaited_once_with(
        clerk_user_id="user_new",
        email="new@example.com",
        role="public",
    )


def test_user_created_without_email(client, repo):
    body, headers = _signed(_user_event("user.created", email_addresses=[]))

    client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert repo["insert_profile"].await_args.kwargs["email"] is None


def test_insert_failure_is_acknowledged(client, repo):
    repo["insert_profile"].side_effect = asyncpg.PostgresError("connection lost")
    body, headers = _signed(_user_event("user.created"))

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_user_updated_syncs_email(client, repo):
    event = _user_event(
        "user.updated",
        primary_email_address_id="idn_2",
        email_addresses=[
            {"id": "idn_1", "email_address": "old@example.com"},
            {"id": "idn_2", "email_address": "primary@example.com"},
        ],
    )
    body, headers = _signed(event)

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    repo["update_email"].assert_awaited_once_with("user_new", email="primary@example.com")


def test_user_deleted_removes_profile(client, repo):
    body, headers = _signed({"type": "user.deleted", "data": {"id": "user_new", "deleted": True}})

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    repo["delete_profile"].assert_awaited_once_with("user_new")


def test_other_events_ignored(client, repo):
    body, headers = _signed({"type": "session.created", "data": {"id": "sess_1"}})

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    for mock in repo.values():
        mock.assert_not_awaited()


def test_missing_secret_is_server_error(client, repo, monkeypatch):
    body, headers = _signed(_user_event("user.created"))
    monkeypatch.delenv("CLERK_WEBHOOK_SECRET")

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 500


def test_primary_email_falls_back_to_first():
    user = {
        "primary_email_address_id": "idn_missing",
        "email_addresses": [{"id": "idn_1", "email_address": "first@example.com"}],
    }

    assert service.primary_email(user) == "first@example.com"
    assert service.primary_email({}) is None


def test_user_created_when_verify_returns_nothing(client, repo, monkeypatch):
    # Newer svix releases verify the signature but do not return the payload.
    monkeypatch.setattr(service.Webhook, "verify", lambda self, data, headers: None)
    body, headers = _signed(_user_event("user.created"))

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    repo["insert_profile"].assert_awaited_once_with(
        clerk_user_id="user_new",
        email="new@example.com",
        role="public",
    )


def test_signed_non_json_body_rejected(client, repo):
    body = "not json at all"
    timestamp = datetime.now(tz=timezone.utc)
    headers = {
        "svix-id": "msg_2abc",
        "svix-timestamp": str(int(timestamp.timestamp())),
        "svix-signature": Webhook(WEBHOOK_SECRET).sign("msg_2abc", timestamp, body),
    }

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Webhook payload is not valid JSON."
    repo["insert_profile"].assert_not_awaited()


def test_signed_array_body_rejected(client, repo):
    body, headers = _signed([_user_event("user.created")])

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 400
    repo["insert_profile"].assert_not_awaited()


@pytest.mark.parametrize(
    ("event", "failing"),
    [
        (_user_event("user.updated"), "update_email"),
        ({"type": "user.deleted", "data": {"id": "user_new", "deleted": True}}, "delete_profile"),
    ],
)
def test_update_and_delete_failures_are_acknowledged(client, repo, event, failing):
    repo[failing].side_effect = asyncpg.PostgresError("connection lost")
    body, headers = _signed(event)

    response = client.post(WEBHOOK_PATH, content=body, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    repo[failing].assert_awaited_once()
