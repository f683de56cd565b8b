from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from profiles import repository, service


def _profile(user_id: str, role: str) -> dict:
    return {
        "id": uuid4(),
        "clerk_user_id": user_id,
        "email": f"{user_id}@example.com",
        "role": role,
        "created_at": None,
    }


@pytest.fixture
def repo(monkeypatch):
    mocks = {
        "list_profiles": AsyncMock(return_value=[_profile("user_a", "admin"), _profile("user_b", "public")]),
        "get_profile_by_user_id": AsyncMock(return_value=None),
        "update_role": AsyncMock(side_effect=lambda user_id, *, role: _profile(user_id, role)),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(repository, name, mock)
    return mocks


def test_list_users(client, as_admin, repo):
    response = client.get("/users")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [u["role"] for u in body["users"]] == ["admin", "public"]


def test_update_role(client, as_admin, repo):
    response = client.patch("/users/user_b/role", json={"role": "admin"})

    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    repo["update_role"].assert_awaited_once_with("user_b", role="admin")


def test_update_role_rejects_unknown_role(client, as_admin, repo):
    response = client.patch("/users/user_b/role", json={"role": "superuser"})

    assert response.status_code == 422
    repo["update_role"].assert_not_awaited()


def test_update_role_missing_profile(client, as_admin, repo):
    repo["update_role"].side_effect = None
    repo["update_role"].return_value = None

    response = client.patch("/users/ghost/role", json={"role": "public"})

    assert response.status_code == 404


@pytest.mark.parametrize(("current", "expected"), [("admin", "public"), ("public", "admin")])
def test_toggle_role(client, as_admin, repo, current, expected):
    repo["get_profile_by_user_id"].return_value = _profile("user_b", current)

    response = client.post("/users/user_b/role/toggle")

    assert response.status_code == 200
    assert response.json()["role"] == expected


def test_toggle_missing_profile(client, as_admin, repo):
    response = client.post("/users/ghost/role/toggle")

    assert response.status_code == 404
    repo["update_role"].assert_not_awaited()


def test_toggled_role_defaults_to_admin():
    assert service.toggled_role(None) == "admin"
