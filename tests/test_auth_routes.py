import pytest

from campaign_manager.auth.auth_routes import register_user
from campaign_manager.auth.auth_utils import get_current_user
from campaign_manager.core import errors
from campaign_manager.database import crud
from campaign_manager.main import app

PASSWORD = "StrongPass1!"


@pytest.fixture
def real_auth(client):
    """Use real bearer tokens instead of the overridden current user."""
    app.dependency_overrides.pop(get_current_user, None)
    return client


def _login(client, email, password=PASSWORD):
    return client.post("/api/auth/login", data={"username": email, "password": password})


def test_login_me_and_refresh(real_auth, db):
    register_user(db, "Ada", "ada@example.com", PASSWORD)
    response = _login(real_auth, "ada@example.com")
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["role"] == "user"

    me = real_auth.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.json()["email"] == "ada@example.com"

    refreshed = real_auth.post("/api/auth/refresh", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert refreshed.status_code == 200
    # An access token is not a refresh token.
    wrong = real_auth.post("/api/auth/refresh", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert wrong.status_code == 403


def test_bad_credentials(real_auth, db):
    register_user(db, "Ada", "ada@example.com", PASSWORD)
    response = _login(real_auth, "ada@example.com", "WrongPass1!")
    assert response.status_code == 401
    assert response.json()["type"] == "UNAUTHORIZED"


def test_token_authorizes_campaign_writes(real_auth, db):
    register_user(db, "Ada", "ada@example.com", PASSWORD)
    token = _login(real_auth, "ada@example.com").json()["access_token"]
    response = real_auth.post(
        "/api/campaigns",
        json={"name": "Foo", "description": "Bar"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201


def test_only_admins_create_users(real_auth, db):
    register_user(db, "Root", "root@example.com", PASSWORD, role="admin")
    register_user(db, "Ada", "ada@example.com", PASSWORD)
    new_user = {"name": "Grace", "email": "grace@example.com", "password": PASSWORD}

    user_token = _login(real_auth, "ada@example.com").json()["access_token"]
    response = real_auth.post("/api/auth/users", json=new_user, headers={"Authorization": f"Bearer {user_token}"})
    assert response.status_code == 403
    assert response.json()["details"]["requiredRole"] == "admin"

    admin_token = _login(real_auth, "root@example.com").json()["access_token"]
    response = real_auth.post("/api/auth/users", json=new_user, headers={"Authorization": f"Bearer {admin_token}"})
    assert response.status_code == 201
    assert crud.get_user_by_email(db, "grace@example.com") is not None


def test_register_user_rejects_duplicates_and_bad_roles(db):
    register_user(db, "Ada", "ada@example.com", PASSWORD)
    with pytest.raises(errors.ValidationError):
        register_user(db, "Ada again", "ada@example.com", PASSWORD)
    with pytest.raises(errors.ValidationError):
        register_user(db, "Mallory", "mallory@example.com", PASSWORD, role="superuser")
