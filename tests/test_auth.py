from __future__ import annotations

from medstore.utils.jwt import create_access_refresh
from tests.conftest import API, STAFF_EMAIL, STAFF_PASSWORD


def test_login_and_me(anon_client):
    r = anon_client.post(f"{API}/auth/login", json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD})
    assert r.status_code == 200, r.text
    tokens = r.json()
    assert tokens["token_type"] == "bearer"

    r = anon_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert r.status_code == 200
    assert r.json()["email"] == STAFF_EMAIL
    assert r.json()["isAdmin"] is False


def test_login_rejects_bad_password(anon_client):
    r = anon_client.post(f"{API}/auth/login", json={"email": STAFF_EMAIL, "password": "nope"})
    assert r.status_code == 401
    assert r.json() == {"message": "Invalid credentials"}


def test_protected_routes_require_bearer_token(anon_client):
    r = anon_client.get(f"{API}/products")
    assert r.status_code == 401
    assert r.json()["message"] == "Missing token"

    r = anon_client.get(f"{API}/products", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token"


def test_refresh_token_is_not_an_access_token(anon_client):
    _access, refresh = create_access_refresh(STAFF_EMAIL)
    r = anon_client.get(f"{API}/products", headers={"Authorization": f"Bearer {refresh}"})
    assert r.status_code == 401


def test_token_for_unknown_user(anon_client):
    access, _refresh = create_access_refresh("ghost@medstore.in")
    r = anon_client.get(f"{API}/dashboard/stats", headers={"Authorization": f"Bearer {access}"})
    assert r.status_code == 401
    assert r.json()["message"] == "User not found"


def test_root_health_is_public(anon_client):
    r = anon_client.get("/")
    assert r.status_code == 200
    assert "running" in r.json()["message"]


def test_refresh_exchanges_refresh_token_for_new_pair(anon_client):
    tokens = anon_client.post(f"{API}/auth/login", json={"email": STAFF_EMAIL, "password": STAFF_PASSWORD}).json()

    r = anon_client.post(f"{API}/auth/refresh", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert r.status_code == 200, r.text
    fresh = r.json()
    assert fresh["token_type"] == "bearer"

    r = anon_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {fresh['access_token']}"})
    assert r.status_code == 200
    assert r.json()["email"] == STAFF_EMAIL


def test_refresh_reads_cookie(anon_client):
    _access, refresh = create_access_refresh(STAFF_EMAIL)
    anon_client.cookies.set("refresh_token", refresh)
    r = anon_client.post(f"{API}/auth/refresh")
    assert r.status_code == 200, r.text
    anon_client.cookies.clear()


def test_refresh_rejects_access_and_missing_tokens(anon_client):
    access, _refresh = create_access_refresh(STAFF_EMAIL)

    r = anon_client.post(f"{API}/auth/refresh", headers={"Authorization": f"Bearer {access}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Wrong token type"

    r = anon_client.post(f"{API}/auth/refresh")
    assert r.status_code == 401
    assert r.json()["message"] == "Missing refresh token"

    r = anon_client.post(f"{API}/auth/refresh", headers={"Authorization": "Bearer junk"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid refresh token"


def test_refresh_for_unknown_user(anon_client):
    _access, refresh = create_access_refresh("ghost@medstore.in")
    r = anon_client.post(f"{API}/auth/refresh", headers={"Authorization": f"Bearer {refresh}"})
    assert r.status_code == 401
    assert r.json()["message"] == "User not found"
