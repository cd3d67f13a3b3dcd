import pytest

from vetcare.core.exceptions import PUBLIC_AUTH_MESSAGE
from vetcare.core.security import create_access_token

LOGIN_URL = "/api/v1/auth/login"


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "VetCare Central" in response.json()["message"]


# ── Login / session / logout ─────────────────────────────────────────

@pytest.mark.asyncio
async def test_login_success(client, memory_backend):
    response = await client.post(LOGIN_URL, json={"email": "admin@vetcare.com", "password": "123456"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "admin"
    assert body["user"]["imageUrl"].startswith("https://")
    assert body["message"] == "Logged in as Laura Méndez"
    assert len(memory_backend.data) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("email,password", [
    ("admin@vetcare.com", "wrong"),
    ("stranger@vetcare.com", "123456"),
])
async def test_login_failure_is_generic(client, memory_backend, email, password):
    response = await client.post(LOGIN_URL, json={"email": email, "password": password})
    assert response.status_code == 401
    assert response.json()["detail"] == PUBLIC_AUTH_MESSAGE
    assert memory_backend.data == {}


@pytest.mark.asyncio
async def test_login_requires_both_fields(client):
    response = await client.post(LOGIN_URL, json={"email": "admin@vetcare.com"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_session_after_login(client, login):
    headers = await login("vet@vetcare.com")
    response = await client.get("/api/v1/auth/session", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["authenticated"] is True
    assert body["loading"] is False
    assert body["identity"]["email"] == "vet@vetcare.com"
    assert body["identity"]["role"] == "veterinarian"


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer not-a-jwt"},
    {"Authorization": f"Bearer {create_access_token({'sub': '1'})}"},
    {"Authorization": f"Bearer {create_access_token({'sub': '1', 'sid': 'never-written'})}"},
])
async def test_session_without_valid_token(client, headers):
    response = await client.get("/api/v1/auth/session", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"identity": None, "loading": False, "authenticated": False}


@pytest.mark.asyncio
async def test_logout_ends_session(client, login, memory_backend):
    headers = await login("reception@vetcare.com")
    response = await client.post("/api/v1/auth/logout", headers=headers)
    assert response.status_code == 200
    assert memory_backend.data == {}

    response = await client.get("/api/v1/auth/session", headers=headers)
    assert response.json()["authenticated"] is False


@pytest.mark.asyncio
async def test_logout_when_logged_out(client):
    response = await client.post("/api/v1/auth/logout")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_corrupted_slot_reads_as_logged_out(client, login, memory_backend):
    headers = await login("admin@vetcare.com")
    key = next(iter(memory_backend.data))
    memory_backend.data[key] = "{broken"

    response = await client.get("/api/v1/auth/session", headers=headers)
    assert response.status_code == 200
    assert response.json()["authenticated"] is False
