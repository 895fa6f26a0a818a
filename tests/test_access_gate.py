"""Tests for the access gate middleware."""
from datetime import timedelta
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from fastapi import Depends, FastAPI

from notekeeper.middlewares.auth import get_current_user_id
from notekeeper.utils.security import create_access_token

pytestmark = pytest.mark.anyio


async def test_api_without_credentials_is_rejected(client):
    response = await client.get("/api/notes")

    assert response.status_code == 401
    assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"


async def test_invalid_token_is_rejected(client):
    response = await client.get("/api/notes", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


async def test_expired_token_is_rejected(client):
    token = create_access_token({"sub": "user_owner"}, expires_delta=timedelta(seconds=-1))
    response = await client.get("/api/notes", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_page_navigation_redirects_to_sign_in(client):
    response = await client.get("/notes/abc?tab=1", headers={"Accept": "text/html,application/xhtml+xml"})

    assert response.status_code == 307
    location = urlsplit(response.headers["location"])
    assert location.path == "/sign-in"
    assert parse_qs(location.query)["redirect_url"] == ["http://testserver/notes/abc?tab=1"]


async def test_api_call_accepting_html_still_gets_401(client):
    response = await client.get("/api/notes", headers={"Accept": "text/html"})
    assert response.status_code == 401


async def test_bearer_token_passes(client, owner_headers):
    response = await client.get("/api/notes", headers=owner_headers)

    assert response.status_code == 200
    assert response.json() == []


async def test_session_cookie_passes(client):
    client.cookies.set("__session", create_access_token({"sub": "user_owner"}))

    response = await client.get("/api/notes")
    assert response.status_code == 200


@pytest.mark.parametrize("path", ["/api/health", "/api/share/00000000-0000-0000-0000-000000000000"])
async def test_public_routes_need_no_credentials(client, path):
    response = await client.get(path)
    assert response.status_code != 401


async def test_health_reports_database(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


@pytest.fixture
async def ungated_client():
    # A bare app without the gate, so the dependency reads the credentials itself
    app = FastAPI()

    @app.get("/whoami")
    async def whoami(user_id: str = Depends(get_current_user_id)):
        return {"userId": user_id}

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


async def test_current_user_from_bearer_credentials(ungated_client):
    token = create_access_token({"sub": "user_owner"})
    response = await ungated_client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"userId": "user_owner"}


async def test_current_user_from_session_cookie(ungated_client):
    ungated_client.cookies.set("__session", create_access_token({"sub": "user_other"}))

    response = await ungated_client.get("/whoami")
    assert response.json() == {"userId": "user_other"}


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-token"}])
async def test_current_user_requires_valid_credentials(ungated_client, headers):
    response = await ungated_client.get("/whoami", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"
