"""Unit tests for the app-link router.

Tests HTTP endpoint behavior, camelCase serialization of decisions,
and error mapping for unparseable URLs.
"""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from applinks.routers import RedirectDecisionResponse, create_redirect_router
from applinks.services.redirect_resolver import RedirectResolver
from tests.fakes import BROWSER_ID


@pytest.fixture
def app(resolution_service):
    """Create a FastAPI app with the app-link router."""
    resolution_service.register("myapp://open", "com.example.app")
    app = FastAPI()
    app.include_router(create_redirect_router(RedirectResolver(resolution_service)))
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestResolve:
    def test_web_url_without_app(self, client):
        response = client.post("/api/app-links/resolve", json={"url": "https://example.com/a"})

        assert response.status_code == 200
        assert response.json() == {
            "externalTarget": None,
            "fallbackWebUrl": "https://example.com/a",
            "isRedirect": False,
        }

    def test_intent_with_app_and_fallback(self, client):
        response = client.post(
            "/api/app-links/resolve",
            json={
                "url": "intent://open#Intent;scheme=myapp;package=com.example.app;"
                "S.browser_fallback_url=https%3A%2F%2Fexample.com%2Fapp;end"
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["externalTarget"] == {
            "uri": "myapp://open",
            "action": "android.intent.action.VIEW",
            "package": "com.example.app",
            "fallbackUrl": "https://example.com/app",
            "browsable": False,
        }
        assert data["fallbackWebUrl"] == "https://example.com/app"
        assert data["isRedirect"] is True

    def test_unparseable_url_is_422(self, client):
        response = client.post(
            "/api/app-links/resolve", json={"url": "intent://open#Intent;scheme=myapp"}
        )

        assert response.status_code == 422
        assert "end" in response.json()["detail"]

    def test_missing_url_is_422(self, client):
        response = client.post("/api/app-links/resolve", json={})
        assert response.status_code == 422


class TestBrowsers:
    def test_lists_probed_browsers(self, client):
        response = client.get("/api/app-links/browsers")

        assert response.status_code == 200
        assert response.json() == {"browsers": [BROWSER_ID]}


@pytest.mark.asyncio
async def test_resolve_over_asgi_transport(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.post("/api/app-links/resolve", json={"url": "myapp://open"})

    assert response.status_code == 200
    assert response.json()["externalTarget"]["uri"] == "myapp://open"
    assert response.json()["isRedirect"] is False


def test_response_models_dump_camel_case():
    body = RedirectDecisionResponse(fallback_web_url="https://example.com").model_dump_json()
    assert '"fallbackWebUrl":"https://example.com"' in body
    assert '"isRedirect":false' in body
