"""Unit tests for application bootstrap."""

import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from applinks.config import AppLinksConfig
from applinks.enums import ConfirmationState
from applinks.logging_filters import RedactUrlFilter
from applinks.main import Application, configure_logging, create_app
from applinks.models.domain import BrowsingSession
from applinks.services.app_launcher import AppLauncher
from applinks.services.confirmation_controller import SessionNavigator
from applinks.services.confirmation_surface import SurfaceHost

REGISTRY_YAML = """\
applications:
  - id: org.example.browser
    browser: true
  - id: com.example.maps
    schemes: [geo]
  - id: com.example.shop
    schemes: [https]
    hosts: ["shop.example.com"]
"""


@pytest.fixture
def config(tmp_path) -> AppLinksConfig:
    registry = tmp_path / "handlers.yml"
    registry.write_text(REGISTRY_YAML)
    return AppLinksConfig(handler_registry_path=str(registry))


@pytest.fixture
def client(config) -> TestClient:
    return TestClient(create_app(config).fastapi_app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"service": "applinks", "status": "healthy"}


def test_resolves_against_registry_file(client):
    response = client.post("/api/app-links/resolve", json={"url": "geo:37.78,-122.41"})

    assert response.json()["externalTarget"]["uri"] == "geo:37.78,-122.41"


def test_app_claimed_web_url_is_not_a_redirect(client):
    response = client.post("/api/app-links/resolve", json={"url": "https://shop.example.com/item"})

    data = response.json()
    assert data["externalTarget"]["uri"] == "https://shop.example.com/item"
    assert data["externalTarget"]["browsable"] is True
    assert data["isRedirect"] is False


def test_browsers_come_from_registry(client):
    assert client.get("/api/app-links/browsers").json() == {"browsers": ["org.example.browser"]}


def test_configured_browser_list_skips_probe(config):
    config.browser_package_names = ["com.example.shop"]
    app = create_app(config)

    assert app.resolver.browser_package_names == frozenset({"com.example.shop"})


def test_fastapi_app_requires_setup(config):
    with pytest.raises(RuntimeError):
        Application(config).create_fastapi_app()


def test_configure_logging_installs_redaction(config):
    root = logging.getLogger()
    handler = logging.NullHandler()
    root.addHandler(handler)
    try:
        configure_logging(config)
        assert any(isinstance(f, RedactUrlFilter) for f in handler.filters)
    finally:
        root.removeHandler(handler)


class TestHostWiring:
    """Tests for building use cases and controllers from configuration."""

    def test_use_cases_follow_config(self, config):
        config.chooser_title = "Pick an app"
        config.browser_package_names = ["org.example.browser"]
        launcher = MagicMock(spec=AppLauncher)
        use_cases = create_app(config).create_use_cases(launcher)

        decision = use_cases.app_link_redirect.resolve("geo:1,2")
        use_cases.open_app_link.invoke(decision)

        launcher.launch.assert_called_once()
        assert launcher.launch.call_args.kwargs == {"chooser_title": "Pick an app"}

    def test_controller_uses_configured_tag(self, config):
        config.confirmation_tag = "CUSTOM_TAG"
        host = SurfaceHost()
        controller = create_app(config).create_confirmation_controller(
            MagicMock(spec=AppLauncher), MagicMock(spec=SessionNavigator), host
        )
        controller.start()

        state = controller.on_url_changed(
            BrowsingSession(id="tab-1", private=True), "geo:1,2", user_triggered=True
        )

        assert controller.tag == "CUSTOM_TAG"
        assert state is ConfirmationState.AWAITING_CONFIRMATION
        assert host.find("CUSTOM_TAG") is not None

    def test_use_cases_require_setup(self, config):
        with pytest.raises(RuntimeError):
            Application(config).create_use_cases(MagicMock(spec=AppLauncher))
