"""Pytest configuration and fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from applinks.services.app_launcher import AppLauncher
from tests.fakes import BROWSER_ID, FakeResolutionService, RecordingSurface

# Configure pytest-asyncio to auto-detect async tests
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def resolution_service() -> FakeResolutionService:
    """Resolution service with one installed browser and no other apps."""
    return FakeResolutionService(browsers={BROWSER_ID})


@pytest.fixture
def launcher() -> MagicMock:
    """Mock AppLauncher recording launches."""
    return MagicMock(spec=AppLauncher)


@pytest.fixture(autouse=True)
def _reset_recording_surfaces():
    RecordingSurface.instances.clear()
    yield
    RecordingSurface.instances.clear()


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend."""
    return "asyncio"
