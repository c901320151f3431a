"""Fixtures for API tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.api.app import create_app
from apps.api.deps.youtube import get_provider, get_resolution_settings
from packages.common.config import ResolutionSettings
from tests.utils.fakes import FakeChannelProvider


@pytest.fixture
def app(provider: FakeChannelProvider, fast_settings: ResolutionSettings) -> FastAPI:
    """Create the application with the scripted provider wired in."""
    application = create_app()
    application.dependency_overrides[get_provider] = lambda: provider
    application.dependency_overrides[get_resolution_settings] = lambda: fast_settings
    return application


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Create FastAPI TestClient for API tests.

    Runs the application lifespan, so startup and shutdown are exercised too.
    """
    with TestClient(app) as test_client:
        yield test_client
