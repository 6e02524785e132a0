"""Pytest fixtures for API testing."""

import pytest
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI

from messaging.api.v1 import conversations, profiles
from messaging.services.messaging import MessagingService


def _build_test_app() -> FastAPI:
    """Create a test app without lifespan (to avoid conflicts)."""
    test_app = FastAPI(title="Messaging Aggregator Test")
    test_app.include_router(conversations.router)
    test_app.include_router(profiles.router)

    @test_app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": "1.0.0"}

    return test_app


@pytest.fixture
def service(db_conn, test_settings):
    """Messaging service injected into the routers for one test."""
    service = MessagingService(db_conn, test_settings)
    service.start()
    conversations.messaging_service = service
    yield service
    service.invalidator.stop()
    service.hub.clear()
    conversations.messaging_service = None


@pytest.fixture
def test_app(service):
    return _build_test_app()


@pytest.fixture
async def client(test_app):
    """Create async HTTP client bound to the test app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
