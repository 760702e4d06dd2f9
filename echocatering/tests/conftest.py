import functools
from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from beanie import Document, init_beanie
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from echocatering.api.main import app
from echocatering.api.v1.configs.config import settings


@pytest.fixture
def test_client():
    """Create a test client for the FastAPI app (lifespan is not run)."""
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client() -> AsyncIterator[httpx.AsyncClient]:
    """Client sharing the test's event loop, for routes that hit Beanie."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def unauthenticated_mode(monkeypatch):
    monkeypatch.setattr(settings.auth, "unauthenticated_mode", True)


@pytest.fixture
def authenticated_mode(monkeypatch):
    monkeypatch.setattr(settings.auth, "unauthenticated_mode", False)


def beanie_setup(models: list[type[Document]]):
    """
    Decorator to initialize Beanie over AsyncMongoMockClient before running a test.

    Example usage:
        @beanie_setup([SaleBeanie])
        async def test_function():
            ...
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            client = AsyncMongoMockClient()
            await init_beanie(database=client.test_db, document_models=models)
            return await func(*args, **kwargs)

        return pytest.mark.asyncio(wrapper)

    return decorator
