"""
Pytest fixtures - fake search client, app client, sample products (TDD/BDD support).
Challenge: Isolated tests; no real Elasticsearch in unit tests.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from catalog.core.dependencies import get_elasticsearch
from catalog.main import app
from catalog.repositories.product_repository import ProductRepository
from catalog.services.product_service import ProductService
from fakes import FakeElasticsearch

TEST_INDEX = "products"


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def repo(fake_es: FakeElasticsearch) -> ProductRepository:
    return ProductRepository(fake_es, index=TEST_INDEX)


@pytest.fixture
def service(repo: ProductRepository) -> ProductService:
    return ProductService(repo, max_bulk_size=1000)


@pytest_asyncio.fixture
async def client(fake_es: FakeElasticsearch):
    async def override_get_elasticsearch():
        return fake_es

    app.dependency_overrides[get_elasticsearch] = override_get_elasticsearch
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def sync_client(fake_es: FakeElasticsearch):
    """Blocking client for pytest-bdd steps (steps are plain functions)."""
    app.dependency_overrides[get_elasticsearch] = lambda: fake_es
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def iphone_payload() -> dict:
    return {
        "name": "iPhone 15 Pro",
        "description": "Latest iPhone with advanced camera system and A17 Pro chip",
        "category": "Electronics",
        "brand": "Apple",
        "price": 999.99,
        "stock": 50,
        "rating": 4.8,
    }


@pytest.fixture
def headphones_payload() -> dict:
    return {
        "name": "Wireless Headphones",
        "description": "Noise cancelling over-ear headphones with 30h battery",
        "category": "Audio",
        "brand": "Sony",
        "price": 79.5,
        "stock": 0,
        "rating": 4.2,
        "tags": ["bluetooth", "anc"],
    }
