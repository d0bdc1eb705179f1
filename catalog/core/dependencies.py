"""
FastAPI dependencies - injection for the search client and product service (SOLID: Dependency Inversion).
Design: The client lives on app.state (created in the lifespan); tests override get_elasticsearch.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import Depends, Request

from catalog.config import Settings, get_settings
from catalog.repositories.product_repository import ProductRepository
from catalog.services.product_service import ProductService


async def get_elasticsearch(request: Request) -> AsyncElasticsearch:
    """Client created at startup for this application instance."""
    return request.app.state.elasticsearch


def get_product_service(
    es: Annotated[AsyncElasticsearch, Depends(get_elasticsearch)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProductService:
    """Factory for service with repository injection (Dependency Inversion)."""
    repo = ProductRepository(es, index=settings.products_index, refresh=settings.index_refresh)
    return ProductService(repo, max_bulk_size=settings.max_bulk_size)


EsClient = Annotated[AsyncElasticsearch, Depends(get_elasticsearch)]
ProductSvc = Annotated[ProductService, Depends(get_product_service)]
