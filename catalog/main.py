"""
FastAPI application entry point.
Challenge: Mount routes, middleware (Prometheus), startup events (ES client + index), error mapping.
"""

import logging
from contextlib import asynccontextmanager

from elastic_transport import TransportError
from elasticsearch import ApiError
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from catalog.api.v1.router import api_router
from catalog.config import get_settings
from catalog.core.exceptions import CatalogError
from catalog.core.logging import configure_logging
from catalog.search.elasticsearch_client import create_elasticsearch_client, ensure_products_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build the ES client, ensure the products index. Shutdown: close the client."""
    settings = get_settings()
    es = create_elasticsearch_client(settings)
    app.state.elasticsearch = es
    try:
        await ensure_products_index(es, settings.products_index)
    except (ApiError, TransportError) as e:
        # ES may be down at boot; requests fail with 500 until it is reachable
        logger.warning("Could not ensure index %r: %s", settings.products_index, e)
    yield
    await es.close()


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query params are client errors (400), every problem listed."""
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Bad Request", "message": "Request validation failed", "details": details},
    )


async def search_service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Search service error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "message": str(exc), "details": None},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(logging.DEBUG if settings.debug else settings.log_level.upper())
    app = FastAPI(
        title=settings.app_name,
        description="Product catalog CRUD and search backed by Elasticsearch.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS for frontend/API consumers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ApiError, search_service_error_handler)
    app.add_exception_handler(TransportError, search_service_error_handler)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
