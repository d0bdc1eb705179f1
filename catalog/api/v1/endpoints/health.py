"""
Health checks - for load balancers, Kubernetes, and monitoring.
Challenge: Fast liveness; readiness reflects whether the search cluster answers.
"""

import logging
from datetime import datetime, timezone

from elastic_transport import TransportError
from elasticsearch import ApiError
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from catalog.config import get_settings
from catalog.core.dependencies import EsClient

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {
        "status": "ok",
        "app": settings.app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def ready(es: EsClient):
    """Readiness: does Elasticsearch answer? 503 otherwise."""
    try:
        info = await es.info()
    except (ApiError, TransportError) as e:
        logger.warning("Elasticsearch not reachable: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "elasticsearch": str(e)},
        )
    body = getattr(info, "body", info)
    return {
        "status": "ready",
        "cluster": body.get("cluster_name"),
        "version": body.get("version", {}).get("number"),
    }
