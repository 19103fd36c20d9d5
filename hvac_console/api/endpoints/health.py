"""
Health check endpoints.

Reports the console's own status and whether the scheduling backend answers.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Depends, status

from hvac_console.core.deps import get_http_client
from hvac_console.services.api_client import check_backend_health

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the console is running.
    """
    return {
        "status": "healthy",
        "timestamp": _timestamp()
    }


@router.get("/health/backend", status_code=status.HTTP_200_OK)
async def backend_health_check(http: httpx.AsyncClient = Depends(get_http_client)) -> Dict[str, Any]:
    """
    Health of the scheduling backend.

    Always answers 200; the body says whether the backend is reachable.
    """
    backend = await check_backend_health(http)
    if backend["status"] != "healthy":
        logger.warning(f"Backend health check: {backend['message']}")

    return {
        "status": backend["status"],
        "timestamp": _timestamp(),
        "checks": {"backend": backend}
    }
