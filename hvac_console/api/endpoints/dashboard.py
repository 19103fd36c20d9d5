import asyncio
import logging
from fastapi import APIRouter, Depends, Request

from hvac_console.core.deps import get_api_client, get_current_user
from hvac_console.core.templating import render
from hvac_console.crud import customer as customer_crud
from hvac_console.crud import job as job_crud
from hvac_console.crud import technician as technician_crud
from hvac_console.schemas.user import User
from hvac_console.services.api_client import ApiClient, ApiError, SessionExpiredError
from hvac_console.services.dashboard import DashboardSummary, build_summary

router = APIRouter(tags=["Dashboard"])
logger = logging.getLogger(__name__)


@router.get("/dashboard")
async def dashboard(
    request: Request,
    client: ApiClient = Depends(get_api_client),
    user: User = Depends(get_current_user),
):
    """Job, customer and technician counts plus today's schedule."""
    error = ""
    try:
        jobs, customers, technicians = await asyncio.gather(
            job_crud.get_multi(client),
            customer_crud.get_multi(client),
            technician_crud.get_multi(client, active_only=False),
        )
        summary = build_summary(jobs, customers, technicians)
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.error(f"Error fetching dashboard data: {e.message}")
        summary = DashboardSummary()
        error = "Failed to load dashboard data"

    return render(request, "dashboard.html", {"summary": summary, "error": error})
