"""
Jobs page: list, filter, create, edit, delete, assign and progress jobs.

Every mutation redirects back to the list so it is re-fetched from the
backend. Failures are logged and queued as an alert for the next page.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import RedirectResponse

from hvac_console.core.deps import get_api_client, get_current_user
from hvac_console.core.security import flash
from hvac_console.core.templating import render
from hvac_console.crud import customer as customer_crud
from hvac_console.crud import job as job_crud
from hvac_console.crud import technician as technician_crud
from hvac_console.schemas.job import JobForm, JobStatusEnum
from hvac_console.schemas.technician import Technician
from hvac_console.schemas.user import User
from hvac_console.services.api_client import ApiClient, ApiError, SessionExpiredError

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)

STATUS_FILTERS = ["all"] + [s.value for s in JobStatusEnum]


def _back_to_list(request: Request) -> RedirectResponse:
    """Redirect to the list, keeping the active status filter."""
    status_filter = request.query_params.get("status")
    url = "/jobs"
    if status_filter in STATUS_FILTERS and status_filter != "all":
        url = f"/jobs?status={status_filter}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def parse_optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


def parse_optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


def parse_scheduled_at(value: str) -> datetime:
    """
    Convert a datetime-local value to an aware UTC timestamp.

    Values without an offset are read as server local time. Past dates
    are accepted.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed.astimezone(timezone.utc)


def build_job_form(
    customer_id: str,
    technician_id: Optional[str],
    title: str,
    description: Optional[str],
    scheduled_at: str,
    duration_minutes: Optional[str],
    price: Optional[str],
) -> JobForm:
    """
    Build the backend payload from the submitted modal form.

    Raises:
        ValueError: A field could not be parsed (ValidationError included)
    """
    return JobForm(
        customer_id=int(customer_id),
        technician_id=parse_optional_int(technician_id),
        title=title.strip(),
        description=(description or "").strip() or None,
        scheduled_at=parse_scheduled_at(scheduled_at),
        duration_minutes=parse_optional_int(duration_minutes) or 60,
        price=parse_optional_float(price),
    )


async def load_assigned_technician(client: ApiClient, technician_id: int) -> Technician:
    """
    Technician currently assigned to a job, even when inactive.

    Falls back to a placeholder named after the id if the lookup fails.
    """
    try:
        return await technician_crud.get_by_id(client, technician_id)
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.warning(f"Failed to load technician {technician_id}: {e.message}")
        return Technician(id=technician_id, name=f"Technician #{technician_id}", is_active=False)


@router.get("")
async def list_jobs(
    request: Request,
    status_filter: str = Query("all", alias="status"),
    modal: Optional[str] = None,
    edit: Optional[int] = None,
    client: ApiClient = Depends(get_api_client),
    user: User = Depends(get_current_user),
):
    """
    Jobs list with status filter and the create/edit modal.

    Query:
        status: all, scheduled, in_progress, completed or cancelled
        modal=new: open the create modal
        edit=<id>: open the edit modal for that job
    """
    if status_filter not in STATUS_FILTERS:
        status_filter = "all"

    jobs, customers, technicians = [], [], []
    error = ""
    try:
        jobs, customers, technicians = await asyncio.gather(
            job_crud.get_multi(client),
            customer_crud.get_multi(client),
            technician_crud.get_multi(client, active_only=True),
        )
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.error(f"Failed to load data: {e.message}")
        error = "Failed to load jobs"

    if status_filter == "all":
        visible_jobs = jobs
    else:
        visible_jobs = [job for job in jobs if job.status.value == status_filter]

    editing_job = None
    modal_technicians = technicians
    if edit is not None:
        editing_job = next((job for job in jobs if job.id == edit), None)
    if editing_job is not None and editing_job.technician_id is not None:
        if all(tech.id != editing_job.technician_id for tech in technicians):
            # Current assignee stays selectable even when inactive
            modal_technicians = technicians + [
                await load_assigned_technician(client, editing_job.technician_id)
            ]

    return render(request, "jobs.html", {
        "jobs": visible_jobs,
        "customers": customers,
        "technicians": technicians,
        "modal_technicians": modal_technicians,
        "status_filters": STATUS_FILTERS,
        "status_filter": status_filter,
        "filter_query": f"?status={status_filter}" if status_filter != "all" else "",
        "show_create": modal == "new",
        "editing_job": editing_job,
        "error": error,
    })


@router.post("")
async def create_job(
    request: Request,
    customer_id: str = Form(...),
    technician_id: Optional[str] = Form(None),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    scheduled_at: str = Form(...),
    duration_minutes: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
):
    try:
        job_data = build_job_form(
            customer_id, technician_id, title, description,
            scheduled_at, duration_minutes, price,
        )
        new_job = await job_crud.create(client, job_data)
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to create job: {e}")
        flash(request.session, "Failed to create job")
        return _back_to_list(request)

    logger.info(f"Created job {new_job.id if new_job else '?'}: {job_data.title}")
    return _back_to_list(request)


@router.post("/{job_id}")
async def update_job(
    request: Request,
    job_id: int,
    customer_id: str = Form(...),
    technician_id: Optional[str] = Form(None),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    scheduled_at: str = Form(...),
    duration_minutes: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
):
    try:
        job_data = build_job_form(
            customer_id, technician_id, title, description,
            scheduled_at, duration_minutes, price,
        )
        await job_crud.update(client, job_id, job_data)
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to update job {job_id}: {e}")
        flash(request.session, "Failed to update job")
        return _back_to_list(request)

    logger.info(f"Updated job {job_id}")
    return _back_to_list(request)


@router.post("/{job_id}/delete")
async def delete_job(
    request: Request,
    job_id: int,
    client: ApiClient = Depends(get_api_client),
):
    """Delete a job (the page asks for confirmation before submitting)."""
    try:
        await job_crud.delete(client, job_id)
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.error(f"Failed to delete job {job_id}: {e.message}")
        flash(request.session, "Failed to delete job")
        return _back_to_list(request)

    logger.info(f"Deleted job {job_id}")
    return _back_to_list(request)


@router.post("/{job_id}/assign")
async def assign_technician(
    request: Request,
    job_id: int,
    technician_id: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
):
    """Assign a technician; an empty selection unassigns the job."""
    try:
        await job_crud.assign_technician(client, job_id, parse_optional_int(technician_id))
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to assign technician to job {job_id}: {e}")
        flash(request.session, "Failed to assign technician")
        return _back_to_list(request)

    return _back_to_list(request)


@router.post("/{job_id}/status")
async def update_status(
    request: Request,
    job_id: int,
    new_status: str = Form(..., alias="status"),
    client: ApiClient = Depends(get_api_client),
):
    try:
        await job_crud.update_status(client, job_id, JobStatusEnum(new_status))
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to update status of job {job_id}: {e}")
        flash(request.session, "Failed to update status")
        return _back_to_list(request)

    logger.info(f"Job {job_id} moved to {new_status}")
    return _back_to_list(request)
