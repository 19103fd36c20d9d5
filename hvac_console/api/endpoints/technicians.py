"""
Technicians page: list (active only by default), create, edit and delete.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from hvac_console.core.deps import get_api_client, get_current_user
from hvac_console.core.security import flash
from hvac_console.core.templating import render
from hvac_console.crud import technician as technician_crud
from hvac_console.schemas.technician import TechnicianForm
from hvac_console.schemas.user import User
from hvac_console.services.api_client import ApiClient, ApiError, SessionExpiredError

router = APIRouter(prefix="/technicians", tags=["Technicians"])
logger = logging.getLogger(__name__)


def _back_to_list(request: Request) -> RedirectResponse:
    """Redirect to the list, keeping the active-only toggle."""
    url = "/technicians"
    if request.query_params.get("active_only") == "false":
        url = "/technicians?active_only=false"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def build_technician_form(
    name: str,
    phone: str,
    email: Optional[str],
    is_active: Optional[str],
) -> TechnicianForm:
    # Unchecked checkboxes are not submitted at all
    return TechnicianForm(
        name=name.strip(),
        phone=phone.strip(),
        email=(email or "").strip() or None,
        is_active=is_active is not None,
    )


@router.get("")
async def list_technicians(
    request: Request,
    active_only: bool = True,
    modal: Optional[str] = None,
    edit: Optional[int] = None,
    client: ApiClient = Depends(get_api_client),
    user: User = Depends(get_current_user),
):
    technicians = []
    error = ""
    try:
        technicians = await technician_crud.get_multi(client, active_only=active_only)
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.error(f"Failed to load technicians: {e.message}")
        error = "Failed to load technicians"

    editing_technician = None
    if edit is not None:
        editing_technician = next((t for t in technicians if t.id == edit), None)

    return render(request, "technicians.html", {
        "technicians": technicians,
        "active_only": active_only,
        "filter_query": "" if active_only else "?active_only=false",
        "show_create": modal == "new",
        "editing_technician": editing_technician,
        "error": error,
    })


@router.post("")
async def create_technician(
    request: Request,
    name: str = Form(...),
    phone: str = Form(...),
    email: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
):
    try:
        technician_data = build_technician_form(name, phone, email, is_active)
        await technician_crud.create(client, technician_data)
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to create technician: {e}")
        flash(request.session, "Failed to create technician")
        return _back_to_list(request)

    logger.info(f"Created technician {technician_data.name}")
    return _back_to_list(request)


@router.post("/{technician_id}")
async def update_technician(
    request: Request,
    technician_id: int,
    name: str = Form(...),
    phone: str = Form(...),
    email: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
):
    try:
        technician_data = build_technician_form(name, phone, email, is_active)
        await technician_crud.update(client, technician_id, technician_data)
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to update technician {technician_id}: {e}")
        flash(request.session, "Failed to update technician")
        return _back_to_list(request)

    logger.info(f"Updated technician {technician_id}")
    return _back_to_list(request)


@router.post("/{technician_id}/delete")
async def delete_technician(
    request: Request,
    technician_id: int,
    client: ApiClient = Depends(get_api_client),
):
    try:
        await technician_crud.delete(client, technician_id)
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.error(f"Failed to delete technician {technician_id}: {e.message}")
        flash(request.session, "Failed to delete technician")
        return _back_to_list(request)

    logger.info(f"Deleted technician {technician_id}")
    return _back_to_list(request)
