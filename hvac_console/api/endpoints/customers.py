"""
Customers page: search, create, edit and delete customers.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from hvac_console.core.deps import get_api_client, get_current_user
from hvac_console.core.security import flash
from hvac_console.core.templating import render
from hvac_console.crud import customer as customer_crud
from hvac_console.schemas.customer import CustomerForm
from hvac_console.schemas.user import User
from hvac_console.services.api_client import ApiClient, ApiError, SessionExpiredError

router = APIRouter(prefix="/customers", tags=["Customers"])
logger = logging.getLogger(__name__)


def _back_to_list(request: Request) -> RedirectResponse:
    """Redirect to the list, keeping the active search term."""
    search = request.query_params.get("search")
    url = "/customers"
    if search:
        url = f"/customers?{urlencode({'search': search})}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def build_customer_form(
    name: str,
    phone: str,
    address: str,
    email: Optional[str],
    notes: Optional[str],
) -> CustomerForm:
    return CustomerForm(
        name=name.strip(),
        phone=phone.strip(),
        address=address.strip(),
        email=(email or "").strip() or None,
        notes=(notes or "").strip() or None,
    )


@router.get("")
async def list_customers(
    request: Request,
    search: str = "",
    modal: Optional[str] = None,
    edit: Optional[int] = None,
    client: ApiClient = Depends(get_api_client),
    user: User = Depends(get_current_user),
):
    """Customer list filtered by the backend's search."""
    customers = []
    error = ""
    try:
        customers = await customer_crud.get_multi(client, search=search)
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.error(f"Failed to load customers: {e.message}")
        error = "Failed to load customers"

    editing_customer = None
    if edit is not None:
        editing_customer = next((c for c in customers if c.id == edit), None)

    return render(request, "customers.html", {
        "customers": customers,
        "search": search,
        "search_query": f"?{urlencode({'search': search})}" if search else "",
        "show_create": modal == "new",
        "editing_customer": editing_customer,
        "error": error,
    })


@router.post("")
async def create_customer(
    request: Request,
    name: str = Form(...),
    phone: str = Form(...),
    address: str = Form(...),
    email: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
):
    try:
        customer_data = build_customer_form(name, phone, address, email, notes)
        await customer_crud.create(client, customer_data)
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to create customer: {e}")
        flash(request.session, "Failed to create customer")
        return _back_to_list(request)

    logger.info(f"Created customer {customer_data.name}")
    return _back_to_list(request)


@router.post("/{customer_id}")
async def update_customer(
    request: Request,
    customer_id: int,
    name: str = Form(...),
    phone: str = Form(...),
    address: str = Form(...),
    email: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
):
    try:
        customer_data = build_customer_form(name, phone, address, email, notes)
        await customer_crud.update(client, customer_id, customer_data)
    except SessionExpiredError:
        raise
    except (ApiError, ValueError) as e:
        logger.error(f"Failed to update customer {customer_id}: {e}")
        flash(request.session, "Failed to update customer")
        return _back_to_list(request)

    logger.info(f"Updated customer {customer_id}")
    return _back_to_list(request)


@router.post("/{customer_id}/delete")
async def delete_customer(
    request: Request,
    customer_id: int,
    client: ApiClient = Depends(get_api_client),
):
    try:
        await customer_crud.delete(client, customer_id)
    except SessionExpiredError:
        raise
    except ApiError as e:
        logger.error(f"Failed to delete customer {customer_id}: {e.message}")
        flash(request.session, "Failed to delete customer")
        return _back_to_list(request)

    logger.info(f"Deleted customer {customer_id}")
    return _back_to_list(request)
