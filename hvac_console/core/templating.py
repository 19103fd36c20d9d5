"""
Jinja2 rendering for console pages.

Every page is rendered through `render`, which adds the signed-in user, the
queued flash messages and the active navigation item to the template context.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from hvac_console.core.config import settings
from hvac_console.core.security import get_user, pop_flashes

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def to_local(value: datetime) -> datetime:
    """Convert an aware timestamp to server local time; naive values are already local."""
    if value.tzinfo is None:
        return value
    return value.astimezone()


def format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    local = to_local(value)
    return local.strftime("%b %d, %Y, %I:%M %p").replace(" 0", " ")


def format_datetime_input(value: Optional[datetime]) -> str:
    """Value for an <input type="datetime-local">"""
    if value is None:
        return ""
    return to_local(value).strftime("%Y-%m-%dT%H:%M")


def format_money(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"${value:,.2f}"


def status_label(value: Any) -> str:
    raw = getattr(value, "value", value) or ""
    if raw == "all":
        return "All"
    return str(raw).replace("_", " ").upper()


templates.env.filters["datetime"] = format_datetime
templates.env.filters["datetime_input"] = format_datetime_input
templates.env.filters["money"] = format_money
templates.env.filters["status_label"] = status_label
templates.env.globals["project_name"] = settings.PROJECT_NAME


def render(request: Request, name: str, context: Optional[Dict[str, Any]] = None, status_code: int = 200):
    """
    Render a page template.

    Args:
        request: Incoming request (session access and url_for)
        name: Template file name
        context: Page-specific variables
        status_code: HTTP status of the response
    """
    page_context = {
        "current_user": get_user(request.session),
        "flashes": pop_flashes(request.session),
        "active_page": name.rsplit(".", 1)[0],
    }
    page_context.update(context or {})
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)
