"""
Authentication pages for the console.

- GET/POST /login: Sign in with email and password
- GET/POST /register: Create a company account
- POST /logout: Forget the stored token and profile

Tokens are issued by the backend; the console keeps them in the signed
session cookie.
"""

import logging
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from hvac_console.core.config import settings
from hvac_console.core.deps import get_public_api_client
from hvac_console.core.security import clear_login, get_token, store_login
from hvac_console.core.templating import render
from hvac_console.crud import user as user_crud
from hvac_console.schemas.user import UserLoginRequest, UserRegisterRequest
from hvac_console.services.api_client import ApiClient, ApiError

router = APIRouter(tags=["Authentication"])
logger = logging.getLogger(__name__)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def validate_registration(password: str, confirm_password: str) -> str:
    """
    Check the registration form before calling the backend.

    Returns:
        Error message, or an empty string when the form is acceptable
    """
    if password != confirm_password:
        return "Passwords do not match"
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        return f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
    return ""


@router.get("/login")
def login_page(request: Request):
    if get_token(request.session):
        return _redirect("/dashboard")
    return render(request, "login.html", {"email": "", "error": ""})


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    client: ApiClient = Depends(get_public_api_client),
):
    """
    Authenticate against the backend and store the returned token.

    On failure the backend's message is shown above the form.
    """
    email = email.strip()
    try:
        credentials = UserLoginRequest(email=email, password=password)
    except ValidationError:
        return render(
            request,
            "login.html",
            {"email": email, "error": "Please enter a valid email and password"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        auth = await user_crud.login(client, credentials)
    except ApiError as e:
        logger.error(f"Login failed for {email}: {e.message}")
        return render(
            request,
            "login.html",
            {"email": email, "error": e.message},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    store_login(request.session, auth.token, auth.user)
    logger.info(f"User {auth.user.email} signed in")
    return _redirect("/dashboard")


@router.get("/register")
def register_page(request: Request):
    if get_token(request.session):
        return _redirect("/dashboard")
    return render(request, "register.html", {"company_name": "", "email": "", "error": ""})


@router.post("/register")
async def register(
    request: Request,
    company_name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    client: ApiClient = Depends(get_public_api_client),
):
    """
    Create a company account and sign straight in.

    Password confirmation and minimum length are checked before the
    backend is called.
    """
    company_name = company_name.strip()
    email = email.strip()
    form_values = {"company_name": company_name, "email": email}

    error = validate_registration(password, confirm_password)
    if not error:
        try:
            registration = UserRegisterRequest(
                email=email,
                password=password,
                company_name=company_name,
            )
        except ValidationError:
            error = "Please enter a company name and a valid email"

    if error:
        return render(
            request,
            "register.html",
            {**form_values, "error": error},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        auth = await user_crud.register(client, registration)
    except ApiError as e:
        logger.error(f"Registration failed for {email}: {e.message}")
        return render(
            request,
            "register.html",
            {**form_values, "error": e.message},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    store_login(request.session, auth.token, auth.user)
    logger.info(f"New account registered: {auth.user.email}")
    return _redirect("/dashboard")


@router.post("/logout")
def logout(request: Request):
    clear_login(request.session)
    return _redirect("/login")
