"""
FastAPI dependencies for the backend client and the auth guard.

These dependencies are used by every private page to get an API client
bound to the signed-in user's token.
"""

import httpx
from fastapi import Depends, Request

from hvac_console.core.security import USER_KEY, get_token, get_user
from hvac_console.crud import user as user_crud
from hvac_console.schemas.user import User
from hvac_console.services.api_client import ApiClient


class LoginRequired(Exception):
    """Raised when a private page is requested without a valid session."""
    pass


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared AsyncClient created in the application lifespan."""
    return request.app.state.http_client


def require_login(request: Request) -> str:
    """
    Return the stored bearer token or refuse the request.

    Raises:
        LoginRequired: No token in the session, or the token has expired
    """
    token = get_token(request.session)
    if not token:
        raise LoginRequired()
    return token


def get_api_client(
    token: str = Depends(require_login),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> ApiClient:
    """API client carrying the user's bearer token."""
    return ApiClient(http, token)


def get_public_api_client(http: httpx.AsyncClient = Depends(get_http_client)) -> ApiClient:
    """API client for register/login, which run before a token exists."""
    return ApiClient(http)


async def get_current_user(
    request: Request,
    client: ApiClient = Depends(get_api_client),
) -> User:
    """
    Profile of the signed-in account.

    Read from the session; when only the token is stored the profile is
    fetched from GET /me and remembered.
    """
    user = get_user(request.session)
    if user is None:
        user = await user_crud.get_current_user(client)
        request.session[USER_KEY] = user.model_dump(mode="json")
    return user
