"""
Backend operations for the company account: register, login and profile.
"""

from hvac_console.schemas.user import AuthResponse, User, UserLoginRequest, UserRegisterRequest
from hvac_console.services.api_client import ApiClient


async def register(client: ApiClient, request: UserRegisterRequest) -> AuthResponse:
    data = await client.post("register", json=request.model_dump(mode="json"))
    return AuthResponse.model_validate(data)


async def login(client: ApiClient, request: UserLoginRequest) -> AuthResponse:
    data = await client.post("login", json=request.model_dump(mode="json"))
    return AuthResponse.model_validate(data)


async def get_current_user(client: ApiClient) -> User:
    data = await client.get("me")
    return User.model_validate(data)
