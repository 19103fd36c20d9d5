"""
Token and session helpers for the console.

The console never verifies tokens itself: the backend signs them and rejects
bad ones with 401. It only reads the `exp` claim so that an expired session
is dropped before a page issues requests that are bound to fail.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from jose import JWTError, jwt

from hvac_console.schemas.user import User

TOKEN_KEY = "token"
USER_KEY = "user"
FLASH_KEY = "_flashes"


def token_is_expired(token: str, now: Optional[datetime] = None) -> bool:
    """
    Check the `exp` claim of a JWT without verifying its signature.

    Opaque (non-JWT) tokens and tokens without `exp` are never treated as
    expired here; the backend remains the authority.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return False

    exp = claims.get("exp")
    if exp is None:
        return False

    try:
        expires_at = datetime.fromtimestamp(float(exp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return False

    now = now or datetime.now(timezone.utc)
    return expires_at <= now


def store_login(session: Dict[str, Any], token: str, user: User) -> None:
    """Remember the bearer token and profile after register or login."""
    session[TOKEN_KEY] = token
    session[USER_KEY] = user.model_dump(mode="json")


def clear_login(session: Dict[str, Any]) -> None:
    session.pop(TOKEN_KEY, None)
    session.pop(USER_KEY, None)


def get_token(session: Dict[str, Any]) -> Optional[str]:
    """Return the stored token, or None when absent or expired."""
    token = session.get(TOKEN_KEY)
    if not token:
        return None
    if token_is_expired(token):
        clear_login(session)
        return None
    return token


def get_user(session: Dict[str, Any]) -> Optional[User]:
    data = session.get(USER_KEY)
    if not data:
        return None
    return User.model_validate(data)


def flash(session: Dict[str, Any], message: str, category: str = "error") -> None:
    """Queue a message for the next rendered page."""
    session.setdefault(FLASH_KEY, []).append({"message": message, "category": category})


def pop_flashes(session: Dict[str, Any]) -> List[Dict[str, str]]:
    return session.pop(FLASH_KEY, [])
