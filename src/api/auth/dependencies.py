"""
FastAPI dependencies for staff authentication.
get_current_user guards routes that need a signed-in clerk;
get_optional_user lets anonymous callers through with user=None.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from utils.logger import get_logger

# Initialized in main.py at startup, or lazily from config
_tokens = None
_staff = None

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def init_auth(tokens, staff):
    """Wire the token issuer and staff store. Called from main.py."""
    global _tokens, _staff
    _tokens = tokens
    _staff = staff


def _lazy_init():
    global _tokens, _staff
    if _tokens is not None and _staff is not None:
        return
    import config
    from api.auth.staff_store import StaffStore
    from api.auth.tokens import StaffTokens
    try:
        _tokens = StaffTokens(
            secret=config.API_JWT_SECRET,
            algorithm=config.API_JWT_ALGORITHM,
            access_minutes=config.API_JWT_EXPIRY_MINUTES,
            refresh_days=config.API_JWT_REFRESH_EXPIRY_DAYS,
        )
    except ValueError as e:
        get_logger().error(f"Auth not initialized: {e}", component="API")
        return
    _staff = StaffStore(config.API_USER_DB_PATH)


def _not_ready() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Auth system not initialized",
    )


def get_tokens():
    _lazy_init()
    if _tokens is None:
        raise _not_ready()
    return _tokens


def get_staff_store():
    _lazy_init()
    if _staff is None:
        raise _not_ready()
    return _staff


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> Dict[str, Any]:
    staff_id = get_tokens().staff_id(token)
    if not staff_id:
        raise _unauthorized("Invalid or expired token")
    user = get_staff_store().get(staff_id)
    if not user:
        raise _unauthorized("Account not found or deactivated")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Dict[str, Any]:
    """
    The signed-in clerk's profile.

        @router.post("/orders")
        async def submit(user: dict = Depends(get_current_user)):
            ...
    """
    return _user_from_token(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security)
) -> Optional[Dict[str, Any]]:
    """Same as get_current_user, but None when no token is sent. A bad token is still a 401."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)
