"""
Staff account routes - sign up, sign in, refresh, and the clerk's own
profile with their order history and configuration status.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from api.auth.dependencies import get_current_user, get_staff_store, get_tokens
from api.auth.models import RefreshRequest, StaffLogin, StaffProfile, StaffRegistration, TokenPair
from api.auth.tokens import REFRESH
from api.helpers import get_config_store
from utils.logger import get_logger

router = APIRouter()


def _profile(user: dict) -> StaffProfile:
    updated_at = get_config_store().account_record_updated_at(user["id"])
    return StaffProfile(**user, own_config=updated_at is not None, config_updated_at=updated_at)


@router.post(
    "/register",
    response_model=StaffProfile,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
    summary="Create a clerk account",
)
async def register(body: StaffRegistration):
    """
    A new account starts on the depot's shared configuration until it saves
    its own through `PUT /config`.
    """
    user = get_staff_store().register(body.email, body.password, body.full_name)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email already exists",
        )
    get_logger().info(f"Registered account {user['email']}", component="Auth")
    return _profile(user)


@router.post(
    "/login",
    response_model=TokenPair,
    responses={401: {"description": "Wrong email or password"}},
    summary="Sign in and get tokens",
)
async def login(body: StaffLogin):
    """
    Send the access token as `Authorization: Bearer <token>`; when it
    expires, exchange the refresh token at /auth/refresh.
    """
    user = get_staff_store().authenticate(body.email, body.password)
    if not user:
        get_logger().warning(f"Failed login for {body.email}", component="Auth")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return TokenPair(**get_tokens().issue(user["id"]))


@router.post(
    "/refresh",
    response_model=TokenPair,
    responses={401: {"description": "Refresh token invalid, expired, or account deactivated"}},
    summary="Exchange a refresh token for a new pair",
)
async def refresh(body: RefreshRequest):
    tokens = get_tokens()
    staff_id = tokens.staff_id(body.refresh_token, token_type=REFRESH)
    if not staff_id or get_staff_store().get(staff_id) is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token. Please login again.",
        )
    return TokenPair(**tokens.issue(staff_id))


@router.get(
    "/me",
    response_model=StaffProfile,
    summary="The signed-in clerk",
)
async def get_profile(user: dict = Depends(get_current_user)):
    return _profile(user)
