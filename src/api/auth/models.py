"""
Request and response bodies for staff accounts and their tokens.
"""
from typing import Optional

from pydantic import BaseModel, Field


class StaffLogin(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class StaffRegistration(StaffLogin):
    """Sign-up body for a clerk account."""
    password: str = Field(..., min_length=6, max_length=128, description="Password (min 6 chars)")
    full_name: str = Field(..., min_length=1, max_length=255, description="Name shown to the depot")


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class RefreshRequest(BaseModel):
    refresh_token: str


class StaffProfile(BaseModel):
    """
    A clerk account as the till sees it: who they are, the last order they
    submitted, and whether they have saved a configuration of their own or
    still work from the depot's shared one.
    """
    id: str
    email: str
    full_name: str
    created_at: str
    order_count: int = 0
    last_order_id: Optional[str] = None
    last_order_at: Optional[str] = None
    own_config: bool = False
    config_updated_at: Optional[str] = None
