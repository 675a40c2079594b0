"""
Configuration routes - read and update the spreadsheet/company settings.
Reads fall back to the shared local record for anonymous callers and for
accounts that never saved their own. Updates need a signed-in account and
only ever write that account's record.
"""
import sqlite3
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ValidationError

from api.auth.dependencies import get_current_user, get_optional_user
from api.helpers import account_id, get_config_store
from utils.logger import get_logger

router = APIRouter()


class ConfigResponse(BaseModel):
    config: Dict[str, Any]
    account_scoped: bool = False
    own_record: bool = False


@router.get(
    "",
    response_model=ConfigResponse,
    summary="Current configuration",
)
async def read_config(user: Optional[dict] = Depends(get_optional_user)):
    store = get_config_store()
    acct = account_id(user)
    app_config = store.load(acct)
    own_record = acct is not None and store.account_record_updated_at(acct) is not None
    return ConfigResponse(config=app_config.to_record(), account_scoped=user is not None, own_record=own_record)


@router.put(
    "",
    response_model=ConfigResponse,
    summary="Update the account's configuration",
)
async def update_config(updates: Dict[str, Any], user: dict = Depends(get_current_user)):
    """
    Apply a partial update (camelCase or snake_case keys) on top of what the
    account currently sees, and store it as the account's own record.

    Returns 422 with the validation problems when the result is invalid,
    e.g. an empty driver list.
    """
    store = get_config_store()
    acct = account_id(user)
    current = store.load(acct)
    try:
        updated = current.with_updates(updates)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        )

    try:
        own_record = store.save(updated, acct)
    except sqlite3.Error:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Configuration could not be saved. Try again.",
        )
    get_logger().info(f"Configuration saved for account {acct}", component="API")
    return ConfigResponse(config=updated.to_record(), account_scoped=True, own_record=own_record)
