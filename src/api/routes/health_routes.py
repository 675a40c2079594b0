"""
Health routes - liveness (public) and a live Google Sheets connectivity test.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.auth.dependencies import get_optional_user
from api.helpers import get_sales_service, resolve_account_config

router = APIRouter()


class ConnectivityResponse(BaseModel):
    ok: bool
    message: str
    row_count: int = 0
    sample_rows: List[List[str]] = []
    error: Optional[Dict[str, Any]] = None


@router.get(
    "",
    summary="System health check",
)
async def health_check():
    """
    Report whether configuration and credentials are in place.
    Does not call Google. No authentication required.
    """
    import config

    health = {
        "status": "healthy",
        "service": "Depot Sales API",
        "version": "1.0.0",
        "components": {"config": "ok"},
    }
    try:
        config.resolve_service_account_info()
        health["components"]["service_account"] = "configured"
    except ValueError as e:
        health["components"]["service_account"] = f"missing: {e}"
        health["status"] = "degraded"
    return health


@router.post(
    "/connectivity",
    response_model=ConnectivityResponse,
    summary="Test the Google Sheets connection",
)
async def test_connectivity(user: Optional[dict] = Depends(get_optional_user)):
    """
    Authenticate with the service account and read the price tab. Returns
    the row count and the first rows as a sample, or the classified error.
    """
    report = await get_sales_service().test_connectivity(resolve_account_config(user))
    return ConnectivityResponse(**report.to_dict())
