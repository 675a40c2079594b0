"""
API helper functions shared across route modules.
Provides the process-wide SalesService and ConfigStore, and maps the error
taxonomy onto HTTP responses.
"""
from typing import Dict, Optional

from fastapi import HTTPException, status

import config
from sales_errors import (
    CatalogUnavailable,
    RangeResolutionFailed,
    SalesError,
    SheetProtected,
    TransientWriteFailure,
    Unauthenticated,
    ValidationFailed,
)
from settings_store.app_config import AppConfig

# Initialized in main.py at startup, or lazily from config
_sales_service = None
_config_store = None

_ERROR_STATUS = {
    ValidationFailed: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Unauthenticated: status.HTTP_502_BAD_GATEWAY,
    RangeResolutionFailed: status.HTTP_400_BAD_REQUEST,
    SheetProtected: status.HTTP_403_FORBIDDEN,
    TransientWriteFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
    CatalogUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def init_sales(sales_service, config_store):
    """Wire the service layer. Called from main.py, or from tests with fakes."""
    global _sales_service, _config_store
    _sales_service = sales_service
    _config_store = config_store


def get_sales_service():
    global _sales_service
    if _sales_service is None:
        from sales_service import SalesService
        from sheets.sheets_gateway import SheetsGateway
        _sales_service = SalesService(SheetsGateway())
    return _sales_service


def get_config_store():
    global _config_store
    if _config_store is None:
        from settings_store.config_store import ConfigStore
        from settings_store.remote_store import AccountConfigStore
        _config_store = ConfigStore(remote=AccountConfigStore(config.API_USER_DB_PATH))
    return _config_store


def account_id(user: Optional[Dict]) -> Optional[str]:
    return user["id"] if user else None


def resolve_account_config(user: Optional[Dict]) -> AppConfig:
    """The signed-in account's configuration, or the local one for anonymous callers."""
    return get_config_store().load(account_id(user))


def http_error(error: SalesError) -> HTTPException:
    """Translate a SalesError into an HTTPException carrying its dict form."""
    code = _ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=code, detail=error.to_dict())
