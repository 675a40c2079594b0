"""
Service-account token exchange.

Each call signs a fresh JWT assertion with the held service-account key and
exchanges it at the OAuth2 token endpoint for a bearer token scoped to
spreadsheets. Nothing is cached between calls.
"""
import functools
from typing import Optional

import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from pydantic import ValidationError

import config
from sales_errors import Unauthenticated
from sheets.payloads import ServiceAccountKey


def load_service_account_key(info: Optional[dict] = None) -> ServiceAccountKey:
    """Validate the key, reading it from the server-side environment when not given."""
    if info is None:
        try:
            info = config.resolve_service_account_info()
        except ValueError as e:
            raise Unauthenticated("Google service account credentials not configured", detail=str(e))
    try:
        return ServiceAccountKey.model_validate(info)
    except ValidationError as e:
        raise Unauthenticated("Invalid Google service account credentials format", detail=str(e))


def mint_credentials(info: Optional[dict] = None, timeout: Optional[float] = None):
    """
    Exchange the service-account key for a short-lived access token.

    Returns:
        google.oauth2.service_account.Credentials holding a valid token.

    Raises:
        Unauthenticated: key missing or malformed, or the token endpoint refused.
    """
    key = load_service_account_key(info)
    timeout = timeout or config.SHEETS_HTTP_TIMEOUT_SECONDS

    try:
        credentials = service_account.Credentials.from_service_account_info(
            key.model_dump(),
            scopes=config.SHEETS_SCOPES,
        )
    except ValueError as e:
        raise Unauthenticated("Service account private key could not be loaded", detail=str(e))

    request = functools.partial(Request(), timeout=timeout)
    try:
        credentials.refresh(request)
    except google.auth.exceptions.RefreshError as e:
        raise Unauthenticated(f"Failed to get access token: {e}")
    except google.auth.exceptions.TransportError as e:
        raise Unauthenticated(f"Token endpoint unreachable: {e}")

    if not credentials.token:
        raise Unauthenticated("Failed to get access token: empty token response")
    return credentials
