"""
Error taxonomy for catalog reads and order submission.

Every remote call made on behalf of an order resolves either to a success
or to exactly one of the errors below. Validation problems are raised before
any network traffic; append failures travel back to the caller as values
inside an AppendOutcome.
"""
from typing import List, Optional


class SalesError(Exception):
    """Base class for every error surfaced to the API layer."""

    code = "SALES_ERROR"
    retryable = False

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
            "retryable": self.retryable,
        }


class ValidationFailed(SalesError):
    """Order or configuration precondition not met. No remote call was made."""

    code = "VALIDATION_FAILED"

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "Validation failed")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["problems"] = self.problems
        return data


class Unauthenticated(SalesError):
    """No valid bearer token could be obtained, or the token was refused."""

    code = "UNAUTHENTICATED"


class RangeResolutionFailed(SalesError):
    """A tab locator (GID) could not be mapped to an addressable range."""

    code = "RANGE_RESOLUTION_FAILED"


class SheetProtected(SalesError):
    """The destination range is protected and refused the write."""

    code = "SHEET_PROTECTED"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(
            message or (
                "The Google Sheet is protected and cannot be edited. Please contact the "
                "sheet owner to remove protection or grant edit access to continue "
                "recording orders."
            ),
            detail,
        )


class TransientWriteFailure(SalesError):
    """Network or server-side failure. Safe for the caller to retry."""

    code = "TRANSIENT_WRITE_FAILURE"
    retryable = True


class CatalogUnavailable(SalesError):
    """The price tab could not be read; callers substitute the built-in catalog."""

    code = "CATALOG_UNAVAILABLE"
