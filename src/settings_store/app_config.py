"""
Application configuration record.
Persisted as a flat JSON object whose keys match the browser client
(spreadsheetId, salesSheetGid, ...). Snake-case names are accepted too.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

import config


class AppConfig(BaseModel):
    """Spreadsheet locators, company display fields and the driver list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    spreadsheet_id: str = Field(default_factory=lambda: config.DEFAULT_SPREADSHEET_ID, alias="spreadsheetId")
    sales_sheet_gid: str = Field(default_factory=lambda: config.DEFAULT_SALES_SHEET_GID, alias="salesSheetGid")
    price_sheet_gid: str = Field(default_factory=lambda: config.DEFAULT_PRICE_SHEET_GID, alias="priceSheetGid")
    payments_sheet_gid: str = Field(default_factory=lambda: config.DEFAULT_PAYMENTS_SHEET_GID, alias="paymentsSheetGid")
    drivers: List[str] = Field(default_factory=lambda: list(config.DEFAULT_DRIVERS))
    company_name: str = Field(default_factory=lambda: config.DEFAULT_COMPANY_NAME, alias="companyName")
    company_address: str = Field(default_factory=lambda: config.DEFAULT_COMPANY_ADDRESS, alias="companyAddress")
    company_phone: str = Field(default_factory=lambda: config.DEFAULT_COMPANY_PHONE, alias="companyPhone")
    loader_1: str = Field(default_factory=lambda: config.DEFAULT_LOADER_NAME, alias="loader1")
    loader_2: str = Field(default_factory=lambda: config.DEFAULT_LOADER_NAME, alias="loader2")
    submitted_by: str = Field(default_factory=lambda: config.DEFAULT_SUBMITTED_BY, alias="submittedBy")

    @field_validator("spreadsheet_id", "sales_sheet_gid", "price_sheet_gid", "payments_sheet_gid", mode="before")
    @classmethod
    def _coerce_locator(cls, value):
        # GIDs arrive as numbers from older clients
        if isinstance(value, int):
            return str(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("drivers")
    @classmethod
    def _require_driver(cls, value: List[str]) -> List[str]:
        drivers = [d.strip() for d in value if d and d.strip()]
        if not drivers:
            raise ValueError("at least one driver is required")
        return drivers

    def to_record(self) -> dict:
        """Flat record in the persisted (camelCase) layout."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: dict) -> "AppConfig":
        """Merge a stored record over the defaults; unknown keys are ignored."""
        return cls.model_validate(record or {})

    def with_updates(self, updates: dict) -> "AppConfig":
        """
        New config with ``updates`` applied over this one and re-validated.
        Keys may be camelCase or snake_case.
        """
        record = self.to_record()
        for key, value in (updates or {}).items():
            field = type(self).model_fields.get(key)
            record[field.alias or key if field else key] = value
        return type(self).from_record(record)
