"""
Typed request/response payloads for the Google Sheets and OAuth2 APIs.
Responses are validated here so malformed bodies never reach business logic.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ServiceAccountKey(_Payload):
    """The fields of a service-account key the token exchange relies on."""
    client_email: str = Field(..., min_length=3)
    private_key: str = Field(..., min_length=1)
    private_key_id: str = Field(..., min_length=1)
    token_uri: str = "https://oauth2.googleapis.com/token"

    @field_validator("client_email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("client_email must be an email address")
        return value

    @field_validator("private_key")
    @classmethod
    def _pem_shape(cls, value: str) -> str:
        # Keys pasted into env vars often carry literal "\n" sequences
        value = value.replace("\\n", "\n")
        if "PRIVATE KEY" not in value:
            raise ValueError("private_key is not a PEM encoded key")
        return value


class SheetProperties(_Payload):
    sheetId: int
    title: str
    index: int = 0


class SheetEntry(_Payload):
    properties: SheetProperties


class SpreadsheetMetadata(_Payload):
    spreadsheetId: str = ""
    sheets: List[SheetEntry] = Field(default_factory=list)


class ValueRange(_Payload):
    range: str = ""
    majorDimension: str = "ROWS"
    values: List[List[Any]] = Field(default_factory=list)

    def as_table(self) -> List[List[str]]:
        """Rows as strings, padded so every row has the same width."""
        width = max((len(row) for row in self.values), default=0)
        table = []
        for row in self.values:
            cells = ["" if cell is None else str(cell) for cell in row]
            cells.extend([""] * (width - len(cells)))
            table.append(cells)
        return table


class AppendUpdates(_Payload):
    spreadsheetId: str = ""
    updatedRange: str = ""
    updatedRows: int = 0
    updatedColumns: int = 0
    updatedCells: int = 0


class AppendResponse(_Payload):
    spreadsheetId: str = ""
    tableRange: Optional[str] = None
    updates: AppendUpdates
