"""
Tab locator resolution.

A tab is identified by its GID, which survives renames. Right before any
read or write the GID is mapped to the tab's current title using fresh
spreadsheet metadata, and the A1 range is produced by gspread's own
quoting helper. Range strings are never assembled by hand, so titles with
spaces, parentheses, hyphens or apostrophes address the right tab.
"""
import re
from dataclasses import dataclass
from typing import Union

from gspread.utils import absolute_range_name
from pydantic import ValidationError

from sales_errors import RangeResolutionFailed
from sheets.payloads import SpreadsheetMetadata

# Accepts "123", "gid=123", "#gid=123" or a full sheet URL ending in gid=123
_GID_PATTERN = re.compile(r"(?:^|[#&?]gid=|^gid=)(\d+)$")


@dataclass(frozen=True)
class ResolvedTab:
    gid: int
    title: str

    @property
    def a1_range(self) -> str:
        return absolute_range_name(self.title)


def parse_gid(locator: Union[str, int]) -> int:
    """Extract the numeric sheet id from a locator string."""
    if isinstance(locator, int):
        return locator
    text = (locator or "").strip()
    match = _GID_PATTERN.search(text)
    if not match:
        raise RangeResolutionFailed(f"'{locator}' is not a valid sheet GID")
    return int(match.group(1))


def find_tab(metadata: SpreadsheetMetadata, locator: Union[str, int]) -> ResolvedTab:
    gid = parse_gid(locator)
    for sheet in metadata.sheets:
        if sheet.properties.sheetId == gid:
            return ResolvedTab(gid=gid, title=sheet.properties.title)
    available = ", ".join(str(s.properties.sheetId) for s in metadata.sheets) or "none"
    raise RangeResolutionFailed(
        f"No tab with GID {gid} in spreadsheet",
        detail=f"Available GIDs: {available}",
    )


def resolve_tab(spreadsheet, locator: Union[str, int]) -> ResolvedTab:
    """
    Map a GID to the tab's current title.

    Args:
        spreadsheet: gspread Spreadsheet (or any object with fetch_sheet_metadata)
        locator: GID as int or string

    Raises:
        RangeResolutionFailed: malformed GID, unknown GID or unreadable metadata.
        gspread.exceptions.APIError: left for the caller to classify.
    """
    # Validate before touching the network
    parse_gid(locator)
    raw = spreadsheet.fetch_sheet_metadata()
    try:
        metadata = SpreadsheetMetadata.model_validate(raw)
    except ValidationError as e:
        raise RangeResolutionFailed("Spreadsheet metadata could not be read", detail=str(e))
    return find_tab(metadata, locator)
