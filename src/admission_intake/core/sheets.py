"""
Google Sheets Client using gspread

Thin async wrapper around a single worksheet. gspread is synchronous, so every
call runs in a worker thread to keep the event loop free.

Values are written RAW so identifiers such as Aadhaar, mobile and pincode stay
text and nothing is parsed as a formula or date.
"""

import asyncio
import logging
import threading
from collections.abc import Callable
from typing import Any

import gspread

logger = logging.getLogger(__name__)


def column_letter(index: int) -> str:
    """
    Convert a 1-based column index to its A1 letter.

    Example: 1 -> "A", 18 -> "R", 28 -> "AB"
    """
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class SheetClient:
    """Row-level access to one worksheet, opened on first use."""

    def __init__(self, open_worksheet: Callable[[], gspread.Worksheet]) -> None:
        self._open_worksheet = open_worksheet
        self._worksheet: gspread.Worksheet | None = None
        self._open_lock = threading.Lock()

    @classmethod
    def from_service_account(
        cls,
        info: dict[str, Any],
        sheet_id: str,
        worksheet_name: str | None = None,
    ) -> "SheetClient":
        """
        Build a client for a worksheet using service-account credentials.

        No network call is made until the worksheet is first used.
        """

        def open_worksheet() -> gspread.Worksheet:
            client = gspread.service_account_from_dict(info)
            spreadsheet = client.open_by_key(sheet_id)
            if worksheet_name:
                return spreadsheet.worksheet(worksheet_name)
            return spreadsheet.sheet1

        return cls(open_worksheet)

    def _get_worksheet(self) -> gspread.Worksheet:
        with self._open_lock:
            if self._worksheet is None:
                self._worksheet = self._open_worksheet()
                logger.info(f"Opened worksheet '{self._worksheet.title}'")
            return self._worksheet

    def _append_row(self, values: list[str]) -> None:
        self._get_worksheet().append_row(values, value_input_option="RAW")

    def _col_values(self, index: int) -> list[str]:
        return self._get_worksheet().col_values(index)

    def _update(self, range_name: str, values: list[list[str]]) -> None:
        self._get_worksheet().update(
            range_name=range_name,
            values=values,
            value_input_option="RAW",
        )

    async def append_row(self, values: list[str]) -> None:
        """Append one row after the last non-empty row."""
        await asyncio.to_thread(self._append_row, values)

    async def get_column(self, index: int) -> list[str]:
        """Return every value in a column, 1-based."""
        return await asyncio.to_thread(self._col_values, index)

    async def update_row(self, row: int, values: list[str], first_column: int = 1) -> None:
        """Overwrite a contiguous range of cells in one row."""
        start = f"{column_letter(first_column)}{row}"
        end = f"{column_letter(first_column + len(values) - 1)}{row}"
        await asyncio.to_thread(self._update, f"{start}:{end}", [values])
