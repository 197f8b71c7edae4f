"""
Initialize Mirror Sheet

Writes the header row into the configured Google Sheet so mirrored
application rows line up with named columns. Safe to run more than once:
row 1 is overwritten with the current header.

Usage:
    python scripts/init_mirror_sheet.py
"""

import asyncio

from admission_intake.core.config import settings
from admission_intake.core.google_auth import resolve_service_account_info
from admission_intake.core.sheets import SheetClient
from admission_intake.modules.admissions.mirror import SHEET_HEADER


async def init_mirror_sheet() -> None:
    """Write the header row into the mirror sheet."""

    if not settings.google_sheet_id:
        print("GOOGLE_SHEET_ID is not set - nothing to initialize")
        return

    info = resolve_service_account_info(settings)
    if info is None:
        print("No Google service account credentials found")
        return

    sheet = SheetClient.from_service_account(
        info, settings.google_sheet_id, settings.google_sheet_worksheet
    )
    await sheet.update_row(1, SHEET_HEADER)

    print(f"Header written to sheet {settings.google_sheet_id}")
    print(f"  Columns: {len(SHEET_HEADER)}")


if __name__ == "__main__":
    asyncio.run(init_mirror_sheet())
