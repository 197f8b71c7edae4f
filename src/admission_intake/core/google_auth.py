"""
Google Service Account Resolution

Finds service-account credentials for the Google APIs used by the sheet
mirror. Resolution order:

1. Inline JSON (GOOGLE_CREDENTIALS_JSON)
2. Key file named by GOOGLE_CREDENTIALS_FILE
3. First existing file in GOOGLE_CREDENTIALS_SEARCH_PATHS

Credentials are resolved once at startup. A missing or unreadable key yields
None, which callers treat as "mirroring disabled".
"""

import json
import logging
from pathlib import Path
from typing import Any

from admission_intake.core.config import Settings

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("type", "client_email", "private_key")


def _validate(info: Any, source: str) -> dict[str, Any] | None:
    if not isinstance(info, dict):
        logger.error(f"Google credentials from {source} are not a JSON object")
        return None

    missing = [key for key in REQUIRED_KEYS if not info.get(key)]
    if missing:
        logger.error(f"Google credentials from {source} missing keys: {', '.join(missing)}")
        return None

    return info


def _load_file(path: Path) -> dict[str, Any] | None:
    try:
        info = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Could not read Google credentials file {path}: {e}")
        return None
    return _validate(info, str(path))


def resolve_service_account_info(settings: Settings) -> dict[str, Any] | None:
    """
    Resolve service-account info from settings.

    Args:
        settings: Application settings

    Returns:
        The parsed service-account dict, or None when no usable credentials exist
    """
    if settings.google_credentials_json:
        try:
            info = json.loads(settings.google_credentials_json)
        except ValueError as e:
            logger.error(f"GOOGLE_CREDENTIALS_JSON is not valid JSON: {e}")
            return None
        return _validate(info, "GOOGLE_CREDENTIALS_JSON")

    if settings.google_credentials_file:
        return _load_file(Path(settings.google_credentials_file))

    for candidate in settings.credentials_search_paths:
        path = Path(candidate)
        if path.is_file():
            logger.info(f"Using Google credentials found at {path}")
            return _load_file(path)

    return None
