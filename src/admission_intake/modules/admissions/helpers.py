"""
Admissions Shared Helpers

Small pure functions used by the service and router.
"""

import secrets
from pathlib import PurePath

APPLICATION_ID_DIGITS = 4

# docType values the form uses for the applicant's photograph
PROFILE_PHOTO_DOC_TYPES = frozenset({"photo", "profile photo", "profile_photo", "profilephoto"})


def generate_application_id(prefix: str) -> str:
    """
    Generate a short application identifier.

    Example: "PPSU4821"

    Args:
        prefix: Fixed literal placed before the digits

    Returns:
        The prefix followed by a random number in [1000, 9999]
    """
    low = 10 ** (APPLICATION_ID_DIGITS - 1)
    high = 10**APPLICATION_ID_DIGITS
    return f"{prefix}{low + secrets.randbelow(high - low)}"


def is_profile_photo(doc_type: str | None) -> bool:
    """Check whether a document type names the profile photo."""
    if not doc_type:
        return False
    return doc_type.strip().lower() in PROFILE_PHOTO_DOC_TYPES


def build_document_name(student_name: str, doc_type: str, original_name: str | None) -> str:
    """
    Build the stored file name for an uploaded document.

    Example: ("Asha Rao", "Marksheet", "scan.PDF") -> "Asha_Rao_Marksheet.pdf"
    """
    suffix = PurePath(original_name).suffix.lower() if original_name else ""
    parts = [part for part in (student_name.strip(), doc_type.strip()) if part]
    stem = "_".join(parts) or "document"
    return f"{stem.replace(' ', '_')}{suffix}"
