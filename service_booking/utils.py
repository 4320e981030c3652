"""Shared utilities used across the booking modules."""

import re
from typing import Optional


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("024 123 4567")
        '0241234567'
        >>> normalize_phone("+233 (24) 123-4567")
        '+233241234567'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def clean_text(value: Optional[str]) -> str:
    """Trim a form value, treating None as empty."""
    return (value or "").strip()


def contains_ci(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test that tolerates missing values."""
    return bool(haystack) and needle.lower() in haystack.lower()
