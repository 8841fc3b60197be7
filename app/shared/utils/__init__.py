"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid, generate_otp_code
from app.shared.utils.sanitization import (
    normalize_email,
    sanitize_search_term,
    sanitize_string,
)

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "generate_otp_code",
    "normalize_email",
    "sanitize_search_term",
    "sanitize_string",
    "utc_now",
]
