"""Input sanitization for free-text user fields and search terms.

Parameterized queries remain the primary defense; these helpers strip markup
and control characters before values are stored or used in LIKE filters.
"""

import re

import nh3

MAX_STRING_LENGTH = 1000

_SEARCH_WILDCARDS = re.compile(r"[%_\\]")
_SEARCH_DISALLOWED = re.compile(r"[^a-zA-Z0-9\s\-.,@]")


def sanitize_string(value: str | None, max_length: int = MAX_STRING_LENGTH) -> str:
    """Trim, drop NUL bytes and HTML, and cap length. None becomes ''."""
    if not value:
        return ""
    cleaned = nh3.clean(value.replace("\0", ""), tags=set(), attributes={}).strip()
    return cleaned[:max_length]


def sanitize_search_term(value: str | None) -> str:
    """Reduce a search term to letters, digits, whitespace and -.,@ (no LIKE wildcards)."""
    cleaned = sanitize_string(value)
    cleaned = _SEARCH_WILDCARDS.sub("", cleaned)
    cleaned = _SEARCH_DISALLOWED.sub("", cleaned)
    return cleaned.strip()


def normalize_email(value: str) -> str:
    """Canonical form used for storage, lookup and rate-limit keys."""
    return value.strip().lower()
