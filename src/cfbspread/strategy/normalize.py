"""Team name normalization for matching against the odds feed.

"Miami (FL)" and "miami fl" both normalize to "miami fl".
"""

from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(value) -> str:
    """Lowercase, non-alphanumerics → space, collapse whitespace, strip.

    Total function: None / empty input returns "".
    """
    text = str(value or "").lower()
    text = _NON_ALNUM.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def names_equal(a, b) -> bool:
    """Normalized equality."""
    return normalize_name(a) == normalize_name(b)


def name_contains(haystack, needle) -> bool:
    """True if normalized needle is a substring of normalized haystack.

    An empty needle never matches (it would match every event).
    """
    n = normalize_name(needle)
    if not n:
        return False
    return n in normalize_name(haystack)
