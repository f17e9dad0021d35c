"""Conversions between GitHub, store and cursor timestamp formats.

Write direction (remote -> store)::

    '2014-10-31 23:21:44 UTC'  -> '2014-10-31T23:21:44+00:00'
    '2014-10-31T23:21:44Z'     -> '2014-10-31T23:21:44+00:00'

Cursor direction (store -> ``since`` query parameter)::

    '2015-04-18 14:17:02'        -> '2015-04-18T14:17:02Z'
    '2015-04-18T14:17:02+00:00'  -> '2015-04-18T14:17:02Z'

Neither direction raises; ``None`` always maps to ``None``.
"""

import re
from datetime import UTC, datetime

STORE_UTC_SUFFIX = "+00:00"
CURSOR_UTC_SUFFIX = "Z"

_UTC_MARKERS = (" UTC", "+00:00", "Z")
_OFFSET_PATTERN = re.compile(r"[+-]\d{2}:\d{2}$")


def _split_utc_marker(value: str) -> tuple[str, bool]:
    """Strip a trailing UTC marker, reporting whether one was present."""
    for marker in _UTC_MARKERS:
        if value.endswith(marker):
            return value[: -len(marker)], True
    return value, False


def to_store_timestamp(value: str | datetime | None) -> str | None:
    """Convert a GitHub timestamp to the canonical stored form."""
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).isoformat()

    text = value.replace(" ", "T", 1)
    text, is_utc = _split_utc_marker(text)
    return text + STORE_UTC_SUFFIX if is_utc else text


def to_cursor_timestamp(value: str | None) -> str | None:
    """Convert a stored timestamp to the form GitHub accepts for ``since``."""
    if value is None:
        return None

    text = value.replace(" ", "T", 1)
    text, _is_utc = _split_utc_marker(text)
    if _OFFSET_PATTERN.search(text):
        # Non-UTC offsets are already valid ISO 8601
        return text
    return text + CURSOR_UTC_SUFFIX
