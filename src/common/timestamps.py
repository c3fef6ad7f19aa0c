"""Timestamp helpers for records returned by the registry API."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from constants import Constants

# Protobuf JSON timestamps carry 0, 3, 6 or 9 fractional digits.
_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_rfc3339(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 string into an aware UTC datetime."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        if text.endswith("Z") or text.endswith("z"):
            parsed = datetime.fromisoformat(text[:-1]).replace(tzinfo=timezone.utc)
        else:
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, TypeError):
        return None


def format_compact_utc(value: datetime) -> str:
    """Format ``value`` as YYYYMMDDHHMMSS in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(Constants.TIMESTAMP_FORMAT)
