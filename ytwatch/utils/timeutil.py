# ytwatch/utils/timeutil.py
# Instant and duration helpers. API timestamps are RFC 3339; scheduler
# hints and config values may be looser, so parsing goes through dateutil.

from __future__ import annotations
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import parser as dateparser

_ISO_DURATION = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$",
    re.I,
)
_SHORT_DURATION = re.compile(r"^(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>s|sec|m|min|h|hr|d)?$", re.I)
_UNIT_SECONDS = {None: 1, "s": 1, "sec": 1, "m": 60, "min": 60, "h": 3600, "hr": 3600, "d": 86400}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_instant(value: object) -> Optional[datetime]:
    """Parse a timestamp into an aware UTC datetime; None when absent or unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            dt = dateparser.isoparse(text)
        except (ValueError, OverflowError):
            try:
                dt = dateparser.parse(text)
            except (ValueError, OverflowError):
                return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_duration(value: object) -> timedelta:
    """Accept a timedelta, seconds, ISO-8601 ("PT30M") or shorthand ("30m", "1h")."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    text = str(value).strip()
    m = _ISO_DURATION.match(text)
    if m and any(m.groupdict().values()):
        parts = {k: float(v) for k, v in m.groupdict().items() if v}
        return timedelta(**parts)
    m = _SHORT_DURATION.match(text)
    if m:
        unit = (m.group("unit") or "").lower() or None
        return timedelta(seconds=float(m.group("value")) * _UNIT_SECONDS[unit])
    raise ValueError(f"invalid duration: {value!r}")


def isoformat(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
