"""Conversion of heterogeneous timestamp encodings into UTC datetimes."""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from dateutil import parser as dateparser

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
# Date parts missing from a string are taken from the epoch, not from today.
_PARSE_DEFAULT = datetime(1970, 1, 1)

MILLISECOND_THRESHOLD = 1e12
SECOND_THRESHOLD = 1e9


def resolve_timestamp(value: Any) -> Optional[datetime]:
    """Return the instant ``value`` denotes, or ``None`` when it cannot be read.

    Numbers and numeric strings are epoch values. Anything above 1e9 is read
    as milliseconds, so the 1e9-1e12 band is *not* treated as seconds even
    though second-resolution epochs of the current era fall inside it.
    Values at or below 1e9 are seconds.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if not isinstance(value, str):
        return None

    candidate = value.strip()
    if not candidate:
        return None
    if _NUMERIC_PATTERN.match(candidate):
        return _from_epoch(float(candidate))
    return _parse_date_string(candidate)


def format_label(instant: datetime) -> str:
    """Render ``instant`` as an ISO-8601 UTC label with millisecond precision."""
    utc = instant.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _from_epoch(value: float) -> Optional[datetime]:
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    if number > MILLISECOND_THRESHOLD:
        millis = number
    elif number > SECOND_THRESHOLD:
        millis = number
    else:
        millis = number * 1000
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        return None


def _parse_date_string(candidate: str) -> Optional[datetime]:
    iso_candidate = candidate[:-1] + "+00:00" if candidate.endswith("Z") else candidate
    try:
        parsed = datetime.fromisoformat(iso_candidate)
    except ValueError:
        try:
            parsed = dateparser.parse(candidate, default=_PARSE_DEFAULT)
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # Offsets of 24h or more are accepted by the parser but not by tzinfo.
        return None
