"""Conversions from raw XER strings to Python values."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

import pandas as pd

# "2023-08-11 07:30", "2023-08-11" - time is optional
_XER_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})\s*(\d{2})?:?(\d{2})?")
# leading numeric prefix, the way a lenient float parse reads "12.5h"
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_xer_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an XER timestamp, returning ``None`` when it cannot be read."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    match = _XER_DATE.match(text)
    if match:
        year, month, day, hour, minute = match.groups()
        try:
            return datetime(
                int(year),
                int(month),
                int(day),
                int(hour or 0),
                int(minute or 0),
            )
        except ValueError:
            # out-of-range fields are not rolled over into the next month
            pass

    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def parse_xer_number(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    return float(match.group(0))


def parse_xer_flag(value: Optional[str]) -> bool:
    return value == "Y"


__all__ = ["parse_xer_date", "parse_xer_number", "parse_xer_flag"]
