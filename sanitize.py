"""
sanitize.py
-----------
Field-level cleanup for raw transaction records: locale-formatted amounts
and the handful of date conventions seen in exported statements.

Both helpers are lenient on purpose. A bad amount degrades to ``0`` and an
unrecognised date is passed through, so one broken field never rejects a
whole record; ``parse_iso_date`` is the check that decides whether a record
has a usable date at all.
"""

from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd

# Currency symbols, thousands separators and whitespace are dropped before parsing.
AMOUNT_NOISE = re.compile(r"[₹$€£¥,\s]")

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DAY_FIRST_DATE = re.compile(r"^(\d{2})[-/](\d{2})[-/](\d{4})$")


def sanitize_amount(value: Any) -> float:
    """Turn a raw amount (number, ``"₹1,250.50"``, blank, garbage) into a finite float."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, numbers.Real):
        try:
            as_float = float(value)
        except OverflowError:
            # ints past float range, e.g. a 400-digit JSON number
            return 0.0
        return value if math.isfinite(as_float) else 0.0
    if not value:
        return 0.0
    cleaned = AMOUNT_NOISE.sub("", str(value))
    try:
        parsed = float(cleaned)
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def normalize_date(value: Any) -> Any:
    """Rewrite ``DD-MM-YYYY`` / ``DD/MM/YYYY`` to ``YYYY-MM-DD``.

    Falsy values come back untouched and anything unrecognised is only
    trimmed.
    """
    if not value:
        return value
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    trimmed = str(value).strip()
    if ISO_DATE.match(trimmed):
        return trimmed
    dmy = DAY_FIRST_DATE.match(trimmed)
    if dmy:
        dd, mm, yyyy = dmy.groups()
        return f"{yyyy}-{mm}-{dd}"
    return trimmed


def parse_iso_date(value: Any) -> Optional[date]:
    """Return the calendar date for a normalized value, or ``None`` if it isn't one."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if ISO_DATE.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None

    # Last resort for free-form dates such as "Oct 26, 2025"
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()
