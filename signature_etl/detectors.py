"""
Value detectors and formatters for untrusted spreadsheet cells.

Cells arrive as str, int, float (Excel stores most numbers as floats) or
NaN/None. Everything is coerced through cell_to_str before classification.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any

import pandas as pd
from pandas.api.types import is_scalar

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$", re.I)

PHONE_SEPARATORS = re.compile(r"[\s\-.()]+")
PHONE_DASHED = re.compile(r"\d{3}[\s\-.]?\d{3}[\s\-.]?\d{4}")
PHONE_PARENS = re.compile(r"\(\d{3}\)\s*\d{3}[\s\-.]?\d{4}")
PHONE_DIGIT_RUN = re.compile(r"\d{10,11}")

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15


def is_na_scalar(v: Any) -> bool:
    """
    Safe NA check that never returns an array/Series.
    """
    if v is None:
        return True
    if is_scalar(v):
        return bool(pd.isna(v))
    return False


def is_temporal(v: Any) -> bool:
    """Excel date/time cells (datetime, date, time, pd.Timestamp)."""
    return isinstance(v, (datetime, date, time, pd.Timestamp))


def cell_to_str(v: Any) -> str:
    """
    Render a cell as text. Integral floats lose their ".0" so numbers typed
    into Excel as 5551234567 come back as digits, not "5551234567.0".
    """
    if is_na_scalar(v):
        return ""
    if isinstance(v, bool):
        return str(v)
    if isinstance(v, float):
        if v.is_integer():
            return f"{v:.0f}"
        return str(v)
    return str(v).strip()


def is_email(value: Any) -> bool:
    t = cell_to_str(value).strip().lower()
    if not t:
        return False
    return EMAIL_REGEX.match(t) is not None


def is_phone_number(value: Any) -> bool:
    """
    Heuristic phone check: 7-15 digits plus a phone-like layout
    (ddd-ddd-dddd, (ddd) ddd-dddd, or a bare 10-11 digit run once separators
    are removed). Some non-phone numeric cells will pass.
    """
    if is_temporal(value):
        return False
    t = cell_to_str(value).strip()
    if not t:
        return False

    stripped = PHONE_SEPARATORS.sub("", t)
    digit_count = sum(1 for ch in stripped if ch.isdigit())
    if not PHONE_MIN_DIGITS <= digit_count <= PHONE_MAX_DIGITS:
        return False

    return bool(
        PHONE_DASHED.search(t)
        or PHONE_PARENS.search(t)
        or PHONE_DIGIT_RUN.search(stripped)
    )


def format_phone_number(value: Any) -> str:
    """
    DDD.DDD.DDDD for 10 digits (or 11 with a leading 1), DDD.DDDD for 7.
    Anything else is returned as-is.
    """
    t = cell_to_str(value).strip()
    if not t:
        return ""

    digits = re.sub(r"\D", "", t)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) == 10:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    if len(digits) == 7:
        return f"{digits[:3]}.{digits[3:]}"
    return t


def format_phone_input(value: Any) -> str:
    """
    Typed-in phone: keep at most 10 digits, dotted as they fill in
    (555 -> 555.1 -> 555.123.4567).
    """
    digits = re.sub(r"\D", "", cell_to_str(value))[:10]
    if len(digits) > 6:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    if len(digits) > 3:
        return f"{digits[:3]}.{digits[3:]}"
    return digits
