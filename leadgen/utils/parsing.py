"""Lenient value parsing for partially-populated company rows."""
import math
import numbers
import re
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def is_missing(value: Any) -> bool:
    """
    Check whether a value should be treated as absent.

    None, NaN, NaT and pd.NA are all missing. Containers never are.
    """
    if value is None:
        return True
    if isinstance(value, (list, tuple, set, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_leading_int(text: Any) -> int:
    """
    Parse the leading integer of a string, the way a lenient integer parse does.

    Args:
        text: Text such as "101", " 250 employees" or "abc"

    Returns:
        Parsed integer, or 0 when the text does not start with digits
    """
    if not isinstance(text, str):
        return 0
    match = _LEADING_INT.match(text)
    if not match:
        return 0
    return int(match.group(1))


def parse_number(value: Any) -> Optional[float]:
    """
    Coerce a numeric-looking value to float.

    Args:
        value: int, float or numeric string ("1,234" allowed)

    Returns:
        Float value, or None if missing or not numeric
    """
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            return None
    if math.isnan(number):
        return None
    return number


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a founding date.

    Accepts date/datetime objects, date strings in any format pandas
    understands, and bare integral years (e.g. 2015).

    Returns:
        Parsed date, or None if missing or unparseable
    """
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, numbers.Real):
        if 1 <= value <= 9999 and float(value).is_integer():
            return date(int(value), 1, 1)
        return None
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.isdigit() and len(text) == 4:
        return date(int(text), 1, 1)
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if is_missing(parsed):
        return None
    return parsed.date()


def as_text(value: Any) -> Optional[str]:
    """
    Render a free-text field as a string.

    Lists (e.g. industries returned by an API) are joined with commas.
    Missing values and empty strings become None.
    """
    if is_missing(value):
        return None
    if isinstance(value, (list, tuple, set)):
        text = ", ".join(str(v) for v in value if not is_missing(v))
    else:
        text = value if isinstance(value, str) else str(value)
    return text or None
