"""
Raw cell interpretation.

Rows arrive from an external spreadsheet/CSV parser as mappings of column
name to raw scalar. Every helper here is total: it accepts any such scalar
and returns a parsed value or None, never raising.
"""
import math
import numbers
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from sheetstats.core.schemas import ColumnType

# Spreadsheet serials for modern data fall roughly in 20000-60000 (1954-2064)
EXCEL_SERIAL_MIN = 20000
EXCEL_SERIAL_MAX = 60000
EXCEL_EPOCH_OFFSET_DAYS = 25569  # 1899-12-30 -> 1970-01-01
SECONDS_PER_DAY = 86400

UNIX_SECONDS_RANGE = (1_000_000_000, 32_503_680_000)
UNIX_MILLIS_RANGE = (1_000_000_000_000, 32_503_680_000_000)

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"
_ORDINAL = r"(?:st|nd|rd|th)?"

# Shapes a string must start with before it is handed to the date parser.
# Keeps bare words and time-only strings away from dateutil defaults.
_DATE_SHAPE = re.compile(
    r"^\s*(?:"
    r"\d{4}[-/.]\d{1,2}[-/.]\d{1,2}"
    r"|\d{1,2}[-/.]\d{1,2}[-/.]\d{2,4}"
    r"|" + _MONTH + r"\s+\d{1,2}" + _ORDINAL + r",?\s+\d{4}"
    r"|\d{1,2}" + _ORDINAL + r"\s+" + _MONTH + r",?\s+\d{4}"
    r"|" + _MONTH + r",?\s+\d{4}"
    r")",
    re.IGNORECASE,
)

_CURRENCY_PREFIX = re.compile(r"^([-+]?)\s*[$€£¥]\s*")
_GROUPED_NUMBER = re.compile(r"^[-+]?\d{1,3}(?:,\d{3})+(?:\.\d+)?$")


def is_null(value: Any) -> bool:
    """True for None, blank strings, NaN and NaT."""
    if value is None or value is pd.NaT or value is pd.NA:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    if isinstance(value, np.datetime64):
        return bool(np.isnat(value))
    return False


def _is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def _finite_float(value: Any) -> Optional[float]:
    # Python ints and Fractions can exceed float range
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def to_number(value: Any) -> Optional[float]:
    """
    Parse a cell as a finite float.

    Accepts real numbers and numeric-looking strings ("12", " 3.5 ",
    "$1,200.50", "45%"). Booleans are not numbers.
    """
    if is_null(value) or _is_bool(value):
        return None

    if isinstance(value, (numbers.Real, Decimal)):
        return _finite_float(value)
    if isinstance(value, str):
        text = _CURRENCY_PREFIX.sub(r"\1", value.strip())
        if text.endswith("%"):
            text = text[:-1].rstrip()
        if "," in text:
            if not _GROUPED_NUMBER.match(text):
                return None
            text = text.replace(",", "")
        if "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None


def _as_utc_naive(stamp: pd.Timestamp) -> Optional[pd.Timestamp]:
    try:
        if stamp.tzinfo is not None:
            stamp = stamp.tz_convert("UTC").tz_localize(None)
        return stamp.as_unit("ns")
    except (ValueError, OverflowError):
        return None


def _date_from_number(number: float) -> Optional[pd.Timestamp]:
    if EXCEL_SERIAL_MIN <= number <= EXCEL_SERIAL_MAX:
        seconds = (number - EXCEL_EPOCH_OFFSET_DAYS) * SECONDS_PER_DAY
    elif UNIX_SECONDS_RANGE[0] < number < UNIX_SECONDS_RANGE[1]:
        seconds = number
    elif UNIX_MILLIS_RANGE[0] < number < UNIX_MILLIS_RANGE[1]:
        seconds = number / 1000
    else:
        return None

    try:
        return pd.Timestamp(int(round(seconds * 1000)), unit="ms").as_unit("ns")
    except (ValueError, OverflowError):
        return None


def _date_from_string(text: str) -> Optional[pd.Timestamp]:
    if not _DATE_SHAPE.match(text) or to_number(text) is not None:
        return None
    try:
        stamp = pd.Timestamp(text.strip())
    except (ValueError, OverflowError, TypeError):
        return None
    if stamp is pd.NaT:
        return None
    return _as_utc_naive(stamp)


def to_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a cell as a UTC-naive Timestamp.

    Date-like means a datetime value, an ISO/human date string, or a real
    number inside the spreadsheet-serial, Unix-seconds or Unix-milliseconds
    ranges. Numeric strings are never dates. Naive datetimes are taken as UTC.
    """
    if is_null(value) or _is_bool(value):
        return None

    if isinstance(value, (pd.Timestamp, datetime, date, np.datetime64)):
        try:
            return _as_utc_naive(pd.Timestamp(value))
        except (ValueError, OverflowError):
            return None

    if isinstance(value, numbers.Real):
        number = _finite_float(value)
        return _date_from_number(number) if number is not None else None

    if isinstance(value, str):
        return _date_from_string(value)

    return None


def to_label(value: Any) -> Optional[str]:
    """Categorical key for a cell: booleans become "true"/"false", integral floats drop ".0"."""
    if is_null(value):
        return None
    if _is_bool(value):
        return "true" if value else "false"
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, numbers.Real) and not isinstance(value, numbers.Integral):
        number = _finite_float(value)
        if number is None:
            return str(value)
        if number.is_integer():
            return str(int(number))
        return str(number)
    if isinstance(value, (pd.Timestamp, datetime, date, np.datetime64)):
        stamp = to_date(value)
        return iso_timestamp(stamp) if stamp is not None else str(value)
    return str(value)


def classify_cell(value: Any) -> Optional[str]:
    """
    Tag a single cell as date, boolean, number or string (None for nulls).

    Date is tested first so spreadsheet serials and epoch timestamps are not
    read as plain numbers.
    """
    if is_null(value):
        return None
    if to_date(value) is not None:
        return ColumnType.DATE
    if _is_bool(value):
        return ColumnType.BOOLEAN
    if to_number(value) is not None:
        return ColumnType.NUMBER
    return ColumnType.STRING


def day_key(stamp: pd.Timestamp) -> str:
    return stamp.strftime("%Y-%m-%d")


def iso_timestamp(stamp: pd.Timestamp) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2021-01-01T00:00:00.000Z."""
    return f"{stamp.strftime('%Y-%m-%dT%H:%M:%S')}.{stamp.microsecond // 1000:03d}Z"


def day_epoch_ms(day: str) -> int:
    """Epoch milliseconds of a YYYY-MM-DD day at UTC midnight."""
    return int(pd.Timestamp(day).value // 1_000_000)


def column_names(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Column names in order of first appearance across rows."""
    seen = {}
    for row in rows:
        for key in row.keys():
            if key not in seen:
                seen[key] = None
    return list(seen)


def frame_from_rows(rows: Sequence[Mapping[str, Any]], columns: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Object-dtype DataFrame over the rows, one column per name.

    Raw cell values are kept as-is (no dtype inference); a key missing from
    a row reads as None.
    """
    columns = list(columns) if columns is not None else column_names(rows)
    return pd.DataFrame(
        {col: pd.Series([row.get(col) for row in rows], dtype=object) for col in columns},
        columns=columns,
    )


def rows_from_dataframe(df: pd.DataFrame) -> List[dict]:
    """Convert a parsed DataFrame into rows, mapping missing values to None."""
    clean = df.astype(object).where(pd.notna(df), None)
    return clean.to_dict(orient="records")
