"""
Unit tests for raw cell parsing.
"""
import math
from datetime import date, datetime, timezone

import numpy as np
import pandas as pd
import pytest

from sheetstats.services.cells import (
    classify_cell,
    column_names,
    day_epoch_ms,
    frame_from_rows,
    is_null,
    iso_timestamp,
    rows_from_dataframe,
    to_date,
    to_label,
    to_number,
)


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "   ", float("nan"), np.nan, pd.NaT, np.datetime64("NaT")])
def test_is_null_true(value):
    assert is_null(value)


@pytest.mark.unit
@pytest.mark.parametrize("value", [0, 0.0, False, "0", "x", pd.Timestamp("2024-01-01")])
def test_is_null_false(value):
    assert not is_null(value)


@pytest.mark.unit
def test_to_number_accepts_numeric_strings():
    """Numbers stored as strings are parsed."""
    assert to_number("12") == 12.0
    assert to_number(" 3.5 ") == 3.5
    assert to_number("-4") == -4.0
    assert to_number("1e3") == 1000.0
    assert to_number("$1,200.50") == 1200.5
    assert to_number("45%") == 45.0
    assert to_number(7) == 7.0
    assert to_number(np.int64(9)) == 9.0


@pytest.mark.unit
def test_to_number_rejects_non_numbers():
    assert to_number(None) is None
    assert to_number("") is None
    assert to_number("abc") is None
    assert to_number("1,2") is None
    assert to_number("1_000") is None
    assert to_number("nan") is None
    assert to_number("inf") is None
    assert to_number(float("inf")) is None
    assert to_number(True) is None
    assert to_number(["1"]) is None


@pytest.mark.unit
def test_excel_serial_is_a_date():
    """44197 is 2021-01-01 in spreadsheet serial days."""
    assert to_date(44197) == pd.Timestamp("2021-01-01")
    assert to_date(44197.5) == pd.Timestamp("2021-01-01 12:00:00")


@pytest.mark.unit
def test_serial_range_bounds():
    assert to_date(20000) is not None
    assert to_date(60000) is not None
    assert to_date(19999) is None
    assert to_date(60001) is None


@pytest.mark.unit
def test_unix_timestamps_are_dates():
    assert to_date(1609459200) == pd.Timestamp("2021-01-01")
    assert to_date(1609459200000) == pd.Timestamp("2021-01-01")


@pytest.mark.unit
def test_numeric_strings_are_never_dates():
    assert to_date("44197") is None
    assert to_date("1609459200") is None


@pytest.mark.unit
def test_date_strings():
    assert to_date("2024-03-05") == pd.Timestamp("2024-03-05")
    assert to_date("2024-03-05T10:30:00") == pd.Timestamp("2024-03-05 10:30:00")
    assert to_date("March 5, 2024") == pd.Timestamp("2024-03-05")
    assert to_date("5 Mar 2024") == pd.Timestamp("2024-03-05")
    assert to_date("03/05/2024") is not None


@pytest.mark.unit
def test_aware_datetimes_are_converted_to_utc():
    stamp = to_date("2024-03-05T23:30:00-02:00")
    assert stamp == pd.Timestamp("2024-03-06 01:30:00")


@pytest.mark.unit
def test_non_dates():
    assert to_date("East") is None
    assert to_date("10:30") is None
    assert to_date("May") is None
    assert to_date(42) is None
    assert to_date(True) is None
    assert to_date(None) is None


@pytest.mark.unit
def test_datetime_objects():
    assert to_date(datetime(2024, 1, 2, 3, 4)) == pd.Timestamp("2024-01-02 03:04")
    assert to_date(date(2024, 1, 2)) == pd.Timestamp("2024-01-02")
    assert to_date(datetime(2024, 1, 2, tzinfo=timezone.utc)) == pd.Timestamp("2024-01-02")


@pytest.mark.unit
def test_to_label():
    assert to_label(True) == "true"
    assert to_label(False) == "false"
    assert to_label(5) == "5"
    assert to_label(5.0) == "5"
    assert to_label(2.5) == "2.5"
    assert to_label(" East ") == "East"
    assert to_label("") is None
    assert to_label(None) is None


@pytest.mark.unit
def test_classify_cell_precedence():
    """Date is tested before boolean and number."""
    assert classify_cell(44197) == "date"
    assert classify_cell("2024-01-01") == "date"
    assert classify_cell(True) == "boolean"
    assert classify_cell(12) == "number"
    assert classify_cell("12") == "number"
    assert classify_cell("hello") == "string"
    assert classify_cell(None) is None
    assert classify_cell(" ") is None


@pytest.mark.unit
def test_iso_timestamp_and_day_epoch():
    assert iso_timestamp(pd.Timestamp("2021-01-01 12:30:05.123456")) == "2021-01-01T12:30:05.123Z"
    assert day_epoch_ms("2021-01-01") == 1609459200000


@pytest.mark.unit
def test_column_names_first_appearance():
    rows = [{"a": 1, "b": 2}, {"b": 3, "c": 4}]
    assert column_names(rows) == ["a", "b", "c"]
    assert column_names([]) == []


@pytest.mark.unit
def test_frame_keeps_raw_values():
    """No dtype inference: booleans and strings survive untouched."""
    rows = [{"flag": True, "n": "7"}, {"flag": None}]
    df = frame_from_rows(rows)
    assert df["flag"].tolist() == [True, None]
    assert df["n"].tolist() == ["7", None]
    assert isinstance(df["flag"].iloc[0], bool)


@pytest.mark.unit
def test_rows_from_dataframe_maps_missing_to_none():
    df = pd.DataFrame({"a": [1.0, np.nan], "b": ["x", None]})
    rows = rows_from_dataframe(df)
    assert rows[0]["a"] == 1.0
    assert rows[1]["a"] is None
    assert rows[1]["b"] is None
    assert not any(isinstance(v, float) and math.isnan(v) for row in rows for v in row.values())


@pytest.mark.unit
def test_integers_beyond_float_range():
    """Huge integers are neither numbers nor dates; they stay as labels."""
    huge = 10 ** 400

    assert to_number(huge) is None
    assert to_date(huge) is None
    assert classify_cell(huge) == "string"
    assert to_label(huge) == str(huge)
