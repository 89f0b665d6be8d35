"""
Unit tests for primary column selection.
"""
import pytest

from sheetstats.services.detector import detect_column_types
from sheetstats.services.profiler import summarize_columns
from sheetstats.services.selector import (
    choose_primary_columns,
    rank_categorical_columns,
    rank_numeric_columns,
)


def _select(rows):
    summaries = summarize_columns(rows, detect_column_types(rows))
    return summaries, choose_primary_columns(summaries)


@pytest.mark.unit
def test_money_name_beats_more_complete_column():
    """A revenue column wins over a fuller id column."""
    rows = [{"id": i, "revenue": 100 if i % 2 else None} for i in range(1, 11)]

    summaries, selection = _select(rows)

    assert selection.num_col == "revenue"
    assert [col for col, _ in rank_numeric_columns(summaries)] == ["revenue", "id"]


@pytest.mark.unit
def test_money_bonus_beats_quantity_bonus():
    rows = [{"units": 1, "price": 2.5}, {"units": 3, "price": 4.0}]
    assert _select(rows)[1].num_col == "price"


@pytest.mark.unit
def test_numeric_without_hints_uses_count():
    rows = [{"a": 1, "b": None}, {"a": 2, "b": 5}, {"a": 3, "b": None}]
    assert _select(rows)[1].num_col == "a"


@pytest.mark.unit
def test_date_name_wins_equal_coverage():
    """hire_date and notes both cover the same days; the date-named one is picked."""
    rows = [
        {"notes": "2024-01-01", "hire_date": "2024-02-01"},
        {"notes": "2024-01-02", "hire_date": "2024-02-02"},
    ]

    _, selection = _select(rows)

    assert selection.date_col == "hire_date"


@pytest.mark.unit
def test_date_column_with_most_days():
    rows = [
        {"shipped": "2024-01-01", "ordered": "2024-01-01"},
        {"shipped": "2024-01-01", "ordered": "2024-01-02"},
        {"shipped": "2024-01-01", "ordered": "2024-01-03"},
    ]
    assert _select(rows)[1].date_col == "ordered"


@pytest.mark.unit
def test_entity_bonus_for_categories():
    rows = [
        {"comment": f"note {i}", "department": "Ops" if i % 2 else "HR"}
        for i in range(10)
    ]

    summaries, selection = _select(rows)

    assert selection.cat_col == "department"
    assert rank_categorical_columns(summaries)[0] == ("department", 10_002)


@pytest.mark.unit
def test_selection_may_be_empty():
    _, selection = _select([{"a": 1}, {"a": 2}])

    assert selection.num_col == "a"
    assert selection.date_col is None
    assert selection.cat_col is None


@pytest.mark.unit
def test_boolean_columns_are_categorical():
    _, selection = _select([{"flag": True}, {"flag": False}])
    assert selection.cat_col == "flag"
