import logging
import pandas as pd
from typing import Any, Dict, Mapping, Sequence

from sheetstats.core.performance import track_performance
from sheetstats.core.sanitization import sanitize_for_logging
from sheetstats.core.schemas import (
    CategoricalSummary,
    ColumnType,
    ColumnTypeInfo,
    DateSummary,
    NumberSummary,
    TimelinePoint,
    TopValue,
)
from sheetstats.services.cells import day_key, frame_from_rows, iso_timestamp, to_date, to_label, to_number

logger = logging.getLogger(__name__)

TOP_VALUES_LIMIT = 25


def parse_numbers(series: pd.Series) -> pd.Series:
    """Float series with NaN wherever a cell is not a finite number."""
    return series.map(to_number).astype(float)


def parse_labels(series: pd.Series) -> pd.Series:
    """Categorical keys with None for empty cells."""
    return series.map(to_label)


def parse_dates(series: pd.Series) -> pd.Series:
    """datetime64 series of the cells that parse as dates (unparseable cells dropped)."""
    stamps = series.map(to_date)
    return pd.to_datetime(stamps[stamps.notna()])


def frequency_table(labels: pd.Series) -> list:
    """
    (label, count) pairs sorted by count descending.

    Ties keep first-seen order: groupby(sort=False) yields keys in order of
    appearance and sorted() is stable.
    """
    labels = labels[labels.notna()]
    counts = labels.groupby(labels, sort=False).size()
    return sorted(((str(k), int(v)) for k, v in counts.items()), key=lambda kv: -kv[1])


def summarize_number(series: pd.Series) -> NumberSummary:
    numbers = parse_numbers(series).dropna()
    count = int(numbers.size)
    if count == 0:
        return NumberSummary(count=0, nulls=int(series.size))

    total = float(numbers.sum())
    return NumberSummary(
        count=count,
        nulls=int(series.size) - count,
        sum=total,
        min=float(numbers.min()),
        max=float(numbers.max()),
        mean=total / count,
    )


def summarize_categorical(series: pd.Series, col_type: str) -> CategoricalSummary:
    table = frequency_table(parse_labels(series))
    counted = sum(count for _, count in table)
    return CategoricalSummary(
        type=col_type,
        nulls=int(series.size) - counted,
        distinct=len(table),
        top=[TopValue(value=value, count=count) for value, count in table[:TOP_VALUES_LIMIT]],
    )


def summarize_dates(series: pd.Series) -> DateSummary:
    dates = parse_dates(series)
    if dates.empty:
        return DateSummary(nulls=int(series.size))

    days = dates.map(day_key)
    per_day = days.groupby(days, sort=True).size()
    return DateSummary(
        nulls=int(series.size) - int(dates.size),
        timeline=[TimelinePoint(day=str(day), count=int(count)) for day, count in per_day.items()],
        min_date=iso_timestamp(dates.min()),
        max_date=iso_timestamp(dates.max()),
    )


@track_performance("summarize_columns")
def summarize_columns(
    rows: Sequence[Mapping[str, Any]],
    column_types: Mapping[str, ColumnTypeInfo],
) -> Dict[str, Any]:
    """
    Compute the per-type summary of every column.

    Cells are re-validated against the detected type; a cell that does not
    parse as that type counts as a null for the column.
    """
    df = frame_from_rows(rows, column_types.keys())

    summaries: Dict[str, Any] = {}
    for col, info in column_types.items():
        series = df[col]
        if info.type == ColumnType.NUMBER:
            summaries[col] = summarize_number(series)
        elif info.type == ColumnType.DATE:
            summaries[col] = summarize_dates(series)
        else:
            summaries[col] = summarize_categorical(series, info.type)

        if summaries[col].nulls:
            logger.debug(f"Column {sanitize_for_logging(col)}: {summaries[col].nulls} null/unparseable cells")

    return summaries
