"""
Chart specification builder.

Emits a fixed palette of charts, each carrying fully aggregated data so the
renderer only draws and switches chart type. A chart whose columns are
missing or whose data would be empty is left out.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from sheetstats.core.performance import track_performance
from sheetstats.core.schemas import ChartSpec, ChartType, PrimaryColumnSelection
from sheetstats.services.cells import day_epoch_ms, day_key, frame_from_rows, to_date
from sheetstats.services.profiler import parse_labels, parse_numbers
from sheetstats.services.selector import choose_primary_columns

logger = logging.getLogger(__name__)

BAR_TOP_N = 15
PIE_TOP_N = 12
AREA_TOP_N = 20
COMPOSED_TOP_N = 20


def _chart(chart_type: str, title: str, data: List[Dict[str, Any]], name_key: str = "name") -> ChartSpec:
    return ChartSpec(
        type=chart_type,
        title=title,
        data_key="value",
        name_key=name_key,
        data=data,
        current_type=chart_type,
    )


def _descending(records: List[Dict[str, Any]], key) -> List[Dict[str, Any]]:
    # sorted() is stable, so ties keep first-seen category order
    return sorted(records, key=lambda r: -key(r))


def top_category_data(summary, limit: int) -> List[Dict[str, Any]]:
    return [{"name": t.value, "value": t.count} for t in summary.top[:limit]]


def daily_count_data(summary) -> List[Dict[str, Any]]:
    return [{"date": p.day, "ts": day_epoch_ms(p.day), "value": p.count} for p in summary.timeline]


def daily_sum_data(df: pd.DataFrame, date_col: str, num_col: str) -> List[Dict[str, Any]]:
    """Per-day sum of num_col, from a fresh pass over the rows."""
    stamps = df[date_col].map(to_date)
    values = parse_numbers(df[num_col])
    mask = stamps.notna() & values.notna()
    if not mask.any():
        return []

    days = stamps[mask].map(day_key)
    per_day = values[mask].groupby(days, sort=True).sum()
    return [{"date": str(day), "ts": day_epoch_ms(str(day)), "value": float(total)} for day, total in per_day.items()]


def category_sum_data(df: pd.DataFrame, cat_col: str, num_col: str) -> List[Dict[str, Any]]:
    labels = parse_labels(df[cat_col])
    values = parse_numbers(df[num_col])
    mask = labels.notna() & values.notna()
    if not mask.any():
        return []

    sums = values[mask].groupby(labels[mask], sort=False).sum()
    records = [{"name": str(name), "value": float(total)} for name, total in sums.items()]
    return _descending(records, key=lambda r: r["value"])[:AREA_TOP_N]


def category_value_count_data(df: pd.DataFrame, cat_col: str, num_col: Optional[str]) -> List[Dict[str, Any]]:
    """Occurrence count and (when a numeric column exists) summed value per category."""
    labels = parse_labels(df[cat_col])
    mask = labels.notna()
    if not mask.any():
        return []

    keys = labels[mask]
    counts = keys.groupby(keys, sort=False).size()
    if num_col:
        values = parse_numbers(df[num_col])[mask].fillna(0.0)
        sums = values.groupby(keys, sort=False).sum()
    else:
        sums = pd.Series(0.0, index=counts.index)

    records = [
        {"name": str(name), "value": float(sums[name]), "count": int(count)}
        for name, count in counts.items()
    ]
    return _descending(records, key=lambda r: r["value"] or r["count"])[:COMPOSED_TOP_N]


@track_performance("build_charts")
def build_charts(
    rows: Sequence[Mapping[str, Any]],
    summaries: Mapping[str, Any],
    selection: Optional[PrimaryColumnSelection] = None,
) -> List[ChartSpec]:
    """
    Build the chart palette in fixed order: top-category bar, time series
    line, distribution pie, category-sum area, value-and-count composed.
    """
    selection = selection or choose_primary_columns(summaries)
    date_col, num_col, cat_col = selection.date_col, selection.num_col, selection.cat_col
    df = frame_from_rows(rows, summaries.keys())
    charts: List[ChartSpec] = []

    if cat_col:
        data = top_category_data(summaries[cat_col], BAR_TOP_N)
        if data:
            charts.append(_chart(ChartType.BAR, f"Top {cat_col}", data))

    if date_col:
        data = daily_sum_data(df, date_col, num_col) if num_col else []
        title = f"Daily {num_col}"
        if not data:
            data = daily_count_data(summaries[date_col])
            title = "Entries over time"
        if data:
            charts.append(_chart(ChartType.LINE, title, data, name_key="date"))

    if cat_col:
        data = top_category_data(summaries[cat_col], PIE_TOP_N)
        if data:
            charts.append(_chart(ChartType.PIE, f"Distribution of {cat_col}", data))

    if cat_col and num_col:
        data = category_sum_data(df, cat_col, num_col)
        if data:
            charts.append(_chart(ChartType.AREA, f"{num_col} by {cat_col}", data))

    if cat_col:
        data = category_value_count_data(df, cat_col, num_col)
        if data:
            title = f"{num_col} & Count by {cat_col}" if num_col else f"Count by {cat_col}"
            charts.append(_chart(ChartType.COMPOSED, title, data))

    logger.info(f"Built {len(charts)} charts")
    return charts
