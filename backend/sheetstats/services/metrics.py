"""
Key metric cards.

Cards are assembled in a fixed order and capped; "Total Records" always
leads when the dataset has rows.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from sheetstats.core.performance import track_performance
from sheetstats.core.schemas import ColumnType, KeyMetric, PrimaryColumnSelection
from sheetstats.services.heuristics import (
    ENTITY_NAME_PATTERN,
    STATUS_NAME_PATTERN,
    classify_status_label,
    name_matches,
)
from sheetstats.services.selector import choose_primary_columns, rank_categorical_columns

logger = logging.getLogger(__name__)

MAX_KEY_METRICS = 6
TREND_WINDOW_DAYS = 30


def format_number(value: float, digits: int = 2) -> str:
    """Round for display; integral results print without a decimal part."""
    rounded = round(float(value), digits)
    if rounded.is_integer():
        return str(int(rounded))
    return str(rounded)


def percent(part: float, whole: float) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def trend_last_window(summary, window_days: int = TREND_WINDOW_DAYS) -> Optional[Dict[str, Any]]:
    """
    Records in the trailing window vs the window before it.

    "Now" is the column's own max date, so the result depends only on the data.
    deltaPct is None when the previous window is empty.
    """
    if not summary.timeline or not summary.max_date:
        return None

    now = pd.Timestamp(summary.max_date.rstrip("Z"))
    start_current = now - pd.Timedelta(days=window_days)
    start_previous = now - pd.Timedelta(days=2 * window_days)

    current = previous = 0
    for point in summary.timeline:
        day = pd.Timestamp(point.day)
        if start_current < day <= now:
            current += point.count
        elif start_previous < day <= start_current:
            previous += point.count

    delta = round((current - previous) / previous * 100, 1) if previous else None
    return {"current": current, "previous": previous, "delta_pct": delta, "window_days": window_days}


def completion_rate(summaries: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Share of done vs open statuses in the first status-like column whose
    labels can be classified.
    """
    for col, summary in summaries.items():
        if summary.type not in ColumnType.CATEGORICAL or not name_matches(col, STATUS_NAME_PATTERN):
            continue

        done = open_count = 0
        for item in summary.top:
            kind = classify_status_label(item.value)
            if kind == "done":
                done += item.count
            elif kind == "open":
                open_count += item.count

        total = done + open_count
        if total:
            return {"column": col, "done": done, "open": open_count, "total": total, "rate": percent(done, total)}

    return None


def _entity_column(summaries: Mapping[str, Any], fallback: Optional[str]) -> Optional[str]:
    for col, _ in rank_categorical_columns(summaries):
        if name_matches(col, ENTITY_NAME_PATTERN):
            return col
    return fallback


@track_performance("build_key_metrics")
def build_key_metrics(
    rows: Sequence[Mapping[str, Any]],
    summaries: Mapping[str, Any],
    selection: Optional[PrimaryColumnSelection] = None,
) -> List[KeyMetric]:
    row_count = len(rows)
    if row_count == 0:
        return []

    selection = selection or choose_primary_columns(summaries)
    date_col, num_col = selection.date_col, selection.num_col

    metrics = [
        KeyMetric(title="Total Records", value=str(row_count), description="Total number of entries in the dataset."),
        KeyMetric(title="Columns", value=str(len(summaries)), description="Number of fields."),
    ]

    if date_col:
        summary = summaries[date_col]
        if summary.min_date and summary.max_date:
            metrics.append(KeyMetric(
                title="Time Coverage",
                value=f"{summary.min_date[:10]} → {summary.max_date[:10]}",
                description=f"From first to last {date_col}.",
            ))

            trend = trend_last_window(summary)
            if trend:
                value = str(trend["current"])
                if trend["delta_pct"] is not None:
                    sign = "▲" if trend["delta_pct"] >= 0 else "▼"
                    value = f"{value} ({sign}{abs(trend['delta_pct'])}%)"
                metrics.append(KeyMetric(
                    title=f"Last {trend['window_days']} days",
                    value=value,
                    description=f"vs previous {trend['window_days']} days ({trend['previous']}).",
                ))

    entity_col = _entity_column(summaries, selection.cat_col)
    if entity_col:
        metrics.append(KeyMetric(
            title=f"Distinct {entity_col}",
            value=str(summaries[entity_col].distinct),
            description=f"Unique {entity_col} values.",
        ))

    if num_col:
        summary = summaries[num_col]
        metrics.append(KeyMetric(
            title=f"Total {num_col}", value=format_number(summary.sum), description="Sum across all records.",
        ))
        metrics.append(KeyMetric(
            title=f"Avg {num_col}", value=format_number(summary.mean), description="Average per record.",
        ))

    completion = completion_rate(summaries)
    if completion:
        metrics.append(KeyMetric(
            title=f"Completion ({completion['column']})",
            value=f"{format_number(completion['rate'], 1)}%",
            description=f"{completion['done']} done of {completion['total']}; {completion['open']} open.",
        ))

    if len(metrics) > MAX_KEY_METRICS:
        logger.debug(f"Dropping {len(metrics) - MAX_KEY_METRICS} key metrics over the cap")
    return metrics[:MAX_KEY_METRICS]
