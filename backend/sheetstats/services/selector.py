"""
Primary column selection.

Picks the single date, numeric and categorical column that drive the
default charts and key metrics. Each pick is independent and may be absent.
"""
import logging
from typing import Any, List, Mapping, Optional, Tuple

from sheetstats.core.schemas import ColumnType, PrimaryColumnSelection
from sheetstats.services.heuristics import (
    CATEGORICAL_NAME_BONUSES,
    DATE_NAME_PATTERN,
    NUMERIC_NAME_BONUSES,
    name_bonus,
    name_matches,
)

logger = logging.getLogger(__name__)


def _ranked(scored: List[Tuple[str, int]]) -> List[Tuple[str, int]]:
    # Stable: equal scores keep column order
    return sorted(scored, key=lambda item: -item[1])


def rank_numeric_columns(summaries: Mapping[str, Any]) -> List[Tuple[str, int]]:
    """Numeric columns scored by parseable count plus money/quantity name bonus."""
    return _ranked([
        (col, s.count + name_bonus(col, NUMERIC_NAME_BONUSES))
        for col, s in summaries.items()
        if s.type == ColumnType.NUMBER
    ])


def rank_categorical_columns(summaries: Mapping[str, Any]) -> List[Tuple[str, int]]:
    """String/boolean columns scored by distinct count plus entity name bonus."""
    return _ranked([
        (col, s.distinct + name_bonus(col, CATEGORICAL_NAME_BONUSES))
        for col, s in summaries.items()
        if s.type in ColumnType.CATEGORICAL
    ])


def choose_date_column(summaries: Mapping[str, Any]) -> Optional[str]:
    """
    Date column with the most covered days.

    Equal coverage prefers a date-sounding name, then column order.
    """
    candidates = [
        (col, (len(s.timeline), name_matches(col, DATE_NAME_PATTERN)))
        for col, s in summaries.items()
        if s.type == ColumnType.DATE
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda item: item[1])[0]


def choose_primary_columns(summaries: Mapping[str, Any]) -> PrimaryColumnSelection:
    numeric = rank_numeric_columns(summaries)
    categorical = rank_categorical_columns(summaries)

    selection = PrimaryColumnSelection(
        date_col=choose_date_column(summaries),
        num_col=numeric[0][0] if numeric else None,
        cat_col=categorical[0][0] if categorical else None,
    )
    logger.debug(
        f"Primary columns: date={selection.date_col!r}, "
        f"number={selection.num_col!r}, category={selection.cat_col!r}"
    )
    return selection
