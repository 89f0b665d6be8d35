"""
Column type detection.

Every cell of every row is tagged (no sampling) and each column takes the
tag with the highest tally.
"""
import logging
from typing import Any, Dict, Mapping, Sequence

from sheetstats.core.performance import track_performance
from sheetstats.core.sanitization import sanitize_for_logging
from sheetstats.core.schemas import ColumnType, ColumnTypeInfo
from sheetstats.services.cells import classify_cell, column_names, frame_from_rows
from sheetstats.services.heuristics import DATE_NAME_NUDGE, DATE_NAME_PATTERN, name_matches

logger = logging.getLogger(__name__)


def choose_column_type(name: str, tallies: Mapping[str, int]) -> str:
    """
    Pick a column type from per-tag tallies.

    A date-sounding name adds a small nudge to the date tally, so a date
    column with a few free-text cells still reads as a date. Columns with no
    non-null cells are strings. Ties go date > number > boolean > string.
    """
    if not any(tallies.values()):
        return ColumnType.STRING

    scores = {tag: int(tallies.get(tag, 0)) for tag in ColumnType.PRIORITY}
    if name_matches(name, DATE_NAME_PATTERN):
        scores[ColumnType.DATE] += DATE_NAME_NUDGE

    # max() keeps the first of equal scores, so PRIORITY order breaks ties
    return max(ColumnType.PRIORITY, key=lambda tag: scores[tag])


@track_performance("detect_column_types")
def detect_column_types(rows: Sequence[Mapping[str, Any]]) -> Dict[str, ColumnTypeInfo]:
    """Classify every column as number, date, boolean or string."""
    columns = column_names(rows)
    df = frame_from_rows(rows, columns)

    column_types: Dict[str, ColumnTypeInfo] = {}
    for col in columns:
        tags = df[col].map(classify_cell).dropna()
        tallies = {str(tag): int(count) for tag, count in tags.value_counts().items()}
        col_type = choose_column_type(col, tallies)
        column_types[col] = ColumnTypeInfo(type=col_type, non_null_count=int(tags.size))
        logger.debug(
            f"Column {sanitize_for_logging(col)} typed as {col_type} "
            f"({tags.size} non-null, tallies={tallies})"
        )

    return column_types
