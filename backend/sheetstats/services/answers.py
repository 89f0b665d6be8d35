"""
Local question answering over PreStats.

Used when the narrative collaborator is unavailable. Only reads fields
already in the aggregate bundle, never the rows.
"""
import re
from typing import Optional

from sheetstats.core.errors import ErrorCodes, get_fallback_message
from sheetstats.core.schemas import ColumnType, PreStats
from sheetstats.services.metrics import format_number

_COUNT_INTENT = re.compile(r"\b(rows?|records?|count)\b")
_TOP_INTENT = re.compile(r"most\s+(sold|popular|common)|\btop\b")
_SUM_INTENT = re.compile(r"\b(total|sum)\b")
_MEAN_INTENT = re.compile(r"\b(average|mean|avg)\b")


def _top_category(stats: PreStats) -> Optional[str]:
    """Categorical column whose leading value has the highest frequency count."""
    best = None
    for col, summary in stats.column_summaries.items():
        if summary.type not in ColumnType.CATEGORICAL or not summary.top:
            continue
        if best is None or summary.top[0].count > best[1].top[0].count:
            best = (col, summary)
    if best is None:
        return None
    col, summary = best
    return f"Top {col}: {summary.top[0].value} ({summary.top[0].count})."


def _most_complete_number(stats: PreStats):
    numeric = [(col, s) for col, s in stats.column_summaries.items() if s.type == ColumnType.NUMBER]
    if not numeric:
        return None
    return max(numeric, key=lambda item: item[1].count)


def answer_locally(question: str, stats: PreStats) -> str:
    """
    Answer a question from precomputed aggregates.

    Intents, in priority order: row/record counts, top category (by
    frequency), totals, averages. Anything else gets a fixed message.
    """
    q = (question or "").lower()

    if _COUNT_INTENT.search(q):
        return f"Total rows: {stats.row_count}."

    if _TOP_INTENT.search(q):
        answer = _top_category(stats)
        if answer:
            return answer

    if _SUM_INTENT.search(q):
        best = _most_complete_number(stats)
        if best:
            return f"Sum of {best[0]}: {format_number(best[1].sum)}."

    if _MEAN_INTENT.search(q):
        best = _most_complete_number(stats)
        if best:
            return f"Average of {best[0]}: {format_number(best[1].mean)}."

    return get_fallback_message(ErrorCodes.UNANSWERABLE_QUESTION)
