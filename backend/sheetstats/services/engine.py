"""
Aggregation pipeline facade.

rows -> detect types -> summarize -> select primary columns -> charts and
key metrics -> PreStats. PreStats is the only thing handed to the narrative
collaborator and to the local question answerer.
"""
import logging
import uuid
from typing import Any, List, Mapping, Optional, Sequence, Union

import pandas as pd

from sheetstats.core.errors import ErrorCodes, get_fallback_message
from sheetstats.core.performance import track_performance
from sheetstats.core.schemas import AnalysisResult, PreStats
from sheetstats.services.ai_insights import LLMNarrator, NarrativeCollaborator
from sheetstats.services.answers import answer_locally
from sheetstats.services.cells import rows_from_dataframe
from sheetstats.services.charts import build_charts
from sheetstats.services.detector import detect_column_types
from sheetstats.services.metrics import build_key_metrics
from sheetstats.services.profiler import summarize_columns
from sheetstats.services.selector import choose_primary_columns

logger = logging.getLogger(__name__)

Rows = Union[Sequence[Mapping[str, Any]], pd.DataFrame]


def _as_rows(rows: Rows) -> List[Mapping[str, Any]]:
    if isinstance(rows, pd.DataFrame):
        return rows_from_dataframe(rows)
    return list(rows)


@track_performance("compute_pre_stats")
def compute_pre_stats(rows: Rows) -> PreStats:
    """Run the full deterministic pipeline over every row (a row list or a parsed DataFrame)."""
    rows = _as_rows(rows)
    column_types = detect_column_types(rows)
    summaries = summarize_columns(rows, column_types)
    selection = choose_primary_columns(summaries)

    return PreStats(
        row_count=len(rows),
        column_names=list(column_types),
        column_types=column_types,
        column_summaries=summaries,
        charts=build_charts(rows, summaries, selection),
        key_metrics=build_key_metrics(rows, summaries, selection),
    )


def _ask(call, *args) -> Optional[str]:
    # Collaborators are untrusted: any exception is a missing answer
    try:
        result = call(*args)
    except Exception as e:
        logger.warning(f"Narrative collaborator raised: {e}", exc_info=True)
        return None
    return result if isinstance(result, str) and result.strip() else None


def analyze_dataset(
    rows: Rows,
    narrator: Optional[NarrativeCollaborator] = None,
) -> AnalysisResult:
    """
    Compute PreStats and a narrative summary of it.

    The narrative falls back to a fixed sentence when the collaborator is
    unavailable or answers badly; this never raises for collaborator errors.
    """
    analysis_id = uuid.uuid4().hex[:12]
    rows = _as_rows(rows)
    logger.info(f"Analyzing {len(rows)} rows", extra={"analysis_id": analysis_id})

    stats = compute_pre_stats(rows)
    narrator = narrator or LLMNarrator()
    analysis_text = _ask(narrator.generate_narrative, stats)
    if analysis_text is None:
        error_code = getattr(narrator, "last_error_code", None) or ErrorCodes.NARRATOR_UNAVAILABLE
        logger.info(f"Using fallback narrative ({error_code})", extra={"analysis_id": analysis_id})
        analysis_text = get_fallback_message(error_code)

    logger.info(
        f"Analysis complete: {len(stats.column_names)} columns, {len(stats.charts)} charts, "
        f"{len(stats.key_metrics)} key metrics",
        extra={"analysis_id": analysis_id},
    )
    return AnalysisResult(
        analysis_text=analysis_text,
        key_metrics=stats.key_metrics,
        charts=stats.charts,
        pre_stats=stats,
    )


def answer_question(
    question: str,
    pre_stats: Optional[PreStats] = None,
    rows: Optional[Rows] = None,
    narrator: Optional[NarrativeCollaborator] = None,
) -> str:
    """
    Answer a question from PreStats, asking the collaborator first and
    falling back to local pattern-matched answers.
    """
    stats = pre_stats if pre_stats is not None else compute_pre_stats(rows if rows is not None else [])
    narrator = narrator or LLMNarrator()

    answer = _ask(narrator.answer_question, question, stats)
    if answer is None:
        logger.info("Answering locally from aggregates")
        return answer_locally(question, stats)
    return answer
