"""
Narrative collaborator using Groq (primary) and Gemini (fallback).

The model only ever sees the serialized PreStats bundle and is never a source
of numbers. Every failure (no key, SDK/network error, empty or malformed
response) stops at this boundary and surfaces as None.
"""
import os
import json
import logging
from typing import Any, Dict, Optional
from groq import Groq
from sheetstats.core.config import get_settings
from sheetstats.core.errors import (
    ErrorCodes,
    MalformedNarratorResponseError,
    NarratorError,
    NarratorUnavailableError,
)
from sheetstats.core.sanitization import sanitize_for_prompt
from sheetstats.core.schemas import PreStats
from sheetstats.services.heuristics import classify_dataset_intent

logger = logging.getLogger(__name__)

# Provider clients (singletons)
_groq_client: Optional[Groq] = None
_gemini_model = None  # Lazy loaded to avoid import if not needed

NARRATIVE_SYSTEM_PROMPT = "You are a precise data analyst. Reply in valid JSON only."
ANSWER_SYSTEM_PROMPT = "You are a precise data analyst and must answer using ONLY the aggregates provided."


def get_groq_client() -> Optional[Groq]:
    """Get or create Groq client singleton."""
    global _groq_client
    if _groq_client is None:
        api_key = os.getenv("GROQ_API_KEY")
        if api_key:
            _groq_client = Groq(api_key=api_key)
            logger.info("Groq AI client initialized")
    return _groq_client


def get_gemini_model():
    """Get or create Gemini model singleton."""
    global _gemini_model
    if _gemini_model is None:
        api_key = os.getenv("GEMINI_API_KEY")
        if api_key:
            try:
                import google.generativeai as genai
                genai.configure(api_key=api_key)
                settings = get_settings()
                _gemini_model = genai.GenerativeModel(settings.gemini_model)
                logger.info(f"Gemini AI fallback initialized with model: {settings.gemini_model}")
            except Exception as e:
                logger.warning(f"Gemini initialization failed: {e}")
    return _gemini_model


def reset_clients() -> None:
    """Drop cached provider clients (useful for testing)."""
    global _groq_client, _gemini_model
    _groq_client = None
    _gemini_model = None


def _call_groq(prompt: str, system_prompt: str, json_mode: bool = False) -> Optional[str]:
    """Call Groq API."""
    client = get_groq_client()
    if not client:
        return None

    settings = get_settings()
    kwargs: Dict[str, Any] = {}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    response = client.chat.completions.create(
        model=settings.groq_model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt}
        ],
        max_tokens=settings.ai_max_tokens,
        temperature=0,
        timeout=settings.ai_timeout_seconds,
        **kwargs
    )
    return response.choices[0].message.content


def _call_gemini(prompt: str, system_prompt: str, json_mode: bool = False) -> Optional[str]:
    """Call Gemini API (fallback)."""
    model = get_gemini_model()
    if not model:
        return None

    settings = get_settings()
    generation_config: Dict[str, Any] = {"temperature": 0, "max_output_tokens": settings.ai_max_tokens}
    if json_mode:
        generation_config["response_mime_type"] = "application/json"
    response = model.generate_content(
        f"{system_prompt}\n\n{prompt}",
        generation_config=generation_config,
        request_options={"timeout": settings.ai_timeout_seconds},
    )
    return response.text


def _call_ai_with_fallback(prompt: str, system_prompt: str, json_mode: bool = False) -> str:
    """
    Call AI with automatic fallback.

    Order: Groq -> Gemini. Raises NarratorUnavailableError when neither
    returns text.
    """
    if not get_settings().narrative_enabled:
        raise NarratorUnavailableError("Narrative generation is disabled")

    try:
        result = _call_groq(prompt, system_prompt, json_mode)
        if result:
            logger.debug("AI response from Groq")
            return result
    except Exception as e:
        error_str = str(e).lower()
        if "rate" in error_str or "limit" in error_str or "429" in error_str:
            logger.warning(f"Groq rate limited, trying Gemini fallback: {e}")
        else:
            logger.warning(f"Groq error, trying fallback: {e}")

    try:
        result = _call_gemini(prompt, system_prompt, json_mode)
        if result:
            logger.info("AI response from Gemini (fallback)")
            return result
    except Exception as e:
        logger.warning(f"Gemini fallback also failed: {e}")

    raise NarratorUnavailableError("No AI provider returned a response (set GROQ_API_KEY or GEMINI_API_KEY)")


def parse_narrative_response(text: str) -> str:
    """Extract analysisText from the model's JSON reply."""
    # Models often wrap JSON in markdown code fences
    json_str = (text or "").replace('```json', '').replace('```', '').strip()
    try:
        payload = json.loads(json_str)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedNarratorResponseError(f"Response is not valid JSON: {e}") from e

    analysis_text = payload.get("analysisText") if isinstance(payload, dict) else None
    if not isinstance(analysis_text, str) or not analysis_text.strip():
        raise MalformedNarratorResponseError("Response has no analysisText string")
    return analysis_text.strip()


def build_narrative_prompt(stats: PreStats) -> str:
    return "\n".join([
        "RULES:",
        "- Use ONLY the numbers inside PRE_STATS; do not estimate or predict.",
        "- Write in clear, executive-friendly language (2-5 sentences).",
        f"DATASET DOMAIN: {classify_dataset_intent(stats.column_names)}",
        "",
        'OUTPUT JSON: { "analysisText": string }',
        "",
        "PRE_STATS:",
        stats.model_dump_json(by_alias=True),
    ])


def build_answer_prompt(question: str, stats: PreStats) -> str:
    return "\n".join([
        "USER QUESTION:",
        sanitize_for_prompt(question),
        "",
        "PRE_STATS:",
        stats.model_dump_json(by_alias=True),
        "",
        "STRICT RULES:",
        "- Use only numbers in PRE_STATS. No estimates.",
        "- If unavailable, say so briefly and offer the closest metric.",
        "- Keep it concise and actionable.",
        "",
        "FORMAT: plain text",
    ])


class NarrativeCollaborator:
    """
    Text-generation boundary.

    Both methods return None instead of raising when no usable answer is
    available; callers substitute their own deterministic fallback.
    """

    def generate_narrative(self, stats: PreStats) -> Optional[str]:
        raise NotImplementedError

    def answer_question(self, question: str, stats: PreStats) -> Optional[str]:
        raise NotImplementedError


class LLMNarrator(NarrativeCollaborator):
    """
    Narrative collaborator backed by the Groq -> Gemini provider chain.

    last_error_code holds the ErrorCodes value of the most recent failure
    (None after a successful call).
    """

    def __init__(self):
        self.last_error_code: Optional[str] = None

    def generate_narrative(self, stats: PreStats) -> Optional[str]:
        self.last_error_code = None
        try:
            response = _call_ai_with_fallback(build_narrative_prompt(stats), NARRATIVE_SYSTEM_PROMPT, json_mode=True)
            return parse_narrative_response(response)
        except NarratorError as e:
            self.last_error_code = e.error_code
            logger.warning(f"Narrative unavailable ({e.error_code}): {e}")
        except Exception as e:
            self.last_error_code = ErrorCodes.UNKNOWN_ERROR
            logger.warning(f"Unexpected narrative failure: {e}", exc_info=True)
        return None

    def answer_question(self, question: str, stats: PreStats) -> Optional[str]:
        self.last_error_code = None
        try:
            response = _call_ai_with_fallback(build_answer_prompt(question, stats), ANSWER_SYSTEM_PROMPT)
        except NarratorError as e:
            self.last_error_code = e.error_code
            logger.warning(f"AI answer unavailable ({e.error_code}): {e}")
            return None
        except Exception as e:
            self.last_error_code = ErrorCodes.UNKNOWN_ERROR
            logger.warning(f"Unexpected AI answer failure: {e}", exc_info=True)
            return None
        return response.strip() or None
