"""Model-backed analysis of diary entries.

This module provides:
1. `classify_entry` – asks the OpenAI chat model for a mood label, a 1-10
   stress level and a short supportive comment on a new entry.  A failed call
   or an unusable reply never fails the request: missing or invalid fields are
   replaced one by one with fixed fallbacks.  A missing `OPENAI_API_KEY` is
   different; it raises `AnalysisConfigurationError` so the entry is not saved.
2. `generate_weekly_insight` – sends a digest of the recent entries and asks
   for one short reflective observation.  This path is best effort: every
   failure collapses into `Unavailable`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Sequence, Union

from flask import current_app
from openai import OpenAI, OpenAIError

from .moods import FALLBACK_MOOD, Mood

FALLBACK_STRESS = 5
FALLBACK_INSIGHTS = "No insights available"
STRESS_MIN = 1
STRESS_MAX = 10
CONTENT_PREVIEW_CHARS = 200

CLASSIFY_PROMPT = (
    "You are an empathetic journal analyst. Read the user's diary entry and provide:\n"
    "1. A mood classification, exactly one of: "
    + ", ".join(mood.value for mood in Mood) + "\n"
    "2. A stress level from 1 to 10 (1 = very relaxed, 10 = extremely stressed)\n"
    "3. Thoughtful, compassionate insights and gentle suggestions\n\n"
    "Respond with a JSON object of this shape:\n"
    '{"mood": "string", "stress": number, "insights": "string"}\n\n'
    "Be warm, supportive and constructive. Validate their feelings while offering gentle guidance."
)

WEEKLY_INSIGHT_PROMPT = (
    "You are an empathetic wellness coach reading someone's recent diary entries, given as a JSON list. "
    "Look for patterns in:\n"
    "- days of the week when stress is highest or lowest\n"
    "- times of day when mood changes\n"
    "- recurring themes or situations\n"
    "- trends over time\n\n"
    "Write ONE concise, personal coaching insight of 2-3 sentences that points out a specific pattern "
    "and asks a thoughtful question to help them reflect. Sound like a caring friend, not a therapist.\n\n"
    'Example: "I noticed your stress spikes on Tuesday afternoons. Is there a meeting or class then?"\n\n'
    "Return only the insight text: no JSON, no labels."
)


class AnalysisConfigurationError(RuntimeError):
    """Raised when entry analysis is requested but no OpenAI key is configured."""


@dataclass(frozen=True)
class EntryAnalysis:
    mood: str
    stress: int
    insights: str


FALLBACK_ANALYSIS = EntryAnalysis(FALLBACK_MOOD, FALLBACK_STRESS, FALLBACK_INSIGHTS)


@dataclass(frozen=True)
class Unavailable:
    """No weekly insight; ``reason`` is for the logs only."""

    reason: str

    def to_dict(self) -> dict:
        return {'insight': None}


@dataclass(frozen=True)
class Value:
    text: str

    def to_dict(self) -> dict:
        return {'insight': self.text}


InsightResult = Union[Unavailable, Value]


# ----------------------------------------------------------------------------------
# OpenAI client
# ----------------------------------------------------------------------------------

def has_credentials() -> bool:
    return bool(current_app.config.get("OPENAI_API_KEY"))


def _get_client() -> OpenAI:
    api_key = current_app.config.get("OPENAI_API_KEY")
    if not api_key:
        raise AnalysisConfigurationError(
            "OpenAI API key not configured. Set OPENAI_API_KEY in the server environment."
        )
    return OpenAI(api_key=api_key)


def _reply_text(response) -> Optional[str]:
    if not response.choices:
        return None
    return response.choices[0].message.content


# ----------------------------------------------------------------------------------
# Entry classification
# ----------------------------------------------------------------------------------

def _parse_stress(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, int) and STRESS_MIN <= value <= STRESS_MAX:
        return value
    return None


def parse_analysis(raw: Optional[str]) -> EntryAnalysis:
    """Turn the model's JSON reply into an `EntryAnalysis`.

    Each field falls back on its own: a reply with a valid mood but a stress
    of "very high" keeps the mood and gets the default stress.
    """
    if not raw:
        return FALLBACK_ANALYSIS

    try:
        data = json.loads(raw)
    except ValueError:
        current_app.logger.warning("Failed to parse analysis JSON: %s", raw)
        return FALLBACK_ANALYSIS

    if not isinstance(data, dict):
        current_app.logger.warning("Analysis reply is not a JSON object: %s", raw)
        return FALLBACK_ANALYSIS

    mood = Mood.parse(data.get("mood"))
    stress = _parse_stress(data.get("stress"))
    insights = data.get("insights")
    if not isinstance(insights, str) or not insights.strip():
        insights = None

    return EntryAnalysis(
        mood=mood.value if mood is not None else FALLBACK_MOOD,
        stress=stress if stress is not None else FALLBACK_STRESS,
        insights=insights.strip() if insights is not None else FALLBACK_INSIGHTS,
    )


def classify_entry(text: str) -> EntryAnalysis:
    """Classify *text*; raises `AnalysisConfigurationError` if no key is set."""
    client = _get_client()

    try:
        response = client.chat.completions.create(
            model=current_app.config["OPENAI_MODEL"],
            messages=[
                {"role": "system", "content": CLASSIFY_PROMPT},
                {"role": "user", "content": text},
            ],
            response_format={"type": "json_object"},
            temperature=0.7,
        )
    except OpenAIError as exc:
        current_app.logger.warning("Entry analysis call failed (%s); using fallback analysis", exc)
        return FALLBACK_ANALYSIS

    return parse_analysis(_reply_text(response))


# ----------------------------------------------------------------------------------
# Weekly insight
# ----------------------------------------------------------------------------------

def _time_of_day(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    return f"{hour} {'AM' if moment.hour < 12 else 'PM'}"


def summarize_entry(entry) -> dict:
    """Reduce an entry to what the pattern prompt needs."""
    return {
        "date": entry.created_at.isoformat(),
        "dayOfWeek": entry.created_at.strftime("%A"),
        "timeOfDay": _time_of_day(entry.created_at),
        "mood": entry.mood,
        "stress": entry.stress,
        "content": entry.content[:CONTENT_PREVIEW_CHARS],
    }


def generate_weekly_insight(entries: Sequence) -> InsightResult:
    """Ask the model for one observation about *entries* (newest first)."""
    min_entries = current_app.config["INSIGHT_MIN_ENTRIES"]
    if len(entries) < min_entries:
        return Unavailable(f"only {len(entries)} entries, need {min_entries}")

    if not has_credentials():
        return Unavailable("OpenAI API key not configured")

    digest: List[dict] = [summarize_entry(entry) for entry in entries]

    try:
        response = _get_client().chat.completions.create(
            model=current_app.config["OPENAI_MODEL"],
            messages=[
                {"role": "system", "content": WEEKLY_INSIGHT_PROMPT},
                {"role": "user", "content": json.dumps(digest)},
            ],
            temperature=0.8,
            max_tokens=150,
        )
    except OpenAIError as exc:
        current_app.logger.error("Weekly insight call failed: %s", exc)
        return Unavailable("model call failed")

    text = (_reply_text(response) or "").strip()
    if not text:
        return Unavailable("model returned an empty reply")
    return Value(text)
