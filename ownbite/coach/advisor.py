# -*- coding: utf-8 -*-
"""Coach — nutrition advice from the text model."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from ..llm import AIRequestError, AIUnavailableError, generate_text
from .models import CoachDailySummary, CoachRecentEntry

log = logging.getLogger(__name__)

MOCK_ADVICE = (
    "Based on your nutrition data, your macronutrient distribution looks balanced. "
    "Your protein intake is good, which helps with muscle maintenance and satiety. "
    "Consider adding more fiber-rich vegetables to your meals for better digestive health. "
    "Try to space your meals evenly throughout the day to maintain steady energy levels. "
    "Stay hydrated and consider tracking your water intake alongside your food."
)

FALLBACK_ADVICE = (
    "I'm having trouble analyzing your nutrition data right now. "
    "In general, aim for a balanced diet with plenty of whole foods, adequate protein, "
    "and a variety of fruits and vegetables. Stay hydrated and try to maintain regular meal times. "
    "If you have specific nutrition questions, please try again later."
)


def _entry_time(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).strftime("%H:%M")
    except ValueError:
        return timestamp


def build_prompt(
    summary: CoachDailySummary,
    recent: Optional[List[CoachRecentEntry]] = None,
    query: Optional[str] = None,
) -> str:
    lines = [
        "As a friendly and knowledgeable nutrition coach, analyze this daily nutrition data:",
        "",
        "Today's Nutrition Summary:",
        f"- Total Calories: {summary.calories:g}",
        f"- Protein: {summary.protein:g}g",
        f"- Carbohydrates: {summary.carbs:g}g",
        f"- Fat: {summary.fat:g}g",
    ]
    if recent:
        lines += ["", "Recent Meals:"]
        for entry in recent:
            lines += [
                f"- {entry.name}",
                f"  • Calories: {entry.calories:g}",
                f"  • Protein: {entry.protein:g}g",
                f"  • Carbs: {entry.carbs:g}g",
                f"  • Fat: {entry.fat:g}g",
                f"  • Time: {_entry_time(entry.timestamp)}",
            ]
    if query:
        lines += ["", f"User Question: {query.strip()}"]
    lines += [
        "",
        "Please provide personalized nutrition advice covering:",
        "1. Analysis of macro distribution and overall calorie intake",
        "2. Specific, actionable recommendations for improvement",
        "3. Meal timing suggestions based on the eating pattern",
        "4. Potential nutrient gaps to watch for",
        "5. Positive reinforcement for good choices",
        "",
        "Keep the response friendly, encouraging, and focused on actionable advice.",
        "Format the response with clear sections and bullet points for readability.",
        "Limit the response to 3-4 short paragraphs.",
    ]
    return "\n".join(lines)


def get_advice(
    summary: CoachDailySummary,
    recent: Optional[List[CoachRecentEntry]] = None,
    query: Optional[str] = None,
) -> Tuple[str, str]:
    """Return (advice, source)."""
    try:
        return generate_text(build_prompt(summary, recent, query)), "ai"
    except AIUnavailableError:
        return MOCK_ADVICE, "mock"
    except AIRequestError:
        log.warning("Coach advice generation failed", exc_info=True)
        return FALLBACK_ADVICE, "fallback"
