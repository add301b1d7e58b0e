# -*- coding: utf-8 -*-
"""Bloodwork — report text extraction + AI biomarker analysis."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..llm import AIUnavailableError, as_str_list, coerce_float, generate_text, parse_json_object

log = logging.getLogger(__name__)

_MAX_REPORT_CHARS = 20_000

ANALYSIS_PROMPT = """
You are a medical AI assistant analyzing bloodwork results.

Report text:
{report}

Please analyze the bloodwork and extract the following information:
1. Key biomarkers and their values
2. Identify any values outside the normal range
3. Provide nutritional recommendations based on the results

Format your response as a JSON object with the following structure:
{{
  "biomarkers": [
    {{
      "name": "Vitamin D",
      "value": 30,
      "unit": "ng/mL",
      "status": "low",
      "normal_range": "30-100",
      "recommendation": "Increase intake of fatty fish, egg yolks, and consider supplementation"
    }}
  ],
  "summary_text": "Brief summary of the overall bloodwork results",
  "key_deficiencies": ["Vitamin D", "Iron"],
  "key_recommendations": ["Increase vitamin D intake", "Add iron-rich foods to diet"]
}}
""".strip()

# Reference ranges used to grade manually entered values.
REFERENCE_RANGES: Dict[str, Tuple[float, float]] = {
    "vitamin d": (30.0, 100.0),
    "iron": (60.0, 170.0),
    "ferritin": (20.0, 250.0),
    "vitamin b12": (200.0, 900.0),
    "b12": (200.0, 900.0),
    "folate": (2.7, 17.0),
    "magnesium": (1.7, 2.2),
    "zinc": (60.0, 120.0),
    "calcium": (8.5, 10.5),
}


def mock_analysis() -> Dict[str, Any]:
    return {
        "biomarkers": [
            {
                "name": "Vitamin D",
                "value": 25,
                "unit": "ng/mL",
                "status": "low",
                "normal_range": "30-100",
                "recommendation": "Increase intake of fatty fish, egg yolks, and consider supplementation",
            },
            {
                "name": "Iron",
                "value": 50,
                "unit": "μg/dL",
                "status": "low",
                "normal_range": "60-170",
                "recommendation": "Increase intake of red meat, spinach, and legumes",
            },
        ],
        "summary_text": (
            "Analysis shows potential deficiencies in Vitamin D and Iron. "
            "Consider dietary adjustments and possible supplementation."
        ),
        "key_deficiencies": ["Vitamin D", "Iron"],
        "key_recommendations": ["Increase vitamin D intake", "Add iron-rich foods to diet"],
    }


def normalize_status(raw: Any) -> str:
    s = str(raw or "").strip().lower().replace("_", " ")
    if s == "very low":
        return "very_low"
    if s == "very high":
        return "very_high"
    if s in ("low", "high"):
        return s
    return "optimal"


def grade_value(name: str, value: float) -> str:
    bounds = REFERENCE_RANGES.get(name.strip().lower())
    if not bounds:
        return "optimal"
    low, high = bounds
    if value < low * 0.5:
        return "very_low"
    if value < low:
        return "low"
    if value > high * 1.5:
        return "very_high"
    if value > high:
        return "high"
    return "optimal"


def extract_report_text(path: Path, *, content_type: str, filename: str) -> str:
    is_pdf = content_type == "application/pdf" or filename.lower().endswith(".pdf")
    if is_pdf:
        from pypdf import PdfReader

        reader = PdfReader(str(path))
        parts: List[str] = []
        for page in reader.pages:
            parts.append(page.extract_text() or "")
        text = "\n".join(parts).strip()
    else:
        text = path.read_text(encoding="utf-8", errors="ignore").strip()
    return text[:_MAX_REPORT_CHARS]


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = (value if isinstance(value, str) else str(value)).strip()
    return text or None


def _normalize_analysis(parsed: Dict[str, Any]) -> Dict[str, Any]:
    biomarkers: List[Dict[str, Any]] = []
    for raw in parsed.get("biomarkers") or []:
        if not isinstance(raw, dict) or not raw.get("name"):
            continue
        biomarkers.append(
            {
                "name": str(raw["name"]).strip(),
                "value": coerce_float(raw.get("value")),
                "unit": _opt_str(raw.get("unit")),
                "status": _opt_str(raw.get("status")),
                "normal_range": _opt_str(raw.get("normal_range")),
                "recommendation": _opt_str(raw.get("recommendation")),
            }
        )
    if not biomarkers:
        raise ValueError("No biomarkers in model output")
    return {
        "biomarkers": biomarkers,
        "summary_text": str(parsed.get("summary_text") or ""),
        "key_deficiencies": as_str_list(parsed.get("key_deficiencies")),
        "key_recommendations": as_str_list(parsed.get("key_recommendations")),
    }


def analyze_report(report_text: Optional[str]) -> Tuple[Dict[str, Any], str]:
    """Return (analysis, source) where source is "ai" or "mock".

    AIRequestError propagates; a missing key or unusable output yields the mock.
    """
    prompt = ANALYSIS_PROMPT.format(report=report_text or "(no readable text)")
    try:
        content = generate_text(prompt)
    except AIUnavailableError:
        log.warning("Bloodwork analysis model not configured; using mock analysis")
        return mock_analysis(), "mock"

    try:
        return _normalize_analysis(parse_json_object(content)), "ai"
    except ValueError:
        log.warning("Bloodwork analysis output unusable; using mock analysis", exc_info=True)
        return mock_analysis(), "mock"
