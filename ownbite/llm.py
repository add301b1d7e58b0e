# -*- coding: utf-8 -*-
"""Generative-AI calls (Gemini via its OpenAI-compatible endpoint) + JSON extraction.

Every AI feature in the app makes exactly one call through `call_model` and decides on
its own fallback; nothing here retries.
"""

from __future__ import annotations

import ast
import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from .config import settings

log = logging.getLogger(__name__)


class AIUnavailableError(RuntimeError):
    """No API key configured."""


class AIRequestError(RuntimeError):
    """Transport, HTTP, timeout or empty-output failure."""


def resolve_model_settings(*, vision: bool = False) -> Dict[str, Any]:
    if not settings.gemini_api_key:
        raise AIUnavailableError("GEMINI_API_KEY not set")
    return {
        "model": settings.gemini_vision_model if vision else settings.gemini_model,
        "base_url": settings.gemini_base_url,
        "api_key": settings.gemini_api_key,
        "timeout": settings.gemini_timeout,
        "temperature": settings.gemini_temperature,
        "max_tokens": settings.gemini_max_tokens,
    }


def _completions_url(base_url: str) -> str:
    base = base_url.rstrip("/")
    if base.endswith("/chat/completions"):
        return base
    return f"{base}/chat/completions"


def _extract_text(data: object) -> str:
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list):
        return ""
    out: list[str] = []
    for choice in choices:
        if not isinstance(choice, dict):
            continue
        msg = choice.get("message")
        if isinstance(msg, dict):
            maybe = msg.get("content")
            if isinstance(maybe, str) and maybe:
                out.append(maybe)
        maybe_text = choice.get("text")
        if isinstance(maybe_text, str) and maybe_text:
            out.append(maybe_text)
    return "".join(out)


def call_model(
    messages: List[Dict[str, Any]],
    *,
    timeout: float | None = None,
    vision: bool = False,
) -> str:
    """Send one chat-completions request and return the assistant text."""
    cfg = resolve_model_settings(vision=vision)
    payload = {
        "model": cfg["model"],
        "messages": messages,
        "temperature": cfg["temperature"],
        "max_tokens": cfg["max_tokens"],
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {cfg['api_key']}",
    }
    try:
        with httpx.Client(timeout=timeout or cfg["timeout"]) as client:
            resp = client.post(_completions_url(cfg["base_url"]), headers=headers, json=payload)
            resp.raise_for_status()
            data = resp.json()
    except httpx.TimeoutException as exc:
        raise AIRequestError(f"AI request timed out: {exc}") from exc
    except httpx.HTTPStatusError as exc:
        raise AIRequestError(f"AI API error: {exc.response.status_code}") from exc
    except (httpx.HTTPError, ValueError) as exc:
        raise AIRequestError(f"AI API unreachable: {exc}") from exc

    text = _extract_text(data).strip()
    if not text:
        raise AIRequestError("AI API returned an empty response")
    return text


def generate_text(prompt: str, *, system: str | None = None, timeout: float | None = None) -> str:
    messages: List[Dict[str, Any]] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return call_model(messages, timeout=timeout)


def describe_image(prompt: str, image_data_url: str, *, timeout: float | None = None) -> str:
    messages = [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ],
        }
    ]
    return call_model(messages, timeout=timeout, vision=True)


# ---------- JSON extraction ----------


def _remove_trailing_commas(text: str) -> str:
    """Remove trailing commas while preserving string literals."""
    out: list[str] = []
    in_str = False
    escaped = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_str:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            i += 1
            continue

        if ch == "\"":
            in_str = True
            out.append(ch)
            i += 1
            continue

        if ch == ",":
            j = i + 1
            while j < len(text) and text[j] in " \t\r\n":
                j += 1
            if j < len(text) and text[j] in "}]":
                i += 1
                continue

        out.append(ch)
        i += 1
    return "".join(out)


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s*```$", "", cleaned)
    return cleaned


def iter_json_object_candidates(text: str) -> list[str]:
    """Extract balanced {...} candidates from arbitrary text.

    Models wrap JSON in prose or emit several objects; braces inside string
    literals are ignored.
    """
    cleaned = _strip_fences(text)

    candidates: list[str] = []
    in_str = False
    escaped = False
    depth = 0
    start_idx: int | None = None

    for i, ch in enumerate(cleaned):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue

        if ch == "\"":
            in_str = True
            continue

        if ch == "{":
            if depth == 0:
                start_idx = i
            depth += 1
            continue

        if ch == "}":
            if depth > 0:
                depth -= 1
                if depth == 0 and start_idx is not None:
                    candidates.append(cleaned[start_idx : i + 1])
                    start_idx = None
            continue

    return candidates


def _sanitize_json_like(text: str) -> str:
    cleaned = text
    cleaned = cleaned.replace("“", "\"").replace("”", "\"")
    cleaned = cleaned.replace("‘", "'").replace("’", "'")
    cleaned = _remove_trailing_commas(cleaned)
    cleaned = re.sub(r"\bNaN\b", "null", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\b-?Infinity\b", "null", cleaned, flags=re.IGNORECASE)
    return cleaned


def _greedy_object(text: str) -> Optional[str]:
    match = re.search(r"\{[\s\S]*\}", text)
    return match.group(0) if match else None


def parse_json_object(content: str) -> Dict[str, Any]:
    """Locate and parse the JSON object embedded in a model's free-text answer."""
    last_error: Exception | None = None

    candidates = iter_json_object_candidates(content or "")
    # The first-brace-to-last-brace span covers a single object spread over prose.
    greedy = _greedy_object(_strip_fences(content or ""))
    if greedy and greedy not in candidates:
        candidates.insert(0, greedy)

    for candidate in candidates:
        sanitized = _sanitize_json_like(candidate)
        for attempt in (candidate, sanitized):
            try:
                parsed = json.loads(attempt)
                if isinstance(parsed, dict):
                    return parsed
            except ValueError as exc:
                last_error = exc

        try:
            py = sanitized
            py = re.sub(r"\bnull\b", "None", py)
            py = re.sub(r"\btrue\b", "True", py)
            py = re.sub(r"\bfalse\b", "False", py)
            parsed = ast.literal_eval(py)
            if isinstance(parsed, dict):
                return parsed
        except (ValueError, SyntaxError) as exc:
            last_error = exc

    if last_error is None:
        raise ValueError("Model output does not contain a JSON object")
    raise ValueError(f"Failed to parse model JSON: {last_error}") from last_error


_NUM_RE = re.compile(r"-?\d+(?:\.\d+)?")


def coerce_float(value: Any) -> Optional[float]:
    """Best-effort number from model output ("260 kcal", "5g", 12)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        m = _NUM_RE.search(s.replace(",", ""))
        if not m:
            return None
        return float(m.group(0))
    return None


def as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        s = value.strip()
        return [s] if s else []
    if isinstance(value, list):
        out: List[str] = []
        for x in value:
            if x is None:
                continue
            s = x.strip() if isinstance(x, str) else str(x).strip()
            if s:
                out.append(s)
        return out
    s = str(value).strip()
    return [s] if s else []
