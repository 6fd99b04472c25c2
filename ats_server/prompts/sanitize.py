"""Prompt guardrails applied before any text leaves the process."""

from __future__ import annotations

import re

from ats_server.core.exceptions import BadRequestError

PROMPT_MAX_CHARS = 16_000
PROMPT_MIN_CHARS = 10

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_OPENAI_KEY = re.compile(r"sk-[A-Za-z0-9_\-]{16,}")
_API_KEY_PAIR = re.compile(r"(api[_-]?key)\s*[:=]\s*[A-Za-z0-9_\-]{12,}", re.IGNORECASE)


def redact_secrets(text: str) -> str:
    """Mask API keys that users paste into free-form fields."""
    text = _OPENAI_KEY.sub("[REDACTED_KEY]", text)
    return _API_KEY_PAIR.sub(r"\1=[REDACTED]", text)


def sanitize_prompt(text: str, max_len: int = PROMPT_MAX_CHARS) -> str:
    """Strip control characters, redact secrets and cap the length (ellipsis appended)."""
    cleaned = redact_secrets(_CONTROL_CHARS.sub(" ", text or ""))
    if len(cleaned) > max_len:
        cleaned = cleaned[: max_len - 1] + "…"
    return cleaned


def validate_prompt(prompt: str) -> str:
    if len(prompt.strip()) < PROMPT_MIN_CHARS:
        raise BadRequestError(f"Prompt must contain at least {PROMPT_MIN_CHARS} non-blank characters")
    return prompt


def select_model(requested: str | None, default: str, allowed: list[str]) -> str:
    """Honour a per-request model only when the allow-list is empty or contains it."""
    if requested and (not allowed or requested in allowed):
        return requested
    return default
