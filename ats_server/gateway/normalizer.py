"""Response Normalizer: turns provider output into a GenerateResult payload.

  - Joins the text of every returned choice
  - Parses JSON out of the text (tolerating markdown code fences)
  - Picks the structured payload a handler should store: json first,
    then text parsed as JSON, then the bare text
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ats_server.gateway.types import GenerateResult

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def extract_text(choices: list[dict] | None) -> str | None:
    """Newline-join the message contents of all candidate choices."""
    if not choices:
        return None
    parts: list[str] = []
    for choice in choices:
        if not isinstance(choice, dict):
            continue
        message = choice.get("message")
        if not isinstance(message, dict):
            continue
        content = message.get("content")
        if isinstance(content, str) and content:
            parts.append(content)
    return "\n".join(parts) if parts else None


def parse_json_content(text: str | None) -> Any:
    """Parse a JSON object/array from model text. Returns None if it isn't JSON."""
    if not text:
        return None
    candidate = text.strip()
    fenced = _FENCE_PATTERN.match(candidate)
    if fenced:
        candidate = fenced.group(1)
    if not candidate or candidate[0] not in "[{":
        return None
    try:
        return json.loads(candidate)
    except ValueError:
        logger.debug("Model text looked like JSON but failed to parse (%d chars)", len(candidate))
        return None


def result_payload(result: GenerateResult) -> Any:
    """The structured content a caller should persist for this result."""
    if result.json is not None:
        return result.json
    parsed = parse_json_content(result.text)
    if parsed is not None:
        return parsed
    return {"text": result.text or ""}
