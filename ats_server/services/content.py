"""Pure shaping of provider payloads before they are stored or returned.

No I/O here: each function takes the payload chosen by
``gateway.normalizer.result_payload`` and returns a cleaned copy.
"""

from __future__ import annotations

import copy
import json
import math
from typing import Any

PREVIEW_MAX_CHARS = 400
MATCH_LIST_MAX_ITEMS = 5

_RESUME_SKILL_KEYS = ("ordered_skills", "emphasize_skills", "add_skills", "ats_keywords")


def _strings(value: Any, limit: int | None = None) -> list[str]:
    if not isinstance(value, list):
        return []
    items = [item for item in value if isinstance(item, str)]
    return items[:limit] if limit is not None else items


def _bullet_text(bullet: Any) -> str | None:
    if isinstance(bullet, str):
        return bullet
    if isinstance(bullet, dict) and bullet.get("text") is not None:
        return str(bullet["text"])
    return None


def sanitize_resume_content(content: Any) -> Any:
    """Coerce the resume contract: string summary, string-only skill lists, clean experience rows."""
    if not isinstance(content, dict):
        return content
    out = copy.deepcopy(content)

    summary = out.get("summary")
    if summary is not None and not isinstance(summary, str):
        bullets = out.get("bullets")
        first = _bullet_text(bullets[0]) if isinstance(bullets, list) and bullets else None
        if first:
            out["summary"] = first
        else:
            out.pop("summary")
    if isinstance(out.get("summary"), str):
        out["summary"] = out["summary"].strip()

    for key in _RESUME_SKILL_KEYS:
        if isinstance(out.get(key), list):
            out[key] = _strings(out[key])

    sections = out.get("sections")
    if isinstance(sections, dict) and isinstance(sections.get("experience"), list):
        rows = []
        for row in sections["experience"]:
            row = row if isinstance(row, dict) else {}
            cleaned = {
                "employment_id": row.get("employment_id"),
                "role": row.get("role"),
                "company": row.get("company"),
                "dates": row.get("dates"),
                "bullets": _strings(row.get("bullets")),
            }
            if cleaned["bullets"] or cleaned["role"] or cleaned["company"]:
                rows.append({k: v for k, v in cleaned.items() if v is not None})
        sections["experience"] = rows
    return out


def _score(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return int(round(max(0.0, min(100.0, number))))


def normalize_match(content: Any) -> dict[str, Any]:
    """Clamp match scores to 0-100 and keep at most five string items per list."""
    data = content if isinstance(content, dict) else {}
    breakdown = data.get("breakdown") if isinstance(data.get("breakdown"), dict) else {}
    return {
        "matchScore": _score(data.get("matchScore")),
        "breakdown": {
            "skills": _score(breakdown.get("skills")),
            "experience": _score(breakdown.get("experience")),
            "education": _score(breakdown.get("education")),
            "culturalFit": _score(breakdown.get("culturalFit")),
        },
        "skillsGaps": _strings(data.get("skillsGaps"), MATCH_LIST_MAX_ITEMS),
        "strengths": _strings(data.get("strengths"), MATCH_LIST_MAX_ITEMS),
        "recommendations": _strings(data.get("recommendations"), MATCH_LIST_MAX_ITEMS),
        "reasoning": str(data.get("reasoning") or "").strip() or "No reasoning provided",
    }


def make_preview(content: Any) -> str:
    """Short human-readable excerpt stored next to the artifact."""
    if isinstance(content, str):
        return content[:PREVIEW_MAX_CHARS]
    if isinstance(content, dict) and isinstance(content.get("bullets"), list):
        lines = [_bullet_text(b) for b in content["bullets"][:3]]
        return "\n".join(line for line in lines if line)
    try:
        rendered = json.dumps(content, ensure_ascii=False)
    except (TypeError, ValueError):
        rendered = str(content)
    if len(rendered) > PREVIEW_MAX_CHARS:
        return rendered[:PREVIEW_MAX_CHARS] + "…"
    return rendered
