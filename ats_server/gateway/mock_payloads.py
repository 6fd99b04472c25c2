"""Deterministic canned payloads for the mock provider, keyed by generation kind."""

from __future__ import annotations

import copy
from typing import Any

MOCK_PAYLOADS: dict[str, dict[str, Any]] = {
    "resume": {
        "json": {
            "summary": "Results-driven software engineer with a track record of shipping reliable products.",
            "bullets": [
                {"text": "Achieved 30% improvement in API response times by introducing caching"},
                {"text": "Led a team of 5 engineers delivering a customer-facing analytics dashboard"},
                {"text": "Automated release pipeline, cutting deployment time from hours to minutes"},
            ],
            "ordered_skills": ["Python", "TypeScript", "PostgreSQL", "AWS"],
            "emphasize_skills": ["Python", "PostgreSQL"],
            "add_skills": ["Docker"],
            "ats_keywords": ["scalability", "CI/CD", "REST APIs"],
        },
        "tokens": 150,
    },
    "cover_letter": {
        "json": {
            "sections": {
                "opening": "I am writing to express my interest in this role and the opportunity to contribute to your team.",
                "body": [
                    "In my current position I have delivered measurable improvements to product quality and speed.",
                    "I am drawn to your mission and believe my experience aligns closely with your needs.",
                ],
                "closing": "Thank you for your consideration. I look forward to discussing how I can help.",
            },
            "metadata": {"wordCount": 72, "tone": "professional"},
        },
        "tokens": 400,
    },
    "skills_optimization": {
        "json": {
            "emphasize": ["Python", "SQL"],
            "add": ["Kubernetes"],
            "order": ["Python", "SQL", "AWS", "Kubernetes"],
            "categories": {"technical": ["Python", "SQL", "AWS"], "soft": ["Communication"]},
            "gaps": ["Kubernetes"],
            "score": 78,
        },
        "tokens": 200,
    },
    "company_research": {
        "json": {
            "name": "Test Company",
            "industry": "Technology",
            "size": "100-500",
            "mission": "Build tools that help people do their best work.",
            "recentNews": [],
            "products": ["Core Platform"],
        },
        "tokens": 100,
    },
    "match": {
        "json": {
            "matchScore": 72,
            "breakdown": {"skills": 75, "experience": 70, "education": 80, "culturalFit": 60},
            "skillsGaps": ["Kubernetes"],
            "strengths": ["Python", "API design"],
            "recommendations": ["Highlight cloud deployment experience"],
            "reasoning": "Strong technical overlap with a gap in container orchestration.",
        },
        "tokens": 180,
    },
}

FALLBACK_PAYLOAD: dict[str, Any] = {
    "text": "Mock response",
    "json": {"text": "Mock response"},
    "tokens": 50,
}


def mock_payload(kind: str) -> dict[str, Any]:
    """A fresh copy of the canned payload for ``kind`` (generic fallback for unknown kinds)."""
    payload = copy.deepcopy(MOCK_PAYLOADS.get(kind, FALLBACK_PAYLOAD))
    if "text" not in payload:
        payload["text"] = _render_text(payload["json"])
    return payload


def _render_text(data: dict[str, Any]) -> str:
    if "bullets" in data:
        return "\n".join(f"- {b['text'] if isinstance(b, dict) else b}" for b in data["bullets"])
    sections = data.get("sections")
    if isinstance(sections, dict):
        return "\n\n".join([sections["opening"], *sections["body"], sections["closing"]])
    if "reasoning" in data:
        return data["reasoning"]
    return str(data.get("name") or data.get("text") or "Mock response")
