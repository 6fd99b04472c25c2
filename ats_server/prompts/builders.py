"""Per-kind prompt builders.

Each builder renders candidate/job context as plain text and ends with the
JSON output contract the generation service expects back. Field values are
whitespace-collapsed and clipped so one oversized job description cannot
crowd out the rest of the prompt.
"""

from __future__ import annotations

from collections.abc import Iterable

from ats_server.models import Job, Profile, Skill
from ats_server.schemas.generation import GenerationOptions


def _clip(value, max_len: int = 1500) -> str:
    text = " ".join(str(value or "").split())
    return text[:max_len] + " …" if len(text) > max_len else text


def _join(items: Iterable | None, max_items: int = 12, max_len: int = 100) -> str:
    return ", ".join(_clip(item, max_len) for item in list(items or [])[:max_items] if item)


def _candidate_block(profile: Profile, skills: list[Skill]) -> str:
    technical = [s.skill_name for s in skills if s.skill_category == "Technical"]
    other = [s.skill_name for s in skills if s.skill_category != "Technical"]
    lines = [
        "--- CANDIDATE ---",
        f"Name: {_clip(profile.full_name, 200)}",
        f"Title: {_clip(profile.professional_title, 200) or 'Not specified'}",
        f"Experience level: {profile.experience_level or 'Not specified'}",
        f"Industry: {_clip(profile.industry, 200) or 'Not specified'}",
        f"Summary: {_clip(profile.summary) or 'Not provided'}",
        f"Technical skills: {_join(technical, 20) or 'None listed'}",
    ]
    if other:
        lines.append(f"Other skills: {_join(other, 10)}")
    return "\n".join(lines)


def _job_block(job: Job) -> str:
    lines = [
        "--- TARGET JOB ---",
        f"Title: {_clip(job.job_title, 200)}",
        f"Company: {_clip(job.company_name, 200) or 'Not specified'}",
        f"Industry: {_clip(job.industry, 200) or 'Not specified'}",
        f"Description: {_clip(job.job_description, 2000) or 'No description provided'}",
    ]
    if job.required_skills:
        lines.append(f"Required skills: {_join(job.required_skills, 20)}")
    if job.preferred_skills:
        lines.append(f"Preferred skills: {_join(job.preferred_skills, 20)}")
    return "\n".join(lines)


def _style(options: GenerationOptions) -> str:
    tone = options.tone or "professional"
    focus = f" Focus on {_clip(options.focus, 120)}." if options.focus else ""
    return f"Tone: {tone}.{focus}"


def with_user_additions(prompt: str, options: GenerationOptions) -> str:
    custom = (options.prompt or "").strip()
    return f"{prompt}\n\nUser Additions:\n{custom}" if custom else prompt


def build_resume_prompt(profile: Profile, skills: list[Skill], job: Job, options: GenerationOptions) -> str:
    return "\n\n".join(
        [
            "You are an expert resume writer optimising a resume for applicant tracking systems.",
            _candidate_block(profile, skills),
            _job_block(job),
            _style(options),
            "Return ONLY valid JSON with no markdown formatting:\n"
            '{ "summary": string, "bullets": [{ "text": string }], "ordered_skills": string[], '
            '"emphasize_skills": string[], "add_skills": string[], "ats_keywords": string[], '
            '"sections": { "experience": [{ "role": string, "company": string, "dates": string, '
            '"bullets": string[] }] } }\n'
            "- 3 to 6 bullets, each starting with an action verb and quantified where possible\n"
            "- Never invent employers, degrees or certifications",
        ]
    )


def build_cover_letter_prompt(profile: Profile, skills: list[Skill], job: Job, options: GenerationOptions) -> str:
    return "\n\n".join(
        [
            "You are an expert career writer drafting a tailored cover letter.",
            _candidate_block(profile, skills),
            _job_block(job),
            _style(options),
            "Target 350-450 words. Return ONLY valid JSON with no markdown formatting:\n"
            '{ "sections": { "opening": string, "body": string[], "closing": string }, '
            '"metadata": { "wordCount": number, "tone": string } }',
        ]
    )


def build_skills_optimization_prompt(
    profile: Profile, skills: list[Skill], job: Job, options: GenerationOptions
) -> str:
    return "\n\n".join(
        [
            "You are a career coach comparing a candidate's skills with a job's requirements.",
            _candidate_block(profile, skills),
            _job_block(job),
            _style(options),
            "Return ONLY valid JSON with no markdown formatting:\n"
            '{ "emphasize": string[], "add": string[], "order": string[], '
            '"categories": { "technical": string[], "soft": string[] }, '
            '"gaps": string[], "score": number }\n'
            "- score is 0-100 coverage of the required skills",
        ]
    )


def build_company_research_prompt(company_name: str, job: Job | None, options: GenerationOptions) -> str:
    parts = [
        "You are a research assistant preparing a candidate for a job application.",
        f"Company: {_clip(company_name, 255)}",
    ]
    if job is not None:
        parts.append(_job_block(job))
    parts.append(
        "Summarise only widely known, verifiable facts. Return ONLY valid JSON with no markdown formatting:\n"
        '{ "name": string, "industry": string, "size": string, "mission": string, '
        '"recentNews": [{ "title": string, "summary": string }], "products": string[] }'
    )
    if options.focus:
        parts.append(f"Focus on {_clip(options.focus, 120)}.")
    return "\n\n".join(parts)


def build_job_match_prompt(profile: Profile, skills: list[Skill], job: Job) -> str:
    return "\n\n".join(
        [
            "You are a job matching assistant. Analyse how well this candidate matches the job requirements.",
            _candidate_block(profile, skills),
            _job_block(job),
            "Return ONLY valid JSON with no markdown formatting:\n"
            '{ "matchScore": number, "breakdown": { "skills": number, "experience": number, '
            '"education": number, "culturalFit": number }, "skillsGaps": string[], '
            '"strengths": string[], "recommendations": string[], "reasoning": string }\n'
            "- All scores are 0-100; at most 5 items per list; reasoning is 2-3 sentences\n"
            "- 90-100 excellent, 70-89 good, 50-69 fair, 30-49 poor, 0-29 not a match",
        ]
    )
