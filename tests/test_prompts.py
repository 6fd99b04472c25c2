"""Tests for prompt sanitisation, model selection and prompt builders."""

import pytest

from ats_server.core.exceptions import BadRequestError
from ats_server.models import Job, Profile, Skill
from ats_server.prompts import builders
from ats_server.prompts.sanitize import redact_secrets, sanitize_prompt, select_model, validate_prompt
from ats_server.schemas.generation import GenerationOptions


@pytest.fixture
def profile() -> Profile:
    return Profile(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        professional_title="Software Engineer",
        summary="Backend   engineer\n\nfocused on APIs.",
        experience_level="mid",
    )


@pytest.fixture
def skills() -> list[Skill]:
    return [
        Skill(skill_name="Python", skill_category="Technical"),
        Skill(skill_name="Mentoring", skill_category="Soft"),
    ]


@pytest.fixture
def job() -> Job:
    return Job(
        job_title="Senior Backend Engineer",
        company_name="Acme Corp",
        job_description="x" * 5000,
        required_skills=["Python", "SQL"],
    )


class TestSanitizePrompt:
    def test_control_characters_replaced(self):
        assert sanitize_prompt("a\x00b\x07c\x1fd") == "a b c d"

    def test_newlines_and_tabs_kept(self):
        assert sanitize_prompt("line1\nline2\tx\r\n") == "line1\nline2\tx\r\n"

    def test_openai_key_redacted(self):
        text = "use sk-abcdefghijklmnopqrstuvwx for calls"
        assert redact_secrets(text) == "use [REDACTED_KEY] for calls"

    def test_api_key_pair_redacted(self):
        assert redact_secrets("api_key: ABCDEFGHIJKL1234") == "api_key=[REDACTED]"
        assert redact_secrets("API-KEY=abcdefghijklmnop") == "API-KEY=[REDACTED]"

    def test_short_values_untouched(self):
        assert redact_secrets("sk-short api_key=abc") == "sk-short api_key=abc"

    def test_truncated_with_ellipsis(self):
        result = sanitize_prompt("a" * 50, max_len=20)
        assert len(result) == 20
        assert result.endswith("…")

    def test_short_prompt_unchanged(self):
        assert sanitize_prompt("hello", max_len=20) == "hello"


class TestValidatePrompt:
    def test_rejects_short(self):
        with pytest.raises(BadRequestError):
            validate_prompt("too short")

    def test_rejects_whitespace(self):
        with pytest.raises(BadRequestError):
            validate_prompt(" " * 50)

    def test_accepts_ten_chars(self):
        assert validate_prompt("  0123456789  ") == "  0123456789  "


class TestSelectModel:
    def test_default_when_not_requested(self):
        assert select_model(None, "gpt-4o-mini", ["gpt-4o"]) == "gpt-4o-mini"

    def test_empty_allow_list_honours_request(self):
        assert select_model("gpt-4o", "gpt-4o-mini", []) == "gpt-4o"

    def test_allow_listed(self):
        assert select_model("gpt-4o", "gpt-4o-mini", ["gpt-4o"]) == "gpt-4o"

    def test_not_allow_listed(self):
        assert select_model("o1-preview", "gpt-4o-mini", ["gpt-4o"]) == "gpt-4o-mini"


class TestBuilders:
    def test_resume_prompt_includes_context(self, profile, skills, job):
        prompt = builders.build_resume_prompt(profile, skills, job, GenerationOptions(tone="confident"))
        assert "Ada Lovelace" in prompt
        assert "Senior Backend Engineer" in prompt
        assert "Acme Corp" in prompt
        assert "Technical skills: Python" in prompt
        assert "Other skills: Mentoring" in prompt
        assert "Tone: confident." in prompt
        assert '"bullets"' in prompt

    def test_whitespace_collapsed(self, profile, skills, job):
        prompt = builders.build_resume_prompt(profile, skills, job, GenerationOptions())
        assert "Summary: Backend engineer focused on APIs." in prompt

    def test_long_description_clipped(self, profile, skills, job):
        prompt = builders.build_cover_letter_prompt(profile, skills, job, GenerationOptions())
        assert "x" * 2000 + " …" in prompt
        assert "x" * 2001 not in prompt

    def test_cover_letter_contract(self, profile, skills, job):
        prompt = builders.build_cover_letter_prompt(profile, skills, job, GenerationOptions(focus="leadership"))
        assert '"opening"' in prompt
        assert "Focus on leadership." in prompt

    def test_company_research_without_job(self):
        prompt = builders.build_company_research_prompt("Globex", None, GenerationOptions())
        assert "Company: Globex" in prompt
        assert "TARGET JOB" not in prompt
        assert '"recentNews"' in prompt

    def test_job_match_contract(self, profile, skills, job):
        prompt = builders.build_job_match_prompt(profile, skills, job)
        assert '"matchScore"' in prompt
        assert "Required skills: Python, SQL" in prompt

    def test_user_additions_appended(self):
        options = GenerationOptions(prompt="  Mention my open source work.  ")
        assert builders.with_user_additions("Base prompt", options) == (
            "Base prompt\n\nUser Additions:\nMention my open source work."
        )

    def test_blank_user_additions_ignored(self):
        assert builders.with_user_additions("Base prompt", GenerationOptions(prompt="   ")) == "Base prompt"
