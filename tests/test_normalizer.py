"""Tests for provider response normalization."""

from ats_server.gateway.normalizer import extract_text, parse_json_content, result_payload
from ats_server.gateway.types import GenerateResult


class TestExtractText:
    def test_joins_all_choices(self):
        choices = [{"message": {"content": "one"}}, {"message": {"content": "two"}}]
        assert extract_text(choices) == "one\ntwo"

    def test_skips_empty_and_missing_content(self):
        choices = [{"message": {"content": ""}}, {"message": {}}, {}, {"message": {"content": "kept"}}]
        assert extract_text(choices) == "kept"

    def test_skips_malformed_choices(self):
        choices = ["oops", {"message": "x"}, {"message": {"content": "kept"}}]
        assert extract_text(choices) == "kept"

    def test_no_choices(self):
        assert extract_text([]) is None
        assert extract_text(None) is None


class TestParseJsonContent:
    def test_plain_object(self):
        assert parse_json_content('{"a": 1}') == {"a": 1}

    def test_array(self):
        assert parse_json_content("  [1, 2]  ") == [1, 2]

    def test_fenced(self):
        assert parse_json_content('```json\n{"a": 1}\n```') == {"a": 1}
        assert parse_json_content('```\n{"a": 1}\n```') == {"a": 1}

    def test_prose_is_not_json(self):
        assert parse_json_content("Here is your resume") is None

    def test_malformed_json(self):
        assert parse_json_content('{"a": ') is None

    def test_empty(self):
        assert parse_json_content("") is None
        assert parse_json_content(None) is None


class TestResultPayload:
    def test_prefers_json(self):
        result = GenerateResult(text='{"from": "text"}', json={"from": "json"})
        assert result_payload(result) == {"from": "json"}

    def test_parses_text_when_no_json(self):
        assert result_payload(GenerateResult(text='{"from": "text"}')) == {"from": "text"}

    def test_wraps_plain_text(self):
        assert result_payload(GenerateResult(text="just words")) == {"text": "just words"}

    def test_empty_result(self):
        assert result_payload(GenerateResult()) == {"text": ""}
