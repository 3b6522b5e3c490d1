"""Generator output parsing: JSON first, deterministic line fallback."""

import pytest

from content_gate.errors import MalformedOutputError
from content_gate.pipeline.parsing import normalize_hashtags, parse_candidate
from content_gate.schemas import ContentInput

from fakes import candidate_json


@pytest.fixture
def linkedin_input():
    return ContentInput(topic="Hiring update", platform="linkedin", tone="professional", format="carousel")


class TestStructuredOutput:

    def test_plain_json(self, content_input):
        result = parse_candidate(candidate_json(body="Body copy"), content_input)
        assert result.structured
        assert result.candidate.headline == "Morning ritual"
        assert result.candidate.body == "Body copy"
        assert result.candidate.char_count == len("Body copy")

    def test_code_fenced_json_with_prose(self, content_input):
        raw = "Here you go:\n```json\n" + candidate_json(body="Fenced") + "\n```\nEnjoy!"
        result = parse_candidate(raw, content_input)
        assert result.structured
        assert result.candidate.body == "Fenced"

    def test_missing_optional_fields_use_defaults(self, linkedin_input):
        result = parse_candidate('{"body": "Only a body"}', linkedin_input)
        assert result.structured
        assert result.candidate.cta == "Learn more"
        assert result.candidate.hashtags == ["#YourBrand"]
        assert result.candidate.post_theme == "carousel"
        assert result.candidate.tone_used == "professional"
        assert result.candidate.aspect_ratio == "1200x630"

    def test_hashtag_string_is_split_and_normalized(self, content_input):
        result = parse_candidate(candidate_json(hashtags="coffee, #autumn coffee"), content_input)
        assert result.candidate.hashtags == ["#coffee", "#autumn"]

    def test_blank_body_falls_back(self, content_input):
        result = parse_candidate('{"headline": "Hi", "body": "   "}', content_input)
        assert not result.structured


class TestFallback:

    def test_first_line_is_headline(self, content_input):
        result = parse_candidate("\n  Big news  \nLine two\nLine three\n", content_input)
        assert not result.structured
        assert result.candidate.headline == "Big news"
        assert result.candidate.body == "Line two\nLine three"
        assert result.candidate.cta == "Learn more"
        assert result.candidate.hashtags == ["#YourBrand"]
        assert result.candidate.post_theme == "post"
        assert result.candidate.tone_used == "professional"
        assert result.candidate.aspect_ratio == "1080x1350"

    def test_single_line_becomes_body_too(self, linkedin_input):
        result = parse_candidate("Just one line", linkedin_input)
        assert result.candidate.headline == "Just one line"
        assert result.candidate.body == "Just one line"
        assert result.candidate.aspect_ratio == "1200x630"

    def test_fallback_is_deterministic(self, content_input):
        raw = "Headline\n{not json at all"
        assert parse_candidate(raw, content_input) == parse_candidate(raw, content_input)

    def test_no_cta_when_not_requested(self):
        content_input = ContentInput(topic="t", platform="x", tone="calm", format="post", include_cta=False)
        assert parse_candidate("Head\nBody", content_input).candidate.cta == ""

    @pytest.mark.parametrize("raw", ["", "   ", "\n\n\t"])
    def test_empty_output_is_malformed(self, raw, content_input):
        with pytest.raises(MalformedOutputError):
            parse_candidate(raw, content_input)


def test_normalize_hashtags_dedupes():
    assert normalize_hashtags(["coffee", "#coffee", " ", "#tea"]) == ["#coffee", "#tea"]
