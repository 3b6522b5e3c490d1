"""
Turn raw generator text into a Candidate.

Models are asked for JSON but do not always comply, so parsing is two-stage:
a lenient JSON read (code fences and surrounding prose tolerated), then a
deterministic line-based fallback. Only empty output is unrecoverable.
"""

from dataclasses import dataclass
from typing import List, Optional
import json
import logging
import re

from pydantic import BaseModel, ValidationError, field_validator

from content_gate.constants import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_CTA,
    DEFAULT_HASHTAGS,
    DEFAULT_TONE_USED,
    INSTAGRAM_ASPECT_RATIO,
)
from content_gate.errors import MalformedOutputError
from content_gate.schemas import Candidate, ContentInput

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class StructuredDocOutput(BaseModel):
    """Shape the doc prompt asks the model to return."""
    headline: str = ""
    body: str
    cta: Optional[str] = None
    hashtags: List[str] = []
    post_theme: Optional[str] = None
    tone_used: Optional[str] = None
    aspect_ratio: Optional[str] = None

    @field_validator("hashtags", mode="before")
    @classmethod
    def split_hashtag_string(cls, value):
        if isinstance(value, str):
            return [tag for tag in re.split(r"[\s,]+", value) if tag]
        return value

    @field_validator("body")
    @classmethod
    def body_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("body must not be blank")
        return value


@dataclass(frozen=True)
class ParseResult:
    candidate: Candidate
    structured: bool


def default_aspect_ratio(platform: str) -> str:
    return INSTAGRAM_ASPECT_RATIO if platform.lower() == "instagram" else DEFAULT_ASPECT_RATIO


def normalize_hashtags(tags: List[str]) -> List[str]:
    normalized = []
    for tag in tags:
        tag = tag.strip()
        if not tag:
            continue
        if not tag.startswith("#"):
            tag = f"#{tag}"
        if tag not in normalized:
            normalized.append(tag)
    return normalized


def parse_structured(raw_text: str) -> Optional[StructuredDocOutput]:
    """Best-effort JSON read; ``None`` when the text holds no usable object."""
    text = _CODE_FENCE.sub("", raw_text).strip()
    match = _JSON_OBJECT.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return StructuredDocOutput.model_validate(data)
    except ValidationError as e:
        logger.debug(f"Generator JSON did not match the doc schema: {e.error_count()} error(s)")
        return None


def parse_candidate(raw_text: str, content_input: ContentInput) -> ParseResult:
    if not raw_text or not raw_text.strip():
        raise MalformedOutputError("Generator returned empty output")

    fallback_cta = DEFAULT_CTA if content_input.include_cta else ""
    structured = parse_structured(raw_text)
    if structured is not None:
        candidate = Candidate(
            headline=structured.headline.strip(),
            body=structured.body.strip(),
            cta=structured.cta if structured.cta is not None else fallback_cta,
            hashtags=normalize_hashtags(structured.hashtags) or list(DEFAULT_HASHTAGS),
            post_theme=structured.post_theme or content_input.format,
            tone_used=structured.tone_used or DEFAULT_TONE_USED,
            aspect_ratio=structured.aspect_ratio or default_aspect_ratio(content_input.platform),
        )
        return ParseResult(candidate=candidate, structured=True)

    lines = [line.strip() for line in raw_text.strip().splitlines()]
    headline = next(line for line in lines if line)
    remainder = "\n".join(lines[lines.index(headline) + 1:]).strip()
    candidate = Candidate(
        headline=headline,
        body=remainder or headline,
        cta=fallback_cta,
        hashtags=list(DEFAULT_HASHTAGS),
        post_theme=content_input.format,
        tone_used=DEFAULT_TONE_USED,
        aspect_ratio=default_aspect_ratio(content_input.platform),
    )
    return ParseResult(candidate=candidate, structured=False)
