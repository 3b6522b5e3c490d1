"""
Shared moderation utilities used by the compliance linter.

Layer 0: OpenAI Moderation API (fast, ~50ms, no LLM cost)
    Uses OpenAI's native ``omni-moderation-latest`` endpoint.
    Produces a toxicity score from the harassment/hate/violence categories
    and a flag when any category is tripped.

Layer 1: Text scanning (regex / phrase lists)
    PII (emails, phones, SSNs), profanity, and case-insensitive phrase hits.
    Zero dependencies, zero latency.
"""

import re
import logging
from dataclasses import dataclass
from typing import Iterable, List

from openai import AsyncOpenAI

from content_gate.config import settings
from content_gate.constants import PII_PATTERNS, PROFANITY_WORDS

logger = logging.getLogger(__name__)

_client: AsyncOpenAI | None = None


def get_moderation_client() -> AsyncOpenAI:
    """Shared async client, created on first use so a missing key only fails when moderation runs."""
    global _client
    if _client is None:
        if not settings.openai_api_key:
            raise ValueError("OpenAI API key not configured (OPENAI_API_KEY)")
        _client = AsyncOpenAI(api_key=settings.openai_api_key)
        logger.debug("Initialized moderation client")
    return _client


# Maps display name → Python attribute name on the moderation result
_MODERATION_CATEGORIES = {
    "harassment": "harassment",
    "harassment/threatening": "harassment_threatening",
    "hate": "hate",
    "hate/threatening": "hate_threatening",
    "self-harm": "self_harm",
    "sexual": "sexual",
    "violence": "violence",
    "violence/graphic": "violence_graphic",
}


@dataclass
class ModerationResult:
    flagged: bool = False
    toxicity_score: float = 0.0
    categories: tuple = ()


# ═══════════════════════════════════════════════════════════════════════════
# Layer 0: OpenAI Moderation API
# ═══════════════════════════════════════════════════════════════════════════


async def check_openai_moderation(text: str) -> ModerationResult:
    """
    Toxicity pre-filter using OpenAI's Moderation API.

    Returns an empty result when moderation is disabled. Raises on API errors.
    """
    if not settings.enable_openai_moderation:
        return ModerationResult()

    client = get_moderation_client()
    moderation = await client.moderations.create(
        model="omni-moderation-latest",
        input=text,
    )
    result = moderation.results[0]
    categories = result.categories
    scores = result.category_scores

    flagged_cats = []
    max_score = 0.0
    for cat_name, attr_name in _MODERATION_CATEGORIES.items():
        score = float(getattr(scores, attr_name, 0.0) or 0.0)
        max_score = max(max_score, score)
        if getattr(categories, attr_name, False):
            flagged_cats.append(f"{cat_name}({score:.2f})")

    if flagged_cats:
        logger.warning(f"OpenAI Moderation FLAGGED: {', '.join(flagged_cats)}")

    return ModerationResult(
        flagged=bool(flagged_cats),
        toxicity_score=round(min(max_score, 1.0), 4),
        categories=tuple(flagged_cats),
    )


# ═══════════════════════════════════════════════════════════════════════════
# Layer 1: Text scanning
# ═══════════════════════════════════════════════════════════════════════════


def detect_pii(text: str) -> List[str]:
    """Return every PII match (emails, phones, SSNs) in order of pattern, deduplicated."""
    found: List[str] = []
    for pattern in PII_PATTERNS.values():
        for match in re.finditer(pattern, text):
            value = match.group(0)
            if value not in found:
                found.append(value)
    return found


def contains_profanity(text: str) -> bool:
    return any(re.search(rf"\b{re.escape(word)}\b", text, re.IGNORECASE) for word in PROFANITY_WORDS)


def find_phrases(text: str, phrases: Iterable[str]) -> List[str]:
    """Case-insensitive substring hits, in the order the phrases were given."""
    lowered = text.lower()
    return [phrase for phrase in phrases if phrase and phrase.lower() in lowered]
