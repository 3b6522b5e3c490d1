"""
Compliance Linter: rule-driven policy checks plus mechanical auto-fix.

Checks, in order: profanity, toxicity (OpenAI Moderation, optional), banned
phrases, banned claims (brand + compliance pack), missing disclaimers, missing
hashtags, platform limits, PII, competitor mentions.

The safety mode decides how strict the profanity/toxicity rules are. The
pipeline only depends on the ``Linter`` protocol.
"""

from typing import List, Optional, Protocol, Tuple
import logging

from content_gate.constants import (
    COMPLIANCE_PACKS,
    PLATFORM_LIMITS,
    SHORTEN_MARGIN_CHARS,
    TOXICITY_THRESHOLDS,
)
from content_gate.schemas import BrandSafetyConfig, Candidate, ComplianceVerdict, PlatformViolation
from content_gate.services.moderation import (
    check_openai_moderation,
    contains_profanity,
    detect_pii,
    find_phrases,
)

logger = logging.getLogger(__name__)


class Linter(Protocol):
    async def lint(self, candidate: Candidate, platform: str, config: BrandSafetyConfig) -> ComplianceVerdict:
        ...

    def auto_fix(
        self,
        candidate: Candidate,
        verdict: ComplianceVerdict,
        config: BrandSafetyConfig,
        platform: Optional[str] = None,
    ) -> Tuple[Candidate, List[str]]:
        ...


def _combined_text(candidate: Candidate) -> str:
    return f"{candidate.headline} {candidate.body} {candidate.cta}"


def check_platform_limits(candidate: Candidate, platform: str) -> List[PlatformViolation]:
    platform = platform.lower()
    limits = PLATFORM_LIMITS.get(platform)
    if not limits:
        return []

    violations = []
    body_length = len(candidate.body)
    char_limit = limits.get("caption") or limits.get("post")
    if char_limit and body_length > char_limit:
        violations.append(PlatformViolation(
            platform=platform,
            issue="char_limit",
            current=body_length,
            limit=char_limit,
            suggestion=f"Shorten to {char_limit} characters",
        ))

    hashtag_limit = limits.get("hashtags")
    if hashtag_limit and len(candidate.hashtags) > hashtag_limit:
        violations.append(PlatformViolation(
            platform=platform,
            issue="hashtag_limit",
            current=len(candidate.hashtags),
            limit=hashtag_limit,
            suggestion=f"Remove {len(candidate.hashtags) - hashtag_limit} hashtags",
        ))
    return violations


def check_missing_disclaimers(text: str, config: BrandSafetyConfig) -> List[str]:
    missing = [d for d in config.required_disclaimers if d not in text]

    # Pack disclaimers are only required when the copy touches a regulated subject
    pack = COMPLIANCE_PACKS.get(config.compliance_pack, COMPLIANCE_PACKS["none"])
    if find_phrases(text, pack["review_keywords"]):
        missing.extend(d for d in pack["required_disclaimers"] if d not in text and d not in missing)
    return missing


class RuleBasedLinter:
    """Default linter driven entirely by the brand safety config."""

    async def lint(self, candidate: Candidate, platform: str, config: BrandSafetyConfig) -> ComplianceVerdict:
        text = _combined_text(candidate)
        mode = config.safety_mode
        block_above, review_above = TOXICITY_THRESHOLDS.get(mode, TOXICITY_THRESHOLDS["safe"])

        moderation = await check_openai_moderation(text)
        profanity = contains_profanity(text)
        pack = COMPLIANCE_PACKS.get(config.compliance_pack, COMPLIANCE_PACKS["none"])

        banned_phrases = find_phrases(text, config.banned_phrases)
        banned_claims = find_phrases(text, list(pack["banned_claims"]) + list(config.claims))
        missing_disclaimers = check_missing_disclaimers(text, config)
        missing_hashtags = [h for h in config.required_hashtags if h not in candidate.hashtags]
        platform_violations = check_platform_limits(candidate, platform)
        pii = detect_pii(text)
        competitors = find_phrases(text, config.competitor_names)

        blocked = (
            (profanity and mode != "edgy_opt_in")
            or moderation.toxicity_score > block_above
            or bool(banned_phrases)
            or bool(banned_claims)
            or bool(pii)
        )
        needs_human_review = (
            (bool(missing_disclaimers) and config.compliance_pack != "none")
            or bool(competitors)
            or moderation.toxicity_score > review_above
            or (profanity and mode == "edgy_opt_in")
        )
        fixable = bool(missing_disclaimers or missing_hashtags or platform_violations)

        verdict = ComplianceVerdict(
            passed=not blocked and not needs_human_review and not fixable,
            blocked=blocked,
            needs_human_review=needs_human_review,
            profanity_detected=profanity,
            toxicity_score=moderation.toxicity_score,
            banned_phrases_found=banned_phrases,
            banned_claims_found=banned_claims,
            missing_disclaimers=missing_disclaimers,
            missing_hashtags=missing_hashtags,
            platform_violations=platform_violations,
            pii_detected=pii,
            competitor_mentions=competitors,
        )
        logger.info(
            f"[Linter] mode={mode} passed={verdict.passed} blocked={verdict.blocked} "
            f"review={verdict.needs_human_review} "
            f"(banned={len(banned_phrases)}, claims={len(banned_claims)}, pii={len(pii)}, "
            f"disclaimers_missing={len(missing_disclaimers)}, hashtags_missing={len(missing_hashtags)}, "
            f"platform={len(platform_violations)}, competitors={len(competitors)}, "
            f"toxicity={moderation.toxicity_score:.2f})"
        )
        return verdict

    def auto_fix(
        self,
        candidate: Candidate,
        verdict: ComplianceVerdict,
        config: BrandSafetyConfig,
        platform: Optional[str] = None,
    ) -> Tuple[Candidate, List[str]]:
        """
        Apply narrowly-scoped fixes: append missing disclaimers, add missing
        hashtags, then shorten the body and trim excess hashtags so the
        fixed copy fits the platform limits.

        Limits are checked against the fixed copy, not the pre-fix verdict.
        When the copy still cannot fit (required hashtags alone over the
        limit, or a disclaimer longer than the post), nothing is applied and
        the original candidate is returned with no fixes.
        """
        if platform is None and verdict.platform_violations:
            platform = verdict.platform_violations[0].platform
        limits = PLATFORM_LIMITS.get((platform or "").lower(), {})
        char_limit = limits.get("caption") or limits.get("post")
        hashtag_limit = limits.get("hashtags")

        body = candidate.body
        hashtags = list(candidate.hashtags)
        fixes: List[str] = []

        suffix = "\n\n" + " ".join(verdict.missing_disclaimers) if verdict.missing_disclaimers else ""
        if char_limit and len(body) + len(suffix) > char_limit:
            max_length = char_limit - SHORTEN_MARGIN_CHARS - len(suffix)
            if max_length > 0:
                body = body[:max_length].rstrip() + "..."
                fixes.append(f"Auto-shortened to {max_length} characters")

        if suffix:
            body = f"{body}{suffix}"
            fixes.append(f"Auto-inserted {len(verdict.missing_disclaimers)} disclaimer(s)")

        if verdict.missing_hashtags:
            hashtags.extend(h for h in verdict.missing_hashtags if h not in hashtags)
            fixes.append(f"Auto-inserted {len(verdict.missing_hashtags)} required hashtag(s)")

        if hashtag_limit and len(hashtags) > hashtag_limit:
            # Required hashtags survive the trim
            required = [h for h in hashtags if h in config.required_hashtags]
            others = [h for h in hashtags if h not in config.required_hashtags]
            kept = required + others[: max(hashtag_limit - len(required), 0)]
            fixes.append(f"Removed {len(hashtags) - len(kept)} excess hashtag(s)")
            hashtags = kept

        fixed = candidate.model_copy(update={"body": body, "hashtags": hashtags})
        remaining = check_platform_limits(fixed, platform) if platform else []
        if remaining:
            logger.warning(
                f"[Linter] Auto-fix abandoned: fixed copy still breaks {platform} limits "
                f"({', '.join(v.issue for v in remaining)})"
            )
            return candidate, []
        return fixed, fixes
