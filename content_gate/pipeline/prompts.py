"""
Prompt construction for the doc (copywriter) agent.
"""

from typing import List, Tuple

from content_gate.constants import DEFAULT_MAX_LENGTH
from content_gate.schemas import BrandSafetyConfig, BrandVoice, ContentInput
from content_gate.pipeline.parsing import default_aspect_ratio


DOC_SYSTEM_PROMPT = """You are a brand copywriter. Create on-brand, engaging social content.

Brand: {brand_name}
Tone keywords: {tone_keywords}
Writing style: {writing_style}

Guidelines:
- Stay strictly on-brand in tone and terminology
- Never use phrases the brand has banned
- Do NOT invent metrics or make unsubstantiated claims (no "guaranteed results", "risk-free", etc.)
- Respect the platform's character limits and conventions
- Include the call-to-action only when asked

Respond with a single JSON object and nothing else:
{{
  "headline": "short hook",
  "body": "the post copy",
  "cta": "call-to-action text",
  "hashtags": ["#tag1", "#tag2"],
  "post_theme": "{format}",
  "tone_used": "tone you wrote in",
  "aspect_ratio": "{aspect_ratio}"
}}"""


def get_cta_instructions(content_input: ContentInput) -> str:
    if not content_input.include_cta:
        return "Do not include a call-to-action; leave \"cta\" empty."
    cta_styles = {
        "link": "Point the reader to the link in the post.",
        "comment": "Invite the reader to comment.",
        "dm": "Invite the reader to send a direct message.",
        "bio": "Point the reader to the link in bio.",
    }
    return cta_styles.get(content_input.cta_type, "Include a clear call-to-action.")


def _listed(values: List[str]) -> str:
    return ", ".join(values) if values else "none"


def build_doc_prompt(
    content_input: ContentInput,
    voice: BrandVoice,
    safety_config: BrandSafetyConfig,
) -> Tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for one generation request."""
    system_prompt = DOC_SYSTEM_PROMPT.format(
        brand_name=voice.brand_name,
        tone_keywords=_listed(voice.tone_keywords),
        writing_style=voice.writing_style,
        format=content_input.format,
        aspect_ratio=default_aspect_ratio(content_input.platform),
    )
    if voice.common_phrases:
        system_prompt += f"\n\nPhrases the brand likes to use: {', '.join(voice.common_phrases)}"

    max_length = content_input.max_length or DEFAULT_MAX_LENGTH
    user_prompt = f"""Create a {content_input.format} for {content_input.platform}.

Topic: {content_input.topic}
Requested tone: {content_input.tone}
Maximum body length: {max_length} characters
Call-to-action: {get_cta_instructions(content_input)}

Brand rules:
- FORBIDDEN PHRASES (DO NOT USE): {_listed(safety_config.banned_phrases)}
- Do not mention competitors: {_listed(safety_config.competitor_names)}
- Avoid topics: {_listed(safety_config.disallowed_topics)}
- Required disclaimers (include verbatim): {_listed(safety_config.required_disclaimers)}
- Required hashtags: {_listed(safety_config.required_hashtags)}
"""
    return system_prompt, user_prompt
