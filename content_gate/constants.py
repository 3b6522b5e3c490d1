"""
Application-wide constants to replace magic numbers and strings.
"""
# Regeneration budget (overridable through settings / ControllerConfig)
MAX_REGENERATION_ATTEMPTS = 3

# Agent identifiers written to the audit log
AGENT_DOC = "doc"

# Safety modes, strictest first
SAFETY_MODES = ("safe", "bold", "edgy_opt_in")
DEFAULT_SAFETY_MODE = "safe"

# Toxicity thresholds per safety mode: (block_above, review_above)
TOXICITY_THRESHOLDS = {
    "safe": (0.7, 0.5),
    "bold": (0.8, 0.6),
    "edgy_opt_in": (0.9, 0.75),
}

VALID_FORMATS = ("reel", "carousel", "image", "story", "post")
VALID_CTA_TYPES = ("link", "comment", "dm", "bio")

# Fallback values when generator output cannot be parsed as JSON
DEFAULT_CTA = "Learn more"
DEFAULT_HASHTAGS = ["#YourBrand"]
DEFAULT_TONE_USED = "professional"
DEFAULT_MAX_LENGTH = 2200
INSTAGRAM_ASPECT_RATIO = "1080x1350"
DEFAULT_ASPECT_RATIO = "1200x630"

# Prompt constraints
MAX_TOPIC_LENGTH_CHARS = 2000

# Caller-visible and audit error strings
ERROR_BLOCKED = "Content blocked by safety filters"
ERROR_EXHAUSTED = "Failed to generate acceptable content after multiple attempts"
ERROR_EXHAUSTED_LOG = "Failed to generate acceptable content"
ERROR_CANCELLED = "Generation cancelled"

# Machine-readable error classes
ERROR_CODE_BLOCKED = "blocked"
ERROR_CODE_EXHAUSTED = "exhausted"
ERROR_CODE_VALIDATION = "validation_error"
ERROR_CODE_INTERNAL = "internal_error"

# Reserve room for appended disclaimers when auto-shortening
SHORTEN_MARGIN_CHARS = 50

# Pending-review rows returned by the review queue
REVIEW_QUEUE_LIMIT = 50

# ── Compliance packs ──
COMPLIANCE_PACKS = {
    "finance": {
        "required_disclaimers": [
            "Investing involves risk. Past performance does not guarantee future results.",
            "Not financial advice. Consult a licensed advisor.",
        ],
        "banned_claims": ["guaranteed returns", "risk-free", "can't lose", "sure thing", "100% profit"],
        "review_keywords": ["invest", "return", "profit", "portfolio", "stock", "crypto"],
    },
    "real_estate": {
        "required_disclaimers": [
            "Actual results may vary. Not a guarantee of property value.",
            "Consult a real estate professional for specific advice.",
        ],
        "banned_claims": ["guaranteed appreciation", "can't lose value", "always goes up", "risk-free investment"],
        "review_keywords": ["property", "investment", "appreciation", "value", "returns"],
    },
    "wellness": {
        "required_disclaimers": [
            "These statements have not been evaluated by the FDA.",
            "Not intended to diagnose, treat, cure, or prevent any disease.",
            "Consult a healthcare professional before use.",
        ],
        "banned_claims": ["cure", "treat disease", "FDA approved", "guaranteed results", "miracle"],
        "review_keywords": ["health", "cure", "treat", "disease", "medical", "therapy"],
    },
    "none": {
        "required_disclaimers": [],
        "banned_claims": [],
        "review_keywords": [],
    },
}

# ── Platform limits (characters / hashtag counts) ──
PLATFORM_LIMITS = {
    "instagram": {"caption": 2200, "hashtags": 30},
    "linkedin": {"post": 3000},
    "facebook": {"post": 63206},
    "twitter": {"post": 280},
}

# Basic profanity list for the rule-driven linter
PROFANITY_WORDS = (
    "fuck", "shit", "damn", "bitch", "ass", "bastard", "crap", "piss",
    "cock", "dick", "pussy", "cunt", "whore", "slut",
)

# PII regex patterns for fast text scanning
PII_PATTERNS = {
    "email": r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b',
    "phone": r'\b(?:\+?1[-.]?)?\(?\d{3}\)?[-.]?\d{3}[-.]?\d{4}\b',
    "ssn": r'\b\d{3}-\d{2}-\d{4}\b',
}
