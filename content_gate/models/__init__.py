"""
All SQLAlchemy models re-exported for convenient imports.

Usage:
    from content_gate.models import GenerationLog, BrandSafetyConfigRecord, BrandKit
"""

from content_gate.models.brand import BrandSafetyConfigRecord, BrandKit
from content_gate.models.generation_log import GenerationLog

__all__ = [
    # Keyed brand stores
    "BrandSafetyConfigRecord",
    "BrandKit",
    # Audit trail
    "GenerationLog",
]
