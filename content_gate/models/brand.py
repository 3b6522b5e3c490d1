"""Keyed per-brand stores: safety configuration and brand voice kit."""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from content_gate.db.session import Base


class BrandSafetyConfigRecord(Base):
    """Compliance policy for one brand."""
    __tablename__ = "brand_safety_configs"

    brand_id = Column(String(255), primary_key=True)
    safety_mode = Column(String(20), nullable=False, default="safe")   # safe / bold / edgy_opt_in
    banned_phrases = Column(JSONB, nullable=False, default=list)
    competitor_names = Column(JSONB, nullable=False, default=list)
    claims = Column(JSONB, nullable=False, default=list)
    required_disclaimers = Column(JSONB, nullable=False, default=list)
    required_hashtags = Column(JSONB, nullable=False, default=list)
    brand_links = Column(JSONB, nullable=False, default=list)
    disallowed_topics = Column(JSONB, nullable=False, default=list)
    allow_topics = Column(JSONB, nullable=False, default=list)
    compliance_pack = Column(String(20), nullable=False, default="none")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class BrandKit(Base):
    """Brand voice parameters used for fidelity scoring and prompting."""
    __tablename__ = "brand_kits"

    brand_id = Column(String(255), primary_key=True)
    brand_name = Column(String(255), nullable=True)
    tone_keywords = Column(JSONB, nullable=False, default=list)
    brand_personality = Column(JSONB, nullable=False, default=list)
    writing_style = Column(String(255), nullable=True)
    common_phrases = Column(JSONB, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
