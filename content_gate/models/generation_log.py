"""Append-only audit row: one per generation request, whatever the outcome."""

from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid

from content_gate.db.session import Base


class GenerationLog(Base):
    """Audit record for one generation request."""
    __tablename__ = "generation_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    brand_id = Column(String(255), nullable=False, index=True)
    agent = Column(String(20), nullable=False)               # doc
    prompt_version = Column(String(20), nullable=True)
    safety_mode = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False)              # accepted / needs_review / blocked / exhausted / failed / cancelled
    input = Column(JSONB, nullable=False)
    output = Column(JSONB, nullable=True)
    bfs = Column(JSONB, nullable=True)
    linter = Column(JSONB, nullable=True)
    approved = Column(Boolean, nullable=False, default=False)
    attempts_used = Column(Integer, nullable=False, default=0)
    duration_ms = Column(Integer, nullable=False, default=0)
    tokens_in = Column(Integer, nullable=False, default=0)
    tokens_out = Column(Integer, nullable=False, default=0)
    provider = Column(String(50), nullable=False, default="unknown")
    model = Column(String(100), nullable=False, default="unknown")
    request_id = Column(String(64), nullable=False, unique=True)
    error = Column(Text, nullable=True)
    reviewer_id = Column(String(255), nullable=True)         # set later by the human review action
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
