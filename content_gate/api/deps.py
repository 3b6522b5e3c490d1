from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from content_gate.db.session import get_db
from content_gate.pipeline.graph import RegenerationController
from content_gate.pipeline.service import DocGenerationService
from content_gate.repositories import BrandKitRepository, GenerationLogRepository, SafetyConfigRepository
from content_gate.services.audit import AuditLogger
from content_gate.services.generator import LangChainGenerator
from content_gate.services.linter import RuleBasedLinter
from content_gate.services.safety_config import SafetyConfigResolver
from content_gate.services.scorer import LLMBrandFidelityScorer

# Compiled once per process; holds no per-request state
_controller: Optional[RegenerationController] = None


def get_controller() -> RegenerationController:
    global _controller
    if _controller is None:
        _controller = RegenerationController(
            generator=LangChainGenerator(),
            scorer=LLMBrandFidelityScorer(),
            linter=RuleBasedLinter(),
        )
    return _controller


def get_safety_config_repository(db: AsyncSession = Depends(get_db)) -> SafetyConfigRepository:
    return SafetyConfigRepository(db)


def get_generation_log_repository(db: AsyncSession = Depends(get_db)) -> GenerationLogRepository:
    return GenerationLogRepository(db)


def get_generation_service(
    db: AsyncSession = Depends(get_db),
    controller: RegenerationController = Depends(get_controller),
) -> DocGenerationService:
    """Per-request service; repositories share the request's session."""
    return DocGenerationService(
        controller=controller,
        resolver=SafetyConfigResolver(SafetyConfigRepository(db), BrandKitRepository(db)),
        audit_logger=AuditLogger(GenerationLogRepository(db)),
    )
