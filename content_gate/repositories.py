"""
Persistence adapters over the async SQLAlchemy session.

Every SQLAlchemy failure is translated into the pipeline's own taxonomy:
a missing table becomes ``SchemaUnavailableError`` (callers may fall back),
anything else becomes ``PersistenceError``.
"""

from typing import Optional, Tuple, List
import uuid
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError, ProgrammingError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from content_gate.constants import REVIEW_QUEUE_LIMIT
from content_gate.errors import PersistenceError, SchemaUnavailableError
from content_gate.models import BrandSafetyConfigRecord, BrandKit, GenerationLog
from content_gate.schemas import BrandSafetyConfig, BrandVoice, GenerationLogEntry

logger = logging.getLogger(__name__)

# Driver messages that mean "the table is not there" (asyncpg / psycopg / sqlite)
_SCHEMA_UNAVAILABLE_MARKERS = ("does not exist", "no such table", "undefinedtable")

_SAFETY_CONFIG_FIELDS = tuple(BrandSafetyConfig.model_fields)


def translate_db_error(exc: SQLAlchemyError, action: str) -> PersistenceError:
    """Map a SQLAlchemy exception onto ``SchemaUnavailableError`` or ``PersistenceError``."""
    orig = getattr(exc, "orig", None)
    message = str(orig if orig is not None else exc)
    haystack = f"{type(orig).__name__ if orig is not None else ''} {message}".lower()
    if isinstance(exc, (ProgrammingError, OperationalError)) and any(
        marker in haystack for marker in _SCHEMA_UNAVAILABLE_MARKERS
    ):
        return SchemaUnavailableError(f"{action}: {message}")
    return PersistenceError(f"{action}: {message}")


class _SessionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def rollback(self) -> None:
        """Discard whatever an interrupted operation left on the shared session."""
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            logger.warning(f"Session rollback failed: {e}")


class SafetyConfigRepository(_SessionRepository):
    """Keyed get/put for ``brand_safety_configs``."""

    async def get(self, brand_id: str) -> Optional[BrandSafetyConfig]:
        try:
            record = await self.session.get(BrandSafetyConfigRecord, brand_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise translate_db_error(e, f"load safety config for brand {brand_id}") from e
        if record is None:
            return None
        return BrandSafetyConfig(**{name: getattr(record, name) for name in _SAFETY_CONFIG_FIELDS})

    async def put(self, brand_id: str, config: BrandSafetyConfig) -> BrandSafetyConfig:
        values = config.model_dump()
        try:
            record = await self.session.get(BrandSafetyConfigRecord, brand_id)
            if record is None:
                record = BrandSafetyConfigRecord(brand_id=brand_id, **values)
                self.session.add(record)
            else:
                for name, value in values.items():
                    setattr(record, name, value)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise translate_db_error(e, f"save safety config for brand {brand_id}") from e
        logger.info(f"Saved safety config for brand {brand_id} (mode={config.safety_mode})")
        return config


class BrandKitRepository(_SessionRepository):
    """Read access to ``brand_kits``."""

    async def get_voice(self, brand_id: str) -> Optional[BrandVoice]:
        try:
            kit = await self.session.get(BrandKit, brand_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise translate_db_error(e, f"load brand kit for brand {brand_id}") from e
        if kit is None:
            return None
        defaults = BrandVoice()
        return BrandVoice(
            brand_name=kit.brand_name or defaults.brand_name,
            tone_keywords=kit.tone_keywords or [],
            brand_personality=kit.brand_personality or [],
            writing_style=kit.writing_style or defaults.writing_style,
            common_phrases=kit.common_phrases or [],
        )


class GenerationLogRepository(_SessionRepository):
    """Append-only access to ``generation_logs``."""

    async def insert(self, entry: GenerationLogEntry) -> str:
        row = GenerationLog(id=uuid.uuid4(), **entry.model_dump())
        try:
            self.session.add(row)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise translate_db_error(e, f"insert generation log for request {entry.request_id}") from e
        return str(row.id)

    async def get(self, log_id: uuid.UUID) -> Optional[GenerationLog]:
        try:
            return await self.session.get(GenerationLog, log_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise translate_db_error(e, f"load generation log {log_id}") from e

    async def list_for_brand(
        self,
        brand_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[GenerationLog], int]:
        """Newest first, with the total count from a window function in the same query."""
        query = select(GenerationLog, func.count(GenerationLog.id).over().label("total"))
        if brand_id:
            query = query.where(GenerationLog.brand_id == brand_id)
        query = query.order_by(GenerationLog.created_at.desc()).limit(limit).offset(offset)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise translate_db_error(e, "list generation logs") from e
        rows = result.all()
        total = rows[0].total if rows else 0
        return [row[0] for row in rows], total

    async def list_review_queue(self, brand_id: str, limit: int = REVIEW_QUEUE_LIMIT) -> List[GenerationLog]:
        """Rows held for review (``approved`` false, no ``error``), newest first."""
        query = (
            select(GenerationLog)
            .where(
                GenerationLog.brand_id == brand_id,
                GenerationLog.approved.is_(False),
                GenerationLog.error.is_(None),
            )
            .order_by(GenerationLog.created_at.desc())
            .limit(limit)
        )
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise translate_db_error(e, f"load review queue for brand {brand_id}") from e
        return list(result.scalars().all())
