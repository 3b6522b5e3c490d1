"""
SafetyConfigResolver: per-request snapshot of a brand's compliance policy.

Storage degradation (missing table, slow store) must not block generation:
those cases fall back to the system default with a warning. Any other
storage failure is fatal for the request.
"""

from typing import Awaitable, Callable, List, Optional, TypeVar
import asyncio
import logging

from content_gate.config import settings
from content_gate.errors import PersistenceError, SafetyConfigLoadError, SchemaUnavailableError
from content_gate.schemas import (
    BrandSafetyConfig,
    BrandVoice,
    DEFAULT_BRAND_VOICE,
    DEFAULT_SAFETY_CONFIG,
    SafetyMode,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SafetyConfigResolver:
    """Loads brand safety config and brand voice with default fallback."""

    def __init__(
        self,
        config_repository,
        brand_kit_repository=None,
        timeout_seconds: Optional[float] = None,
        default_config: BrandSafetyConfig = DEFAULT_SAFETY_CONFIG,
        default_voice: BrandVoice = DEFAULT_BRAND_VOICE,
    ):
        self.config_repository = config_repository
        self.brand_kit_repository = brand_kit_repository
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.persistence_timeout_seconds
        self.default_config = default_config
        self.default_voice = default_voice

    async def _load(
        self,
        repository,
        loader: Callable[[str], Awaitable[Optional[T]]],
        what: str,
        brand_id: str,
        warnings: Optional[List[str]],
    ) -> Optional[T]:
        try:
            return await asyncio.wait_for(loader(brand_id), timeout=self.timeout_seconds)
        except SchemaUnavailableError as e:
            reason = str(e)
        except asyncio.TimeoutError:
            reason = f"timed out after {self.timeout_seconds}s"
            # The cancelled read may leave the shared session mid-operation
            await repository.rollback()
        except PersistenceError as e:
            logger.error(f"Failed to load {what} for brand {brand_id}: {e}")
            raise SafetyConfigLoadError(f"Failed to load {what}: {e}") from e

        message = f"{what} unavailable for brand {brand_id} ({reason}); using system defaults"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
        return None

    async def resolve(
        self,
        brand_id: str,
        requested_mode: Optional[SafetyMode] = None,
        warnings: Optional[List[str]] = None,
    ) -> BrandSafetyConfig:
        """
        Effective config for one request.

        Mode priority: requested override, then brand-stored mode, then the
        system default. The override applies on top of the default config too.
        """
        repository = self.config_repository
        stored = await self._load(repository, repository.get, "safety config", brand_id, warnings)
        config = stored or self.default_config
        mode = requested_mode or config.safety_mode
        if mode != config.safety_mode:
            config = config.model_copy(update={"safety_mode": mode})

        logger.info(
            f"Resolved safety config for brand {brand_id}: "
            f"source={'brand' if stored else 'default'}, mode={config.safety_mode}, "
            f"pack={config.compliance_pack}"
        )
        return config

    async def resolve_voice(self, brand_id: str, warnings: Optional[List[str]] = None) -> BrandVoice:
        """Brand voice for scoring and prompting; neutral default when no kit exists."""
        if self.brand_kit_repository is None:
            return self.default_voice
        repository = self.brand_kit_repository
        voice = await self._load(repository, repository.get_voice, "brand kit", brand_id, warnings)
        return voice or self.default_voice
