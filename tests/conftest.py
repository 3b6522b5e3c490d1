"""Shared fixtures: requests, controller factory, and in-memory service wiring."""

import pytest

from content_gate.pipeline.graph import ControllerConfig, RegenerationController
from content_gate.pipeline.service import DocGenerationService
from content_gate.schemas import BrandSafetyConfig, ContentInput, DEFAULT_BRAND_VOICE, GenerationRequest
from content_gate.services.audit import AuditLogger
from content_gate.services.safety_config import SafetyConfigResolver

from fakes import (
    InMemoryBrandKitRepository,
    InMemoryGenerationLogRepository,
    InMemorySafetyConfigRepository,
    ScriptedGenerator,
    ScriptedLinter,
    ScriptedScorer,
)


@pytest.fixture
def content_input():
    return ContentInput(topic="Autumn coffee blend launch", platform="instagram", tone="warm", format="post")


@pytest.fixture
def generation_request(content_input):
    return GenerationRequest(brand_id="brand-123", input=content_input)


@pytest.fixture
def safety_config():
    return BrandSafetyConfig(banned_phrases=["cheapest"], required_hashtags=["#brewco"])


@pytest.fixture
def make_controller():
    def _make(generator=None, scorer=None, linter=None, max_attempts=3, timeout=1.0):
        return RegenerationController(
            generator=generator or ScriptedGenerator(),
            scorer=scorer or ScriptedScorer(),
            linter=linter or ScriptedLinter(),
            config=ControllerConfig(max_attempts=max_attempts, attempt_timeout_seconds=timeout),
        )
    return _make


@pytest.fixture
def run_controller(generation_request, safety_config):
    """Run a controller against the default request; returns the outcome."""
    async def _run(controller, stats=None):
        return await controller.run(
            request_id="req-1",
            brand_id=generation_request.brand_id,
            content_input=generation_request.input,
            system_prompt="system",
            prompt="prompt",
            safety_config=safety_config,
            brand_voice=DEFAULT_BRAND_VOICE,
            stats=stats,
        )
    return _run


@pytest.fixture
def log_repository():
    return InMemoryGenerationLogRepository()


@pytest.fixture
def config_repository():
    return InMemorySafetyConfigRepository()


@pytest.fixture
def make_service(make_controller, log_repository, config_repository):
    def _make(generator=None, scorer=None, linter=None, max_attempts=3, timeout=1.0,
              config_repo=None, log_repo=None):
        controller = make_controller(generator, scorer, linter, max_attempts, timeout)
        resolver = SafetyConfigResolver(
            config_repo or config_repository,
            InMemoryBrandKitRepository(),
            timeout_seconds=0.5,
        )
        audit_logger = AuditLogger(log_repo or log_repository, timeout_seconds=0.5)
        return DocGenerationService(controller, resolver, audit_logger)
    return _make
