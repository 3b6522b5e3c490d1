"""DocGenerationService end to end with in-memory collaborators."""

import asyncio

import pytest

from content_gate.errors import PersistenceError, SafetyConfigLoadError, SchemaUnavailableError, TransientGenerationError
from content_gate.pipeline.outcome import OutcomeStatus
from content_gate.schemas import BrandSafetyConfig, GenerationRequest

from fakes import (
    HangingGenerator,
    InMemoryGenerationLogRepository,
    InMemorySafetyConfigRepository,
    ScriptedGenerator,
    ScriptedLinter,
    ScriptedScorer,
    candidate_json,
    compliance,
    quality,
)


class TestGenerate:

    @pytest.mark.asyncio
    async def test_accepted_request_is_audited(self, make_service, generation_request, log_repository):
        result = await make_service().generate(generation_request)

        assert result.outcome.status == OutcomeStatus.ACCEPTED
        assert result.attempts_used == 1
        assert result.log_id == "log-1"
        assert result.warnings == []
        entry = log_repository.entries[0]
        assert entry.request_id == result.request_id
        assert entry.approved is True
        assert entry.brand_id == "brand-123"

    @pytest.mark.asyncio
    async def test_each_request_gets_its_own_id(self, make_service, generation_request, log_repository):
        service = make_service()
        first = await service.generate(generation_request)
        second = await service.generate(generation_request)
        assert first.request_id != second.request_id
        assert len(log_repository.entries) == 2

    @pytest.mark.asyncio
    async def test_requested_mode_is_logged(self, make_service, content_input, log_repository):
        request = GenerationRequest(brand_id="brand-123", input=content_input, safety_mode="bold")
        await make_service().generate(request)
        assert log_repository.entries[0].safety_mode == "bold"

    @pytest.mark.asyncio
    async def test_prompt_carries_brand_rules(self, make_service, generation_request):
        config_repo = InMemorySafetyConfigRepository({"brand-123": BrandSafetyConfig(banned_phrases=["cheapest"])})
        generator = ScriptedGenerator(candidate_json())
        await make_service(generator=generator, config_repo=config_repo).generate(generation_request)
        assert "cheapest" in generator.prompts[0]
        assert "Autumn coffee blend launch" in generator.prompts[0]

    @pytest.mark.asyncio
    async def test_exhausted_is_a_result_not_an_error(self, make_service, generation_request, log_repository):
        service = make_service(scorer=ScriptedScorer(quality(passed=False)))
        result = await service.generate(generation_request)
        assert result.outcome.status == OutcomeStatus.EXHAUSTED
        assert result.attempts_used == 3
        assert log_repository.entries[0].error == "Failed to generate acceptable content"


class TestDegradation:

    @pytest.mark.asyncio
    async def test_missing_config_table_still_generates(self, make_service, generation_request):
        config_repo = InMemorySafetyConfigRepository(error=SchemaUnavailableError("no such table"))
        result = await make_service(config_repo=config_repo).generate(generation_request)
        assert result.outcome.status == OutcomeStatus.ACCEPTED
        assert len(result.warnings) == 1

    @pytest.mark.asyncio
    async def test_fatal_config_error_propagates_without_generating(self, make_service, generation_request, log_repository):
        config_repo = InMemorySafetyConfigRepository(error=PersistenceError("connection refused"))
        generator = ScriptedGenerator(candidate_json())
        with pytest.raises(SafetyConfigLoadError):
            await make_service(generator=generator, config_repo=config_repo).generate(generation_request)
        assert generator.calls == 0
        assert log_repository.entries == []

    @pytest.mark.asyncio
    async def test_log_write_failure_is_invisible(self, make_service, generation_request):
        log_repo = InMemoryGenerationLogRepository(error=PersistenceError("disk full"))
        result = await make_service(log_repo=log_repo).generate(generation_request)
        assert result.outcome.status == OutcomeStatus.ACCEPTED
        assert result.log_id is None
        assert any("disk full" in w for w in result.warnings)


class TestFailureAuditing:

    @pytest.mark.asyncio
    async def test_generation_failure_is_audited_and_reraised(self, make_service, generation_request, log_repository):
        service = make_service(generator=ScriptedGenerator(TransientGenerationError("provider down")))
        with pytest.raises(TransientGenerationError) as exc_info:
            await service.generate(generation_request)

        assert exc_info.value.log_id == "log-1"
        entry = log_repository.entries[0]
        assert entry.status == "failed"
        assert entry.error == "provider down"
        assert entry.attempts_used == 3
        assert entry.approved is False

    @pytest.mark.asyncio
    async def test_scorer_outage_is_audited_and_reraised(self, make_service, generation_request, log_repository):
        service = make_service(
            generator=ScriptedGenerator(candidate_json()),
            scorer=ScriptedScorer(RuntimeError("scorer provider outage")),
        )
        with pytest.raises(RuntimeError, match="scorer provider outage") as exc_info:
            await service.generate(generation_request)

        assert exc_info.value.log_id == "log-1"
        assert len(log_repository.entries) == 1
        entry = log_repository.entries[0]
        assert entry.status == "failed"
        assert entry.error == "RuntimeError: scorer provider outage"
        assert entry.attempts_used == 3
        assert entry.approved is False

    @pytest.mark.asyncio
    async def test_transient_scorer_failure_still_accepts(self, make_service, generation_request, log_repository):
        scorer = ScriptedScorer(RuntimeError("scorer timeout"), quality(passed=True))
        result = await make_service(scorer=scorer).generate(generation_request)

        assert result.outcome.status == OutcomeStatus.ACCEPTED
        assert result.attempts_used == 2
        assert log_repository.entries[0].approved is True

    @pytest.mark.asyncio
    async def test_cancellation_is_audited(self, make_service, generation_request, log_repository):
        service = make_service(generator=HangingGenerator(), timeout=30.0)
        task = asyncio.create_task(service.generate(generation_request))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        entry = log_repository.entries[0]
        assert entry.status == "cancelled"
        assert entry.error == "Generation cancelled"
        assert entry.attempts_used == 1

    @pytest.mark.asyncio
    async def test_blocked_request_logs_verdicts(self, make_service, generation_request, log_repository):
        linter = ScriptedLinter(compliance(passed=False, blocked=True, pii_detected=["555-123-4567"]))
        result = await make_service(linter=linter).generate(generation_request)
        assert result.outcome.status == OutcomeStatus.BLOCKED
        entry = log_repository.entries[0]
        assert entry.output is None
        assert entry.linter["pii_detected"] == ["555-123-4567"]
