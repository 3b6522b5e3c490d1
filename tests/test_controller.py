"""RegenerationController: the bounded generate/evaluate/gate loop."""

import pytest

from content_gate.errors import GeneratorTimeoutError, TransientGenerationError
from content_gate.pipeline.graph import ControllerConfig
from content_gate.pipeline.outcome import OutcomeStatus, RunStats

from fakes import (
    HangingGenerator,
    ScriptedGenerator,
    ScriptedLinter,
    ScriptedScorer,
    candidate_json,
    compliance,
    quality,
)


class TestScenarios:

    @pytest.mark.asyncio
    async def test_accepted_on_first_attempt(self, make_controller, run_controller):
        generator = ScriptedGenerator(candidate_json())
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator), stats)

        assert outcome.status == OutcomeStatus.ACCEPTED
        assert outcome.candidate.body == "Fresh roast, fresh start."
        assert stats.attempts_used == 1
        assert generator.calls == 1

    @pytest.mark.asyncio
    async def test_fixable_issue_is_auto_fixed_and_accepted(self, make_controller, run_controller):
        linter = ScriptedLinter(
            compliance(passed=False, missing_disclaimers=["Not financial advice."]),
            fixes=["Auto-inserted 1 disclaimer(s)"],
        )
        stats = RunStats()
        outcome = await run_controller(make_controller(linter=linter), stats)

        assert outcome.status == OutcomeStatus.ACCEPTED
        assert outcome.fixes_applied == ["Auto-inserted 1 disclaimer(s)"]
        assert outcome.candidate.body.endswith("Not financial advice.")
        assert stats.attempts_used == 1
        assert linter.fix_calls == 1

    @pytest.mark.asyncio
    async def test_blocked_stops_with_budget_left(self, make_controller, run_controller):
        generator = ScriptedGenerator(candidate_json())
        linter = ScriptedLinter(compliance(passed=False, blocked=True, banned_phrases_found=["cheapest"]))
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator, linter=linter), stats)

        assert outcome.status == OutcomeStatus.BLOCKED
        assert outcome.candidate is None
        assert outcome.compliance.blocked
        assert stats.attempts_used == 1
        assert generator.calls == 1
        assert linter.fix_calls == 0

    @pytest.mark.asyncio
    async def test_exhausted_after_three_failures(self, make_controller, run_controller):
        generator = ScriptedGenerator(candidate_json())
        scorer = ScriptedScorer(quality(passed=False))
        linter = ScriptedLinter(compliance(passed=False))
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator, scorer=scorer, linter=linter), stats)

        assert outcome.status == OutcomeStatus.EXHAUSTED
        assert outcome.candidate is None
        assert stats.attempts_used == 3
        assert generator.calls == 3

    @pytest.mark.asyncio
    async def test_needs_review_on_final_attempt(self, make_controller, run_controller):
        scorer = ScriptedScorer(quality(passed=False))
        linter = ScriptedLinter(
            compliance(passed=False),
            compliance(passed=False),
            compliance(passed=False, needs_human_review=True, competitor_mentions=["BeanCorp"]),
        )
        stats = RunStats()
        outcome = await run_controller(make_controller(scorer=scorer, linter=linter), stats)

        assert outcome.status == OutcomeStatus.NEEDS_REVIEW
        assert outcome.candidate is not None
        assert stats.attempts_used == 3


class TestAttemptBudget:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_attempts", [1, 2, 5])
    async def test_attempts_never_exceed_budget(self, make_controller, run_controller, max_attempts):
        generator = ScriptedGenerator(candidate_json())
        scorer = ScriptedScorer(quality(passed=False))
        stats = RunStats()
        controller = make_controller(generator=generator, scorer=scorer, max_attempts=max_attempts)
        outcome = await run_controller(controller, stats)

        assert outcome.status == OutcomeStatus.EXHAUSTED
        assert stats.attempts_used == max_attempts
        assert generator.calls == max_attempts

    @pytest.mark.asyncio
    async def test_needs_review_ends_loop_early(self, make_controller, run_controller):
        generator = ScriptedGenerator(candidate_json())
        scorer = ScriptedScorer(quality(passed=False))
        linter = ScriptedLinter(compliance(passed=False, needs_human_review=True))
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator, scorer=scorer, linter=linter), stats)

        assert outcome.status == OutcomeStatus.NEEDS_REVIEW
        assert stats.attempts_used == 1

    @pytest.mark.asyncio
    async def test_usage_summed_across_attempts(self, make_controller, run_controller):
        scorer = ScriptedScorer(quality(passed=False), quality(passed=True))
        stats = RunStats()
        outcome = await run_controller(make_controller(scorer=scorer), stats)

        assert outcome.status == OutcomeStatus.ACCEPTED
        assert stats.attempts_used == 2
        assert (stats.tokens_in, stats.tokens_out) == (20, 40)
        assert (stats.provider, stats.model) == ("fake", "fake-1")

    def test_config_rejects_empty_budget(self):
        with pytest.raises(ValueError):
            ControllerConfig(max_attempts=0)


class TestBlocking:

    @pytest.mark.asyncio
    async def test_blocked_even_when_quality_passes_and_fixes_exist(self, make_controller, run_controller):
        linter = ScriptedLinter(
            compliance(passed=False, blocked=True, pii_detected=["jane@example.com"]),
            fixes=["Auto-inserted 1 disclaimer(s)"],
        )
        outcome = await run_controller(make_controller(linter=linter))

        assert outcome.status == OutcomeStatus.BLOCKED
        assert outcome.fixes_applied == []
        assert linter.fix_calls == 0

    @pytest.mark.asyncio
    async def test_blocked_after_earlier_retries(self, make_controller, run_controller):
        scorer = ScriptedScorer(quality(passed=False))
        linter = ScriptedLinter(compliance(passed=False), compliance(passed=False, blocked=True))
        stats = RunStats()
        outcome = await run_controller(make_controller(scorer=scorer, linter=linter), stats)

        assert outcome.status == OutcomeStatus.BLOCKED
        assert stats.attempts_used == 2
        assert stats.last_attempt.compliance.blocked


class TestGenerationFailures:

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, make_controller, run_controller):
        generator = ScriptedGenerator(TransientGenerationError("provider down"), candidate_json())
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator), stats)

        assert outcome.status == OutcomeStatus.ACCEPTED
        assert stats.attempts_used == 2

    @pytest.mark.asyncio
    async def test_malformed_output_is_retried(self, make_controller, run_controller):
        generator = ScriptedGenerator("   ", candidate_json())
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator), stats)

        assert outcome.status == OutcomeStatus.ACCEPTED
        assert stats.attempts_used == 2
        # Tokens of the empty answer still count
        assert stats.tokens_in == 20

    @pytest.mark.asyncio
    async def test_unexpected_generator_exception_is_transient(self, make_controller, run_controller):
        generator = ScriptedGenerator(RuntimeError("socket closed"), candidate_json())
        outcome = await run_controller(make_controller(generator=generator))
        assert outcome.status == OutcomeStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_every_attempt_fails_raises(self, make_controller, run_controller):
        generator = ScriptedGenerator(TransientGenerationError("provider down"))
        stats = RunStats()
        with pytest.raises(TransientGenerationError):
            await run_controller(make_controller(generator=generator), stats)

        assert stats.attempts_used == 3
        assert generator.calls == 3

    @pytest.mark.asyncio
    async def test_final_failure_after_a_candidate_is_exhausted(self, make_controller, run_controller):
        generator = ScriptedGenerator(candidate_json(), candidate_json(), TransientGenerationError("down"))
        scorer = ScriptedScorer(quality(passed=False))
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator, scorer=scorer), stats)

        assert outcome.status == OutcomeStatus.EXHAUSTED
        assert stats.attempts_used == 3

    @pytest.mark.asyncio
    async def test_timeout_consumes_an_attempt(self, make_controller, run_controller):
        generator = HangingGenerator()
        stats = RunStats()
        with pytest.raises(GeneratorTimeoutError):
            await run_controller(make_controller(generator=generator, max_attempts=2, timeout=0.01), stats)

        assert stats.attempts_used == 2
        assert generator.calls == 2


class TestEvaluationInputs:

    @pytest.mark.asyncio
    async def test_scorer_sees_raw_candidate(self, make_controller, run_controller):
        scorer = ScriptedScorer(quality(passed=True))
        linter = ScriptedLinter(compliance(passed=False), fixes=["Auto-inserted 1 disclaimer(s)"])
        outcome = await run_controller(make_controller(scorer=scorer, linter=linter))

        assert scorer.scored[0].body == "Fresh roast, fresh start."
        assert outcome.candidate.body != scorer.scored[0].body



class TestCollaboratorFailures:

    @pytest.mark.asyncio
    async def test_scorer_failure_is_retried(self, make_controller, run_controller):
        generator = ScriptedGenerator(candidate_json())
        scorer = ScriptedScorer(RuntimeError("scorer timeout"), quality(passed=True))
        stats = RunStats()
        outcome = await run_controller(make_controller(generator=generator, scorer=scorer), stats)

        assert outcome.status == OutcomeStatus.ACCEPTED
        assert stats.attempts_used == 2
        assert generator.calls == 2

    @pytest.mark.asyncio
    async def test_linter_failure_is_retried(self, make_controller, run_controller):
        linter = ScriptedLinter(RuntimeError("moderation API error"), compliance())
        stats = RunStats()
        outcome = await run_controller(make_controller(linter=linter), stats)

        assert outcome.status == OutcomeStatus.ACCEPTED
        assert stats.attempts_used == 2
        assert len(linter.linted) == 2

    @pytest.mark.asyncio
    async def test_scorer_outage_on_every_attempt_raises(self, make_controller, run_controller):
        generator = ScriptedGenerator(candidate_json())
        scorer = ScriptedScorer(RuntimeError("scorer provider outage"))
        stats = RunStats()
        with pytest.raises(RuntimeError, match="scorer provider outage"):
            await run_controller(make_controller(generator=generator, scorer=scorer), stats)

        assert stats.attempts_used == 3
        assert generator.calls == 3

    @pytest.mark.asyncio
    async def test_final_linter_failure_after_an_evaluated_attempt_is_exhausted(self, make_controller, run_controller):
        scorer = ScriptedScorer(quality(passed=False), quality(passed=False), quality(passed=True))
        linter = ScriptedLinter(compliance(), compliance(), RuntimeError("moderation API error"))
        stats = RunStats()
        outcome = await run_controller(make_controller(scorer=scorer, linter=linter), stats)

        assert outcome.status == OutcomeStatus.EXHAUSTED
        assert "moderation API error" in outcome.error
        assert stats.attempts_used == 3
