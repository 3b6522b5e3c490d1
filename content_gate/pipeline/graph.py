"""
LangGraph workflow for the regeneration loop.

Each attempt runs generate → evaluate → gate; the gate's decision either
ends the run or sends it back to generate. A generation failure skips
evaluation and either retries or ends the run. A scorer or linter failure
is handled the same way: it consumes the attempt, then retries or ends
the run.

Graph shape:

    generate ──(failed, attempts left)──► generate
        │
        ├──(failed on final attempt, earlier candidate existed)──► END
        │
        ▼
    evaluate  (Quality Evaluator, raw candidate; failure → generate / END)
        │
        ▼
      gate    (Compliance Gate + decide(); failure → generate / END)
        │
   ┌── decision? ───────────────────────────┐
   │retry                                    │blocked / accepted /
   ▼                                         │needs_review / exhausted
 generate                                   END

Attempts are strictly sequential. Progress is written to the caller's
``RunStats`` (passed through ``config["configurable"]``) as the run
advances, so a cancelled run can still be audited.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from langchain_core.runnables import RunnableConfig
from langgraph.graph import StateGraph, START, END

from content_gate.config import settings
from content_gate.constants import MAX_REGENERATION_ATTEMPTS
from content_gate.errors import GenerationError
from content_gate.pipeline.nodes import ComplianceGate, GeneratorAdapter, QualityEvaluator
from content_gate.pipeline.outcome import (
    AttemptRecord,
    GateDecision,
    GenerationOutcome,
    RunStats,
    decide,
)
from content_gate.pipeline.state import GateState
from content_gate.schemas import BrandSafetyConfig, BrandVoice, ContentInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControllerConfig:
    max_attempts: int = MAX_REGENERATION_ATTEMPTS
    attempt_timeout_seconds: float = 30.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.attempt_timeout_seconds <= 0:
            raise ValueError("attempt_timeout_seconds must be positive")

    @classmethod
    def from_settings(cls) -> "ControllerConfig":
        return cls(
            max_attempts=settings.max_regeneration_attempts,
            attempt_timeout_seconds=settings.attempt_timeout_seconds,
        )


def _run_stats(config: RunnableConfig) -> RunStats:
    return config["configurable"]["run_stats"]


class RegenerationController:
    """Bounded generate/evaluate/gate loop compiled once into a LangGraph graph."""

    def __init__(self, generator, scorer, linter, config: Optional[ControllerConfig] = None):
        self.config = config or ControllerConfig.from_settings()
        self.adapter = GeneratorAdapter(generator, self.config.attempt_timeout_seconds)
        self.evaluator = QualityEvaluator(scorer)
        self.gate = ComplianceGate(linter)
        self.graph = self._build_graph()

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    async def _generate_node(self, state: GateState, config: RunnableConfig) -> dict:
        stats = _run_stats(config)
        request_id = state["request_id"]
        attempt = state["attempt"] + 1
        stats.attempts_used = attempt
        logger.info(f"Request {request_id}: Generation attempt {attempt}/{self.config.max_attempts}")

        try:
            candidate, usage = await self.adapter.generate(
                state["system_prompt"], state["prompt"], state["content_input"]
            )
        except GenerationError as e:
            stats.add_usage(e.usage)
            cleared = {"attempt": attempt, "candidate": None, "quality": None, "compliance": None, "last_error": str(e)}
            if attempt < self.config.max_attempts:
                logger.warning(f"Request {request_id}: Attempt {attempt} failed ({e}); retrying")
                return {**cleared, "decision": GateDecision.RETRY.value}
            if state["candidates_seen"] == 0:
                logger.error(f"Request {request_id}: Final attempt {attempt} failed with no candidate produced: {e}")
                raise
            logger.warning(f"Request {request_id}: Final attempt {attempt} failed ({e}); exhausted")
            return {**cleared, "decision": GateDecision.EXHAUSTED.value}

        stats.add_usage(usage)
        stats.candidates_seen += 1
        logger.info(
            f"Request {request_id}: Attempt {attempt} produced a candidate "
            f"({candidate.char_count} chars, {len(candidate.hashtags)} hashtags)"
        )
        return {
            "attempt": attempt,
            "candidates_seen": state["candidates_seen"] + 1,
            "candidate": candidate,
            "quality": None,
            "compliance": None,
            "last_error": None,
            "decision": None,
        }

    def _failed_attempt(self, state: GateState, stats: RunStats, stage: str, error: Exception) -> dict:
        """Turn a scorer or linter failure into a retry, or end the run on the final attempt."""
        request_id = state["request_id"]
        attempt = state["attempt"]
        cleared = {"candidate": None, "quality": None, "compliance": None, "last_error": f"{stage} failed: {error}"}
        if attempt < self.config.max_attempts:
            logger.warning(f"Request {request_id}: {stage} failed on attempt {attempt} ({error}); retrying")
            return {**cleared, "decision": GateDecision.RETRY.value}
        if stats.last_attempt is None:
            logger.error(
                f"Request {request_id}: {stage} failed on final attempt {attempt} "
                f"with no candidate ever evaluated: {error}"
            )
            raise error
        logger.warning(f"Request {request_id}: {stage} failed on final attempt {attempt} ({error}); exhausted")
        return {**cleared, "decision": GateDecision.EXHAUSTED.value}

    async def _evaluate_node(self, state: GateState, config: RunnableConfig) -> dict:
        try:
            quality = await self.evaluator.evaluate(
                state["candidate"], state["brand_voice"], state["content_input"].platform
            )
        except Exception as e:
            return self._failed_attempt(state, _run_stats(config), "Scoring", e)
        return {"quality": quality}

    async def _gate_node(self, state: GateState, config: RunnableConfig) -> dict:
        stats = _run_stats(config)
        attempt = state["attempt"]
        try:
            result = await self.gate.check(
                state["candidate"], state["content_input"].platform, state["safety_config"]
            )
        except Exception as e:
            return self._failed_attempt(state, stats, "Compliance check", e)
        decision = decide(state["quality"], result.verdict, self.config.max_attempts - attempt)
        stats.last_attempt = AttemptRecord(
            attempt=attempt,
            candidate=result.candidate,
            quality=state["quality"],
            compliance=result.verdict,
            decision=decision,
        )
        logger.info(
            f"Request {state['request_id']}: Attempt {attempt} → {decision.value} "
            f"(bfs={state['quality'].overall:.2f}, quality_passed={state['quality'].passed}, "
            f"compliance_passed={result.verdict.passed}, fixes={len(result.fixes_applied)})"
        )
        return {"candidate": result.candidate, "compliance": result.verdict, "decision": decision.value}

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    @staticmethod
    def _route_after_generate(state: GateState) -> str:
        if state.get("candidate") is not None:
            return "evaluate"
        if state.get("decision") == GateDecision.RETRY.value:
            return "retry"
        return "end"

    @staticmethod
    def _route_after_evaluate(state: GateState) -> str:
        if state.get("quality") is not None:
            return "gate"
        if state.get("decision") == GateDecision.RETRY.value:
            return "retry"
        return "end"

    @staticmethod
    def _route_after_gate(state: GateState) -> str:
        if state.get("decision") == GateDecision.RETRY.value:
            return "retry"
        return "end"

    # ------------------------------------------------------------------
    # Graph
    # ------------------------------------------------------------------

    def _build_graph(self):
        workflow = StateGraph(GateState)

        workflow.add_node("generate", self._generate_node)
        workflow.add_node("evaluate", self._evaluate_node)
        workflow.add_node("gate", self._gate_node)

        workflow.add_edge(START, "generate")
        workflow.add_conditional_edges(
            "generate",
            self._route_after_generate,
            {"evaluate": "evaluate", "retry": "generate", "end": END},
        )
        workflow.add_conditional_edges(
            "evaluate",
            self._route_after_evaluate,
            {"gate": "gate", "retry": "generate", "end": END},
        )
        workflow.add_conditional_edges(
            "gate",
            self._route_after_gate,
            {"retry": "generate", "end": END},
        )
        return workflow.compile()

    @property
    def recursion_limit(self) -> int:
        # Three steps per attempt plus headroom for the entry/exit edges
        return self.config.max_attempts * 3 + 5

    async def run(
        self,
        *,
        request_id: str,
        brand_id: str,
        content_input: ContentInput,
        system_prompt: str,
        prompt: str,
        safety_config: BrandSafetyConfig,
        brand_voice: BrandVoice,
        stats: Optional[RunStats] = None,
    ) -> GenerationOutcome:
        """
        Run the loop to a terminal outcome.

        Raises the last ``GenerationError`` when the final attempt fails and
        no attempt ever produced a candidate. A scorer or linter exception on
        the final attempt is re-raised when no attempt was ever fully
        evaluated; otherwise the run is exhausted.
        """
        stats = stats if stats is not None else RunStats()
        initial_state: GateState = {
            "request_id": request_id,
            "brand_id": brand_id,
            "content_input": content_input,
            "system_prompt": system_prompt,
            "prompt": prompt,
            "safety_config": safety_config,
            "brand_voice": brand_voice,
            "attempt": 0,
            "candidates_seen": 0,
            "candidate": None,
            "quality": None,
            "compliance": None,
            "decision": None,
            "last_error": None,
        }
        final_state = await self.graph.ainvoke(
            initial_state,
            config={"configurable": {"run_stats": stats}, "recursion_limit": self.recursion_limit},
        )
        return self._to_outcome(final_state)

    @staticmethod
    def _to_outcome(state: GateState) -> GenerationOutcome:
        decision = GateDecision(state["decision"])
        if decision == GateDecision.ACCEPTED:
            return GenerationOutcome.accepted(state["candidate"], state["quality"], state["compliance"])
        if decision == GateDecision.NEEDS_REVIEW:
            return GenerationOutcome.needs_review(state["candidate"], state["quality"], state["compliance"])
        if decision == GateDecision.BLOCKED:
            return GenerationOutcome.blocked(state["quality"], state["compliance"])
        if decision == GateDecision.EXHAUSTED:
            return GenerationOutcome.exhausted(state.get("last_error"))
        raise RuntimeError(f"Regeneration loop ended on non-terminal decision {decision.value}")
