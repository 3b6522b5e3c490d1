"""
Regeneration pipeline package.

Core workflow components:
- outcome.py:  GateDecision, decide(), GenerationOutcome, RunStats
- state.py:    GateState TypedDict
- graph.py:    RegenerationController (compiled LangGraph workflow)
- nodes/:      Generator Adapter, Quality Evaluator, Compliance Gate
- service.py:  DocGenerationService (per-request orchestration)
"""
