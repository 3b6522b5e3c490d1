from content_gate.pipeline.nodes.generation import GeneratorAdapter
from content_gate.pipeline.nodes.evaluation import QualityEvaluator
from content_gate.pipeline.nodes.compliance import ComplianceGate, GateResult, merge_fixed_fields

__all__ = [
    "GeneratorAdapter",
    "QualityEvaluator",
    "ComplianceGate",
    "GateResult",
    "merge_fixed_fields",
]
