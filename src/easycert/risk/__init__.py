"""Risk inference and assessment pipeline.

- matrix: Fixed 3x3 probability/impact lattice
- validator: Repairs untrusted generator output into valid scenarios
- fallback: Deterministic rule-based scenario generator
- inference: Orchestrator choosing between LLM and fallback
"""

from easycert.risk.fallback import generate_fallback_scenarios
from easycert.risk.inference import (
    InferenceMode,
    InferenceOutcome,
    RiskInferenceService,
    run_inference,
)
from easycert.risk.matrix import RISK_MATRIX, risk_level
from easycert.risk.validator import GENERIC_CONTROL_PLACEHOLDER, sanitize_scenarios

__all__ = [
    "GENERIC_CONTROL_PLACEHOLDER",
    "InferenceMode",
    "InferenceOutcome",
    "RISK_MATRIX",
    "RiskInferenceService",
    "generate_fallback_scenarios",
    "risk_level",
    "run_inference",
    "sanitize_scenarios",
]
