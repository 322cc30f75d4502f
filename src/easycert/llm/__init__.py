"""LLM integration module for EasyCert.

Provides the LiteLLM client wrapper, the risk-inference prompt, and the
extraction of JSON arrays from free-form responses.
"""

from easycert.llm.client import (
    LLMClient,
    LLMError,
    LLMResponse,
    create_client,
    request_scenario_candidates,
)
from easycert.llm.parsing import ResponseParseError, extract_json_array, strip_code_fences
from easycert.llm.prompts import RISK_SYSTEM_PROMPT, build_risk_prompt
from easycert.models.llm_config import VALID_PROVIDERS, LLMConfig

__all__ = [
    "LLMClient",
    "LLMConfig",
    "LLMError",
    "LLMResponse",
    "RISK_SYSTEM_PROMPT",
    "ResponseParseError",
    "VALID_PROVIDERS",
    "build_risk_prompt",
    "create_client",
    "extract_json_array",
    "request_scenario_candidates",
    "strip_code_fences",
]
