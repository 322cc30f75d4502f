"""Risk inference orchestrator.

Decides between AI-assisted and rule-based scenario generation and
guarantees a concrete result. The decision sequence for each run:

1. Guard: facts lacking assets, threats or vulnerabilities -> fallback (empty)
2. Mode: LLM missing, disabled or without credentials -> fallback
3. AI attempt: prompt, one LLM call, JSON extraction, validation;
   any failure on the way -> fallback

``infer`` never raises. Callers treat an empty list as "not yet assessed".
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from easycert.llm.client import LLMClient, create_client, request_scenario_candidates
from easycert.models.llm_config import LLMConfig
from easycert.models.risk import RiskScenario
from easycert.models.security import SecurityFacts
from easycert.risk.fallback import generate_fallback_scenarios
from easycert.risk.validator import sanitize_scenarios
from easycert.utils.logging import get_logger

logger = get_logger(__name__)


class InferenceMode(Enum):
    """How a run produced its scenarios."""

    INSUFFICIENT = "insufficient"
    FALLBACK = "fallback"
    AI = "ai"
    AI_FAILED = "ai_failed"


@dataclass
class InferenceOutcome:
    """Result of one inference run.

    Attributes:
        scenarios: Ordered scenario list (possibly empty)
        mode: How the scenarios were produced
        error: Failure message when the AI attempt fell back
    """

    scenarios: list[RiskScenario]
    mode: InferenceMode
    error: str | None = None


class RiskInferenceService:
    """Infers risk scenarios from security facts.

    The LLM configuration is passed in at construction; whether AI is used is
    re-evaluated from it on every run.

    Usage:
        service = RiskInferenceService(config.llm)
        scenarios = service.infer(facts)
    """

    def __init__(
        self,
        llm_config: LLMConfig | None = None,
        client_factory: Callable[[LLMConfig], LLMClient] = create_client,
        verbose_llm: bool = False,
    ) -> None:
        """Initialize the service.

        Args:
            llm_config: LLM configuration; None means fallback only
            client_factory: Builds the client for an AI attempt
            verbose_llm: Log full prompts and responses at DEBUG level
        """
        self.llm_config = llm_config
        self._client_factory = client_factory
        self._verbose_llm = verbose_llm

    @property
    def ai_enabled(self) -> bool:
        """Whether the next run will attempt the LLM."""
        return self.llm_config is not None and self.llm_config.ai_enabled

    def infer(self, facts: SecurityFacts) -> list[RiskScenario]:
        """Infer risk scenarios for the given facts.

        Args:
            facts: Organization security facts

        Returns:
            Ordered scenario list; empty when the facts are insufficient
        """
        return self.run(facts).scenarios

    def run(self, facts: SecurityFacts) -> InferenceOutcome:
        """Infer risk scenarios and report how they were produced.

        Args:
            facts: Organization security facts

        Returns:
            InferenceOutcome with scenarios and mode
        """
        facts = facts.normalized()

        if not facts.is_sufficient:
            logger.warning(
                "Not enough security information to infer risk scenarios "
                "(assets, threats and vulnerabilities are all required)"
            )
            return self._finish(generate_fallback_scenarios(facts), InferenceMode.INSUFFICIENT)

        if not self.ai_enabled:
            return self._finish(generate_fallback_scenarios(facts), InferenceMode.FALLBACK)

        try:
            scenarios = self._infer_with_llm(self.llm_config, facts)  # type: ignore[arg-type]
        except Exception as e:
            logger.warning("AI risk inference failed, using rule-based fallback: %s", e)
            return self._finish(
                generate_fallback_scenarios(facts), InferenceMode.AI_FAILED, error=str(e)
            )

        return self._finish(scenarios, InferenceMode.AI)

    def _infer_with_llm(
        self, llm_config: LLMConfig, facts: SecurityFacts
    ) -> list[RiskScenario]:
        """Single AI attempt: one call, extraction, validation."""
        client = self._client_factory(llm_config)
        candidates = request_scenario_candidates(client, facts, verbose=self._verbose_llm)
        return sanitize_scenarios(candidates, facts)

    def _finish(
        self,
        scenarios: list[RiskScenario],
        mode: InferenceMode,
        error: str | None = None,
    ) -> InferenceOutcome:
        logger.structured(
            logging.INFO,
            f"Generated {len(scenarios)} risk scenario(s)",
            mode=mode.value,
            scenarios=len(scenarios),
        )
        return InferenceOutcome(scenarios=scenarios, mode=mode, error=error)


def run_inference(
    facts: SecurityFacts,
    llm_config: LLMConfig | None = None,
) -> list[RiskScenario]:
    """Infer risk scenarios for a set of facts.

    Args:
        facts: Organization security facts
        llm_config: LLM configuration; None selects the rule-based fallback

    Returns:
        Ordered scenario list, never raising
    """
    return RiskInferenceService(llm_config).infer(facts)
