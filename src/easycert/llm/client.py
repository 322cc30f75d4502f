"""LLM client wrapper using LiteLLM.

Provides a single chat-completion call for several providers. Each call is
one HTTP request with the configured timeout and no retries: a failure is
reported as LLMError and the caller decides what to do (risk inference falls
back to the rule-based generator).
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import litellm

from easycert.models.llm_config import LLMConfig

if TYPE_CHECKING:
    from easycert.models.security import SecurityFacts

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from LLM completion.

    Attributes:
        content: Generated text content
        model: Model that generated the response
        usage: Token usage statistics
        finish_reason: Reason for completion (stop, length, etc.)
    """

    content: str
    model: str
    usage: dict[str, int]
    finish_reason: str | None = None


class LLMError(Exception):
    """Exception raised for LLM-related errors."""

    pass


class LLMClient:
    """LLM client using LiteLLM.

    Supports OpenAI, Claude (Anthropic), Gemini, Ollama and Bedrock through
    one interface. Credentials are passed per call, never set globally.
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize LLM client with configuration.

        Args:
            config: LLM configuration with provider, model, and credentials
        """
        self.config = config

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a completion from the LLM.

        Args:
            prompt: User prompt for the LLM
            system_prompt: Optional system prompt
            max_tokens: Override max_tokens from config

        Returns:
            LLMResponse with generated content

        Raises:
            LLMError: If the completion fails for any reason
        """
        messages: list[dict[str, str]] = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        completion_kwargs: dict[str, Any] = {
            "model": self.config.get_litellm_model_name(),
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": max_tokens or self.config.max_tokens,
            "timeout": self.config.timeout,
            "num_retries": 0,
        }
        if self.config.api_key:
            completion_kwargs["api_key"] = self.config.api_key
        if self.config.api_base:
            completion_kwargs["api_base"] = self.config.api_base

        try:
            response = litellm.completion(**completion_kwargs)

            choice = response.choices[0]
            content = choice.message.content or ""

            usage = {}
            if getattr(response, "usage", None):
                usage = {
                    "prompt_tokens": response.usage.prompt_tokens or 0,
                    "completion_tokens": response.usage.completion_tokens or 0,
                    "total_tokens": response.usage.total_tokens or 0,
                }

            return LLMResponse(
                content=content.strip(),
                model=response.model or self.config.model,
                usage=usage,
                finish_reason=choice.finish_reason,
            )

        except litellm.exceptions.AuthenticationError as e:
            raise LLMError(f"Authentication failed for {self.config.provider}: {e}") from e
        except litellm.exceptions.RateLimitError as e:
            raise LLMError(f"Rate limit exceeded for {self.config.provider}: {e}") from e
        except litellm.exceptions.Timeout as e:
            raise LLMError(
                f"{self.config.provider} did not respond within {self.config.timeout}s: {e}"
            ) from e
        except litellm.exceptions.APIConnectionError as e:
            raise LLMError(f"Connection failed to {self.config.provider}: {e}") from e
        except Exception as e:
            raise LLMError(f"LLM completion failed: {e}") from e

    def check_available(self) -> bool:
        """Check if the LLM provider is available.

        Performs a minimal API call to verify connectivity.

        Returns:
            True if provider is reachable and credentials are valid
        """
        try:
            self.complete("Say 'ok'", max_tokens=10)
            return True
        except LLMError as e:
            logger.debug("LLM availability check failed: %s", e)
            return False


def create_client(config: LLMConfig) -> LLMClient:
    """Create an LLM client from configuration.

    Args:
        config: LLM configuration

    Returns:
        Configured LLMClient instance

    Raises:
        ValueError: If the LLM is disabled or has no credentials
    """
    if not config.enabled:
        raise ValueError("LLM is disabled in configuration")
    if not config.has_credentials:
        raise ValueError(f"No credentials configured for {config.provider}")

    return LLMClient(config)


def request_scenario_candidates(
    client: LLMClient,
    facts: "SecurityFacts",
    verbose: bool = False,
) -> list[Any]:
    """Ask the LLM for risk scenarios and return the raw parsed array.

    Exactly one completion call is made. Items are returned unvalidated;
    the risk validator repairs them.

    Args:
        client: LLM client to use
        facts: Security facts embedded in the prompt
        verbose: Log the full prompt and response at DEBUG level

    Returns:
        Parsed JSON array from the response

    Raises:
        LLMError: If the call fails
        ResponseParseError: If the response holds no JSON array
    """
    from easycert.llm.parsing import extract_json_array
    from easycert.llm.prompts import RISK_SYSTEM_PROMPT, build_risk_prompt

    prompt = build_risk_prompt(facts)

    if verbose:
        logger.debug("Risk inference prompt:\n%s", prompt)

    response = client.complete(prompt=prompt, system_prompt=RISK_SYSTEM_PROMPT)

    if verbose:
        logger.debug(
            "Risk inference response (%d tokens):\n%s",
            response.usage.get("total_tokens", 0),
            response.content,
        )
    else:
        logger.debug(
            "Risk inference response: %d tokens, %d chars",
            response.usage.get("total_tokens", 0),
            len(response.content),
        )

    if response.finish_reason == "length":
        logger.warning("LLM response was truncated at max_tokens=%d", client.config.max_tokens)

    return extract_json_array(response.content)
