"""LLM configuration entity for EasyCert.

Defines the configuration of the text-generation backend used for risk
inference. A configuration without a credential is valid: it simply selects
the deterministic fallback generator on every run.
"""

from dataclasses import dataclass, field

# Valid LLM providers
VALID_PROVIDERS = frozenset({"openai", "claude", "gemini", "ollama", "bedrock"})

# Providers authenticated with an API key sent as a bearer credential
KEY_PROVIDERS = frozenset({"openai", "claude", "gemini"})

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o-mini"


@dataclass
class LLMConfig:
    """Configuration for the LLM provider.

    Attributes:
        provider: LLM provider (openai, claude, gemini, ollama, bedrock)
        model: Model identifier (e.g., "gpt-4o-mini", "claude-3-5-sonnet")
        api_key: API key; when missing for a key provider, inference falls back
        api_base: API base URL (required for Ollama)
        temperature: Sampling temperature (0 keeps runs reproducible)
        max_tokens: Maximum response tokens
        timeout: Seconds to wait for the backend before treating it as failed
        enabled: Whether AI-assisted inference is enabled at all
    """

    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    api_base: str | None = None
    temperature: float = field(default=0.0)
    max_tokens: int = field(default=2000)
    timeout: float = field(default=60.0)
    enabled: bool = field(default=True)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.provider = self.provider.lower().strip()

        if self.provider not in VALID_PROVIDERS:
            raise ValueError(
                f"Invalid provider '{self.provider}'. "
                f"Must be one of: {sorted(VALID_PROVIDERS)}"
            )

        if not self.model or not self.model.strip():
            raise ValueError("Model identifier cannot be empty")
        self.model = self.model.strip()

        # Empty strings come from unset ${VAR} substitutions
        self.api_key = (self.api_key or "").strip() or None
        self.api_base = (self.api_base or "").strip() or None

        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(
                f"temperature must be between 0 and 2. Got: {self.temperature}"
            )

        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive. Got: {self.max_tokens}")

        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive. Got: {self.timeout}")

        if self.provider == "ollama" and not self.api_base:
            self.api_base = "http://localhost:11434"

    @property
    def has_credentials(self) -> bool:
        """Whether the provider has what it needs to be called.

        Key providers need an API key. Ollama needs only its base URL and
        Bedrock resolves AWS credentials from the environment.
        """
        if self.provider in KEY_PROVIDERS:
            return self.api_key is not None
        if self.provider == "ollama":
            return self.api_base is not None
        return True

    @property
    def ai_enabled(self) -> bool:
        """Whether inference should attempt the LLM before falling back."""
        return self.enabled and self.has_credentials

    def validate(self) -> list[str]:
        """Validate configuration and return warnings.

        Returns:
            List of warning messages (empty if no warnings)
        """
        warnings: list[str] = []

        if self.enabled and not self.has_credentials:
            warnings.append(
                f"No API key configured for {self.provider}; "
                "risk inference will use the rule-based fallback"
            )

        if self.max_tokens < 1000:
            warnings.append(
                f"max_tokens is set to {self.max_tokens}, which may truncate "
                "the scenario array"
            )

        if self.api_base and not self.api_base.startswith(("http://", "https://")):
            warnings.append(
                f"api_base '{self.api_base}' does not start with http:// or https://"
            )

        return warnings

    def to_dict(self, redact: bool = True) -> dict[str, str | int | float | bool | None]:
        """Convert to dictionary for serialization.

        Args:
            redact: Replace the API key with a marker

        Returns:
            Dictionary representation of the configuration
        """
        api_key = self.api_key
        if redact and api_key:
            api_key = "***"
        return {
            "provider": self.provider,
            "model": self.model,
            "api_key": api_key,
            "api_base": self.api_base,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str | int | float | bool | None]) -> "LLMConfig":
        """Create LLMConfig from dictionary.

        Args:
            data: Dictionary with configuration values

        Returns:
            LLMConfig instance
        """
        return cls(
            provider=str(data.get("provider") or DEFAULT_PROVIDER),
            model=str(data.get("model") or DEFAULT_MODEL),
            api_key=str(data["api_key"]) if data.get("api_key") else None,
            api_base=str(data["api_base"]) if data.get("api_base") else None,
            temperature=float(data.get("temperature", 0.0)),  # type: ignore[arg-type]
            max_tokens=int(data.get("max_tokens", 2000)),  # type: ignore[arg-type]
            timeout=float(data.get("timeout", 60.0)),  # type: ignore[arg-type]
            enabled=bool(data.get("enabled", True)),
        )

    def get_litellm_model_name(self) -> str:
        """Get the model name in LiteLLM format.

        Returns:
            Model name with the LiteLLM provider prefix
        """
        prefixes = {
            "openai": "openai",
            "claude": "anthropic",
            "gemini": "gemini",
            "ollama": "ollama",
            "bedrock": "bedrock",
        }
        return f"{prefixes[self.provider]}/{self.model}"
