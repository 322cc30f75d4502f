"""EasyCert configuration system.

Configuration is YAML-based with minimal CLI overrides (--output, --ci).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.easycert/config.yaml
3. ./easycert.yaml
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from easycert.models.llm_config import LLMConfig

logger = logging.getLogger(__name__)

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        path: Default path of the rendered risk assessment
    """

    path: str = "docs/EVALUACION_RIESGOS.md"


@dataclass
class EasyCertConfig:
    """Top-level EasyCert configuration.

    Attributes:
        llm: Inference backend settings (no credential means fallback only)
        output: Report output settings
        templates_file: Extra security templates (YAML) added to the catalog
    """

    llm: LLMConfig = field(default_factory=LLMConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    templates_file: str | None = None

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax. An unset variable becomes an empty string, so
    a missing API key leaves inference on the fallback path instead of
    failing to load the configuration.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                logger.debug("Environment variable not set: %s", var_name)
                return ""
            return env_value

        return _ENV_VAR_RE.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.easycert/config.yaml
    2. ./easycert.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".easycert" / "config.yaml",
        start_path / "easycert.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> EasyCertConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        EasyCertConfig instance

    Raises:
        ValueError: If a section is malformed or a value is invalid
    """
    data = substitute_env_vars(data)

    config = EasyCertConfig()

    if "llm" in data:
        llm_data = data["llm"] or {}
        if not isinstance(llm_data, dict):
            raise ValueError("'llm' section must be a mapping")
        config.llm = LLMConfig.from_dict(llm_data)

    if "output" in data:
        output_data = data["output"] or {}
        if not isinstance(output_data, dict):
            raise ValueError("'output' section must be a mapping")
        config.output = OutputConfig(path=output_data.get("path", config.output.path))

    if data.get("templates_file"):
        config.templates_file = str(data["templates_file"])

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> EasyCertConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        EasyCertConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ValueError: If the file content is invalid
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {found_path}")
        config = load_config_from_dict(data)
        config._config_path = found_path
        logger.debug("Loaded configuration from %s", found_path)
    else:
        config = EasyCertConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# EasyCert Configuration

# Risk inference backend.
# Without a usable credential every run uses the built-in fallback generator.
llm:
  provider: "openai"     # openai, claude, gemini, ollama, bedrock
  model: "gpt-4o-mini"
  api_key: "${OPENAI_API_KEY}"   # Empty when unset: fallback only
  # api_base: "http://localhost:11434"  # Required for ollama
  temperature: 0         # 0 keeps runs reproducible (0-2)
  max_tokens: 2000
  timeout: 60            # Seconds before the backend counts as failed
  enabled: true

# Report output
output:
  path: "docs/EVALUACION_RIESGOS.md"

# Extra security templates, same layout as the built-in ones
# templates_file: ".easycert/templates.yaml"
'''
