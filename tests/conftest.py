"""Shared pytest fixtures for EasyCert tests.

Fixtures are organized by category:
- Logging fixtures: Reset the easycert logger between tests
- Facts fixtures: Security facts in various states of completeness
- Configuration fixtures: LLM configs with and without credentials
- LLM fixtures: Mock LiteLLM responses
"""

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from easycert.models import LLMConfig, SecurityFacts

# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_easycert_logger() -> Iterator[None]:
    """Let caplog see easycert records even after a CLI test configured logging."""
    yield
    logger = logging.getLogger("easycert")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# =============================================================================
# Facts Fixtures
# =============================================================================


@pytest.fixture
def sample_facts() -> SecurityFacts:
    """Return sufficient facts resembling a small online shop."""
    return SecurityFacts(
        information_assets=[
            "Base de datos de clientes",
            "Sitio web",
            "Información financiera",
        ],
        threats=["Malware", "Acceso no autorizado"],
        vulnerabilities=["Contraseñas débiles", "Software desactualizado"],
        existing_measures=["Antivirus"],
    )


@pytest.fixture
def minimal_facts() -> SecurityFacts:
    """Return the smallest sufficient facts."""
    return SecurityFacts(
        information_assets=["DB"],
        threats=["Malware"],
        vulnerabilities=["Software desactualizado"],
    )


@pytest.fixture
def facts_file(tmp_path: Path, sample_facts: SecurityFacts) -> Path:
    """Write sample facts to a YAML file and return its path."""
    path = tmp_path / "facts.yaml"
    lines = []
    for key, values in sample_facts.to_dict().items():
        lines.append(f"{key}:")
        lines.extend(f'  - "{value}"' for value in values)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def llm_config() -> LLMConfig:
    """Return an OpenAI config with a (fake) API key."""
    return LLMConfig(provider="openai", model="gpt-4o-mini", api_key="sk-test")


@pytest.fixture
def no_key_config() -> LLMConfig:
    """Return an OpenAI config without credentials (fallback only)."""
    return LLMConfig(provider="openai", model="gpt-4o-mini")


# =============================================================================
# LLM Fixtures
# =============================================================================


@pytest.fixture
def make_litellm_response() -> Callable[..., MagicMock]:
    """Return a factory for mock LiteLLM completion responses."""

    def _make(content: str, finish_reason: str = "stop") -> MagicMock:
        response = MagicMock()
        response.choices = [
            MagicMock(message=MagicMock(content=content), finish_reason=finish_reason)
        ]
        response.model = "gpt-4o-mini"
        response.usage = MagicMock(prompt_tokens=120, completion_tokens=80, total_tokens=200)
        return response

    return _make


@pytest.fixture
def ai_scenarios_payload() -> list[dict[str, Any]]:
    """Return a well-formed scenario array as an LLM would send it."""
    return [
        {
            "id": "R01",
            "asset": "Base de datos de clientes",
            "threat": "Acceso no autorizado",
            "vulnerability": "Contraseñas débiles",
            "probability": "Alto",
            "impact": "Alto",
            "riskLevel": "Alto",
            "controls": ["Autenticación multifactor", "Política de contraseñas"],
        },
        {
            "id": "R02",
            "asset": "Sitio web",
            "threat": "Malware",
            "vulnerability": "Software desactualizado",
            "probability": "Medio",
            "impact": "Medio",
            "riskLevel": "Medio",
            "controls": ["Gestión de parches"],
        },
    ]


@pytest.fixture
def ai_scenarios_text(ai_scenarios_payload: list[dict[str, Any]]) -> str:
    """Return the scenario array wrapped in a json code fence."""
    return "```json\n" + json.dumps(ai_scenarios_payload, ensure_ascii=False) + "\n```"
