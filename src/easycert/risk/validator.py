"""Scenario validator and sanitizer.

Turns untrusted generator output into valid RiskScenario values. Every
candidate is repaired field by field, never rejected, so a parseable array of
N items always yields N scenarios.

Repair rules, applied independently per candidate:
1. id: missing, malformed or duplicated -> "R" + 2-digit 1-based position
2. probability / impact: not a canonical level -> Medio
3. riskLevel: not a canonical level -> matrix(probability, impact);
   a valid value is kept as the generator's own assessment
4. asset / threat / vulnerability: missing or blank -> first fact of that kind
5. controls: not a non-empty list of non-blank strings -> generic placeholder
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from easycert.models.risk import (
    RiskLevel,
    RiskScenario,
    format_scenario_id,
    is_valid_scenario_id,
)
from easycert.models.security import SecurityFacts
from easycert.risk.matrix import risk_level

logger = logging.getLogger(__name__)

GENERIC_CONTROL_PLACEHOLDER = "Implementar controles adecuados"

DEFAULT_LEVEL = RiskLevel.MEDIUM


def _label(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _level(value: Any) -> RiskLevel:
    return RiskLevel.parse(value) or DEFAULT_LEVEL


def _controls(value: Any) -> list[str]:
    if (
        isinstance(value, list)
        and value
        and all(isinstance(c, str) and c.strip() for c in value)
    ):
        return list(value)
    return [GENERIC_CONTROL_PLACEHOLDER]


def _scenario_id(value: Any, position: int, used: set[str]) -> str:
    if is_valid_scenario_id(value) and value not in used:
        return value
    number = position
    candidate = format_scenario_id(number)
    while candidate in used:
        number += 1
        candidate = format_scenario_id(number)
    return candidate


def _first(values: list[str]) -> str:
    return values[0] if values else "N/A"


def sanitize_scenario(
    candidate: Any,
    position: int,
    facts: SecurityFacts,
    used_ids: set[str] | None = None,
) -> RiskScenario:
    """Repair a single candidate into a RiskScenario.

    Args:
        candidate: Raw item from the generator (normally a dict) or a
            previously sanitized RiskScenario
        position: 1-based position in the candidate list
        facts: Facts used for label defaults
        used_ids: Ids already assigned earlier in the same list (updated)

    Returns:
        A valid RiskScenario
    """
    raw: Mapping[str, Any]
    if isinstance(candidate, RiskScenario):
        raw = candidate.to_dict()
    elif isinstance(candidate, Mapping):
        raw = candidate
    else:
        raw = {}
    used = used_ids if used_ids is not None else set()

    scenario_id = _scenario_id(raw.get("id"), position, used)
    used.add(scenario_id)

    probability = _level(raw.get("probability"))
    impact = _level(raw.get("impact"))
    level = RiskLevel.parse(raw.get("riskLevel")) or risk_level(probability, impact)

    return RiskScenario(
        id=scenario_id,
        asset=_label(raw.get("asset"), _first(facts.information_assets)),
        threat=_label(raw.get("threat"), _first(facts.threats)),
        vulnerability=_label(raw.get("vulnerability"), _first(facts.vulnerabilities)),
        probability=probability,
        impact=impact,
        risk_level=level,
        controls=_controls(raw.get("controls")),
    )


def sanitize_scenarios(candidates: Iterable[Any], facts: SecurityFacts) -> list[RiskScenario]:
    """Repair a list of generator candidates into RiskScenario values.

    Args:
        candidates: Parsed JSON array from the generator
        facts: Facts the scenarios should be consistent with

    Returns:
        One RiskScenario per candidate, in the same order
    """
    facts = facts.normalized()
    used_ids: set[str] = set()
    scenarios = [
        sanitize_scenario(candidate, position, facts, used_ids)
        for position, candidate in enumerate(candidates, start=1)
    ]
    logger.debug("Sanitized %d scenario candidate(s)", len(scenarios))
    return scenarios
