"""Risk entities.

This module contains the output side of the inference pipeline:
- RiskLevel: The three-valued, totally ordered severity scale
- RiskScenario: One scored asset/threat/vulnerability tuple with controls
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any

# Scenario identifiers: "R" followed by a zero-padded sequence number
SCENARIO_ID_PATTERN = re.compile(r"^R\d{2,}$")


@total_ordering
class RiskLevel(Enum):
    """Severity level used for probability, impact and overall risk.

    Values are the canonical strings used in persisted and rendered output.
    Ordering follows severity (LOW < MEDIUM < HIGH), not the string values.
    """

    LOW = "Bajo"
    MEDIUM = "Medio"
    HIGH = "Alto"

    @property
    def rank(self) -> int:
        """Numeric severity (1 = low, 3 = high)."""
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value: Any) -> "RiskLevel | None":
        """Return the level for a canonical value, or None.

        Only the exact canonical strings ("Bajo", "Medio", "Alto") or
        RiskLevel members are accepted. No case folding is applied.
        """
        if isinstance(value, RiskLevel):
            return value
        if isinstance(value, str):
            for level in cls:
                if level.value == value:
                    return level
        return None


_RANKS = {RiskLevel.LOW: 1, RiskLevel.MEDIUM: 2, RiskLevel.HIGH: 3}


def format_scenario_id(position: int) -> str:
    """Build a scenario id from a 1-based position (e.g. 1 -> "R01")."""
    return f"R{position:02d}"


def is_valid_scenario_id(value: Any) -> bool:
    """Check whether a value is a well-formed scenario id."""
    return isinstance(value, str) and SCENARIO_ID_PATTERN.match(value) is not None


@dataclass
class RiskScenario:
    """A scored risk scenario linking one asset, threat and vulnerability.

    Attributes:
        id: Short code such as "R01"; position in a list is display priority
        asset: Information asset label
        threat: Threat label
        vulnerability: Vulnerability label
        probability: Likelihood of the threat exploiting the vulnerability
        impact: Consequence for the asset
        risk_level: Overall level (normally risk_level(probability, impact))
        controls: Recommended controls, never empty
    """

    id: str
    asset: str
    threat: str
    vulnerability: str
    probability: RiskLevel
    impact: RiskLevel
    risk_level: RiskLevel
    controls: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not is_valid_scenario_id(self.id):
            raise ValueError(f"Invalid scenario id: {self.id!r}")
        for name in ("asset", "threat", "vulnerability"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Scenario {self.id}: {name} cannot be empty")
        if not self.controls:
            raise ValueError(f"Scenario {self.id}: controls cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dictionary form."""
        return {
            "id": self.id,
            "asset": self.asset,
            "threat": self.threat,
            "vulnerability": self.vulnerability,
            "probability": self.probability.value,
            "impact": self.impact.value,
            "riskLevel": self.risk_level.value,
            "controls": list(self.controls),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskScenario":
        """Create a RiskScenario from its persisted dictionary form.

        This is the strict path for trusted data (e.g. a stored organization).
        Untrusted generator output goes through the validator instead.

        Raises:
            ValueError: If any field is missing or invalid
        """
        levels = {}
        for key in ("probability", "impact", "riskLevel"):
            level = RiskLevel.parse(data.get(key))
            if level is None:
                raise ValueError(f"Invalid {key}: {data.get(key)!r}")
            levels[key] = level

        return cls(
            id=str(data.get("id", "")),
            asset=str(data.get("asset", "")),
            threat=str(data.get("threat", "")),
            vulnerability=str(data.get("vulnerability", "")),
            probability=levels["probability"],
            impact=levels["impact"],
            risk_level=levels["riskLevel"],
            controls=[str(c) for c in data.get("controls") or []],
        )
