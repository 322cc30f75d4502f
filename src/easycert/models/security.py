"""Security posture entities.

This module contains the input side of the inference pipeline:
- SecurityFacts: The four labeled lists describing an organization's posture
- SecurityTemplate: A named, industry-tagged preset of SecurityFacts
- merge_security_facts: Order-preserving union used when applying templates
"""

from dataclasses import dataclass, field
from typing import Any

# Persisted (camelCase) key for each container, in display order
FACT_KEYS = {
    "information_assets": "informationAssets",
    "threats": "threats",
    "vulnerabilities": "vulnerabilities",
    "existing_measures": "existingMeasures",
}


def _clean_labels(values: Any) -> list[str]:
    """Normalize a raw container into a list of non-blank labels."""
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    return [v.strip() for v in values if isinstance(v, str) and v.strip()]


def _union(existing: list[str], additions: list[str]) -> list[str]:
    """Union preserving first-seen order (case-sensitive exact match)."""
    merged = list(existing)
    seen = set(existing)
    for item in additions:
        if item not in seen:
            merged.append(item)
            seen.add(item)
    return merged


@dataclass
class SecurityFacts:
    """Security posture of an organization.

    Attributes:
        information_assets: Assets worth protecting
        threats: Threats the organization is exposed to
        vulnerabilities: Weaknesses a threat could exploit
        existing_measures: Controls already in place (may be empty)
    """

    information_assets: list[str] = field(default_factory=list)
    threats: list[str] = field(default_factory=list)
    vulnerabilities: list[str] = field(default_factory=list)
    existing_measures: list[str] = field(default_factory=list)

    @property
    def is_sufficient(self) -> bool:
        """Sufficiency guard: assets, threats and vulnerabilities all present."""
        return bool(self.information_assets and self.threats and self.vulnerabilities)

    @property
    def has_any_risk_inputs(self) -> bool:
        """True if any of assets, threats or vulnerabilities is non-empty."""
        return bool(self.information_assets or self.threats or self.vulnerabilities)

    def merged_with(self, other: "SecurityFacts") -> "SecurityFacts":
        """Return a copy with another set of facts merged in."""
        return merge_security_facts(self, other)

    def normalized(self) -> "SecurityFacts":
        """Return a copy with blank and non-string labels removed.

        A None container becomes empty and a bare string a single label.
        """
        return SecurityFacts(**{attr: _clean_labels(getattr(self, attr)) for attr in FACT_KEYS})

    def copy(self) -> "SecurityFacts":
        """Return an independent copy."""
        return SecurityFacts(
            information_assets=list(self.information_assets),
            threats=list(self.threats),
            vulnerabilities=list(self.vulnerabilities),
            existing_measures=list(self.existing_measures),
        )

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to the persisted (camelCase) dictionary form."""
        return {key: list(getattr(self, attr)) for attr, key in FACT_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "SecurityFacts":
        """Create SecurityFacts from a dictionary.

        Accepts camelCase or snake_case keys. Missing or null containers are
        treated as empty; non-string entries are dropped.
        """
        data = data or {}
        values = {}
        for attr, key in FACT_KEYS.items():
            raw = data.get(key)
            if raw is None:
                raw = data.get(attr)
            values[attr] = _clean_labels(raw)
        return cls(**values)


def merge_security_facts(facts: SecurityFacts, addition: SecurityFacts) -> SecurityFacts:
    """Merge two sets of facts container by container.

    Existing entries are kept in order; entries of ``addition`` are appended
    only if not already present. Applying the same addition twice yields the
    same result as applying it once, and no existing entry is ever removed.

    Args:
        facts: Current facts (never modified)
        addition: Facts to merge in, typically a template's

    Returns:
        New SecurityFacts with the merged containers
    """
    return SecurityFacts(
        information_assets=_union(facts.information_assets, addition.information_assets),
        threats=_union(facts.threats, addition.threats),
        vulnerabilities=_union(facts.vulnerabilities, addition.vulnerabilities),
        existing_measures=_union(facts.existing_measures, addition.existing_measures),
    )


@dataclass
class SecurityTemplate:
    """Industry preset of security facts.

    Attributes:
        id: Stable slug used to reference the template
        name: Display name
        industry: Industry tag
        facts: Preset facts merged into an organization's own
        description: Optional description
        is_default: Whether the template ships with EasyCert
    """

    id: str
    name: str
    industry: str
    facts: SecurityFacts = field(default_factory=SecurityFacts)
    description: str = ""
    is_default: bool = False

    def __post_init__(self) -> None:
        """Validate template identity."""
        self.id = self.id.strip()
        if not self.id:
            raise ValueError("Template id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError(f"Template {self.id}: name cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "industry": self.industry,
            "description": self.description,
            "isDefault": self.is_default,
            "template": self.facts.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecurityTemplate":
        """Create a SecurityTemplate from a dictionary."""
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            industry=str(data.get("industry", "")),
            description=str(data.get("description") or ""),
            is_default=bool(data.get("isDefault", data.get("is_default", False))),
            facts=SecurityFacts.from_dict(data.get("template")),
        )
