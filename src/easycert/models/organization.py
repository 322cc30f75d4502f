"""Organization entity.

An organization owns one SecurityFacts value and the risk scenarios last
inferred from it. The scenario list is replaced wholesale by each inference
run and only disappears when the organization is removed.
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from easycert.models.risk import RiskScenario
from easycert.models.security import SecurityFacts

# Descriptive fields that can be changed through OrganizationService.update
PROFILE_FIELDS = frozenset(
    {
        "name",
        "industry",
        "location",
        "size",
        "description",
        "website",
        "email",
        "phone",
        "address",
    }
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class Organization:
    """Organization being assessed.

    Attributes:
        name: Organization name
        id: Unique identifier (generated if not given)
        industry: Industry sector
        location: City or country
        size: Number of employees
        description: Free-text description
        website: Public website
        email: Contact email
        phone: Contact phone
        address: Postal address
        security_facts: Current security posture
        risk_scenarios: Scenarios from the last inference run
        last_inference_at: When risk_scenarios was last replaced (UTC)
        created_at: Creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    industry: str | None = None
    location: str | None = None
    size: int | None = None
    description: str | None = None
    website: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    security_facts: SecurityFacts = field(default_factory=SecurityFacts)
    risk_scenarios: list[RiskScenario] = field(default_factory=list)
    last_inference_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate and normalize."""
        if not self.name or not self.name.strip():
            raise ValueError("Organization name cannot be empty")
        self.name = self.name.strip()

    @property
    def has_risk_assessment(self) -> bool:
        """True once an inference run has produced scenarios."""
        return bool(self.risk_scenarios)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {name: getattr(self, name) for name in sorted(PROFILE_FIELDS)}
        data.update(
            {
                "id": self.id,
                "securityInfo": self.security_facts.to_dict(),
                "riskScenarios": [s.to_dict() for s in self.risk_scenarios],
                "lastRiskInference": (
                    self.last_inference_at.isoformat() if self.last_inference_at else None
                ),
                "createdAt": self.created_at.isoformat(),
                "updatedAt": self.updated_at.isoformat(),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Organization":
        """Create an Organization from its dictionary form."""
        profile = {name: data.get(name) for name in PROFILE_FIELDS if name in data}
        org = cls(
            **profile,
            security_facts=SecurityFacts.from_dict(data.get("securityInfo")),
            risk_scenarios=[RiskScenario.from_dict(s) for s in data.get("riskScenarios") or []],
            last_inference_at=_parse_datetime(data.get("lastRiskInference")),
        )
        if data.get("id"):
            org.id = str(data["id"])
        if data.get("createdAt"):
            org.created_at = _parse_datetime(data["createdAt"]) or org.created_at
        if data.get("updatedAt"):
            org.updated_at = _parse_datetime(data["updatedAt"]) or org.updated_at
        return org
