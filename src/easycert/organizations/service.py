"""Organization service.

Owns the lifecycle of organizations and decides when risk inference runs:
- on creation, when any of assets, threats or vulnerabilities is present
- on update, when any of the four security fact containers changed
- on demand, before a risk assessment is rendered without scenarios

Each run replaces the scenario list wholesale and stamps
``last_inference_at`` in the same store write. Concurrent runs for the same
organization are not serialized: the last write wins.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from easycert.catalog import TemplateCatalog
from easycert.models.organization import PROFILE_FIELDS, Organization
from easycert.models.security import SecurityFacts, merge_security_facts
from easycert.organizations.store import InMemoryOrganizationStore, OrganizationStore
from easycert.risk.inference import RiskInferenceService
from easycert.utils.logging import get_logger

logger = get_logger(__name__)


class OrganizationNotFoundError(KeyError):
    """Raised when an organization id is unknown."""

    def __init__(self, org_id: str) -> None:
        super().__init__(org_id)
        self.org_id = org_id

    def __str__(self) -> str:
        return f"Organization not found: {self.org_id}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class OrganizationService:
    """Creates, updates and removes organizations, keeping scenarios current."""

    def __init__(
        self,
        inference: RiskInferenceService,
        store: OrganizationStore | None = None,
        catalog: TemplateCatalog | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the service.

        Args:
            inference: Risk inference orchestrator
            store: Organization storage (in-memory if None)
            catalog: Security templates (built-in defaults if None)
            clock: Source of UTC timestamps
        """
        self.inference = inference
        self.store = store or InMemoryOrganizationStore()
        self.catalog = catalog if catalog is not None else TemplateCatalog.with_defaults()
        self._clock = clock

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, org_id: str) -> Organization:
        """Get an organization by id.

        Raises:
            OrganizationNotFoundError: If the id is unknown
        """
        organization = self.store.get(org_id)
        if organization is None:
            logger.warning("Organization %s not found", org_id)
            raise OrganizationNotFoundError(org_id)
        return organization

    def list_all(self) -> list[Organization]:
        """All organizations, newest first."""
        return self.store.list_all()

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(
        self,
        name: str,
        security_facts: SecurityFacts | None = None,
        template_id: str | None = None,
        **profile: Any,
    ) -> Organization:
        """Create an organization and infer its initial risk scenarios.

        Args:
            name: Organization name
            security_facts: Initial facts (empty if None)
            template_id: Security template merged into the facts
            **profile: Other descriptive fields (industry, location, ...)

        Returns:
            The stored organization, with scenarios when facts allowed it

        Raises:
            ValueError: If a profile field is unknown or the name is empty
        """
        self._check_profile_fields(profile)

        facts = security_facts.normalized() if security_facts else SecurityFacts()
        if template_id:
            facts = self._apply_template(facts, template_id)

        now = self._clock()
        organization = Organization(
            name=name,
            security_facts=facts,
            created_at=now,
            updated_at=now,
            **profile,
        )
        organization = self.store.save(organization)
        logger.info("Organization created: %s (%s)", organization.name, organization.id)

        if facts.has_any_risk_inputs:
            organization = self.update_risk_scenarios(organization.id)

        return organization

    def update(
        self,
        org_id: str,
        changes: dict[str, Any] | None = None,
        security_facts: SecurityFacts | None = None,
        template_id: str | None = None,
    ) -> Organization:
        """Update an organization, re-inferring scenarios if its facts changed.

        Args:
            org_id: Organization id
            changes: Descriptive field changes
            security_facts: Replacement facts (None keeps the current ones)
            template_id: Security template merged into the resulting facts

        Returns:
            The stored organization

        Raises:
            OrganizationNotFoundError: If the id is unknown
            ValueError: If a field in ``changes`` is unknown or the name is empty
        """
        changes = dict(changes or {})
        self._check_profile_fields(changes)
        if "name" in changes:
            name = changes["name"]
            if not isinstance(name, str) or not name.strip():
                raise ValueError("Organization name cannot be empty")
            changes["name"] = name.strip()
        organization = self.get(org_id)

        new_facts = (
            security_facts.normalized()
            if security_facts is not None
            else organization.security_facts.copy()
        )
        if template_id:
            new_facts = self._apply_template(new_facts, template_id)

        facts_changed = new_facts != organization.security_facts

        for field_name, value in changes.items():
            setattr(organization, field_name, value)
        organization.security_facts = new_facts
        organization.updated_at = self._clock()
        organization = self.store.save(organization)

        if facts_changed:
            logger.info("Security facts changed for %s; refreshing risk scenarios", org_id)
            return self.update_risk_scenarios(org_id)

        logger.info("Organization updated: %s", organization.name)
        return organization

    def update_risk_scenarios(self, org_id: str) -> Organization:
        """Run inference and replace the organization's scenario list.

        With insufficient facts nothing is changed: the previous scenarios
        (if any) stay until the next successful run.

        Args:
            org_id: Organization id

        Returns:
            The stored organization

        Raises:
            OrganizationNotFoundError: If the id is unknown
        """
        organization = self.get(org_id)

        if not organization.security_facts.is_sufficient:
            logger.warning(
                "Not enough security information to generate risk scenarios for %s",
                org_id,
            )
            return organization

        scenarios = self.inference.infer(organization.security_facts)

        organization.risk_scenarios = scenarios
        organization.last_inference_at = self._clock()
        organization = self.store.save(organization)

        logger.structured(
            logging.INFO,
            f"Risk scenarios updated for {org_id}",
            organization=org_id,
            scenarios=len(scenarios),
        )
        return organization

    def ensure_risk_scenarios(self, org_id: str) -> Organization:
        """Infer scenarios only if the organization has none yet."""
        organization = self.get(org_id)
        if organization.has_risk_assessment:
            return organization
        return self.update_risk_scenarios(org_id)

    def remove(self, org_id: str) -> None:
        """Delete an organization together with its scenarios.

        Raises:
            OrganizationNotFoundError: If the id is unknown
        """
        organization = self.get(org_id)
        self.store.delete(org_id)
        logger.info("Organization removed: %s", organization.name)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _apply_template(self, facts: SecurityFacts, template_id: str) -> SecurityFacts:
        """Merge a catalog template into facts; unknown ids leave facts as-is."""
        template = self.catalog.find(template_id)
        if template is None:
            logger.warning("Security template %s not found; skipping merge", template_id)
            return facts
        logger.info("Security template applied: %s", template.name)
        return merge_security_facts(facts, template.facts)

    @staticmethod
    def _check_profile_fields(fields: dict[str, Any]) -> None:
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown organization field(s): {', '.join(sorted(unknown))}")
