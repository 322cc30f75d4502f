"""Organization lifecycle and risk-scenario refresh."""

from easycert.organizations.service import OrganizationNotFoundError, OrganizationService
from easycert.organizations.store import InMemoryOrganizationStore, OrganizationStore

__all__ = [
    "InMemoryOrganizationStore",
    "OrganizationNotFoundError",
    "OrganizationService",
    "OrganizationStore",
]
