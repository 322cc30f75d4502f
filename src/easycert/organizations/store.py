"""Organization persistence interface.

The service only needs four operations from storage. Real deployments plug
in their own backend; the in-memory store is used by the CLI and tests.
"""

import copy
from abc import ABC, abstractmethod

from easycert.models.organization import Organization


class OrganizationStore(ABC):
    """Abstract storage for organizations."""

    @abstractmethod
    def get(self, org_id: str) -> Organization | None:
        """Return the organization with the given id, or None."""
        pass

    @abstractmethod
    def save(self, organization: Organization) -> Organization:
        """Insert or replace an organization in a single write."""
        pass

    @abstractmethod
    def delete(self, org_id: str) -> bool:
        """Delete an organization; return whether it existed."""
        pass

    @abstractmethod
    def list_all(self) -> list[Organization]:
        """Return all organizations, newest first."""
        pass


class InMemoryOrganizationStore(OrganizationStore):
    """Dictionary-backed store.

    Stored objects are copied on the way in and out, so callers never share
    state with the store (the same isolation a database would give).
    """

    def __init__(self) -> None:
        self._items: dict[str, Organization] = {}

    def get(self, org_id: str) -> Organization | None:
        organization = self._items.get(org_id)
        return copy.deepcopy(organization) if organization else None

    def save(self, organization: Organization) -> Organization:
        self._items[organization.id] = copy.deepcopy(organization)
        return copy.deepcopy(organization)

    def delete(self, org_id: str) -> bool:
        return self._items.pop(org_id, None) is not None

    def list_all(self) -> list[Organization]:
        ordered = sorted(self._items.values(), key=lambda o: o.created_at, reverse=True)
        return [copy.deepcopy(o) for o in ordered]
