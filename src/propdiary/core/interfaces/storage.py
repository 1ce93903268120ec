"""
Abstract interfaces for storage providers.

Defines contracts for the property, unit and tenancy record stores and
the key-value overlay store used by the diary.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from propdiary.core.entities.property import Property, Unit
from propdiary.core.entities.tenancy import Tenancy


class IPropertyStore(ABC):
    """Abstract interface for property storage."""

    @abstractmethod
    async def create(self, prop: Property) -> Property:
        """Create a new property."""
        pass

    @abstractmethod
    async def get(self, property_id: str) -> Property | None:
        """Get property by ID, including archived and soft-deleted ones."""
        pass

    @abstractmethod
    async def update(self, prop: Property) -> Property:
        """Persist all fields of an existing property."""
        pass

    @abstractmethod
    async def list(
        self, include_archived: bool = False, include_deleted: bool = False
    ) -> list[Property]:
        """List properties, active ones only by default."""
        pass

    @abstractmethod
    async def list_deleted(self) -> list[Property]:
        """List properties currently in the recycle bin."""
        pass

    @abstractmethod
    async def archive(self, property_id: str) -> bool:
        """Mark a property archived."""
        pass

    @abstractmethod
    async def restore(self, property_id: str) -> bool:
        """Clear the tombstone if deleted, otherwise clear the archive flag."""
        pass

    @abstractmethod
    async def soft_delete(self, property_id: str, deleted_at: datetime) -> bool:
        """Move a property to the recycle bin. Does not cascade."""
        pass

    @abstractmethod
    async def delete(self, property_id: str) -> bool:
        """Permanently delete a property with its units and their tenancies."""
        pass


class IUnitStore(ABC):
    """Abstract interface for unit storage."""

    @abstractmethod
    async def create(self, unit: Unit) -> Unit:
        """Create a new unit."""
        pass

    @abstractmethod
    async def get(self, unit_id: str) -> Unit | None:
        """Get unit by ID, including archived and soft-deleted ones."""
        pass

    @abstractmethod
    async def update(self, unit: Unit) -> Unit:
        """Persist all fields of an existing unit."""
        pass

    @abstractmethod
    async def list(
        self, include_archived: bool = False, include_deleted: bool = False
    ) -> list[Unit]:
        """List units, active ones only by default."""
        pass

    @abstractmethod
    async def list_by_property(self, property_id: str) -> list[Unit]:
        """List non-deleted units of a property."""
        pass

    @abstractmethod
    async def list_deleted(self) -> list[Unit]:
        """List units currently in the recycle bin."""
        pass

    @abstractmethod
    async def archive(self, unit_id: str) -> bool:
        """Mark a unit archived."""
        pass

    @abstractmethod
    async def restore(self, unit_id: str) -> bool:
        """Clear the tombstone if deleted, otherwise clear the archive flag."""
        pass

    @abstractmethod
    async def soft_delete(self, unit_id: str, deleted_at: datetime) -> bool:
        """Move a unit to the recycle bin. Does not cascade."""
        pass

    @abstractmethod
    async def delete(self, unit_id: str) -> bool:
        """Permanently delete a unit and its tenancies."""
        pass


class ITenancyStore(ABC):
    """Abstract interface for tenancy storage."""

    @abstractmethod
    async def create(self, tenancy: Tenancy) -> Tenancy:
        """Create a tenancy and mark its unit occupied."""
        pass

    @abstractmethod
    async def get(self, tenancy_id: str) -> Tenancy | None:
        """Get tenancy by ID, including archived and soft-deleted ones."""
        pass

    @abstractmethod
    async def update(self, tenancy: Tenancy) -> Tenancy:
        """Persist all fields of an existing tenancy."""
        pass

    @abstractmethod
    async def list(
        self, include_archived: bool = False, include_deleted: bool = False
    ) -> list[Tenancy]:
        """List tenancies, active ones only by default."""
        pass

    @abstractmethod
    async def list_by_unit(self, unit_id: str) -> list[Tenancy]:
        """List non-deleted tenancies of a unit."""
        pass

    @abstractmethod
    async def list_deleted(self) -> list[Tenancy]:
        """List tenancies currently in the recycle bin."""
        pass

    @abstractmethod
    async def archive(self, tenancy_id: str) -> bool:
        """Archive a tenancy (terminates it and frees the unit)."""
        pass

    @abstractmethod
    async def restore(self, tenancy_id: str) -> bool:
        """Restore from bin or archive (reactivates it and occupies the unit)."""
        pass

    @abstractmethod
    async def soft_delete(self, tenancy_id: str, deleted_at: datetime) -> bool:
        """Move a tenancy to the recycle bin (terminates it and frees the unit)."""
        pass

    @abstractmethod
    async def delete(self, tenancy_id: str) -> bool:
        """Permanently delete a tenancy and free its unit."""
        pass


class IOverlayStore(ABC):
    """
    Abstract interface for the diary overlay documents.

    Each named document is a mapping of event id to a JSON object, read
    and written as a whole.
    """

    @abstractmethod
    async def load(self, name: str) -> dict[str, dict[str, Any]]:
        """Load a document. Missing or unreadable documents load as empty."""
        pass

    @abstractmethod
    async def save(self, name: str, entries: dict[str, dict[str, Any]]) -> None:
        """Replace a document with the given entries."""
        pass
