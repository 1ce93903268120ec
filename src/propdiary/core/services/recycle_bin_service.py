"""
Recycle Bin Service.

Lists, restores and permanently deletes soft-deleted records, and sweeps
tombstones whose retention window has elapsed.
"""

from dataclasses import dataclass, field
from datetime import datetime

from propdiary.config import get_logger
from propdiary.core.entities.base import utc_now
from propdiary.core.entities.property import Property, Unit
from propdiary.core.entities.recycle_bin import DeletedItem, DeletedItemType
from propdiary.core.entities.tenancy import Tenancy
from propdiary.core.exceptions import InvalidItemTypeError, RecycleBinItemNotFoundError
from propdiary.core.interfaces.storage import IPropertyStore, ITenancyStore, IUnitStore
from propdiary.core.services.reminder_rules import UNKNOWN_PROPERTY
from propdiary.core.services.retention import (
    RETENTION_DAYS,
    days_remaining,
    is_expired,
    urgency_bucket,
)

logger = get_logger(__name__)


@dataclass
class SweepResult:
    """Outcome of one retention sweep."""

    purged: dict[str, list[str]] = field(
        default_factory=lambda: {t.value: [] for t in DeletedItemType}
    )

    @property
    def total(self) -> int:
        return sum(len(ids) for ids in self.purged.values())

    def counts(self) -> dict[str, int]:
        return {k: len(v) for k, v in self.purged.items()}


def parse_item_type(value: str) -> DeletedItemType:
    """Resolve a path/query value to a DeletedItemType."""
    try:
        return DeletedItemType(value)
    except ValueError:
        raise InvalidItemTypeError(value, [t.value for t in DeletedItemType]) from None


class RecycleBinService:
    """Retention engine over the property, unit and tenancy stores."""

    def __init__(
        self,
        property_store: IPropertyStore,
        unit_store: IUnitStore,
        tenancy_store: ITenancyStore,
        retention_days: int = RETENTION_DAYS,
    ) -> None:
        self._property_store = property_store
        self._unit_store = unit_store
        self._tenancy_store = tenancy_store
        self._retention_days = retention_days

    async def list_items(
        self,
        now: datetime | None = None,
        search: str | None = None,
        item_type: DeletedItemType | None = None,
    ) -> list[DeletedItem]:
        """
        List records still inside their retention window.

        Args:
            now: Evaluation time (defaults to current UTC time).
            search: Case-insensitive match on name or description.
            item_type: Restrict to one record type.

        Returns:
            Items sorted by days remaining, most urgent first.
        """
        now = now or utc_now()

        # Labels resolve against every record, deleted parents included
        properties = {
            p.id: p
            for p in await self._property_store.list(include_archived=True, include_deleted=True)
        }
        units = {
            u.id: u
            for u in await self._unit_store.list(include_archived=True, include_deleted=True)
        }

        items: list[DeletedItem] = []
        if item_type in (None, DeletedItemType.PROPERTY):
            for prop in await self._property_store.list_deleted():
                items.append(self._property_item(prop, now))
        if item_type in (None, DeletedItemType.UNIT):
            for unit in await self._unit_store.list_deleted():
                items.append(self._unit_item(unit, properties, now))
        if item_type in (None, DeletedItemType.TENANCY):
            for tenancy in await self._tenancy_store.list_deleted():
                items.append(self._tenancy_item(tenancy, units, properties, now))

        listed = [i for i in items if i.days_remaining > 0 and i.matches_search(search)]
        listed.sort(key=lambda i: (i.days_remaining, i.deleted_at, i.id))
        return listed

    async def restore(self, item_type: DeletedItemType, item_id: str) -> None:
        """Bring a record back out of the bin."""
        await self._require_in_bin(item_type, item_id)
        store = self._store_for(item_type)
        await store.restore(item_id)
        logger.info("recycle_bin_item_restored", item_type=item_type.value, item_id=item_id)

    async def purge(self, item_type: DeletedItemType, item_id: str) -> None:
        """Permanently delete a record from the bin, cascading to children."""
        await self._require_in_bin(item_type, item_id)
        store = self._store_for(item_type)
        await store.delete(item_id)
        logger.info("recycle_bin_item_purged", item_type=item_type.value, item_id=item_id)

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        """
        Permanently delete every tombstone past the retention window.

        Safe to run repeatedly: records already restored or already gone
        (for example removed by a parent's cascade) are skipped.
        """
        now = now or utc_now()
        result = SweepResult()

        # Parents first so children removed by the cascade are not counted twice
        for item_type in (DeletedItemType.PROPERTY, DeletedItemType.UNIT, DeletedItemType.TENANCY):
            store = self._store_for(item_type)
            for record in await store.list_deleted():
                if record.deleted_at is None:
                    continue
                if not is_expired(record.deleted_at, now, self._retention_days):
                    continue
                if await store.delete(record.id):
                    result.purged[item_type.value].append(record.id)

        if result.total:
            logger.info("recycle_bin_sweep_complete", **result.counts())
        else:
            logger.debug("recycle_bin_sweep_complete", purged=0)
        return result

    def _store_for(self, item_type: DeletedItemType) -> IPropertyStore | IUnitStore | ITenancyStore:
        if item_type is DeletedItemType.PROPERTY:
            return self._property_store
        if item_type is DeletedItemType.UNIT:
            return self._unit_store
        return self._tenancy_store

    async def _require_in_bin(self, item_type: DeletedItemType, item_id: str) -> None:
        record = await self._store_for(item_type).get(item_id)
        if record is None or not record.is_deleted:
            raise RecycleBinItemNotFoundError(item_type.value, item_id)

    # Labels

    def _item(
        self,
        record: Property | Unit | Tenancy,
        item_type: DeletedItemType,
        name: str,
        description: str,
        now: datetime,
    ) -> DeletedItem:
        assert record.deleted_at is not None
        days = days_remaining(record.deleted_at, now, self._retention_days)
        return DeletedItem(
            id=record.id,
            item_type=item_type,
            name=name,
            description=description,
            deleted_at=record.deleted_at,
            days_remaining=days,
            urgency=urgency_bucket(days),
        )

    def _property_item(self, prop: Property, now: datetime) -> DeletedItem:
        return self._item(
            prop,
            DeletedItemType.PROPERTY,
            prop.name,
            f"{prop.property_type} • {prop.address}",
            now,
        )

    def _unit_item(self, unit: Unit, properties: dict[str, Property], now: datetime) -> DeletedItem:
        prop = properties.get(unit.property_id)
        return self._item(
            unit,
            DeletedItemType.UNIT,
            f"Unit {unit.unit_number}",
            f"{unit.unit_type} • {prop.name if prop else UNKNOWN_PROPERTY}",
            now,
        )

    def _tenancy_item(
        self,
        tenancy: Tenancy,
        units: dict[str, Unit],
        properties: dict[str, Property],
        now: datetime,
    ) -> DeletedItem:
        unit = units.get(tenancy.unit_id)
        prop = properties.get(unit.property_id) if unit else None
        unit_label = unit.unit_number if unit else "Unknown"
        return self._item(
            tenancy,
            DeletedItemType.TENANCY,
            tenancy.tenant_name,
            f"Unit {unit_label} • {prop.name if prop else UNKNOWN_PROPERTY}",
            now,
        )
