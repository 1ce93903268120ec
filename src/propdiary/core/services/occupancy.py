"""Per-property occupancy and rent figures."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from propdiary.core.entities.property import Unit, UnitStatus
from propdiary.core.entities.tenancy import Tenancy, TenancyStatus


@dataclass(frozen=True)
class PropertyOccupancy:
    """Unit counts and annual rent of one property."""

    total_units: int = 0
    occupied_units: int = 0
    annual_rent: float = 0.0


def summarize_occupancy(
    units: Iterable[Unit],
    tenancies: Iterable[Tenancy],
) -> dict[str, PropertyOccupancy]:
    """
    Figures keyed by property ID.

    Only active units count. Rent is twelve times the monthly rent of every
    active tenancy on those units, archived and binned tenancies excluded.
    Properties without active units are absent from the result.
    """
    live_units = [u for u in units if u.is_active]
    property_of = {u.id: u.property_id for u in live_units}

    totals: dict[str, int] = defaultdict(int)
    occupied: dict[str, int] = defaultdict(int)
    for unit in live_units:
        totals[unit.property_id] += 1
        if unit.status is UnitStatus.OCCUPIED:
            occupied[unit.property_id] += 1

    rent: dict[str, float] = defaultdict(float)
    for tenancy in tenancies:
        property_id = property_of.get(tenancy.unit_id)
        if property_id is None or not tenancy.is_active:
            continue
        if tenancy.status is TenancyStatus.ACTIVE:
            rent[property_id] += tenancy.monthly_rent * 12

    return {
        property_id: PropertyOccupancy(
            total_units=count,
            occupied_units=occupied[property_id],
            annual_rent=rent[property_id],
        )
        for property_id, count in totals.items()
    }
