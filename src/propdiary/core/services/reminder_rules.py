"""
Reminder activation rules.

Pure functions behind the diary and the dashboard. A tenancy carries one
reminder rule per tracked date (lease end, rent review, break); each rule
is evaluated by the same activation predicate and, when active, yields a
diary event whose id is stable across recomputations.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta

from propdiary.core.entities.base import utc_now
from propdiary.core.entities.diary import (
    DiaryAnnotation,
    DiaryEvent,
    DiaryEventType,
    DismissedEvent,
    make_event_id,
)
from propdiary.core.entities.property import Property, Unit
from propdiary.core.entities.tenancy import ReminderRule, Tenancy, TenancyStatus

DEFAULT_MONTHS_BEFORE = 3
UNKNOWN_PROPERTY = "Unknown Property"
UNKNOWN_UNIT = "Unknown Unit"

_DISPLAY_DATE = "%d/%m/%Y"


@dataclass(frozen=True)
class RuleSource:
    """One reminder rule of a tenancy paired with the date it watches."""

    event_type: DiaryEventType
    rule: ReminderRule
    target_date: date | None


def notification_date(target_date: date, months_before: int) -> date:
    """First day the reminder surfaces, in calendar months before the target."""
    return target_date - relativedelta(months=months_before)


def is_rule_active(
    enabled: bool,
    target_date: date | None,
    months_before: int,
    today: date,
) -> bool:
    """
    Check whether a reminder is due to surface today.

    Active from `months_before` calendar months ahead of the target date up
    to and including the target date itself. Past dates never activate.
    """
    if not enabled or target_date is None:
        return False
    if target_date < today:
        return False
    return notification_date(target_date, months_before) <= today


def effective_months_before(rule: ReminderRule, default: int = DEFAULT_MONTHS_BEFORE) -> int:
    # 0 means "unset" in stored settings, not "remind on the day"
    return rule.months_before or default


def rule_sources(tenancy: Tenancy) -> list[RuleSource]:
    """Expand a tenancy into its three rule/date pairs."""
    settings = tenancy.reminder_settings
    return [
        RuleSource(DiaryEventType.LEASE_EXPIRY, settings.lease_expiry, tenancy.lease_end_date),
        RuleSource(DiaryEventType.RENT_REVIEW, settings.rent_review, tenancy.rent_review_date),
        RuleSource(DiaryEventType.TENANCY_BREAK, settings.tenancy_break, tenancy.break_date),
    ]


def _humanize(value: str) -> str:
    return value.replace("_", " ")


def describe_event(event_type: DiaryEventType, tenancy: Tenancy, event_date: date) -> tuple[str, str]:
    """Build the title and description shown for an event."""
    shown = event_date.strftime(_DISPLAY_DATE)

    if event_type is DiaryEventType.LEASE_EXPIRY:
        return (
            f"Lease Expiry - {tenancy.tenant_name}",
            f"Lease expires on {shown}",
        )

    if event_type is DiaryEventType.RENT_REVIEW:
        description = f"Rent review due on {shown}"
        if tenancy.rent_review_type is not None:
            description += f" ({_humanize(tenancy.rent_review_type.value).upper()})"
        return f"Rent Review - {tenancy.tenant_name}", description

    description = f"Break clause available from {shown}"
    if tenancy.break_type is not None:
        description += f" ({_humanize(tenancy.break_type.value)})"
    return f"Tenancy Break - {tenancy.tenant_name}", description


def _is_eligible(
    tenancy: Tenancy,
    unit: Unit | None,
    prop: Property | None,
) -> bool:
    if tenancy.status is not TenancyStatus.ACTIVE or not tenancy.is_active:
        return False
    # Unresolved parents fall back to placeholders; hidden parents hide the tenancy
    if unit is not None and not unit.is_active:
        return False
    if prop is not None and not prop.is_active:
        return False
    return True


def derive_events(
    tenancies: Iterable[Tenancy],
    units_by_id: Mapping[str, Unit],
    properties_by_id: Mapping[str, Property],
    today: date,
    default_months_before: int = DEFAULT_MONTHS_BEFORE,
) -> list[DiaryEvent]:
    """
    Compute the active diary events for a set of tenancies.

    Events carry default annotations (pending, no comments); the caller
    merges persisted annotations on top. Duplicate tenancies are ignored.
    """
    events: dict[str, DiaryEvent] = {}
    now = utc_now()

    for tenancy in tenancies:
        unit = units_by_id.get(tenancy.unit_id)
        prop = properties_by_id.get(unit.property_id) if unit is not None else None

        if not _is_eligible(tenancy, unit, prop):
            continue

        for source in rule_sources(tenancy):
            months = effective_months_before(source.rule, default_months_before)
            if not is_rule_active(source.rule.enabled, source.target_date, months, today):
                continue

            event_id = make_event_id(source.event_type, tenancy.id)
            if event_id in events:
                continue

            title, description = describe_event(
                source.event_type, tenancy, source.target_date  # type: ignore[arg-type]
            )
            events[event_id] = DiaryEvent(
                id=event_id,
                event_type=source.event_type,
                event_date=source.target_date,  # type: ignore[arg-type]
                title=title,
                description=description,
                tenancy_id=tenancy.id,
                unit_id=unit.id if unit is not None else None,
                property_id=prop.id if prop is not None else None,
                property_name=prop.name if prop is not None else UNKNOWN_PROPERTY,
                unit_number=unit.unit_number if unit is not None else UNKNOWN_UNIT,
                tenant_name=tenancy.tenant_name,
                monthly_rent=tenancy.monthly_rent,
                created_at=now,
                updated_at=now,
            )

    return list(events.values())


def apply_annotations(
    events: Iterable[DiaryEvent],
    annotations: Mapping[str, DiaryAnnotation],
) -> list[DiaryEvent]:
    """Overlay saved status, comments and timestamps onto derived events."""
    merged = []
    for event in events:
        note = annotations.get(event.id)
        if note is None:
            merged.append(event)
            continue
        merged.append(
            event.model_copy(
                update={
                    "status": note.status,
                    "comments": note.comments,
                    "created_at": note.created_at,
                    "updated_at": note.updated_at,
                }
            )
        )
    return merged


def exclude_hidden(
    events: Iterable[DiaryEvent],
    archived_ids: Iterable[str],
    dismissed: Mapping[str, DismissedEvent],
) -> list[DiaryEvent]:
    """Drop archived events and dismissed occurrences."""
    archived = set(archived_ids)
    visible = []
    for event in events:
        if event.id in archived:
            continue
        marker = dismissed.get(event.id)
        if marker is not None and marker.suppresses(event):
            continue
        visible.append(event)
    return visible


def sort_events(events: Iterable[DiaryEvent]) -> list[DiaryEvent]:
    """Soonest first; ties ordered by id."""
    return sorted(events, key=lambda e: (e.event_date, e.id))


def urgent_subset(
    events: Iterable[DiaryEvent],
    today: date,
    window_days: int = 30,
    limit: int = 5,
) -> tuple[list[DiaryEvent], int]:
    """
    Pick the dashboard's most urgent events.

    Returns the first `limit` events due within `window_days`, ordered by
    days until the event, and the count of further in-window events.
    """
    in_window = [e for e in events if e.days_until(today) <= window_days]
    in_window.sort(key=lambda e: (e.days_until(today), e.id))
    return in_window[:limit], max(0, len(in_window) - limit)
