"""Recurrence scheduling and due-date status for every schedulable household item.

Calendar events, chores, cleaning tasks, grocery items, meal plans and personal
reminders all share this engine. Functions here are pure: they never read the
system clock, so callers pass an explicit, timezone-aware ``now``.

Month and year arithmetic uses ``dateutil.relativedelta``, which clamps to the
last day of a short month (Jan 31 + 1 month = Feb 29 in a leap year) instead of
rolling into the following month.
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from src.core.config import constants, settings
from src.domain.notification import NotificationAdvance
from src.domain.recurrence import Frequency, RecurrenceRule, weekday_index
from src.domain.status import EntityKind, TemporalStatus


logger = logging.getLogger(__name__)


ALL_FREQUENCIES: frozenset[Frequency] = frozenset(Frequency)

_SUPPORTED_FREQUENCIES: dict[EntityKind, frozenset[Frequency]] = {
    EntityKind.CALENDAR_EVENT: frozenset(
        {Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY, Frequency.YEARLY}
    ),
    EntityKind.CHORE: frozenset({Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY}),
    EntityKind.CLEANING_TASK: frozenset(
        {Frequency.DAILY, Frequency.WEEKLY, Frequency.BIWEEKLY, Frequency.MONTHLY, Frequency.QUARTERLY}
    ),
    EntityKind.GROCERY_ITEM: frozenset({Frequency.WEEKLY, Frequency.BIWEEKLY, Frequency.MONTHLY}),
    EntityKind.PERSONAL_REMINDER: frozenset(
        {Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY, Frequency.YEARLY}
    ),
}


def _require_aware(value: datetime, name: str) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware, got naive datetime {value.isoformat()}")


def _step(rule: RecurrenceRule) -> timedelta | relativedelta:
    """Return the offset between two consecutive occurrences of a rule."""
    match rule.frequency:
        case Frequency.DAILY:
            return timedelta(days=rule.interval)
        case Frequency.WEEKLY:
            return timedelta(days=constants.DAYS_PER_WEEK * rule.interval)
        case Frequency.BIWEEKLY:
            return timedelta(days=constants.BIWEEKLY_DAYS)
        case Frequency.MONTHLY:
            return relativedelta(months=rule.interval, day=rule.day_of_month)
        case Frequency.QUARTERLY:
            return relativedelta(months=constants.MONTHS_PER_QUARTER * rule.interval, day=rule.day_of_month)
        case Frequency.YEARLY:
            return relativedelta(years=rule.interval)


def _advance_to_weekday(candidate: datetime, days_of_week: frozenset[int]) -> datetime:
    """Move forward to the first date on/after candidate whose weekday is listed."""
    for offset in range(constants.DAYS_PER_WEEK):
        shifted = candidate + timedelta(days=offset)
        if weekday_index(shifted) in days_of_week:
            return shifted
    return candidate


def next_occurrence(
    anchor: datetime,
    rule: RecurrenceRule,
    *,
    honor_days_of_week: bool = False,
) -> datetime | None:
    """Calculate the occurrence that follows an anchor.

    Args:
        anchor: Last completion or original due date (timezone-aware)
        rule: Recurrence rule of the item
        honor_days_of_week: For weekly rules with days_of_week set, move the
            fixed-offset candidate forward to the next listed weekday

    Returns:
        The next occurrence, or None when the rule is disabled or the next
        occurrence would fall strictly after rule.end_date

    Raises:
        ValueError: If anchor is naive
    """
    _require_aware(anchor, "anchor")

    if not rule.enabled:
        return None

    candidate = anchor + _step(rule)

    if honor_days_of_week and rule.frequency == Frequency.WEEKLY and rule.days_of_week:
        candidate = _advance_to_weekday(candidate, rule.days_of_week)

    if rule.end_date is not None and candidate > rule.end_date:
        logger.debug(
            "recurrence_expired",
            extra={"anchor": anchor.isoformat(), "candidate": candidate.isoformat(), "end_date": rule.end_date.isoformat()},
        )
        return None

    return candidate


def occurrences(
    anchor: datetime,
    rule: RecurrenceRule,
    *,
    limit: int | None = None,
    until: datetime | None = None,
    honor_days_of_week: bool = False,
) -> Iterator[datetime]:
    """Yield successive occurrences after anchor.

    Each occurrence is derived from the previous one, the same way completing
    an item rolls it forward. Iteration stops when the rule expires, after
    ``limit`` occurrences, at the first occurrence after ``until``, or at
    constants.MAX_OCCURRENCE_EXPANSION, whichever comes first.
    """
    if until is not None:
        _require_aware(until, "until")

    cap = constants.MAX_OCCURRENCE_EXPANSION if limit is None else min(limit, constants.MAX_OCCURRENCE_EXPANSION)
    current = anchor
    for _ in range(cap):
        current = next_occurrence(current, rule, honor_days_of_week=honor_days_of_week)
        if current is None or (until is not None and current > until):
            return
        yield current


def default_horizon(kind: EntityKind) -> timedelta:
    """Return the configured due-soon horizon for an entity kind."""
    match kind:
        case EntityKind.PET_VACCINE:
            return timedelta(days=settings.vaccine_due_soon_days)
        case EntityKind.PERSONAL_REMINDER:
            return timedelta(hours=settings.reminder_due_soon_hours)
        case EntityKind.CALENDAR_EVENT:
            return timedelta(days=settings.event_due_soon_days)
        case _:
            return timedelta(days=settings.chore_due_soon_days)


def classify(
    due_date: datetime,
    now: datetime,
    completed: bool = False,
    due_soon_horizon: timedelta | None = None,
) -> TemporalStatus:
    """Classify a due date relative to now.

    now == due_date counts as DUE_SOON: the due-soon boundary is inclusive and
    OVERDUE starts strictly after the due date. Completed items are CURRENT.

    Args:
        due_date: When the item is due (timezone-aware)
        now: Caller-supplied current instant (timezone-aware)
        completed: Whether the item is already done
        due_soon_horizon: How far ahead counts as due soon; defaults to the chore horizon

    Returns:
        TemporalStatus of the item
    """
    _require_aware(due_date, "due_date")
    _require_aware(now, "now")

    horizon = default_horizon(EntityKind.CHORE) if due_soon_horizon is None else due_soon_horizon
    if horizon < timedelta(0):
        raise ValueError(f"due_soon_horizon must not be negative, got {horizon}")

    if completed:
        return TemporalStatus.CURRENT
    if now > due_date:
        return TemporalStatus.OVERDUE
    if due_date - now <= horizon:
        return TemporalStatus.DUE_SOON
    return TemporalStatus.CURRENT


def classify_for(kind: EntityKind, due_date: datetime, now: datetime, completed: bool = False) -> TemporalStatus:
    """Classify using the default horizon of an entity kind."""
    return classify(due_date, now, completed, default_horizon(kind))


def notification_times(anchor: datetime, advances: Iterable[NotificationAdvance]) -> list[datetime]:
    """Fan a reminder's anchor out into its notification fire-times.

    The anchor itself is always included, so a reminder without advances still
    fires once. Zero-valued advances collapse into the anchor entry.

    Returns:
        Fire-times sorted ascending, without duplicates
    """
    _require_aware(anchor, "anchor")
    times = {anchor - advance.as_timedelta() for advance in advances}
    times.add(anchor)
    return sorted(times)


def pending_notification_times(
    anchor: datetime,
    advances: Iterable[NotificationAdvance],
    now: datetime,
) -> list[datetime]:
    """Return notification fire-times that are not yet in the past."""
    _require_aware(now, "now")
    return [t for t in notification_times(anchor, advances) if t >= now]


def snooze_until(now: datetime, minutes: int | None = None) -> datetime:
    """Return when a reminder snoozed at ``now`` should fire again."""
    _require_aware(now, "now")
    minutes = settings.default_snooze_minutes if minutes is None else minutes
    if minutes < 1:
        raise ValueError(f"Snooze length must be at least 1 minute, got {minutes}")
    return now + timedelta(minutes=minutes)


def is_snoozed(snoozed_until: datetime | None, now: datetime) -> bool:
    """Return whether a reminder is still snoozed at ``now``."""
    _require_aware(now, "now")
    return snoozed_until is not None and now < snoozed_until


def supported_frequencies(kind: EntityKind) -> frozenset[Frequency]:
    """Return the frequencies an entity kind accepts."""
    return _SUPPORTED_FREQUENCIES.get(kind, ALL_FREQUENCIES)


def validate_frequency_for(kind: EntityKind, rule: RecurrenceRule) -> RecurrenceRule:
    """Check an enabled rule's frequency is one the entity kind supports.

    Raises:
        ValueError: If the frequency is not supported by the entity kind
    """
    allowed = supported_frequencies(kind)
    if rule.enabled and rule.frequency not in allowed:
        options = ", ".join(sorted(allowed))
        msg = f"Frequency '{rule.frequency}' is not supported for {kind}. Use one of: {options}"
        raise ValueError(msg)
    return rule
