"""Recurrence parsing utilities for household scheduling."""

import re

from src.domain.recurrence import WEEKDAY_NAMES, Frequency, RecurrenceRule


_FREQUENCY_ALIASES: dict[str, Frequency] = {
    "every other week": Frequency.BIWEEKLY,
    "fortnightly": Frequency.BIWEEKLY,
    "bi-weekly": Frequency.BIWEEKLY,
    "annually": Frequency.YEARLY,
    "every day": Frequency.DAILY,
    "every week": Frequency.WEEKLY,
    "every month": Frequency.MONTHLY,
    "every quarter": Frequency.QUARTERLY,
    "every year": Frequency.YEARLY,
}

_UNIT_FREQUENCIES: dict[str, Frequency] = {
    "day": Frequency.DAILY,
    "week": Frequency.WEEKLY,
    "month": Frequency.MONTHLY,
    "quarter": Frequency.QUARTERLY,
    "year": Frequency.YEARLY,
}


def _ordinal(n: int) -> str:
    suffix = "th"
    if n in (1, 21, 31):
        suffix = "st"
    elif n in (2, 22):
        suffix = "nd"
    elif n in (3, 23):
        suffix = "rd"
    return f"{n}{suffix}"


def parse_frequency(token: str) -> Frequency:
    """Parse a frequency token such as "weekly" or "fortnightly".

    Raises:
        ValueError: If the token is not a known frequency
    """
    normalized = " ".join(token.lower().split())
    if normalized in _FREQUENCY_ALIASES:
        return _FREQUENCY_ALIASES[normalized]
    try:
        return Frequency(normalized)
    except ValueError:
        options = ", ".join(f.value for f in Frequency)
        msg = f"Invalid frequency: {token}. Use one of: {options}"
        raise ValueError(msg) from None


def parse_recurrence(recurrence: str) -> RecurrenceRule:
    """Parse a recurrence phrase into an enabled RecurrenceRule.

    Supports:
    - Frequency tokens (e.g., "daily", "biweekly", "fortnightly")
    - Interval format (e.g., "every 3 days", "every 2 weeks")
    - Weekday format (e.g., "every monday", "every monday and thursday")
    - Day-of-month format (e.g., "monthly on the 15th")

    Raises:
        ValueError: If recurrence format is invalid
    """
    recurrence_lower = " ".join(recurrence.lower().split())

    match = re.match(r"^every\s+(\d+)\s+(day|week|month|quarter|year)s?$", recurrence_lower)
    if match:
        interval = int(match.group(1))
        if interval < 1:
            msg = f"Invalid recurrence format: {recurrence}. Interval must be at least 1"
            raise ValueError(msg)
        return RecurrenceRule(enabled=True, frequency=_UNIT_FREQUENCIES[match.group(2)], interval=interval)

    day_names = "|".join(WEEKDAY_NAMES)
    weekday_match = re.match(rf"^every\s+((?:{day_names})(?:\s*(?:,|and)\s*(?:{day_names}))*)$", recurrence_lower)
    if weekday_match:
        days = re.findall(day_names, weekday_match.group(1))
        return RecurrenceRule(enabled=True, frequency=Frequency.WEEKLY, days_of_week=days)

    monthly_match = re.match(r"^monthly\s+on\s+the\s+(\d{1,2})(?:st|nd|rd|th)?$", recurrence_lower)
    if monthly_match:
        return RecurrenceRule(
            enabled=True,
            frequency=Frequency.MONTHLY,
            day_of_month=int(monthly_match.group(1)),
        )

    try:
        return RecurrenceRule(enabled=True, frequency=parse_frequency(recurrence_lower))
    except ValueError:
        msg = (
            f"Invalid recurrence format: {recurrence}. "
            f"Use 'daily', 'weekly', 'every X days', 'every [weekday]', or 'monthly on the Nth'"
        )
        raise ValueError(msg) from None


def rule_to_human(rule: RecurrenceRule) -> str:
    """Convert a RecurrenceRule to human-readable text.

    Returns:
        Description such as "every 2 weeks" or "monthly on the 31st until 2024-06-30"
    """
    if not rule.enabled:
        return "not recurring"

    if rule.frequency == Frequency.BIWEEKLY:
        text = "every other week"
    elif rule.interval == 1:
        text = rule.frequency.value
    else:
        unit = {
            Frequency.DAILY: "days",
            Frequency.WEEKLY: "weeks",
            Frequency.MONTHLY: "months",
            Frequency.QUARTERLY: "quarters",
            Frequency.YEARLY: "years",
        }[rule.frequency]
        text = f"every {rule.interval} {unit}"

    if rule.frequency == Frequency.WEEKLY and rule.days_of_week:
        days = [WEEKDAY_NAMES[d].capitalize() for d in sorted(rule.days_of_week)]
        text = f"{text} on {', '.join(days)}"

    if rule.frequency in (Frequency.MONTHLY, Frequency.QUARTERLY) and rule.day_of_month:
        text = f"{text} on the {_ordinal(rule.day_of_month)}"

    if rule.end_date is not None:
        text = f"{text} until {rule.end_date.date().isoformat()}"

    return text
