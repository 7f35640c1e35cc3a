"""
Weekly Planner API - Day and Week Helpers.

Canonical day names, week normalisation and the day-of-week
comparison used when adapting a plan.
"""

from datetime import date, timedelta
from typing import Callable, Iterable, List

from app.utils.errors import ValidationError

# Injected "today" provider
Clock = Callable[[], date]

DAYS_OF_WEEK: List[str] = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


def week_start_for(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_end_for(week_start: date) -> date:
    """Return the Sunday closing the week that starts on ``week_start``."""
    return week_start + timedelta(days=6)


def day_name(day: date) -> str:
    """Lowercase weekday name, e.g. 'monday'."""
    return DAYS_OF_WEEK[day.weekday()]


def normalize_day(name: str) -> str:
    """
    Normalize a day name to its canonical lowercase form.

    Raises:
        ValidationError: If the name is not a day of the week.
    """
    normalized = str(name).strip().lower()
    if normalized not in DAYS_OF_WEEK:
        raise ValidationError(
            message="Invalid day name",
            detail=f"'{name}' is not one of {', '.join(DAYS_OF_WEEK)}"
        )
    return normalized


def normalize_days(names: Iterable[str]) -> List[str]:
    """Normalize and de-duplicate day names, returned in week order."""
    normalized = {normalize_day(name) for name in names}
    return [day for day in DAYS_OF_WEEK if day in normalized]


def comparison_index(name: str) -> int:
    """
    Position of a day inside the 7-day cycle for future/past checks.

    Monday..Saturday map to 0..5 and Sunday wraps to 0.
    """
    index = DAYS_OF_WEEK.index(name)
    return 0 if index == 6 else index


def is_future_day(name: str, today: date) -> bool:
    """True if ``name`` lies strictly after today's weekday by name position."""
    return comparison_index(name) > comparison_index(day_name(today))
