"""Week keys: the ISO date of the Monday that starts a planning week."""

from datetime import date, timedelta

from mealweek.errors import ValidationError

DAYS_OF_WEEK = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def week_start_for(day: date) -> date:
    return day - timedelta(days=day.weekday())


def is_week_key(day: date) -> bool:
    return day.weekday() == 0


def parse_week_key(value: str | date) -> date:
    """Parse an ISO date that must fall on a Monday."""
    if isinstance(value, date):
        parsed = value
    else:
        try:
            parsed = date.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationError(f"Invalid week key {value!r}: {e}") from e
    if not is_week_key(parsed):
        raise ValidationError(
            f"Week key {parsed.isoformat()} is a {DAYS_OF_WEEK[parsed.weekday()]}, expected a Monday"
        )
    return parsed


def previous_week(week_start: date) -> date:
    return week_start - timedelta(weeks=1)


def day_index(day_of_week: str) -> int:
    return DAYS_OF_WEEK.index(day_of_week)
