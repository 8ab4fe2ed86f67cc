"""Fixed US Eastern offsets for calendar dates.

The rule is encoded directly rather than read from a timezone database so the
offset chosen for a given date never changes between runs: daylight time runs
from the second Sunday of March up to (not including) the first Sunday of
November.
"""

from datetime import date, timedelta

DAYLIGHT_OFFSET = "-0400"
STANDARD_OFFSET = "-0500"

_SUNDAY = 6


def _first_sunday_on_or_after(day: date) -> date:
    return day + timedelta(days=(_SUNDAY - day.weekday()) % 7)


def second_sunday_of_march(year: int) -> date:
    return _first_sunday_on_or_after(date(year, 3, 1)) + timedelta(days=7)


def first_sunday_of_november(year: int) -> date:
    return _first_sunday_on_or_after(date(year, 11, 1))


def is_daylight_time(day: date) -> bool:
    return second_sunday_of_march(day.year) <= day < first_sunday_of_november(day.year)


def resolve_offset(day: date) -> str:
    if is_daylight_time(day):
        return DAYLIGHT_OFFSET
    return STANDARD_OFFSET
