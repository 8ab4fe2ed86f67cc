from datetime import date
from typing import List

from .errors import InvalidObservationError
from .models import Event
from .timezones import resolve_offset

START_HOUR = 12
# Seconds between noon and the end of the day.
MAX_UNITS_PER_DAY = (24 - START_HOUR) * 3600


def time_of_day(sequence_index: int) -> str:
    hours = START_HOUR + sequence_index // 3600
    minutes = (sequence_index // 60) % 60
    seconds = sequence_index % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def idempotency_key(day: date, clock: str, ordinal: int) -> str:
    return f"{day.isoformat()} {clock} - Contribution #{ordinal}"


def synthesize(day: date, owed_count: int, start_ordinal: int = 0) -> List[Event]:
    """One event per owed unit, a second apart starting at noon.

    Numbering resumes after ``start_ordinal`` units already in the ledger so
    keys and timestamps never collide with work applied by an earlier run.
    """
    if owed_count < 0 or start_ordinal < 0:
        raise InvalidObservationError(
            f"Cannot synthesize {owed_count} events from ordinal {start_ordinal}"
            f" for {day.isoformat()}"
        )
    if start_ordinal + owed_count > MAX_UNITS_PER_DAY:
        raise InvalidObservationError(
            f"{start_ordinal + owed_count} events do not fit between noon and"
            f" midnight on {day.isoformat()}"
        )

    offset = resolve_offset(day)
    events: List[Event] = []
    for i in range(owed_count):
        index = start_ordinal + i
        clock = time_of_day(index)
        events.append(
            Event(
                date=day,
                sequence_index=index,
                timestamp=f"{day.isoformat()}T{clock}{offset}",
                idempotency_key=idempotency_key(day, clock, index + 1),
            )
        )
    return events
