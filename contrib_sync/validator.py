import re
from datetime import date
from typing import Iterable, List, Set

AUTHOR_DATE = re.compile(
    r'GIT_AUTHOR_DATE="(\d{4}-\d{2}-\d{2})T\d{2}:\d{2}:\d{2}[+-]\d{4}"'
)


def validate(emitted_dates: Iterable[date], observed_dates: Iterable[date]) -> List[date]:
    """Dates that were owed commits but never made it into the output."""
    return sorted(set(observed_dates) - set(emitted_dates))


def emitted_dates_from_script(script: str) -> Set[date]:
    return {date.fromisoformat(match) for match in AUTHOR_DATE.findall(script)}
