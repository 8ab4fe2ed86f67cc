from datetime import date

from contrib_sync.models import DeltaEntry, ObservedCount, SourceTag


def observed(day: str, count: int, source: SourceTag = SourceTag.ARIA_LABELLEDBY) -> ObservedCount:
    return ObservedCount(date=date.fromisoformat(day), count=count, source=source)


def delta(day: str, owed: int, recorded: int = 0) -> DeltaEntry:
    return DeltaEntry(
        date=date.fromisoformat(day),
        owed_count=owed,
        observed_total=owed + recorded,
        recorded_total=recorded,
        source=SourceTag.ARIA_LABELLEDBY,
    )
