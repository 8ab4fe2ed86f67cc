from typing import Iterable, List, Sequence

from .errors import InvalidObservationError
from .log import get_logger
from .models import DeltaEntry, ObservedCount, RecordedLedger

logger = get_logger(__name__)

APPROXIMATE_POLICIES = ("include", "exclude")


def check_observations(observed: Sequence[ObservedCount]) -> None:
    if not observed:
        raise InvalidObservationError("No observed contributions to schedule")
    seen = set()
    for entry in observed:
        if entry.count < 0:
            raise InvalidObservationError(
                f"Negative count {entry.count} observed for {entry.date.isoformat()}"
            )
        if entry.date in seen:
            raise InvalidObservationError(
                f"Date {entry.date.isoformat()} observed more than once"
            )
        seen.add(entry.date)


def sort_observations(observed: Iterable[ObservedCount]) -> List[ObservedCount]:
    return sorted(observed, key=lambda entry: entry.date)


def compute_deltas(
    observed: Sequence[ObservedCount],
    recorded: RecordedLedger,
    approximate_policy: str = "include",
) -> List[DeltaEntry]:
    """Commits still owed per date, in the order the observations were given.

    Days already covered by the ledger (or undercounted on a later pass) are
    dropped, so a second run over the same calendar yields nothing.
    """
    if approximate_policy not in APPROXIMATE_POLICIES:
        raise ValueError(f"Unknown approximate policy '{approximate_policy}'")

    deltas: List[DeltaEntry] = []
    for entry in observed:
        if entry.count < 0:
            raise InvalidObservationError(
                f"Negative count {entry.count} observed for {entry.date.isoformat()}"
            )
        recorded_total = recorded.get(entry.date, 0)
        owed = max(0, entry.count - recorded_total)
        if owed == 0:
            continue
        approximate = entry.source.approximate
        if approximate:
            logger.warning(
                "approximate_count",
                date=entry.date.isoformat(),
                owed=owed,
                policy=approximate_policy,
            )
            if approximate_policy == "exclude":
                continue
        deltas.append(
            DeltaEntry(
                date=entry.date,
                owed_count=owed,
                observed_total=entry.count,
                recorded_total=recorded_total,
                source=entry.source,
                approximate=approximate,
            )
        )
    return deltas
