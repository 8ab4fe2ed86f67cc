from typing import List, Sequence

from .errors import ScheduleConfigError
from .log import get_logger
from .models import (
    AnnounceDirective,
    AuthorIdentity,
    Batch,
    CommitDirective,
    DelayDirective,
    DeltaEntry,
    Directive,
    InitDirective,
    PublishDirective,
    Schedule,
    ScheduleConfig,
)
from .synthesizer import synthesize

logger = get_logger(__name__)

DEFAULT_LEDGER_FILE = "contributions.txt"
DEFAULT_LEDGER_HEADER = "GitHub Contributions History"


def check_config(config: ScheduleConfig) -> None:
    if config.batch_threshold <= 0:
        raise ScheduleConfigError(
            f"Batch threshold must be positive, got {config.batch_threshold}"
        )
    if config.inter_batch_delay_seconds < 0:
        raise ScheduleConfigError(
            f"Inter-batch delay must not be negative, got {config.inter_batch_delay_seconds}"
        )


def partition(
    deltas: Sequence[DeltaEntry], config: ScheduleConfig
) -> List[List[DeltaEntry]]:
    """Greedy date-atomic packing of deltas into groups.

    A date is never split: when it does not fit in a non-empty group it opens
    the next one, and a date larger than the threshold gets a group to itself.
    """
    if not deltas:
        return []
    if not config.batching_enabled:
        return [list(deltas)]

    groups: List[List[DeltaEntry]] = []
    current: List[DeltaEntry] = []
    current_count = 0
    for entry in deltas:
        if current and current_count + entry.owed_count > config.batch_threshold:
            groups.append(current)
            current = []
            current_count = 0
        current.append(entry)
        current_count += entry.owed_count
    groups.append(current)
    return groups


def schedule(
    deltas: Sequence[DeltaEntry],
    config: ScheduleConfig,
    author: AuthorIdentity,
    fresh: bool = False,
    ledger_file: str = DEFAULT_LEDGER_FILE,
    ledger_header: str = DEFAULT_LEDGER_HEADER,
) -> Schedule:
    check_config(config)

    batches: List[Batch] = []
    for number, group in enumerate(partition(deltas, config), start=1):
        batch = Batch(index=number)
        for entry in group:
            batch.dates.append(entry.date)
            batch.events.extend(
                synthesize(entry.date, entry.owed_count, start_ordinal=entry.recorded_total)
            )
            batch.cumulative_count += entry.owed_count
        batches.append(batch)

    total_events = sum(batch.cumulative_count for batch in batches)
    directives: List[Directive] = []
    if fresh and batches:
        directives.append(InitDirective(ledger_file=ledger_file, header=ledger_header))

    for batch in batches:
        last = batch.index == len(batches)
        if config.batching_enabled:
            directives.append(
                AnnounceDirective(
                    batch_index=batch.index,
                    total_batches=len(batches),
                    event_count=batch.cumulative_count,
                    day_count=len(batch.dates),
                )
            )
        directives.extend(
            CommitDirective(event=event, author=author, ledger_file=ledger_file)
            for event in batch.events
        )
        directives.append(
            PublishDirective(batch_index=batch.index, final=last, total_events=total_events)
        )
        if config.batching_enabled and not last:
            directives.append(DelayDirective(seconds=config.inter_batch_delay_seconds))

    logger.info(
        "schedule_built",
        batches=len(batches),
        events=total_events,
        batching=config.batching_enabled,
    )
    return Schedule(batches=batches, directives=directives)
