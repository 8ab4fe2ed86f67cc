from datetime import date, datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SourceTag(str, Enum):
    """Where a day's count was read from, in priority order."""

    ARIA_LABELLEDBY = "aria-labelledby"
    ARIA_LABEL = "aria-label"
    DATA_COUNT = "data-count"
    DATA_LEVEL = "data-level"

    @property
    def approximate(self) -> bool:
        return self is SourceTag.DATA_LEVEL


RecordedLedger = Dict[date, int]


class ObservedCount(BaseModel):
    """Contribution count seen on the calendar for one day."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int
    source: SourceTag


class DeltaEntry(BaseModel):
    """Commits still owed for a day after subtracting the ledger."""

    model_config = ConfigDict(frozen=True)

    date: date
    owed_count: int
    observed_total: int
    recorded_total: int
    source: SourceTag
    approximate: bool = False


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    sequence_index: int
    timestamp: str
    idempotency_key: str


class Batch(BaseModel):
    index: int
    dates: List[date] = Field(default_factory=list)
    events: List[Event] = Field(default_factory=list)
    cumulative_count: int = 0


class ScheduleConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    batching_enabled: bool = True
    batch_threshold: int = 500
    inter_batch_delay_seconds: int = 300


class AuthorIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class InitDirective(BaseModel):
    kind: Literal["init"] = "init"
    ledger_file: str
    header: str


class AnnounceDirective(BaseModel):
    kind: Literal["announce"] = "announce"
    batch_index: int
    total_batches: int
    event_count: int
    day_count: int


class CommitDirective(BaseModel):
    kind: Literal["commit"] = "commit"
    event: Event
    author: AuthorIdentity
    ledger_file: str


class PublishDirective(BaseModel):
    kind: Literal["publish"] = "publish"
    batch_index: int
    final: bool
    total_events: int


class DelayDirective(BaseModel):
    kind: Literal["delay"] = "delay"
    seconds: int


Directive = Annotated[
    Union[
        InitDirective, AnnounceDirective, CommitDirective, PublishDirective, DelayDirective
    ],
    Field(discriminator="kind"),
]


class Schedule(BaseModel):
    """Batches plus the ordered directive stream handed to the executor."""

    batches: List[Batch] = Field(default_factory=list)
    directives: List[Directive] = Field(default_factory=list)

    @property
    def event_count(self) -> int:
        return sum(batch.cumulative_count for batch in self.batches)

    def directives_of(self, kind: str) -> List[Directive]:
        return [d for d in self.directives if d.kind == kind]


class CalendarCell(BaseModel):
    """Attributes scraped from one day cell of the contribution calendar."""

    date: Optional[str] = None
    aria_labelledby_text: Optional[str] = None
    aria_label: Optional[str] = None
    data_count: Optional[str] = None
    data_level: Optional[str] = None


class ExtractionStats(BaseModel):
    by_source: Dict[str, int] = Field(default_factory=dict)
    skipped_no_contributions: int = 0


class ExtractionResult(BaseModel):
    observed: List[ObservedCount]
    stats: ExtractionStats
    total_extracted: int
    total_from_page: Optional[int] = None
    capture_rate: Optional[float] = None


class RunResult(BaseModel):
    started_at: datetime
    finished_at: datetime
    observed_days: int
    observed_total: int
    recorded_total: int
    owed_total: int
    dates_affected: int
    batch_count: int
    incremental: bool
    approximate_dates: List[date] = Field(default_factory=list)
    missing_dates: List[date] = Field(default_factory=list)
    script_path: Optional[str] = None
