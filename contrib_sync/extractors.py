import re
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from .errors import InvalidObservationError
from .log import get_logger
from .models import (
    CalendarCell,
    ExtractionResult,
    ExtractionStats,
    ObservedCount,
    SourceTag,
)

logger = get_logger(__name__)

COUNT_TEXT = re.compile(r"^(\d+)\s+contribution")
NO_CONTRIBUTIONS = "No contribution"

# Coarse shading levels mapped to a rough count.
LEVEL_COUNTS: Dict[str, int] = {"0": 0, "1": 2, "2": 5, "3": 10, "4": 15}


class NoContributions(Exception):
    """Raised by an extractor that positively knows the day is empty."""


def _int_or_zero(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


class Extractor(Protocol):
    source: SourceTag

    def extract(self, cell: CalendarCell) -> Optional[int]:
        ...


class _LabelTextExtractor:
    attribute = ""

    def extract(self, cell: CalendarCell) -> Optional[int]:
        text = getattr(cell, self.attribute)
        if not text:
            return None
        text = text.strip()
        match = COUNT_TEXT.match(text)
        if match:
            return _int_or_zero(match.group(1)) or None
        if NO_CONTRIBUTIONS in text:
            raise NoContributions()
        return None


class TooltipExtractor(_LabelTextExtractor):
    """Tooltip text, e.g. "10 contributions on March 21, 2022"."""

    source = SourceTag.ARIA_LABELLEDBY
    attribute = "aria_labelledby_text"


class AriaLabelExtractor(_LabelTextExtractor):
    source = SourceTag.ARIA_LABEL
    attribute = "aria_label"


class DataCountExtractor:
    source = SourceTag.DATA_COUNT

    def extract(self, cell: CalendarCell) -> Optional[int]:
        if not cell.data_count:
            return None
        return _int_or_zero(cell.data_count) or None


class DataLevelExtractor:
    source = SourceTag.DATA_LEVEL

    def extract(self, cell: CalendarCell) -> Optional[int]:
        if not cell.data_level:
            return None
        return LEVEL_COUNTS.get(cell.data_level.strip()) or None


DEFAULT_CHAIN: Tuple[Extractor, ...] = (
    TooltipExtractor(),
    AriaLabelExtractor(),
    DataCountExtractor(),
    DataLevelExtractor(),
)


class ExtractorChain:
    """Ranked extractor strategies; the first one that yields a count wins."""

    def __init__(self, extractors: Iterable[Extractor] = DEFAULT_CHAIN):
        self.extractors: List[Extractor] = list(extractors)

    def extract(self, cell: CalendarCell) -> Optional[ObservedCount]:
        if not cell.date:
            return None
        try:
            day = date.fromisoformat(cell.date)
        except ValueError as exc:
            raise InvalidObservationError(f"Bad calendar date '{cell.date}'") from exc
        for extractor in self.extractors:
            count = extractor.extract(cell)
            if count:
                return ObservedCount(date=day, count=count, source=extractor.source)
        return None

    def extract_all(
        self, cells: Iterable[CalendarCell], total_from_page: Optional[int] = None
    ) -> ExtractionResult:
        observed: List[ObservedCount] = []
        stats = ExtractionStats(by_source={tag.value: 0 for tag in SourceTag})
        for cell in cells:
            try:
                entry = self.extract(cell)
            except NoContributions:
                stats.skipped_no_contributions += 1
                continue
            if entry is None:
                continue
            stats.by_source[entry.source.value] += 1
            observed.append(entry)

        total = sum(entry.count for entry in observed)
        capture_rate = None
        if total_from_page:
            capture_rate = round(total / total_from_page * 100, 1)
            if total != total_from_page:
                logger.warning(
                    "capture_incomplete",
                    extracted=total,
                    expected=total_from_page,
                    capture_rate=capture_rate,
                )
        logger.info("calendar_extracted", days=len(observed), total=total)
        return ExtractionResult(
            observed=observed,
            stats=stats,
            total_extracted=total,
            total_from_page=total_from_page,
            capture_rate=capture_rate,
        )
