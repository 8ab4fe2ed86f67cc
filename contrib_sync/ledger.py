import os
import re
from collections import Counter
from datetime import date
from typing import Dict, Iterable, List, Protocol

from .errors import LedgerError
from .log import get_logger
from .models import RecordedLedger

logger = get_logger(__name__)

DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def parse_ledger_lines(lines: Iterable[str]) -> RecordedLedger:
    counts: Counter = Counter()
    for line in lines:
        match = DATE_PREFIX.match(line)
        if not match:
            continue
        try:
            day = date.fromisoformat(match.group(1))
        except ValueError:
            # 2023-13-45 and the like
            continue
        counts[day] += 1
    return dict(counts)


class LedgerStore(Protocol):
    def load(self) -> RecordedLedger:
        ...

    def lines(self) -> List[str]:
        ...

    def stats(self) -> Dict[str, int]:
        ...


def _stats(backend: str, ledger: RecordedLedger) -> Dict[str, int]:
    return {
        "backend": backend,
        "days": len(ledger),
        "total": sum(ledger.values()),
    }


class InMemoryLedger:
    """Ledger held as a list of lines, e.g. supplied with an API request."""

    def __init__(self, lines: Iterable[str] = ()):
        self._lines: List[str] = list(lines)

    def load(self) -> RecordedLedger:
        return parse_ledger_lines(self._lines)

    def lines(self) -> List[str]:
        return list(self._lines)

    def stats(self) -> Dict[str, int]:
        return _stats("memory", self.load())


class FileLedger:
    """Read-only view of the contributions file kept in the target repository."""

    def __init__(self, path: str):
        self.path = path

    @property
    def exists(self) -> bool:
        return os.path.exists(self.path)

    def lines(self) -> List[str]:
        if not self.exists:
            return []
        try:
            with open(self.path, "r", encoding="utf-8", errors="replace") as handle:
                return handle.read().splitlines()
        except OSError as exc:
            raise LedgerError(f"Could not read ledger {self.path}: {exc}") from exc

    def load(self) -> RecordedLedger:
        if not self.exists:
            logger.info("ledger_missing", path=self.path)
            return {}
        ledger = parse_ledger_lines(self.lines())
        logger.debug("ledger_loaded", path=self.path, days=len(ledger))
        return ledger

    def stats(self) -> Dict[str, int]:
        return _stats("file", self.load())


def load_ledger(path: str) -> RecordedLedger:
    return FileLedger(path).load()
