import os
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional

from .delta import check_observations, compute_deltas, sort_observations
from .ledger import LedgerStore
from .log import get_logger
from .models import AuthorIdentity, ObservedCount, RunResult, Schedule, ScheduleConfig
from .render import render_script
from .scheduler import (
    DEFAULT_LEDGER_FILE,
    DEFAULT_LEDGER_HEADER,
    check_config,
    schedule,
)
from .validator import emitted_dates_from_script, validate

logger = get_logger(__name__)


class ContributionPipeline:
    """Observed calendar counts in, guarded commit script out."""

    def __init__(
        self,
        ledger: LedgerStore,
        author: AuthorIdentity,
        schedule_config: ScheduleConfig,
        approximate_policy: str = "include",
        ledger_file: str = DEFAULT_LEDGER_FILE,
        ledger_header: str = DEFAULT_LEDGER_HEADER,
        git_remote: str = "origin",
        git_branch: str = "main",
    ):
        self.ledger = ledger
        self.author = author
        self.schedule_config = schedule_config
        self.approximate_policy = approximate_policy
        self.ledger_file = ledger_file
        self.ledger_header = ledger_header
        self.git_remote = git_remote
        self.git_branch = git_branch
        self.last_result: Optional[RunResult] = None
        self.last_schedule: Optional[Schedule] = None
        self.last_script: str = ""

    def run(
        self,
        observed: Iterable[ObservedCount],
        write_to: Optional[str] = None,
        ledger: Optional[LedgerStore] = None,
    ) -> RunResult:
        """Plan one import. ``ledger`` replaces the configured ledger for this run."""
        started_at = datetime.now(timezone.utc)
        check_config(self.schedule_config)
        observations = sort_observations(observed)
        check_observations(observations)

        recorded = (ledger if ledger is not None else self.ledger).load()
        recorded_total = sum(recorded.values())
        incremental = recorded_total > 0
        deltas = compute_deltas(observations, recorded, self.approximate_policy)
        owed_total = sum(entry.owed_count for entry in deltas)
        logger.info(
            "import_summary",
            first_date=observations[0].date.isoformat(),
            last_date=observations[-1].date.isoformat(),
            observed_total=sum(entry.count for entry in observations),
            already_imported=recorded_total,
            new_to_import=owed_total,
            dates_affected=len(deltas),
            incremental=incremental,
        )

        planned = schedule(
            deltas,
            self.schedule_config,
            self.author,
            fresh=not incremental,
            ledger_file=self.ledger_file,
            ledger_header=self.ledger_header,
        )
        script = render_script(planned, remote=self.git_remote, branch=self.git_branch)

        script_path = None
        if write_to and script:
            script_path = self._write(script, write_to)

        missing = validate(
            emitted_dates_from_script(script), [entry.date for entry in deltas]
        )
        if missing:
            logger.warning(
                "dates_missing_from_script",
                count=len(missing),
                sample=[day.isoformat() for day in missing[:10]],
            )
        elif deltas:
            logger.info("dates_validated", dates=len(deltas))
        else:
            logger.info("nothing_to_import")

        approximate: List[date] = [entry.date for entry in deltas if entry.approximate]
        self.last_schedule = planned
        self.last_script = script
        self.last_result = RunResult(
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            observed_days=len(observations),
            observed_total=sum(entry.count for entry in observations),
            recorded_total=recorded_total,
            owed_total=owed_total,
            dates_affected=len(deltas),
            batch_count=len(planned.batches),
            incremental=incremental,
            approximate_dates=approximate,
            missing_dates=missing,
            script_path=script_path,
        )
        return self.last_result

    def _write(self, script: str, path: str) -> str:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(script)
        logger.info("script_written", path=path, size=len(script))
        return path
