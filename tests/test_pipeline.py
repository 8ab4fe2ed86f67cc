from datetime import date

import pytest

from contrib_sync.errors import InvalidObservationError, ScheduleConfigError
from contrib_sync.ledger import FileLedger, InMemoryLedger
from contrib_sync.models import ScheduleConfig, SourceTag
from contrib_sync.pipeline import ContributionPipeline

from helpers import observed

HEADER = "GitHub Contributions History"


def applied_lines(pipeline):
    """What the executor would have appended after running the last script."""
    return [d.event.idempotency_key for d in pipeline.last_schedule.directives_of("commit")]


def test_single_day_run(author, batched, empty_ledger):
    pipeline = ContributionPipeline(empty_ledger, author, batched)
    result = pipeline.run([observed("2023-01-01", 3)])
    assert result.owed_total == 3
    assert result.batch_count == 1
    assert result.missing_dates == []
    assert not result.incremental
    assert pipeline.last_script.count("git commit -m \"Contribution for 2023-01-01\"") == 3
    assert pipeline.last_schedule.directives[0].kind == "init"
    assert len(pipeline.last_schedule.directives_of("publish")) == 1
    assert pipeline.last_schedule.directives_of("delay") == []


def test_second_run_is_a_no_op(author, batched, empty_ledger):
    observations = [observed("2023-01-02", 2), observed("2023-01-01", 3)]
    first = ContributionPipeline(empty_ledger, author, batched)
    first.run(observations)

    ledger = InMemoryLedger([HEADER] + applied_lines(first))
    second = ContributionPipeline(ledger, author, batched)
    result = second.run(observations)
    assert result.incremental
    assert result.owed_total == 0
    assert result.batch_count == 0
    assert result.missing_dates == []
    assert second.last_script == ""
    assert second.last_schedule.directives == []


def test_partial_run_resumes_numbering(author, batched):
    ledger = InMemoryLedger(
        [
            HEADER,
            "2023-01-01 12:00:00 - Contribution #1",
            "2023-01-01 12:00:01 - Contribution #2",
        ]
    )
    pipeline = ContributionPipeline(ledger, author, batched)
    result = pipeline.run([observed("2023-01-01", 3)])
    assert result.owed_total == 1
    assert applied_lines(pipeline) == ["2023-01-01 12:00:02 - Contribution #3"]
    assert pipeline.last_schedule.directives[0].kind == "announce"


def test_observations_are_sorted(author, batched, empty_ledger):
    pipeline = ContributionPipeline(empty_ledger, author, batched)
    pipeline.run([observed("2023-03-01", 1), observed("2023-01-01", 1), observed("2023-02-01", 1)])
    assert [line[:10] for line in applied_lines(pipeline)] == [
        "2023-01-01",
        "2023-02-01",
        "2023-03-01",
    ]


def test_approximate_dates_reported(author, batched, empty_ledger):
    pipeline = ContributionPipeline(empty_ledger, author, batched)
    result = pipeline.run(
        [observed("2023-01-01", 2, SourceTag.DATA_LEVEL), observed("2023-01-02", 1)]
    )
    assert result.approximate_dates == [date(2023, 1, 1)]


def test_approximate_dates_excluded_are_not_missing(author, batched, empty_ledger):
    pipeline = ContributionPipeline(empty_ledger, author, batched, approximate_policy="exclude")
    result = pipeline.run(
        [observed("2023-01-01", 2, SourceTag.DATA_LEVEL), observed("2023-01-02", 1)]
    )
    assert result.owed_total == 1
    assert result.missing_dates == []


@pytest.mark.parametrize(
    "observations",
    [[], [observed("2023-01-01", 2), observed("2023-01-02", -1)]],
)
def test_bad_observations_abort_before_output(tmp_path, author, batched, empty_ledger, observations):
    target = tmp_path / "2023.sh"
    pipeline = ContributionPipeline(empty_ledger, author, batched)
    with pytest.raises(InvalidObservationError):
        pipeline.run(observations, write_to=str(target))
    assert not target.exists()
    assert pipeline.last_result is None


def test_bad_config_aborts_before_output(tmp_path, author, empty_ledger):
    target = tmp_path / "2023.sh"
    pipeline = ContributionPipeline(empty_ledger, author, ScheduleConfig(batch_threshold=0))
    with pytest.raises(ScheduleConfigError):
        pipeline.run([observed("2023-01-01", 1)], write_to=str(target))
    assert not target.exists()


def test_script_written_and_ledger_untouched(tmp_path, author, batched):
    ledger_path = tmp_path / "contributions.txt"
    target = tmp_path / "out" / "2023.sh"
    pipeline = ContributionPipeline(FileLedger(str(ledger_path)), author, batched)
    result = pipeline.run([observed("2023-06-01", 2)], write_to=str(target))
    assert result.script_path == str(target)
    text = target.read_text(encoding="utf-8")
    assert 'GIT_AUTHOR_DATE="2023-06-01T12:00:01-0400"' in text
    assert not ledger_path.exists()
