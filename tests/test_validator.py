from datetime import date

from contrib_sync.validator import emitted_dates_from_script, validate


def test_missing_dates_are_reported_sorted():
    observed = {date(2023, 1, 3), date(2023, 1, 1), date(2023, 1, 2)}
    assert validate({date(2023, 1, 2)}, observed) == [date(2023, 1, 1), date(2023, 1, 3)]


def test_nothing_missing():
    assert validate({date(2023, 1, 1)}, {date(2023, 1, 1)}) == []
    assert validate(set(), set()) == []


def test_extra_emitted_dates_are_not_reported():
    assert validate({date(2023, 1, 1), date(2023, 1, 5)}, {date(2023, 1, 1)}) == []


def test_dates_parsed_from_script():
    script = (
        'GIT_AUTHOR_DATE="2023-01-01T12:00:00-0500" git commit\n'
        'GIT_AUTHOR_DATE="2023-07-04T12:00:01-0400" git commit\n'
        'GIT_AUTHOR_DATE="2023-07-04T12:00:02-0400" git commit\n'
    )
    assert emitted_dates_from_script(script) == {date(2023, 1, 1), date(2023, 7, 4)}
