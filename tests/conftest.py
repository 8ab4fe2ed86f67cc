import pytest

from contrib_sync.ledger import InMemoryLedger
from contrib_sync.models import AuthorIdentity, ScheduleConfig


@pytest.fixture
def author():
    return AuthorIdentity(name="Ada Lovelace", email="ada@example.com")


@pytest.fixture
def batched():
    return ScheduleConfig(batching_enabled=True, batch_threshold=500, inter_batch_delay_seconds=300)


@pytest.fixture
def unbatched():
    return ScheduleConfig(batching_enabled=False, batch_threshold=500, inter_batch_delay_seconds=300)


@pytest.fixture
def empty_ledger():
    return InMemoryLedger()
