"""Error hierarchy for contrib-sync.

    ContribSyncError
    ├── InvalidObservationError   # bad observed counts, fatal for the run
    ├── ScheduleConfigError       # batch threshold / delay out of bounds
    └── LedgerError               # ledger exists but cannot be read
"""


class ContribSyncError(Exception):
    """Base class for all contrib-sync errors."""


class InvalidObservationError(ContribSyncError):
    """Observed counts are inconsistent and must not be scheduled."""


class ScheduleConfigError(ContribSyncError):
    """Scheduling configuration is out of bounds."""


class LedgerError(ContribSyncError):
    """The persisted ledger exists but could not be read."""
