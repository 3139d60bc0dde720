"""Custom exception hierarchy for the forecast engine.

Numeric degeneracy (zero variance, zero elapsed days, empty windows) is
never an error here; those resolve to ``None`` statistics.  Only problems
reaching or reading the ledger abort a run.
"""


class ForecastError(Exception):
    """Base exception for all forecast engine errors."""


# --- Configuration ---
class ConfigError(ForecastError):
    """Invalid or missing configuration."""


# --- Data ---
class DataError(ForecastError):
    """Ledger data could not be obtained or understood."""


class LedgerUnavailableError(DataError):
    """The ledger store could not be reached or read.

    Raised before any trajectory is produced; callers never receive a
    partial series.
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Ledger unavailable [{source}]: {reason}")


class LedgerFormatError(DataError):
    """Ledger rows are missing required columns or hold unparseable values."""
