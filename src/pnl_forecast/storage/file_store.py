"""File-based ledger store — CSV or Parquet exports of the trade table.

Reads the whole file with pandas (PyArrow engine for Parquet), maps each
row to a :class:`TradeRecord` and applies the ledger filter.  Useful for
offline runs against a dump of the ledger.

The file must carry at least the columns in ``REQUIRED_FIELDS``; every
descriptive column it also carries is passed through.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError

from pnl_forecast.core.errors import LedgerFormatError, LedgerUnavailableError
from pnl_forecast.core.models import DESCRIPTIVE_FIELDS, REQUIRED_FIELDS, TradeRecord
from pnl_forecast.forecast.ledger_filter import LedgerQuery, filter_trades

logger = logging.getLogger(__name__)

_DATETIME_COLUMNS = ("open_time", "close_time")
_KNOWN_COLUMNS = frozenset(DESCRIPTIVE_FIELDS) | frozenset(REQUIRED_FIELDS)


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in (".parquet", ".pq"):
        return pd.read_parquet(path, engine="pyarrow")
    if suffix in (".csv", ".txt"):
        return pd.read_csv(path)
    raise LedgerFormatError(f"Unsupported ledger file type: {path.suffix!r}")


def _naive_utc(column: pd.Series) -> pd.Series:
    """Parse timestamps; offset-aware values are converted to naive UTC.

    The Postgres ledger stores naive timestamps, and filter cutoffs are
    compared against them.
    """
    parsed = pd.to_datetime(column, utc=True)
    return parsed.dt.tz_localize(None)


def _to_python(value: Any) -> Any:
    """Unwrap pandas scalars so file records match database records."""
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, pd.Timedelta):
        return value.to_pytimedelta()
    return value


def frame_to_trades(df: pd.DataFrame) -> list[TradeRecord]:
    """Convert a ledger DataFrame to trade records.

    Raises:
        LedgerFormatError: If required columns are missing or a row fails
            validation.
    """
    missing = [c for c in REQUIRED_FIELDS if c not in df.columns]
    if missing:
        raise LedgerFormatError(f"Ledger is missing columns: {', '.join(missing)}")

    df = df[[c for c in df.columns if c in _KNOWN_COLUMNS]].copy()
    for col in _DATETIME_COLUMNS:
        try:
            df[col] = _naive_utc(df[col])
        except (TypeError, ValueError) as exc:
            raise LedgerFormatError(f"Unparseable {col}: {exc}") from exc
    df["category_name"] = df["category_name"].fillna("")
    # Nullable cells become None rather than NaN/NaT
    df = df.astype(object).where(df.notna(), None)

    try:
        return [
            TradeRecord(**{k: _to_python(v) for k, v in row.items()})
            for row in df.to_dict(orient="records")
        ]
    except ValidationError as exc:
        raise LedgerFormatError(f"Invalid ledger row: {exc}") from exc


class FileLedgerStore:
    """``ILedgerStore`` reading a CSV or Parquet ledger export.

    Args:
        path: Ledger file.  ``.csv`` and ``.parquet`` are supported.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[TradeRecord]:
        """Read every record in the file (unfiltered)."""
        if not self._path.exists():
            raise LedgerUnavailableError(str(self._path), "file not found")
        try:
            df = _read_frame(self._path)
        except (OSError, ValueError) as exc:
            logger.error("Failed to read ledger file %s: %s", self._path, exc)
            raise LedgerUnavailableError(str(self._path), str(exc)) from exc
        trades = frame_to_trades(df)
        logger.info("Loaded %d trades from %s", len(trades), self._path)
        return trades

    async def fetch_trades(self, query: LedgerQuery) -> list[TradeRecord]:
        trades = await asyncio.to_thread(self.load)
        return filter_trades(trades, query)
