"""Core domain models used across the forecast engine.

``TradeRecord`` is the immutable ledger fact every stage reads;
``TrajectoryPoint`` is the unit of output handed to exporters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, field_validator

from .enums import PointLabel

# Fields carried through from the ledger to the output untouched, in
# output column order.
DESCRIPTIVE_FIELDS: tuple[str, ...] = (
    "id",
    "symbol",
    "open_time",
    "duration",
    "commission",
    "realized_pnl",
    "percent",
    "qty",
    "avg_price_entry",
    "avg_price_exit",
    "net_profit",
    "max_win_percent",
    "max_loose_percent",
    "peak_qty",
    "profit_deposit",
    "funding",
    "volume",
    "closed_value",
    "open_qty",
    "orders",
    "rounded_qty",
    "trades_count",
    "unit_percent",
    "model_name",
    "maximum_drawdown",
)

REQUIRED_FIELDS: tuple[str, ...] = (
    "id",
    "symbol",
    "open_time",
    "close_time",
    "net_profit",
    "category_name",
    "model_name",
)


# ---------------------------------------------------------------------------
# Ledger record
# ---------------------------------------------------------------------------

class TradeRecord(BaseModel):
    """One closed trade as stored in the ledger.

    Ordering key is ``(close_time, id)``; the id breaks ties between trades
    closing at the same instant.
    """

    model_config = {"frozen": True}

    # Identity
    id: int
    symbol: str
    model_name: str
    category_name: str

    # Timing
    open_time: datetime
    close_time: datetime
    duration: Any = None  # Stored as-is (interval or seconds, per ledger)

    # Result
    net_profit: float
    realized_pnl: float | None = None
    commission: float | None = None
    funding: float | None = None
    percent: float | None = None
    unit_percent: float | None = None
    profit_deposit: float | None = None

    # Size and prices
    qty: float | None = None
    rounded_qty: float | None = None
    open_qty: float | None = None
    peak_qty: float | None = None
    avg_price_entry: float | None = None
    avg_price_exit: float | None = None
    volume: float | None = None
    closed_value: float | None = None
    orders: int | None = None
    trades_count: int | None = None

    # Excursions
    max_win_percent: float | None = None
    max_loose_percent: float | None = None
    maximum_drawdown: float | None = None

    @field_validator("open_time", "close_time")
    @classmethod
    def naive_utc(cls, v: datetime) -> datetime:
        """Offset-aware timestamps are stored as naive UTC, like the ledger."""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @property
    def order_key(self) -> tuple[datetime, int]:
        return (self.close_time, self.id)

    def descriptive_fields(self) -> dict[str, Any]:
        """Return the carried-through fields in output column order."""
        return {name: getattr(self, name) for name in DESCRIPTIVE_FIELDS}


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TrajectoryPoint:
    """One row of the combined actual + predicted PnL series.

    ``bands`` maps band names (``"p01"``, ``"p05"``, ...) to cumulative
    values and is empty for real points.  ``trade`` is the ledger record
    whose close time matches this point exactly, if any.
    """

    timestamp: datetime
    label: PointLabel
    cum_pnl: float
    bands: dict[str, float | None] = field(default_factory=dict)
    cum_regression: float | None = None
    cum_median_regression: float | None = None
    cum_median_cum_pnl: float | None = None
    trade_id: int | None = None  # Source trade of a real point
    trade: TradeRecord | None = None
    category_name: str | None = None

    @property
    def is_predicted(self) -> bool:
        return self.label == PointLabel.PREDICTED


def band_name(percentile: int) -> str:
    """``5`` -> ``"p05"``."""
    return f"p{percentile:02d}"
