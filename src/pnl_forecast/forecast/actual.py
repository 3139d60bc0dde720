"""Actual trajectory — realized cumulative PnL plus trend overlays.

Over the filtered set in ``(close_time, id)`` order this computes, once,
as arrays:

* the running total of ``net_profit * scale_factor`` (cumulative PnL);
* a 1-based trade index ``t`` over the trades that are *not* in the
  forecast category, with its own running total ``y``.  Rows of earlier
  forecast output fed back into the ledger therefore never bend the
  trend lines;
* three overlays evaluated per actual row:

  ``cum_regression``         ``t * b``, least-squares slope of ``y`` on ``t``
  ``cum_median_regression``  ``t * median_net_profit * scale_factor``
  ``cum_median_cum_pnl``     ``t * k + first``, with
                             ``k = (y_last - y_first) / (t_last - t_first)``

Overlays are ``None`` where the row has no index or the slope is undefined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

import numpy as np

from ..core.enums import PointLabel
from ..core.models import TradeRecord, TrajectoryPoint
from .statistics import DistributionProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendModel:
    """Slopes fitted over the index-bearing subset.

    Parameters
    ----------
    n : int
        Trades in the index-bearing subset.
    regression_slope : float | None
        Least-squares slope ``b`` of cumulative PnL on trade index.
    median_slope : float | None
        Slope ``k`` of the line through the first and last cumulative values.
    median_anchor : float | None
        First cumulative value of the subset.
    median_net_profit : float | None
        Population median trade profit driving the median-regression line.
    """

    n: int = 0
    regression_slope: float | None = None
    median_slope: float | None = None
    median_anchor: float | None = None
    median_net_profit: float | None = None

    def regression_at(self, t: int) -> float | None:
        if self.regression_slope is None:
            return None
        return t * self.regression_slope

    def median_slope_at(self, t: int) -> float | None:
        if self.median_slope is None or self.median_anchor is None:
            return None
        return t * self.median_slope + self.median_anchor

    def median_regression_at(self, t: int, scale_factor: float) -> float | None:
        if self.median_net_profit is None:
            return None
        return t * self.median_net_profit * scale_factor


@dataclass(frozen=True)
class ActualTrajectory:
    """Precomputed actual series, one entry per filtered trade."""

    close_times: list[datetime] = field(default_factory=list)
    trade_ids: list[int] = field(default_factory=list)
    cum_pnl: np.ndarray = field(default_factory=lambda: np.zeros(0))
    index: list[int | None] = field(default_factory=list)
    cum_regression: list[float | None] = field(default_factory=list)
    cum_median_regression: list[float | None] = field(default_factory=list)
    cum_median_cum_pnl: list[float | None] = field(default_factory=list)
    trend: TrendModel = field(default_factory=TrendModel)

    def __len__(self) -> int:
        return len(self.close_times)

    @property
    def empty(self) -> bool:
        return not self.close_times

    @property
    def last_time(self) -> datetime | None:
        return self.close_times[-1] if self.close_times else None

    @property
    def last_cum_pnl(self) -> float | None:
        return float(self.cum_pnl[-1]) if self.close_times else None

    @property
    def last_median_slope_value(self) -> float | None:
        """Median-slope overlay on the last actual row, the forecast's start."""
        return self.cum_median_cum_pnl[-1] if self.close_times else None

    def to_points(self) -> list[TrajectoryPoint]:
        return [
            TrajectoryPoint(
                timestamp=self.close_times[i],
                label=PointLabel.REAL,
                cum_pnl=float(self.cum_pnl[i]),
                cum_regression=self.cum_regression[i],
                cum_median_regression=self.cum_median_regression[i],
                cum_median_cum_pnl=self.cum_median_cum_pnl[i],
                trade_id=self.trade_ids[i],
            )
            for i in range(len(self.close_times))
        ]


# ---------------------------------------------------------------------------
# Trend fitting
# ---------------------------------------------------------------------------

def regression_slope(t: np.ndarray, y: np.ndarray) -> float | None:
    """Closed-form least-squares slope.

    ``b = (n*sum(t*y) - sum(t)*sum(y)) / (n*sum(t^2) - sum(t)^2)``;
    ``None`` when the denominator is zero.
    """
    n = t.size
    if n == 0:
        return None
    sum_t = float(t.sum())
    denom = n * float((t * t).sum()) - sum_t * sum_t
    if denom == 0:
        return None
    return (n * float((t * y).sum()) - sum_t * float(y.sum())) / denom


def median_slope(t: np.ndarray, y: np.ndarray) -> tuple[float | None, float | None]:
    """Slope and anchor of the line through the first and last points."""
    if t.size == 0:
        return None, None
    first = float(y[0])
    span = float(t[-1] - t[0])
    if span == 0:
        return None, first
    return (float(y[-1]) - first) / span, first


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build_actual(
    filtered: Sequence[TradeRecord],
    profile: DistributionProfile,
    *,
    scale_factor: float = 10.0,
    forecast_category: str = "predict",
) -> ActualTrajectory:
    """Build the actual trajectory over *filtered* (already ordered)."""
    if not filtered:
        return ActualTrajectory()

    scaled = np.fromiter(
        (t.net_profit for t in filtered), dtype=np.float64, count=len(filtered)
    ) * scale_factor
    cum_pnl = np.cumsum(scaled)

    bearing = np.fromiter(
        (t.category_name != forecast_category for t in filtered),
        dtype=bool,
        count=len(filtered),
    )
    subset_t = np.arange(1, int(bearing.sum()) + 1, dtype=np.float64)
    subset_y = np.cumsum(scaled[bearing])

    b = regression_slope(subset_t, subset_y)
    k, first = median_slope(subset_t, subset_y)
    trend = TrendModel(
        n=int(subset_t.size),
        regression_slope=b,
        median_slope=k,
        median_anchor=first,
        median_net_profit=profile.median,
    )
    logger.debug(
        "Trend fitted over %d trades: b=%s k=%s first=%s",
        trend.n,
        b,
        k,
        first,
    )

    index: list[int | None] = []
    next_t = 1
    for is_bearing in bearing:
        if is_bearing:
            index.append(next_t)
            next_t += 1
        else:
            index.append(None)

    return ActualTrajectory(
        close_times=[t.close_time for t in filtered],
        trade_ids=[t.id for t in filtered],
        cum_pnl=cum_pnl,
        index=index,
        cum_regression=[
            trend.regression_at(t) if t is not None else None for t in index
        ],
        cum_median_regression=[
            trend.median_regression_at(t, scale_factor) if t is not None else None
            for t in index
        ],
        cum_median_cum_pnl=[
            trend.median_slope_at(t) if t is not None else None for t in index
        ],
        trend=trend,
    )
