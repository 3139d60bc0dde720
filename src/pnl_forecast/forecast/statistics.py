"""Distribution statistics over trade net profit.

Two profiles are extracted from the filtered set:

* the **full profile** (count, sample stddev, median, tracked
  percentiles) over every trade, which drives the forecast's central
  tendency and spread magnitude;
* the **recent spread coefficients** over the most recent N trades,
  where each tracked percentile is expressed as
  ``(percentile - median) / stddev``.  Recent volatility shapes the tails;
  the full-history stddev rescales them at forecast time.

Percentiles follow continuous semantics: linear interpolation between
order statistics.  Anything that cannot be computed is ``None``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from ..core.models import TradeRecord, band_name

logger = logging.getLogger(__name__)

DEFAULT_PERCENTILES: tuple[int, ...] = (1, 5, 25, 75, 95, 99)


@dataclass(frozen=True)
class DistributionProfile:
    """Net-profit distribution over a record set."""

    count: int = 0
    stddev: float | None = None
    median: float | None = None
    percentiles: dict[str, float | None] = field(default_factory=dict)


@dataclass(frozen=True)
class SpreadCoefficients:
    """Recent-window percentile offsets normalized by recent stddev."""

    window_count: int = 0
    median: float | None = None
    stddev: float | None = None
    offsets: dict[str, float | None] = field(default_factory=dict)

    @property
    def defined(self) -> bool:
        return any(v is not None for v in self.offsets.values())

    def offset_or_zero(self, name: str) -> float:
        """Offset for band *name*, 0.0 when undefined.

        A zero offset collapses the band onto the central estimate.
        """
        value = self.offsets.get(name)
        return value if value is not None else 0.0


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def percentile_cont(values: np.ndarray, fraction: float) -> float | None:
    """Continuous percentile of *values* at *fraction* (0..1)."""
    if values.size == 0:
        return None
    return float(np.quantile(values, fraction, method="linear"))


def sample_stddev(values: np.ndarray) -> float | None:
    """Sample standard deviation (ddof=1); ``None`` below two values."""
    if values.size < 2:
        return None
    return float(np.std(values, ddof=1))


def _net_profits(trades: Sequence[TradeRecord]) -> np.ndarray:
    return np.fromiter((t.net_profit for t in trades), dtype=np.float64, count=len(trades))


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

def full_profile(
    filtered: Sequence[TradeRecord],
    percentiles: Sequence[int] = DEFAULT_PERCENTILES,
) -> DistributionProfile:
    """Distribution profile over every trade in *filtered*."""
    values = _net_profits(filtered)
    return DistributionProfile(
        count=int(values.size),
        stddev=sample_stddev(values),
        median=percentile_cont(values, 0.5),
        percentiles={
            band_name(p): percentile_cont(values, p / 100.0) for p in percentiles
        },
    )


def recent_profile(
    filtered: Sequence[TradeRecord],
    window_size: int = 300,
    percentiles: Sequence[int] = DEFAULT_PERCENTILES,
) -> SpreadCoefficients:
    """Spread coefficients over the most recent *window_size* trades.

    *filtered* must already be ordered by ``(close_time, id)``; the window
    is its tail.  All offsets are ``None`` when the window holds fewer than
    two trades or has zero dispersion.
    """
    window = filtered[-window_size:] if window_size > 0 else []
    values = _net_profits(window)
    median = percentile_cont(values, 0.5)
    stddev = sample_stddev(values)

    if median is None or not stddev:
        logger.debug(
            "Spread coefficients undefined (window=%d, stddev=%s)",
            values.size,
            stddev,
        )
        offsets: dict[str, float | None] = {band_name(p): None for p in percentiles}
    else:
        offsets = {
            band_name(p): (percentile_cont(values, p / 100.0) - median) / stddev
            for p in percentiles
        }

    return SpreadCoefficients(
        window_count=int(values.size),
        median=median,
        stddev=stddev,
        offsets=offsets,
    )
