"""Forecast generator — project the actual curve over a fixed horizon.

The horizon (3 days by default) is split into as many steps as the
cadence says trades would close in that time, with at least one step.
Step ``i`` (1-based) carries:

* central estimate ``last + (i - 1) * median * scale`` — the first step
  restates the last actual level;
* one band per tracked percentile, the same formula with
  ``median + offset_p * stddev`` in place of ``median``;
* the median-slope continuation ``last_median_slope + i * k``.

Regression overlays are not extended.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import timedelta

from ..core.enums import PointLabel
from ..core.models import TrajectoryPoint
from .actual import ActualTrajectory
from .statistics import DistributionProfile, SpreadCoefficients

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForecastPlan:
    """Number of forecast points spread evenly over the horizon."""

    steps: int
    horizon: timedelta

    @property
    def step_interval(self) -> timedelta:
        return self.horizon / self.steps

    def offset(self, i: int) -> timedelta:
        """Distance of step *i* from the last actual point.

        Computed from the horizon rather than by repeated addition, so the
        last step lands exactly on the horizon.
        """
        return self.horizon * i / self.steps


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def plan_steps(
    avg_trades_per_day: float | None,
    horizon: timedelta = timedelta(days=3),
) -> ForecastPlan:
    """Size the forecast to the cadence; a single step when it is undefined."""
    horizon_days = horizon / timedelta(days=1)
    if avg_trades_per_day is None:
        steps = 1
    else:
        steps = max(1, _round_half_up(avg_trades_per_day * horizon_days))
    return ForecastPlan(steps=steps, horizon=horizon)


def generate_forecast(
    actual: ActualTrajectory,
    profile: DistributionProfile,
    spread: SpreadCoefficients,
    plan: ForecastPlan,
    *,
    scale_factor: float = 10.0,
    forecast_category: str = "predict",
) -> list[TrajectoryPoint]:
    """Emit ``plan.steps`` predicted points after the last actual point.

    Returns an empty list when there is no actual history to extend.
    """
    if actual.empty or profile.median is None:
        return []

    last_time = actual.last_time
    last_cum = actual.last_cum_pnl
    median = profile.median
    # Undefined dispersion collapses every band onto the central estimate
    stddev = profile.stddev or 0.0
    k = actual.trend.median_slope
    last_median_slope = actual.last_median_slope_value

    per_step_bands = {
        name: (median + spread.offset_or_zero(name) * stddev) * scale_factor
        for name in spread.offsets
    }

    points: list[TrajectoryPoint] = []
    for i in range(1, plan.steps + 1):
        growth = i - 1
        continuation = (
            last_median_slope + i * k
            if last_median_slope is not None and k is not None
            else None
        )
        points.append(
            TrajectoryPoint(
                timestamp=last_time + plan.offset(i),
                label=PointLabel.PREDICTED,
                cum_pnl=last_cum + growth * median * scale_factor,
                bands={
                    name: last_cum + growth * step
                    for name, step in per_step_bands.items()
                },
                cum_median_cum_pnl=continuation,
                category_name=forecast_category,
            )
        )

    logger.debug(
        "Generated %d forecast points every %s from %s",
        plan.steps,
        plan.step_interval,
        last_time,
    )
    return points
