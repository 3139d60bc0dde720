"""Forecast engine — compose the stages into one trajectory run.

Flow::

    ledger filter ─┬─> statistics (full profile, recent spread)
                   ├─> cadence
                   └─> actual trajectory
                            └─> forecast generator ─> merger ─> points

Each statistic is computed once and shared read-only.  The engine keeps
no state between runs, so concurrent runs for different models are
independent.

Usage::

    engine = ForecastEngine(settings.forecast)
    result = engine.run(trades, settings.filter.to_query())
    print(result.summary())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..core.config import ForecastConfig, Settings
from ..core.interfaces import ILedgerStore
from ..core.models import TradeRecord, TrajectoryPoint
from .actual import ActualTrajectory, TrendModel, build_actual
from .cadence import avg_trades_per_day
from .generator import ForecastPlan, generate_forecast, plan_steps
from .ledger_filter import LedgerQuery, filter_trades
from .merger import merge_trajectory
from .statistics import (
    DistributionProfile,
    SpreadCoefficients,
    full_profile,
    recent_profile,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrajectoryResult:
    """Merged series plus the statistics that produced it."""

    points: list[TrajectoryPoint] = field(default_factory=list)
    filtered: list[TradeRecord] = field(default_factory=list)
    profile: DistributionProfile = field(default_factory=DistributionProfile)
    spread: SpreadCoefficients = field(default_factory=SpreadCoefficients)
    cadence: float | None = None
    trend: TrendModel = field(default_factory=TrendModel)
    plan: ForecastPlan | None = None

    @property
    def actual_points(self) -> list[TrajectoryPoint]:
        return [p for p in self.points if not p.is_predicted]

    @property
    def forecast_points(self) -> list[TrajectoryPoint]:
        return [p for p in self.points if p.is_predicted]

    def summary(self) -> dict[str, Any]:
        """Return summary dict for logging."""
        actual = self.actual_points
        forecast = self.forecast_points
        return {
            "trades": self.profile.count,
            "stddev": self.profile.stddev,
            "median": self.profile.median,
            "recent_window": self.spread.window_count,
            "spread_defined": self.spread.defined,
            "trades_per_day": self.cadence,
            "regression_slope": self.trend.regression_slope,
            "median_slope": self.trend.median_slope,
            "forecast_steps": self.plan.steps if self.plan else 0,
            "step_interval": str(self.plan.step_interval) if self.plan else None,
            "last_cum_pnl": actual[-1].cum_pnl if actual else None,
            "forecast_end_cum_pnl": forecast[-1].cum_pnl if forecast else None,
        }


class ForecastEngine:
    """Turn a trade ledger into a labeled actual + predicted PnL series.

    Parameters
    ----------
    config : ForecastConfig
        Scale factor, recent window, horizon, tracked percentiles and the
        forecast category label.
    """

    def __init__(self, config: ForecastConfig | None = None) -> None:
        self._config = config or ForecastConfig()

    @property
    def config(self) -> ForecastConfig:
        return self._config

    def run(
        self,
        trades: Iterable[TradeRecord],
        query: LedgerQuery | None = None,
    ) -> TrajectoryResult:
        """Filter *trades* with *query* and build the trajectory."""
        filtered = filter_trades(trades, query or LedgerQuery())
        return self.build(filtered)

    def build(self, filtered: list[TradeRecord]) -> TrajectoryResult:
        """Build the trajectory from an already filtered, ordered set."""
        cfg = self._config
        if not filtered:
            logger.info("No trades matched; trajectory is empty")
            return TrajectoryResult()

        profile = full_profile(filtered, cfg.percentiles)
        spread = recent_profile(filtered, cfg.recent_window, cfg.percentiles)
        cadence = avg_trades_per_day(filtered)

        actual: ActualTrajectory = build_actual(
            filtered,
            profile,
            scale_factor=cfg.scale_factor,
            forecast_category=cfg.forecast_category,
        )
        plan = plan_steps(cadence, cfg.horizon)
        forecast = generate_forecast(
            actual,
            profile,
            spread,
            plan,
            scale_factor=cfg.scale_factor,
            forecast_category=cfg.forecast_category,
        )
        points = merge_trajectory(
            actual.to_points(),
            forecast,
            filtered,
            forecast_category=cfg.forecast_category,
        )

        result = TrajectoryResult(
            points=points,
            filtered=filtered,
            profile=profile,
            spread=spread,
            cadence=cadence,
            trend=actual.trend,
            plan=plan,
        )
        logger.info("Trajectory built", extra=result.summary())
        return result


async def run_forecast(store: ILedgerStore, settings: Settings) -> TrajectoryResult:
    """Read the ledger once, then build the trajectory.

    Raises:
        LedgerUnavailableError: If the store cannot be read.  No partial
            trajectory is produced.
    """
    query = settings.filter.to_query()
    trades = await store.fetch_trades(query)
    logger.info("Fetched %d trades from ledger", len(trades))
    # Stores already filter; re-applying keeps the ordering guarantee
    # independent of the store implementation.
    return ForecastEngine(settings.forecast).run(trades, query)
