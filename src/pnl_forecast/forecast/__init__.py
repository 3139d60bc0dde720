"""Forecast trajectory engine.

Turns a closed-trade ledger into one labeled series: the realized
cumulative PnL curve followed by a statistically derived projection
with percentile bands.

Key components
--------------
LedgerQuery / filter_trades   Model + window + category selection
full_profile / recent_profile Distribution statistics and spread coefficients
avg_trades_per_day            Trade cadence
build_actual                  Cumulative PnL and trend overlays
plan_steps / generate_forecast  Forward projection
merge_trajectory              Ordered, labeled output with trade details
ForecastEngine                Composition of all of the above
"""

from .actual import ActualTrajectory, TrendModel, build_actual
from .cadence import avg_trades_per_day
from .engine import ForecastEngine, TrajectoryResult, run_forecast
from .generator import ForecastPlan, generate_forecast, plan_steps
from .ledger_filter import LedgerQuery, filter_trades
from .merger import merge_trajectory
from .statistics import (
    DistributionProfile,
    SpreadCoefficients,
    full_profile,
    recent_profile,
)

__all__ = [
    "ActualTrajectory",
    "TrendModel",
    "build_actual",
    "avg_trades_per_day",
    "ForecastEngine",
    "TrajectoryResult",
    "run_forecast",
    "ForecastPlan",
    "generate_forecast",
    "plan_steps",
    "LedgerQuery",
    "filter_trades",
    "merge_trajectory",
    "DistributionProfile",
    "SpreadCoefficients",
    "full_profile",
    "recent_profile",
]
