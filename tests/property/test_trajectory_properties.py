"""Property tests: trajectory invariants over random ledgers.

Uses hypothesis to generate trade ledgers of arbitrary size, profit
distribution and timing, and checks the running-sum, horizon and band
ordering guarantees of the engine.
"""

from datetime import datetime, timedelta

import pytest
from hypothesis import given, settings, strategies as st

from pnl_forecast.core.models import TradeRecord
from pnl_forecast.forecast.engine import ForecastEngine

BASE = datetime(2025, 1, 1)
BAND_ORDER = ("p01", "p05", "p25", "p75", "p95", "p99")
TOL = 1e-6

profits = st.floats(min_value=-500.0, max_value=500.0, allow_nan=False, allow_infinity=False)
minute_offsets = st.integers(min_value=0, max_value=60 * 24 * 30)
ledgers = st.lists(st.tuples(profits, minute_offsets), min_size=1, max_size=120)


def _trades(rows) -> list[TradeRecord]:
    return [
        TradeRecord(
            id=i,
            symbol="BTCUSDT",
            model_name="model_1232",
            category_name="AUTO",
            open_time=BASE + timedelta(minutes=offset),
            close_time=BASE + timedelta(minutes=offset),
            net_profit=profit,
        )
        for i, (profit, offset) in enumerate(rows, start=1)
    ]


def _close(a: float, b: float) -> bool:
    return abs(a - b) <= TOL * (1.0 + abs(a) + abs(b))


class TestActualProperties:
    @given(rows=ledgers)
    @settings(max_examples=100, deadline=None)
    def test_last_point_is_scaled_total(self, rows):
        trades = _trades(rows)
        result = ForecastEngine().run(trades)
        expected = sum(t.net_profit for t in trades) * 10
        assert result.actual_points[-1].cum_pnl == pytest.approx(expected, abs=1e-6)

    @given(rows=ledgers)
    @settings(max_examples=100, deadline=None)
    def test_running_sum(self, rows):
        points = ForecastEngine().run(_trades(rows)).actual_points
        for prev, cur in zip(points, points[1:]):
            assert cur.cum_pnl == pytest.approx(
                prev.cum_pnl + cur.trade.net_profit * 10, abs=1e-6
            )

    @given(rows=ledgers)
    @settings(max_examples=100, deadline=None)
    def test_actual_points_ordered(self, rows):
        points = ForecastEngine().run(_trades(rows)).actual_points
        keys = [(p.timestamp, p.trade_id) for p in points]
        assert keys == sorted(keys)


class TestForecastProperties:
    @given(rows=ledgers)
    @settings(max_examples=100, deadline=None)
    def test_timestamps_cover_horizon(self, rows):
        result = ForecastEngine().run(_trades(rows))
        last = result.actual_points[-1].timestamp
        stamps = [p.timestamp for p in result.forecast_points]
        assert len(stamps) >= 1
        assert stamps[0] > last
        assert all(a < b for a, b in zip(stamps, stamps[1:]))
        assert stamps[-1] - last == timedelta(days=3)

    @given(rows=ledgers)
    @settings(max_examples=100, deadline=None)
    def test_bands_are_ordered(self, rows):
        for point in ForecastEngine().run(_trades(rows)).forecast_points:
            values = [point.bands[b] for b in BAND_ORDER]
            for lower, upper in zip(values, values[1:]):
                assert lower <= upper or _close(lower, upper)
            assert point.bands["p25"] <= point.cum_pnl or _close(point.bands["p25"], point.cum_pnl)
            assert point.cum_pnl <= point.bands["p75"] or _close(point.cum_pnl, point.bands["p75"])

    @given(
        profit_list=st.lists(profits, min_size=1, max_size=40),
        minutes=st.integers(min_value=0, max_value=60 * 23),
    )
    @settings(max_examples=50, deadline=None)
    def test_single_day_gives_single_step(self, profit_list, minutes):
        # Every trade closes on the same calendar day
        rows = [(p, min(minutes + i, 60 * 24 - 1)) for i, p in enumerate(profit_list)]
        result = ForecastEngine().run(_trades(rows))
        assert result.cadence is None
        assert len(result.forecast_points) == 1

    @given(value=profits, n=st.integers(min_value=2, max_value=30))
    @settings(max_examples=50, deadline=None)
    def test_constant_profit_collapses_bands(self, value, n):
        rows = [(value, i * 60 * 24) for i in range(n)]
        for point in ForecastEngine().run(_trades(rows)).forecast_points:
            assert all(_close(v, point.cum_pnl) for v in point.bands.values())
