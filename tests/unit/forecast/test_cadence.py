"""Tests for the trade cadence estimator."""

from datetime import datetime, timedelta

import pytest

from pnl_forecast.forecast.cadence import avg_trades_per_day, elapsed_days


class TestElapsedDays:
    def test_uses_date_component_only(self, make_trade):
        trades = [
            make_trade(1, 1.0, datetime(2025, 4, 10, 23, 59)),
            make_trade(2, 1.0, datetime(2025, 4, 11, 0, 1)),
        ]
        assert elapsed_days(trades) == 1

    def test_same_day_is_zero(self, make_trade, base_time):
        trades = [make_trade(i, 1.0, base_time + timedelta(hours=i)) for i in range(5)]
        assert elapsed_days(trades) == 0

    def test_empty(self):
        assert elapsed_days([]) == 0


class TestAvgTradesPerDay:
    def test_rate(self, daily_trades):
        # 40 trades between day 0 and day 9
        assert avg_trades_per_day(daily_trades) == pytest.approx(40 / 9)

    def test_three_day_rate(self, three_trades):
        assert avg_trades_per_day(three_trades) == pytest.approx(1.5)

    def test_single_day_is_undefined(self, make_trade, base_time):
        trades = [make_trade(i, 1.0, base_time + timedelta(minutes=i)) for i in range(10)]
        assert avg_trades_per_day(trades) is None

    def test_empty_is_undefined(self):
        assert avg_trades_per_day([]) is None
