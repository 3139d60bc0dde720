"""Tests for distribution statistics and spread coefficients."""

import math

import numpy as np
import pytest

from pnl_forecast.forecast.statistics import (
    full_profile,
    percentile_cont,
    recent_profile,
    sample_stddev,
)


class TestPrimitives:
    def test_percentile_cont_interpolates(self):
        values = np.array([-0.5, 1.0, 2.0])
        assert percentile_cont(values, 0.5) == pytest.approx(1.0)
        assert percentile_cont(values, 0.25) == pytest.approx(0.25)
        assert percentile_cont(values, 0.75) == pytest.approx(1.5)
        assert percentile_cont(values, 0.01) == pytest.approx(-0.47)

    def test_percentile_cont_empty_is_none(self):
        assert percentile_cont(np.array([]), 0.5) is None

    def test_sample_stddev_uses_ddof_one(self):
        assert sample_stddev(np.array([1.0, 3.0])) == pytest.approx(math.sqrt(2.0))

    def test_sample_stddev_needs_two_values(self):
        assert sample_stddev(np.array([4.0])) is None
        assert sample_stddev(np.array([])) is None


class TestFullProfile:
    def test_basic_profile(self, three_trades):
        profile = full_profile(three_trades)
        assert profile.count == 3
        assert profile.median == pytest.approx(1.0)
        assert profile.stddev == pytest.approx(math.sqrt(19 / 12))
        assert set(profile.percentiles) == {"p01", "p05", "p25", "p75", "p95", "p99"}
        assert profile.percentiles["p25"] == pytest.approx(0.25)

    def test_percentiles_are_ordered(self, daily_trades):
        p = full_profile(daily_trades).percentiles
        ordered = [p["p01"], p["p05"], p["p25"], p["p75"], p["p95"], p["p99"]]
        assert ordered == sorted(ordered)

    def test_custom_percentile_set(self, three_trades):
        profile = full_profile(three_trades, [5, 95])
        assert set(profile.percentiles) == {"p05", "p95"}

    def test_empty_set_is_undefined(self):
        profile = full_profile([])
        assert profile.count == 0
        assert profile.median is None
        assert profile.stddev is None
        assert all(v is None for v in profile.percentiles.values())


class TestRecentProfile:
    def test_offsets_normalized_by_recent_stddev(self, three_trades):
        spread = recent_profile(three_trades)
        stddev = math.sqrt(19 / 12)
        assert spread.window_count == 3
        assert spread.offsets["p75"] == pytest.approx((1.5 - 1.0) / stddev)
        assert spread.offsets["p25"] == pytest.approx((0.25 - 1.0) / stddev)
        assert spread.defined

    def test_window_takes_most_recent(self, three_trades):
        spread = recent_profile(three_trades, window_size=2)
        assert spread.window_count == 2
        assert spread.median == pytest.approx(0.75)
        assert spread.stddev == pytest.approx(math.sqrt(3.125))

    def test_offsets_are_monotonic(self, daily_trades):
        offsets = recent_profile(daily_trades, window_size=25).offsets
        values = [offsets[k] for k in ("p01", "p05", "p25", "p75", "p95", "p99")]
        assert values == sorted(values)

    def test_zero_stddev_leaves_offsets_undefined(self, make_trade, base_time):
        trades = [make_trade(i, 0.5, base_time) for i in range(1, 6)]
        spread = recent_profile(trades)
        assert spread.stddev == 0.0
        assert not spread.defined
        assert spread.offset_or_zero("p05") == 0.0

    def test_single_trade_window_is_undefined(self, three_trades):
        spread = recent_profile(three_trades, window_size=1)
        assert spread.window_count == 1
        assert all(v is None for v in spread.offsets.values())

    def test_empty_set_is_undefined(self):
        spread = recent_profile([])
        assert spread.window_count == 0
        assert spread.median is None
        assert not spread.defined
