"""Shared fixtures for the pnl-forecast test suite."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

import pytest

from pnl_forecast.core.config import ForecastConfig
from pnl_forecast.core.models import TradeRecord
from pnl_forecast.forecast.ledger_filter import LedgerQuery


def build_trade(
    trade_id: int,
    net_profit: float,
    close_time: datetime,
    *,
    model_name: str = "model_1232_v1",
    category_name: str = "AUTO",
    symbol: str = "BTCUSDT",
    **extra,
) -> TradeRecord:
    """Create a closed trade that opened one hour before it closed."""
    return TradeRecord(
        id=trade_id,
        symbol=symbol,
        model_name=model_name,
        category_name=category_name,
        open_time=close_time - timedelta(hours=1),
        close_time=close_time,
        net_profit=net_profit,
        **extra,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def base_time() -> datetime:
    return datetime(2025, 4, 10, 12, 0, 0)


@pytest.fixture
def make_trade() -> Callable[..., TradeRecord]:
    return build_trade


@pytest.fixture
def forecast_config() -> ForecastConfig:
    return ForecastConfig()


@pytest.fixture
def open_query() -> LedgerQuery:
    """Query matching every trade."""
    return LedgerQuery()


@pytest.fixture
def three_trades(base_time) -> list[TradeRecord]:
    """Net profits [1, -0.5, 2] closing on three consecutive days."""
    return [
        build_trade(1, 1.0, base_time),
        build_trade(2, -0.5, base_time + timedelta(days=1)),
        build_trade(3, 2.0, base_time + timedelta(days=2)),
    ]


@pytest.fixture
def daily_trades(base_time) -> list[TradeRecord]:
    """Forty trades, four per day over ten days, with varied profits."""
    profits = [1.5, -0.8, 0.3, 2.1, -1.2, 0.7, 0.0, 1.1, -0.4, 0.9]
    trades = []
    for i in range(40):
        close = base_time + timedelta(days=i // 4, hours=2 * (i % 4))
        trades.append(build_trade(i + 1, profits[i % len(profits)] * (1 + i % 3), close))
    return trades
