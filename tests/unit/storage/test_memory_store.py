"""Tests for the in-memory ledger store."""

from datetime import timedelta

import pytest

from pnl_forecast.core.interfaces import ILedgerStore
from pnl_forecast.forecast.ledger_filter import LedgerQuery
from pnl_forecast.storage.memory_store import InMemoryLedgerStore


def test_satisfies_protocol():
    assert isinstance(InMemoryLedgerStore(), ILedgerStore)


@pytest.mark.asyncio
async def test_fetch_filters_and_orders(make_trade, base_time, open_query):
    store = InMemoryLedgerStore()
    store.add(make_trade(3, 1.0, base_time + timedelta(hours=2)))
    store.extend([
        make_trade(1, 1.0, base_time),
        make_trade(2, 1.0, base_time + timedelta(hours=1), model_name="other"),
    ])
    assert len(store) == 3

    fetched = await store.fetch_trades(open_query)
    assert [t.id for t in fetched] == [1, 2, 3]

    fetched = await store.fetch_trades(LedgerQuery(model_pattern="1232"))
    assert [t.id for t in fetched] == [1, 3]


@pytest.mark.asyncio
async def test_fetch_returns_snapshot(three_trades, open_query):
    store = InMemoryLedgerStore(three_trades)
    fetched = await store.fetch_trades(open_query)
    fetched.clear()
    assert len(await store.fetch_trades(open_query)) == 3
