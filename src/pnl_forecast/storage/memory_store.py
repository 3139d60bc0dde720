"""In-memory ledger store for tests and ad-hoc analysis.

No external dependencies.  Records are held as given and filtered on
every fetch, so each call returns an independent snapshot.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pnl_forecast.core.models import TradeRecord
from pnl_forecast.forecast.ledger_filter import LedgerQuery, filter_trades

logger = logging.getLogger(__name__)


class InMemoryLedgerStore:
    """In-memory ``ILedgerStore``."""

    def __init__(self, trades: Iterable[TradeRecord] = ()) -> None:
        self._trades: list[TradeRecord] = list(trades)

    def add(self, trade: TradeRecord) -> None:
        self._trades.append(trade)

    def extend(self, trades: Iterable[TradeRecord]) -> None:
        self._trades.extend(trades)

    def __len__(self) -> int:
        return len(self._trades)

    async def fetch_trades(self, query: LedgerQuery) -> list[TradeRecord]:
        """Return the stored trades matching *query*."""
        return filter_trades(self._trades, query)
