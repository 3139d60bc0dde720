"""Protocol interfaces for the forecast engine.

The ledger store is the only external collaborator.  Implementations
(Postgres, flat files, in-memory) can be swapped without changing callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .models import TradeRecord

if TYPE_CHECKING:
    from ..forecast.ledger_filter import LedgerQuery


# ---------------------------------------------------------------------------
# Ledger Store
# ---------------------------------------------------------------------------

@runtime_checkable
class ILedgerStore(Protocol):
    """Read-only source of closed trade records.

    ``fetch_trades`` returns the records matching *query*, ordered by
    ``(close_time, id)``.  Failure to reach the store raises
    :class:`~pnl_forecast.core.errors.LedgerUnavailableError`.
    """

    async def fetch_trades(self, query: LedgerQuery) -> list[TradeRecord]: ...
