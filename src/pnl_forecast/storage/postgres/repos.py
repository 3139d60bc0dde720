"""Repository for reading closed trades from the Postgres ledger.

:class:`TradeLedgerRepo` encapsulates the query; it accepts an
:class:`AsyncSession` obtained from
:func:`pnl_forecast.storage.postgres.connection.get_session`.
:class:`PostgresLedgerStore` adapts it to the ``ILedgerStore`` protocol
and turns driver failures into ``LedgerUnavailableError``.
"""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from pydantic import ValidationError
from sqlalchemy import Select, or_, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from pnl_forecast.core.errors import LedgerFormatError, LedgerUnavailableError
from pnl_forecast.core.models import DESCRIPTIVE_FIELDS, TradeRecord
from pnl_forecast.forecast.ledger_filter import LedgerQuery

from .connection import get_session
from .models import TradeRow

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def _record_to_trade(record: TradeRow) -> TradeRecord:
    """Convert an ORM :class:`TradeRow` to a core :class:`TradeRecord`."""
    fields = {name: getattr(record, name) for name in DESCRIPTIVE_FIELDS}
    fields["close_time"] = record.close_time
    fields["category_name"] = record.category_name or ""
    return TradeRecord(**fields)


def build_trade_query(query: LedgerQuery) -> Select[tuple[TradeRow]]:
    """SELECT for one model's trades, ordered by ``(close_time, id)``."""
    stmt = select(TradeRow).where(
        TradeRow.model_name.contains(query.model_pattern, autoescape=True)
    )
    if query.since is not None:
        stmt = stmt.where(TradeRow.close_time > query.since)
    if query.excluded_categories:
        # Uncategorised rows read as "" and are never excluded
        stmt = stmt.where(or_(
            TradeRow.category_name.is_(None),
            TradeRow.category_name.not_in(sorted(query.excluded_categories)),
        ))
    return stmt.order_by(TradeRow.close_time, TradeRow.id)


# ---------------------------------------------------------------------------
# TradeLedgerRepo
# ---------------------------------------------------------------------------

class TradeLedgerRepo:
    """Read access to the trade ledger table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch(self, query: LedgerQuery) -> list[TradeRecord]:
        """Return the trades matching *query*.

        Raises:
            LedgerFormatError: If a row cannot be converted.
        """
        result = await self._session.execute(build_trade_query(query))
        rows = result.scalars().all()
        try:
            return [_record_to_trade(r) for r in rows]
        except ValidationError as exc:
            raise LedgerFormatError(f"Invalid ledger row: {exc}") from exc


# ---------------------------------------------------------------------------
# PostgresLedgerStore
# ---------------------------------------------------------------------------

class PostgresLedgerStore:
    """``ILedgerStore`` backed by the Postgres ledger.

    Args:
        session_factory: Callable returning an async context manager that
            yields an :class:`AsyncSession`.  Defaults to
            :func:`~pnl_forecast.storage.postgres.connection.get_session`.
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]] = get_session,
    ) -> None:
        self._session_factory = session_factory

    async def fetch_trades(self, query: LedgerQuery) -> list[TradeRecord]:
        try:
            async with self._session_factory() as session:
                trades = await TradeLedgerRepo(session).fetch(query)
        except (DBAPIError, OSError) as exc:
            logger.error("Ledger query failed: %s", exc)
            raise LedgerUnavailableError("postgres", str(exc)) from exc
        logger.debug("Loaded %d trades from postgres", len(trades))
        return trades
