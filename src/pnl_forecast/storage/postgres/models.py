"""SQLAlchemy ORM mapping of the external trade ledger table.

The ledger is owned by the trading system; this mapping is read-only and
no migrations are issued from here.  The schema name is remapped at run
time through ``schema_translate_map`` (see :mod:`.connection`).
"""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import BigInteger, DateTime, Integer, Interval, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

LEDGER_SCHEMA = "money"


def _num() -> Numeric:
    return Numeric(asdecimal=False)


# ---------------------------------------------------------------------------
# Declarative base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Shared declarative base for ledger models."""

    pass


# ---------------------------------------------------------------------------
# TradeRow
# ---------------------------------------------------------------------------

class TradeRow(Base):
    """One closed trade in the ledger.

    Maps to :class:`pnl_forecast.core.models.TradeRecord`.
    """

    __tablename__ = "tmm_small"
    __table_args__ = {"schema": LEDGER_SCHEMA}

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(64), nullable=False)
    model_name: Mapped[str] = mapped_column(String(128), nullable=False)
    category_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    open_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    close_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    duration: Mapped[timedelta | None] = mapped_column(Interval, nullable=True)

    net_profit: Mapped[float] = mapped_column(_num(), nullable=False)
    realized_pnl: Mapped[float | None] = mapped_column(_num(), nullable=True)
    commission: Mapped[float | None] = mapped_column(_num(), nullable=True)
    funding: Mapped[float | None] = mapped_column(_num(), nullable=True)
    percent: Mapped[float | None] = mapped_column(_num(), nullable=True)
    unit_percent: Mapped[float | None] = mapped_column(_num(), nullable=True)
    profit_deposit: Mapped[float | None] = mapped_column(_num(), nullable=True)

    qty: Mapped[float | None] = mapped_column(_num(), nullable=True)
    rounded_qty: Mapped[float | None] = mapped_column(_num(), nullable=True)
    open_qty: Mapped[float | None] = mapped_column(_num(), nullable=True)
    peak_qty: Mapped[float | None] = mapped_column(_num(), nullable=True)
    avg_price_entry: Mapped[float | None] = mapped_column(_num(), nullable=True)
    avg_price_exit: Mapped[float | None] = mapped_column(_num(), nullable=True)
    volume: Mapped[float | None] = mapped_column(_num(), nullable=True)
    closed_value: Mapped[float | None] = mapped_column(_num(), nullable=True)
    orders: Mapped[int | None] = mapped_column(Integer, nullable=True)
    trades_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    max_win_percent: Mapped[float | None] = mapped_column(_num(), nullable=True)
    max_loose_percent: Mapped[float | None] = mapped_column(_num(), nullable=True)
    maximum_drawdown: Mapped[float | None] = mapped_column(_num(), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<TradeRow(id={self.id!r}, symbol={self.symbol!r}, "
            f"model_name={self.model_name!r}, close_time={self.close_time!r})>"
        )
