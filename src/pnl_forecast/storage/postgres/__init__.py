"""Postgres-backed trade ledger (SQLAlchemy async + asyncpg)."""

from .repos import PostgresLedgerStore, TradeLedgerRepo, build_trade_query

__all__ = ["PostgresLedgerStore", "TradeLedgerRepo", "build_trade_query"]
