"""SQLAlchemy async engine pool and session management.

Provides a factory for creating async engines backed by asyncpg, an
async context manager for scoped read-only sessions, and a shutdown
helper.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from .models import LEDGER_SCHEMA

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singleton (set via ``init_engine``)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine(
    url: str,
    *,
    schema_name: str = LEDGER_SCHEMA,
    pool_size: int = 5,
    echo: bool = False,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """Create and return a new SQLAlchemy :class:`AsyncEngine`.

    Args:
        url: Database connection URL. Must use the ``postgresql+asyncpg://``
            scheme.
        schema_name: Schema holding the ledger table; mapped over the
            ORM default via ``schema_translate_map``.
        pool_size: Number of persistent connections to keep in the pool.
        echo: If ``True``, log all emitted SQL statements.
        use_null_pool: If ``True``, disable connection pooling entirely.
            Useful in one-off CLI runs.

    Returns:
        A configured :class:`AsyncEngine` instance.
    """
    pool_kwargs: dict = {}
    if use_null_pool:
        pool_kwargs["poolclass"] = NullPool
    else:
        pool_kwargs["pool_size"] = pool_size

    engine = create_async_engine(
        url,
        echo=echo,
        execution_options={"schema_translate_map": {LEDGER_SCHEMA: schema_name}},
        **pool_kwargs,
    )
    logger.info("Created async engine for %s (schema=%s)", url.split("@")[-1], schema_name)
    return engine


def init_engine(
    url: str,
    *,
    schema_name: str = LEDGER_SCHEMA,
    pool_size: int = 5,
    echo: bool = False,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """Initialise the module-level engine and session factory.

    Subsequent calls to :func:`get_session` use the engine created here.
    """
    global _engine, _session_factory  # noqa: PLW0603

    _engine = create_engine(
        url,
        schema_name=schema_name,
        pool_size=pool_size,
        echo=echo,
        use_null_pool=use_null_pool,
    )
    _session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return _engine


async def dispose() -> None:
    """Dispose of the module-level engine and release all pooled connections."""
    global _engine, _session_factory  # noqa: PLW0603

    if _engine is not None:
        await _engine.dispose()
        logger.info("Engine disposed.")
        _engine = None
        _session_factory = None


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield a read-only async session scoped to the caller's block.

    Usage::

        async with get_session() as session:
            result = await session.execute(select(TradeRow))

    Nothing is ever committed; the session is rolled back and closed on
    exit.

    Raises:
        RuntimeError: If :func:`init_engine` has not been called.
    """
    if _session_factory is None:
        raise RuntimeError(
            "Session factory not initialised. Call init_engine() first."
        )

    session = _session_factory()
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()
