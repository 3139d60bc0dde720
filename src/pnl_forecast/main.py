"""Application bootstrap.

Configures logging, opens the selected ledger store, performs the single
ledger read and builds the trajectory.
"""

from __future__ import annotations

from pathlib import Path

from .core.config import Settings
from .core.interfaces import ILedgerStore
from .forecast.engine import TrajectoryResult, run_forecast
from .observability.logger import get_logger, new_run_id, setup_logging
from .storage.file_store import FileLedgerStore

logger = get_logger(__name__)

POSTGRES_SOURCE = "postgres"


async def run(settings: Settings, source: str = POSTGRES_SOURCE) -> TrajectoryResult:
    """Main entry point. Read the ledger, build the trajectory.

    Args:
        settings: Loaded settings (see :func:`~pnl_forecast.core.config.load_settings`).
        source: ``"postgres"`` or a path to a CSV/Parquet ledger export.

    Raises:
        LedgerUnavailableError: The ledger could not be read.
    """
    setup_logging(
        settings.observability.log_level,
        settings.observability.log_format,
    )
    new_run_id()
    logger.info(
        "Starting forecast run",
        model_pattern=settings.filter.model_pattern,
        source=source,
    )

    if source != POSTGRES_SOURCE:
        return await run_forecast(FileLedgerStore(Path(source)), settings)

    from .storage.postgres import connection
    from .storage.postgres.repos import PostgresLedgerStore

    connection.init_engine(
        settings.ledger.postgres_url,
        schema_name=settings.ledger.schema_name,
        pool_size=settings.ledger.pool_size,
        echo=settings.ledger.echo,
        use_null_pool=True,
    )
    store: ILedgerStore = PostgresLedgerStore()
    try:
        return await run_forecast(store, settings)
    finally:
        await connection.dispose()
