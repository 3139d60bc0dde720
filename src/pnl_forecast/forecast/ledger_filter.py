"""Ledger filter — select one model's trades within the active window.

Manually-closed and erroneous trades are excluded by category.  The
result is ordered by ``(close_time, id)``, the total order every
downstream stage relies on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from ..core.models import TradeRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerQuery:
    """Selection criteria for one forecast run.

    Parameters
    ----------
    model_pattern : str
        Substring matched against ``model_name``.  Empty matches all.
    since : datetime | None
        Only trades closing strictly after this instant are kept.
    excluded_categories : frozenset[str]
        Category labels dropped from the set.
    """

    model_pattern: str = ""
    since: datetime | None = None
    excluded_categories: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Ledger timestamps are naive UTC
        if self.since is not None and self.since.tzinfo is not None:
            naive = self.since.astimezone(timezone.utc).replace(tzinfo=None)
            object.__setattr__(self, "since", naive)

    def matches(self, trade: TradeRecord) -> bool:
        if self.model_pattern not in trade.model_name:
            return False
        if self.since is not None and trade.close_time <= self.since:
            return False
        return trade.category_name not in self.excluded_categories


def order_key(trade: TradeRecord) -> tuple[datetime, int]:
    """Ordering key ``(close_time, id)``."""
    return trade.order_key


def filter_trades(
    trades: Iterable[TradeRecord], query: LedgerQuery
) -> list[TradeRecord]:
    """Return the trades matching *query*, sorted by ``(close_time, id)``.

    An empty result is valid and flows through the rest of the pipeline.
    """
    selected = sorted((t for t in trades if query.matches(t)), key=order_key)
    logger.debug(
        "Filtered ledger: %d trades for model pattern %r",
        len(selected),
        query.model_pattern,
    )
    return selected
