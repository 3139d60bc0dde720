"""Trade cadence — average closed trades per calendar day."""

from __future__ import annotations

import logging
from typing import Sequence

from ..core.models import TradeRecord

logger = logging.getLogger(__name__)


def elapsed_days(filtered: Sequence[TradeRecord]) -> int:
    """Calendar days between the first and last close dates.

    Only the date component counts, so trades on one day span 0 days.
    """
    if not filtered:
        return 0
    first = min(t.close_time for t in filtered).date()
    last = max(t.close_time for t in filtered).date()
    return (last - first).days


def avg_trades_per_day(filtered: Sequence[TradeRecord]) -> float | None:
    """Trades per day over the set's span; ``None`` for a zero-day span."""
    days = elapsed_days(filtered)
    if days == 0:
        logger.debug("Cadence undefined: %d trades span zero days", len(filtered))
        return None
    return len(filtered) / days
