"""Trajectory merger — one ordered, labeled series with trade details."""

from __future__ import annotations

import dataclasses
import logging
from collections import defaultdict
from datetime import datetime
from typing import Sequence

from ..core.models import TradeRecord, TrajectoryPoint

logger = logging.getLogger(__name__)


def _match_trade(
    point: TrajectoryPoint,
    by_close_time: dict[datetime, list[TradeRecord]],
) -> TradeRecord | None:
    """Trade closing exactly at the point's timestamp.

    When several trades share that close time, the point's own source
    trade id picks one; otherwise nothing is attached.
    """
    candidates = by_close_time.get(point.timestamp, [])
    if len(candidates) == 1:
        return candidates[0]
    for trade in candidates:
        if point.trade_id is not None and trade.id == point.trade_id:
            return trade
    return None


def merge_trajectory(
    actual: Sequence[TrajectoryPoint],
    forecast: Sequence[TrajectoryPoint],
    filtered: Sequence[TradeRecord],
    *,
    forecast_category: str = "predict",
) -> list[TrajectoryPoint]:
    """Concatenate, sort by timestamp and attach matching trade records.

    The sort is stable, so actual points sharing a timestamp keep their
    ``(close_time, id)`` order.
    """
    by_close_time: dict[datetime, list[TradeRecord]] = defaultdict(list)
    for trade in filtered:
        by_close_time[trade.close_time].append(trade)

    merged: list[TrajectoryPoint] = []
    unmatched = 0
    for point in sorted([*actual, *forecast], key=lambda p: p.timestamp):
        if point.is_predicted:
            merged.append(dataclasses.replace(
                point, trade=None, category_name=forecast_category,
            ))
            continue
        trade = _match_trade(point, by_close_time)
        if trade is None:
            unmatched += 1
        merged.append(dataclasses.replace(
            point,
            trade=trade,
            category_name=trade.category_name if trade else None,
        ))

    if unmatched:
        logger.warning("%d actual points matched no unique trade", unmatched)
    return merged
