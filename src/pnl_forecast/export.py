"""Trajectory export — CSV, JSON and DataFrame output for plotting.

One row per trajectory point.  Columns, in order: timestamp, label,
cumulative PnL, one ``cum_pXX`` column per tracked percentile, the three
trend overlays, every carried-through trade field and the category.
Undefined values are empty CSV cells / JSON ``null``.

Usage::

    exporter = TrajectoryExporter(percentiles=[1, 5, 25, 75, 95, 99])
    csv_str = exporter.to_csv(result.points)
    df = exporter.to_dataframe(result.points)
"""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Sequence

import pandas as pd

from .core.models import DESCRIPTIVE_FIELDS, TrajectoryPoint, band_name
from .forecast.statistics import DEFAULT_PERCENTILES

logger = logging.getLogger(__name__)

_OVERLAY_COLUMNS = ["cum_regression", "cum_median_regression", "cum_median_cum_pnl"]


def _plain(value: Any) -> Any:
    """JSON/CSV-friendly scalar."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


class TrajectoryExporter:
    """Serialize trajectory points.

    Parameters
    ----------
    percentiles : Sequence[int]
        Tracked percentiles; one band column each.
    decimal_places : int | None
        Rounding precision for computed series.  ``None`` keeps full
        precision.  Default 6.
    """

    def __init__(
        self,
        *,
        percentiles: Sequence[int] = DEFAULT_PERCENTILES,
        decimal_places: int | None = 6,
    ) -> None:
        self._bands = [band_name(p) for p in percentiles]
        self._dp = decimal_places

    @property
    def columns(self) -> list[str]:
        return [
            "close_time",
            "label",
            "cum_pnl",
            *(f"cum_{b}" for b in self._bands),
            *_OVERLAY_COLUMNS,
            *DESCRIPTIVE_FIELDS,
            "category_name",
        ]

    # ------------------------------------------------------------------ #
    # Rows                                                                 #
    # ------------------------------------------------------------------ #

    def to_rows(self, points: Sequence[TrajectoryPoint]) -> list[dict[str, Any]]:
        """Flat dicts in column order."""
        return [self._point_to_row(p) for p in points]

    # ------------------------------------------------------------------ #
    # CSV / JSON / DataFrame                                               #
    # ------------------------------------------------------------------ #

    def to_csv(self, points: Sequence[TrajectoryPoint]) -> str:
        """Export points as a CSV string with header row."""
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=self.columns, extrasaction="ignore")
        writer.writeheader()
        for row in self.to_rows(points):
            writer.writerow({c: "" if row[c] is None else _plain(row[c]) for c in self.columns})
        return buf.getvalue()

    def to_json(self, points: Sequence[TrajectoryPoint], *, indent: int = 2) -> str:
        """Export points as a JSON list of objects."""
        rows = [
            {k: _plain(v) for k, v in row.items()} for row in self.to_rows(points)
        ]
        return json.dumps(rows, indent=indent, ensure_ascii=False, default=str)

    def to_dataframe(self, points: Sequence[TrajectoryPoint]) -> pd.DataFrame:
        """Export points as a DataFrame, one column per output field."""
        return pd.DataFrame(self.to_rows(points), columns=self.columns)

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _round(self, value: float | None) -> float | None:
        if value is None or self._dp is None:
            return value
        return round(value, self._dp)

    def _point_to_row(self, point: TrajectoryPoint) -> dict[str, Any]:
        row: dict[str, Any] = {
            "close_time": point.timestamp,
            "label": point.label.value,
            "cum_pnl": self._round(point.cum_pnl),
        }
        for b in self._bands:
            row[f"cum_{b}"] = self._round(point.bands.get(b))
        row["cum_regression"] = self._round(point.cum_regression)
        row["cum_median_regression"] = self._round(point.cum_median_regression)
        row["cum_median_cum_pnl"] = self._round(point.cum_median_cum_pnl)
        if point.trade is not None:
            row.update(point.trade.descriptive_fields())
        else:
            row.update({name: None for name in DESCRIPTIVE_FIELDS})
        row["category_name"] = point.category_name
        return row
