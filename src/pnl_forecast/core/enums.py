"""Enumerations used across the forecast engine."""

from enum import Enum


class PointLabel(str, Enum):
    """Origin of a trajectory point."""

    REAL = "real"
    PREDICTED = "predicted"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
