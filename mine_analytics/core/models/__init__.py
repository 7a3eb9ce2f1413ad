"""
Data models for the analytics engine.

This module provides the input-side structures:
- DataPoint: One timestamped observation of a series
- Method enums: Moving average, anomaly, forecast, change-point,
  correlation and robust weighting methods
- Options: Validated settings for the configurable operations
"""

from .series import DataPoint, values_of
from .options import (
    MovingAverageType,
    AnomalyMethod,
    ForecastMethod,
    ChangePointMethod,
    CorrelationMethod,
    RobustMethod,
    AnomalyOptions,
    ForecastOptions,
    KMeansOptions,
    ChangePointOptions,
    RobustOptions,
)

__all__ = [
    # Series
    "DataPoint",
    "values_of",

    # Methods
    "MovingAverageType",
    "AnomalyMethod",
    "ForecastMethod",
    "ChangePointMethod",
    "CorrelationMethod",
    "RobustMethod",

    # Options
    "AnomalyOptions",
    "ForecastOptions",
    "KMeansOptions",
    "ChangePointOptions",
    "RobustOptions",
]
