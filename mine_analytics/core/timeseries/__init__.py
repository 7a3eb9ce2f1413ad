"""mine_analytics.core.timeseries

Smoothing, forecasting and structural analysis of ordered series.
"""

from .smoothing import moving_average, forecast
from .analysis import trend_detection, seasonality_decomposition, change_point_detection, rolling_stats

__all__ = [
    "moving_average",
    "forecast",
    "trend_detection",
    "seasonality_decomposition",
    "change_point_detection",
    "rolling_stats",
]
