"""
Mine Analytics - statistics and machine-learning engine

Descriptive and inferential statistics, regression, clustering, anomaly
detection and time-series analysis for numeric datasets.

Conventions:
- Inputs: plain sequences of floats (or rows of floats); never mutated
- Degenerate input: returns sentinel values (NaN, 0, p-value 1) with
  ``valid=False`` instead of raising
- Errors: ValueError only for contract violations (unknown method names,
  mismatched regression lengths, non-positive periods)
- Quantiles: linear interpolation between order statistics (R type 7)
- Standard deviation: sample (n-1) unless stated otherwise
"""

__version__ = "1.0.0"
__author__ = "Mine Analytics"

from .core.models import DataPoint, AnomalyOptions, ForecastOptions, KMeansOptions
from .core.statistics import (
    descriptive_stats,
    correlation_pair,
    correlation_matrix,
    t_test,
    chi_squared_test,
    mann_whitney_u,
    effect_size,
    confidence_interval,
    sample_size_calculation,
    distribution_test,
)
from .core.solver import linear_regression, polynomial_regression, multivariate_regression
from .core.clustering import (
    k_means_clustering,
    silhouette_score,
    elbow_method,
    normalize_data,
    pca_analysis,
    anomaly_detection,
)
from .core.timeseries import (
    moving_average,
    forecast,
    trend_detection,
    seasonality_decomposition,
    change_point_detection,
    rolling_stats,
)

__all__ = [
    # Version
    "__version__",

    # Models
    "DataPoint",
    "AnomalyOptions",
    "ForecastOptions",
    "KMeansOptions",

    # Statistics
    "descriptive_stats",
    "correlation_pair",
    "correlation_matrix",
    "t_test",
    "chi_squared_test",
    "mann_whitney_u",
    "effect_size",
    "confidence_interval",
    "sample_size_calculation",
    "distribution_test",

    # Regression
    "linear_regression",
    "polynomial_regression",
    "multivariate_regression",

    # Clustering
    "k_means_clustering",
    "silhouette_score",
    "elbow_method",
    "normalize_data",
    "pca_analysis",
    "anomaly_detection",

    # Time series
    "moving_average",
    "forecast",
    "trend_detection",
    "seasonality_decomposition",
    "change_point_detection",
    "rolling_stats",
]
