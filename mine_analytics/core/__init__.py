"""
Core module for the analytics engine.

Every operation is a pure function: inputs are copied on read, nothing is
cached between calls and results are plain dataclasses.
"""

from .models import (
    DataPoint,
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

from .results import (
    DescriptiveStats,
    CorrelationResult,
    CorrelationMatrix,
    RegressionResult,
    RobustRegressionResult,
    HypothesisTest,
    EffectSizeResult,
    NormalityResult,
    Cluster,
    ClusterResult,
    ElbowPoint,
    NormalizationResult,
    PCAResult,
    Anomaly,
    AnomalyResult,
    TrendResult,
    Decomposition,
    RollingWindowStats,
)

from .statistics import (
    descriptive_stats,
    correlation_pair,
    spearman_correlation,
    correlation_matrix,
    t_test,
    chi_squared_test,
    mann_whitney_u,
    effect_size,
    confidence_interval,
    sample_size_calculation,
    distribution_test,
)

from .solver import (
    linear_regression,
    polynomial_regression,
    multivariate_regression,
    robust_linear_regression,
)

from .clustering import (
    k_means_clustering,
    silhouette_score,
    elbow_method,
    normalize_data,
    pca_analysis,
    anomaly_detection,
)

from .timeseries import (
    moving_average,
    forecast,
    trend_detection,
    seasonality_decomposition,
    change_point_detection,
    rolling_stats,
)

__all__ = [
    # Models
    "DataPoint",
    "MovingAverageType",
    "AnomalyMethod",
    "ForecastMethod",
    "ChangePointMethod",
    "CorrelationMethod",
    "RobustMethod",
    "AnomalyOptions",
    "ForecastOptions",
    "KMeansOptions",
    "ChangePointOptions",
    "RobustOptions",

    # Results
    "DescriptiveStats",
    "CorrelationResult",
    "CorrelationMatrix",
    "RegressionResult",
    "RobustRegressionResult",
    "HypothesisTest",
    "EffectSizeResult",
    "NormalityResult",
    "Cluster",
    "ClusterResult",
    "ElbowPoint",
    "NormalizationResult",
    "PCAResult",
    "Anomaly",
    "AnomalyResult",
    "TrendResult",
    "Decomposition",
    "RollingWindowStats",

    # Statistics
    "descriptive_stats",
    "correlation_pair",
    "spearman_correlation",
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
    "robust_linear_regression",

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
