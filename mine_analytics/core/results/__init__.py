"""Result value objects returned by the analytics operations."""

from .analysis_result import (
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

__all__ = [
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
]
