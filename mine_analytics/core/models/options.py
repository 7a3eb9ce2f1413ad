"""
Method selectors and option sets for the analytics engine.

Every method family (moving averages, anomaly detectors, forecasters, ...)
is a closed enumeration. Families that carry tuning parameters get an
options dataclass that validates itself on construction and round-trips
through plain dictionaries.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class _MethodEnum(Enum):
    """Enum base with case-insensitive lookup by value."""

    @classmethod
    def from_string(cls, s):
        """Create a member from its string value (case-insensitive).

        Members are passed through unchanged.
        """
        if isinstance(s, cls):
            return s
        s_lower = str(s).lower().strip()
        for method in cls:
            if method.value == s_lower:
                return method
        raise ValueError(f"Unknown {cls.__name__}: {s}")


class MovingAverageType(_MethodEnum):
    """Moving average kernels."""
    SMA = "sma"
    EMA = "ema"
    WMA = "wma"


class AnomalyMethod(_MethodEnum):
    """
    Anomaly detectors.

    - ZSCORE: |x - mean| / stddev above threshold
    - IQR: outside [Q1 - k*IQR, Q3 + k*IQR]
    - MAHALANOBIS: multivariate distance from the mean vector
    """
    ZSCORE = "zscore"
    IQR = "iqr"
    MAHALANOBIS = "mahalanobis"


class ForecastMethod(_MethodEnum):
    """Exponential smoothing forecasters."""
    SES = "ses"
    HOLT = "holt"


class ChangePointMethod(_MethodEnum):
    """Change-point scanners."""
    WINDOW = "window"
    CUSUM = "cusum"


class CorrelationMethod(_MethodEnum):
    """Correlation coefficients."""
    PEARSON = "pearson"
    SPEARMAN = "spearman"


class RobustMethod(_MethodEnum):
    """
    Robust weight functions for iteratively reweighted least squares.

    - HUBER: soft downweighting
    - DANISH: exponential downweighting
    - IGG3: three-part function with hard rejection
    """
    HUBER = "huber"
    DANISH = "danish"
    IGG3 = "igg3"


_DEFAULT_ANOMALY_THRESHOLDS = {
    AnomalyMethod.ZSCORE: 3.0,
    AnomalyMethod.IQR: 1.5,
    AnomalyMethod.MAHALANOBIS: 3.0,
}


@dataclass
class AnomalyOptions:
    """
    Configuration for anomaly detection.

    Attributes:
        method: Detector to use (default: z-score)
        threshold: Detection threshold; None selects the method default
            (z-score 3.0, IQR multiplier 1.5, Mahalanobis 3.0)
        full_covariance: Invert the full covariance matrix for Mahalanobis
            distances of any dimension. When False, data with more than two
            features uses a diagonal covariance approximation.
    """

    method: AnomalyMethod = AnomalyMethod.ZSCORE
    threshold: Optional[float] = None
    full_covariance: bool = False

    def __post_init__(self):
        self.method = AnomalyMethod.from_string(self.method)
        if self.threshold is not None and self.threshold < 0:
            raise ValueError("threshold cannot be negative")

    @property
    def effective_threshold(self) -> float:
        """Threshold actually applied by the detector."""
        if self.threshold is None:
            return _DEFAULT_ANOMALY_THRESHOLDS[self.method]
        return float(self.threshold)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "threshold": self.threshold,
            "full_covariance": self.full_covariance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnomalyOptions':
        return cls(
            method=data.get("method", "zscore"),
            threshold=data.get("threshold"),
            full_covariance=data.get("full_covariance", False),
        )


@dataclass
class ForecastOptions:
    """
    Configuration for exponential smoothing forecasts.

    Attributes:
        method: SES (flat forecast) or Holt (level + trend)
        ses_alpha: SES smoothing factor; None picks it by grid search
            over 0.1..0.9 minimizing one-step-ahead squared error
        holt_alpha: Holt level smoothing factor (default: 0.3)
        holt_beta: Holt trend smoothing factor (default: 0.1)
    """

    method: ForecastMethod = ForecastMethod.SES
    ses_alpha: Optional[float] = None
    holt_alpha: float = 0.3
    holt_beta: float = 0.1

    def __post_init__(self):
        self.method = ForecastMethod.from_string(self.method)
        if self.ses_alpha is not None and not 0 < self.ses_alpha <= 1:
            raise ValueError("ses_alpha must be in (0, 1]")
        if not 0 < self.holt_alpha <= 1:
            raise ValueError("holt_alpha must be in (0, 1]")
        if not 0 < self.holt_beta <= 1:
            raise ValueError("holt_beta must be in (0, 1]")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "ses_alpha": self.ses_alpha,
            "holt_alpha": self.holt_alpha,
            "holt_beta": self.holt_beta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ForecastOptions':
        return cls(
            method=data.get("method", "ses"),
            ses_alpha=data.get("ses_alpha"),
            holt_alpha=data.get("holt_alpha", 0.3),
            holt_beta=data.get("holt_beta", 0.1),
        )


@dataclass
class KMeansOptions:
    """
    Configuration for k-means clustering.

    Attributes:
        max_iterations: Maximum Lloyd iterations (default: 100)
        seed: Seed for k-means++ initialisation; None uses a fixed seed
        tolerance: Stop when no centroid moves further than this
    """

    max_iterations: int = 100
    seed: Optional[int] = None
    tolerance: float = 1e-8

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.tolerance < 0:
            raise ValueError("tolerance cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_iterations": self.max_iterations,
            "seed": self.seed,
            "tolerance": self.tolerance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'KMeansOptions':
        return cls(
            max_iterations=data.get("max_iterations", 100),
            seed=data.get("seed"),
            tolerance=data.get("tolerance", 1e-8),
        )


@dataclass
class ChangePointOptions:
    """
    Configuration for change-point detection.

    Attributes:
        method: WINDOW compares the means of adjacent windows; CUSUM
            accumulates deviations from the global mean
        window: Half-width of the comparison window (WINDOW only);
            None selects max(2, min(10, n // 5))
        threshold: WINDOW: mean shift in units of the global stddev
            (default 1.0). CUSUM: absolute cumulative-sum bound
            (default 2 * stddev).
    """

    method: ChangePointMethod = ChangePointMethod.WINDOW
    window: Optional[int] = None
    threshold: Optional[float] = None

    def __post_init__(self):
        self.method = ChangePointMethod.from_string(self.method)
        if self.window is not None and self.window < 1:
            raise ValueError("window must be at least 1")
        if self.threshold is not None and self.threshold <= 0:
            raise ValueError("threshold must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "window": self.window,
            "threshold": self.threshold,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChangePointOptions':
        return cls(
            method=data.get("method", "window"),
            window=data.get("window"),
            threshold=data.get("threshold"),
        )


@dataclass
class RobustOptions:
    """
    Configuration for robust (IRLS) regression.

    Attributes:
        method: Weight function
        max_iterations: Maximum IRLS iterations (default: 20)
        tolerance: Convergence tolerance on the largest weight change
        huber_c: Huber tuning constant (default: 1.5)
        danish_c: Danish tuning constant (default: 2.0)
        igg3_k0: IGG-III lower threshold (default: 1.5)
        igg3_k1: IGG-III upper threshold (default: 3.0)
    """

    method: RobustMethod = RobustMethod.HUBER
    max_iterations: int = 20
    tolerance: float = 1e-3
    huber_c: float = 1.5
    danish_c: float = 2.0
    igg3_k0: float = 1.5
    igg3_k1: float = 3.0

    def __post_init__(self):
        self.method = RobustMethod.from_string(self.method)
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.huber_c <= 0 or self.danish_c <= 0:
            raise ValueError("tuning constants must be positive")
        if not 0 < self.igg3_k0 < self.igg3_k1:
            raise ValueError("IGG-III thresholds must satisfy 0 < k0 < k1")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "max_iterations": self.max_iterations,
            "tolerance": self.tolerance,
            "huber_c": self.huber_c,
            "danish_c": self.danish_c,
            "igg3_k0": self.igg3_k0,
            "igg3_k1": self.igg3_k1,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RobustOptions':
        return cls(
            method=data.get("method", "huber"),
            max_iterations=data.get("max_iterations", 20),
            tolerance=data.get("tolerance", 1e-3),
            huber_c=data.get("huber_c", 1.5),
            danish_c=data.get("danish_c", 2.0),
            igg3_k0=data.get("igg3_k0", 1.5),
            igg3_k1=data.get("igg3_k1", 3.0),
        )
