"""
Result classes for the analytics engine.

Every analysis returns one of these immutable-by-convention value objects.
Degenerate inputs (too few samples, zero variance, singular matrices) do not
raise; they produce sentinel values (NaN, p-value 1, zero scores) and set
``valid`` to False so callers can branch without inspecting for NaN.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


def _json_safe_value(value: Any) -> Any:
    """Convert non-JSON-safe floats (nan/inf) to None, recursing into lists."""
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, (list, tuple)):
        return [_json_safe_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _json_safe_value(v) for k, v in value.items()}
    return value


# ---------------------------------------------------------------------------
# Descriptive statistics, correlation, regression
# ---------------------------------------------------------------------------

@dataclass
class DescriptiveStats:
    """
    Summary statistics of a sample.

    Spread uses the sample (n-1) variance. Quantiles use linear
    interpolation at position q*(n-1) of the sorted sample.
    Skewness is the adjusted Fisher-Pearson coefficient (n >= 3) and
    kurtosis the adjusted excess kurtosis (n >= 4); both are NaN otherwise.

    Attributes:
        count: Number of observations
        percentiles: Mapping of percentile (5, 10, 25, 50, 75, 90, 95) to value
        valid: True when count >= 2 and spread estimates are defined
    """

    count: int
    mean: float
    median: float
    mode: float
    min: float
    max: float
    range: float
    variance: float
    std_dev: float
    q1: float
    q3: float
    iqr: float
    skewness: float
    kurtosis: float
    percentiles: Dict[int, float] = field(default_factory=dict)
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "mean": _json_safe_value(self.mean),
            "median": _json_safe_value(self.median),
            "mode": _json_safe_value(self.mode),
            "min": _json_safe_value(self.min),
            "max": _json_safe_value(self.max),
            "range": _json_safe_value(self.range),
            "variance": _json_safe_value(self.variance),
            "std_dev": _json_safe_value(self.std_dev),
            "q1": _json_safe_value(self.q1),
            "q3": _json_safe_value(self.q3),
            "iqr": _json_safe_value(self.iqr),
            "skewness": _json_safe_value(self.skewness),
            "kurtosis": _json_safe_value(self.kurtosis),
            "percentiles": {str(k): _json_safe_value(v) for k, v in self.percentiles.items()},
            "valid": self.valid,
        }


@dataclass
class CorrelationResult:
    """Pearson and Spearman correlation of a pair of variables.

    pValue is the two-tailed t-test of the Pearson coefficient (df = n-2).
    """

    pearson: float
    spearman: float
    p_value: float
    variable_a: str = "a"
    variable_b: str = "b"
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variable_a": self.variable_a,
            "variable_b": self.variable_b,
            "pearson": _json_safe_value(self.pearson),
            "spearman": _json_safe_value(self.spearman),
            "p_value": _json_safe_value(self.p_value),
            "valid": self.valid,
        }


@dataclass
class CorrelationMatrix:
    """Symmetric matrix of pairwise correlations with unit diagonal.

    valid is False when any off-diagonal coefficient is undefined (NaN).
    """

    variables: List[str]
    matrix: List[List[float]]
    method: str = "pearson"
    valid: bool = True

    def get(self, a: str, b: str) -> float:
        """Return the coefficient between two named variables.

        Raises:
            KeyError: If a variable is not in the matrix
        """
        try:
            i = self.variables.index(a)
            j = self.variables.index(b)
        except ValueError:
            raise KeyError(f"Variable pair ({a!r}, {b!r}) not in matrix")
        return self.matrix[i][j]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variables": list(self.variables),
            "matrix": _json_safe_value(self.matrix),
            "method": self.method,
            "valid": self.valid,
        }


@dataclass
class RegressionResult:
    """
    Ordinary least-squares fit.

    Attributes:
        type: "linear", "polynomial" or "multivariate"
        coefficients: linear: [slope]; polynomial: [c0, c1, ..., cd] in
            ascending powers (c0 equals the intercept); multivariate: one
            coefficient per feature
        intercept: Constant term
        r_squared: 1 - SS_res / SS_tot (1.0 when the target is constant)
        predictions: Fitted values, one per input row
        residuals: actual - predicted, one per input row
        valid: False for underdetermined or singular fits
    """

    type: str
    coefficients: List[float]
    intercept: float
    r_squared: float
    predictions: List[float] = field(default_factory=list)
    residuals: List[float] = field(default_factory=list)
    valid: bool = True

    def predict(self, x: Any) -> List[float]:
        """Evaluate the fitted model.

        Args:
            x: Scalars for linear/polynomial fits, feature rows for
               multivariate fits

        Returns:
            Predicted values
        """
        out: List[float] = []
        if self.type == "multivariate":
            for row in x:
                out.append(self.intercept + sum(c * float(v) for c, v in zip(self.coefficients, row)))
        elif self.type == "polynomial":
            for xi in x:
                out.append(sum(c * float(xi) ** p for p, c in enumerate(self.coefficients)))
        else:
            slope = self.coefficients[0] if self.coefficients else float("nan")
            for xi in x:
                out.append(self.intercept + slope * float(xi))
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "coefficients": _json_safe_value(list(self.coefficients)),
            "intercept": _json_safe_value(self.intercept),
            "r_squared": _json_safe_value(self.r_squared),
            "predictions": _json_safe_value(list(self.predictions)),
            "residuals": _json_safe_value(list(self.residuals)),
            "valid": self.valid,
        }


@dataclass
class RobustRegressionResult:
    """Linear fit from iteratively reweighted least squares.

    ``fit`` holds the final weighted fit; ``weights`` the final robust
    weight factor per observation (1.0 = full weight).
    """

    fit: RegressionResult
    weights: List[float]
    method: str
    converged: bool
    iterations: int
    message: str = ""
    valid: bool = True

    @property
    def downweighted(self) -> List[int]:
        """Indices of observations whose weight dropped below 0.999."""
        return [i for i, w in enumerate(self.weights) if w < 0.999]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fit": self.fit.to_dict(),
            "weights": _json_safe_value(list(self.weights)),
            "method": self.method,
            "converged": self.converged,
            "iterations": self.iterations,
            "message": self.message,
            "valid": self.valid,
        }


# ---------------------------------------------------------------------------
# Hypothesis tests
# ---------------------------------------------------------------------------

@dataclass
class HypothesisTest:
    """
    Outcome of a statistical hypothesis test.

    Invariant: significant == (p_value < alpha), alpha = 1 - confidence_level.

    Attributes:
        test_name: Human-readable test name
        statistic: Test statistic (t, chi-squared, U)
        p_value: Two-tailed p-value (upper tail for chi-squared)
        degrees_of_freedom: Degrees of freedom where the test has them
        significant: True if the null hypothesis is rejected
        confidence_interval: Interval for the tested quantity, if computed
        confidence_level: 1 - alpha
        valid: False when a degenerate-input policy produced the result
    """

    test_name: str
    statistic: float
    p_value: float
    significant: bool
    confidence_level: float = 0.95
    degrees_of_freedom: Optional[float] = None
    confidence_interval: Optional[Tuple[float, float]] = None
    valid: bool = True

    @property
    def alpha(self) -> float:
        """Significance level (complement of confidence level)."""
        return 1.0 - self.confidence_level

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_name": self.test_name,
            "statistic": _json_safe_value(self.statistic),
            "p_value": _json_safe_value(self.p_value),
            "degrees_of_freedom": _json_safe_value(self.degrees_of_freedom),
            "significant": self.significant,
            "confidence_interval": _json_safe_value(
                list(self.confidence_interval) if self.confidence_interval else None
            ),
            "confidence_level": self.confidence_level,
            "valid": self.valid,
        }


@dataclass
class EffectSizeResult:
    """Cohen's d with its conventional magnitude label."""

    cohens_d: float
    interpretation: str
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cohens_d": _json_safe_value(self.cohens_d),
            "interpretation": self.interpretation,
            "valid": self.valid,
        }


@dataclass
class NormalityResult:
    """Jarque-Bera normality test.

    Attributes:
        is_normal: True when normality is not rejected
        skewness_z: Skewness divided by its standard error sqrt(6/n)
        kurtosis_z: Excess kurtosis divided by its standard error sqrt(24/n)
        statistic: Jarque-Bera statistic
        p_value: Upper tail of chi-squared(2) at the statistic
    """

    is_normal: bool
    skewness_z: float
    kurtosis_z: float
    statistic: float
    p_value: float
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_normal": self.is_normal,
            "skewness_z": _json_safe_value(self.skewness_z),
            "kurtosis_z": _json_safe_value(self.kurtosis_z),
            "jarque_bera": {
                "statistic": _json_safe_value(self.statistic),
                "p_value": _json_safe_value(self.p_value),
            },
            "valid": self.valid,
        }


# ---------------------------------------------------------------------------
# Clustering, dimensionality reduction, anomalies
# ---------------------------------------------------------------------------

@dataclass
class Cluster:
    """A single k-means cluster. An empty cluster is not valid."""

    centroid: List[float]
    points: List[List[float]] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.points)

    @property
    def valid(self) -> bool:
        return self.size > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "centroid": _json_safe_value(list(self.centroid)),
            "points": [list(p) for p in self.points],
            "size": self.size,
            "valid": self.valid,
        }


@dataclass
class ClusterResult:
    """
    K-means clustering outcome.

    Invariants: sum of cluster sizes == len(labels); k == len(clusters).
    valid requires k > 0 and no empty cluster.

    Attributes:
        k: Number of clusters actually used (requested k clamped to n)
        clusters: Clusters indexed by label
        labels: Cluster label per input point
        silhouette_score: Mean silhouette (0 when n <= k)
        inertia: Sum of squared distances to the assigned centroid
        iterations: Lloyd iterations performed
        converged: True if centroids settled before max_iterations
    """

    k: int = 0
    clusters: List[Cluster] = field(default_factory=list)
    labels: List[int] = field(default_factory=list)
    silhouette_score: float = 0.0
    inertia: float = 0.0
    iterations: int = 0
    converged: bool = True

    @property
    def valid(self) -> bool:
        return self.k > 0 and all(c.valid for c in self.clusters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "k": self.k,
            "clusters": [c.to_dict() for c in self.clusters],
            "labels": list(self.labels),
            "silhouette_score": _json_safe_value(self.silhouette_score),
            "inertia": _json_safe_value(self.inertia),
            "iterations": self.iterations,
            "converged": self.converged,
            "valid": self.valid,
        }


@dataclass
class ElbowPoint:
    """One point of an elbow (inertia vs. k) curve."""

    k: int
    inertia: float
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"k": self.k, "inertia": _json_safe_value(self.inertia), "valid": self.valid}


@dataclass
class NormalizationResult:
    """Per-feature z-score normalized data with the statistics used.

    valid is False for fewer than two rows or when any feature has zero
    spread (its z-scores are then all zero rather than standardized).
    """

    normalized: List[List[float]] = field(default_factory=list)
    means: List[float] = field(default_factory=list)
    std_devs: List[float] = field(default_factory=list)
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "normalized": _json_safe_value(self.normalized),
            "means": _json_safe_value(list(self.means)),
            "std_devs": _json_safe_value(list(self.std_devs)),
            "valid": self.valid,
        }


@dataclass
class PCAResult:
    """
    Principal component analysis outcome.

    Eigenvalues are sorted descending. Each entry of ``eigenvectors`` is one
    principal axis (loadings over the input features).
    ``cumulative_variance`` is the running sum of ``explained_variance``.
    """

    eigenvalues: List[float] = field(default_factory=list)
    eigenvectors: List[List[float]] = field(default_factory=list)
    explained_variance: List[float] = field(default_factory=list)
    cumulative_variance: List[float] = field(default_factory=list)
    projections: List[List[float]] = field(default_factory=list)
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eigenvalues": _json_safe_value(list(self.eigenvalues)),
            "eigenvectors": _json_safe_value(self.eigenvectors),
            "explained_variance": _json_safe_value(list(self.explained_variance)),
            "cumulative_variance": _json_safe_value(list(self.cumulative_variance)),
            "projections": _json_safe_value(self.projections),
            "valid": self.valid,
        }


@dataclass
class Anomaly:
    """A flagged observation. For Mahalanobis, value is the distance."""

    index: int
    value: float
    score: float
    method: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "value": _json_safe_value(self.value),
            "score": _json_safe_value(self.score),
            "method": self.method,
        }


@dataclass
class AnomalyResult:
    """
    Anomaly detection outcome.

    Invariant: anomaly_rate == len(anomalies) / total_points (0 if no points).
    """

    anomalies: List[Anomaly] = field(default_factory=list)
    threshold: float = 0.0
    method: str = "zscore"
    total_points: int = 0
    anomaly_rate: float = 0.0
    valid: bool = True

    @property
    def indices(self) -> List[int]:
        return [a.index for a in self.anomalies]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "anomalies": [a.to_dict() for a in self.anomalies],
            "threshold": _json_safe_value(self.threshold),
            "method": self.method,
            "total_points": self.total_points,
            "anomaly_rate": self.anomaly_rate,
            "valid": self.valid,
        }


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------

@dataclass
class TrendResult:
    """Linear trend of a series against its index."""

    direction: str
    slope: float
    r_squared: float
    p_value: float
    significant: bool
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction,
            "slope": _json_safe_value(self.slope),
            "r_squared": _json_safe_value(self.r_squared),
            "p_value": _json_safe_value(self.p_value),
            "significant": self.significant,
            "valid": self.valid,
        }


@dataclass
class Decomposition:
    """
    Additive seasonal decomposition.

    All components have the input's length and
    value[i] == trend[i] + seasonal[i] + residual[i].
    """

    trend: List[float] = field(default_factory=list)
    seasonal: List[float] = field(default_factory=list)
    residual: List[float] = field(default_factory=list)
    period: int = 0
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trend": _json_safe_value(list(self.trend)),
            "seasonal": _json_safe_value(list(self.seasonal)),
            "residual": _json_safe_value(list(self.residual)),
            "period": self.period,
            "valid": self.valid,
        }


@dataclass
class RollingWindowStats:
    """Statistics of the trailing window ending at one index.

    mean and std_dev are NaN until the window is full (valid is False);
    min and max cover the partial window.
    """

    mean: float
    std_dev: float
    min: float
    max: float
    valid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": _json_safe_value(self.mean),
            "std_dev": _json_safe_value(self.std_dev),
            "min": _json_safe_value(self.min),
            "max": _json_safe_value(self.max),
            "valid": self.valid,
        }


def as_float_list(values: Sequence[Any]) -> List[float]:
    """Convert a numeric sequence (list or ndarray) to a list of Python floats."""
    return [float(v) for v in values]
