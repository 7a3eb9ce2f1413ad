"""mine_analytics.core.clustering.anomaly

Outlier detection by z-score, interquartile range or Mahalanobis distance.

- ZSCORE: flag |x - mean| / s > threshold (s: sample stddev)
- IQR: flag x outside [Q1 - k IQR, Q3 + k IQR]; the score is the distance
  beyond the fence in IQR units (IQR = 0 scores in raw units)
- MAHALANOBIS: flag sqrt((x - mu)^T S^-1 (x - mu)) > threshold

Mahalanobis inverse covariance:
  1-D and 2-D data are inverted analytically; a 2x2 matrix with
  |det| < 1e-10 falls back to its diagonal. Above two dimensions the
  diagonal approximation is used unless ``full_covariance`` is set, in
  which case the full (pseudo-)inverse is computed. The diagonal path is
  O(n d); the full path adds O(d^3).

Univariate detectors applied to row data look at the first column only.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import numpy as np

from ..models.options import AnomalyMethod, AnomalyOptions
from ..results.analysis_result import Anomaly, AnomalyResult
from ..statistics.descriptive import quantile

logger = logging.getLogger(__name__)

_SINGULAR_DET = 1e-10


def anomaly_detection(
    data: Sequence[Any],
    method: AnomalyMethod | str = AnomalyMethod.ZSCORE,
    threshold: Optional[float] = None,
    full_covariance: bool = False,
    options: AnomalyOptions | None = None,
) -> AnomalyResult:
    """Detect anomalies in univariate values or multivariate rows.

    Args:
        data: numbers, or rows of numbers
        method: detector (enum member or its string value)
        threshold: detector threshold; None selects the method default
        full_covariance: full-matrix Mahalanobis inverse above 2-D
        options: full settings; overrides the three previous arguments

    Returns:
        AnomalyResult. Zero spread (constant data) produces no anomalies and
        ``valid=False``.
    """
    options = options or AnomalyOptions(
        method=method, threshold=threshold, full_covariance=full_covariance
    )
    limit = options.effective_threshold

    if len(data) == 0:
        return AnomalyResult(threshold=limit, method=options.method.value, valid=False)

    X = np.array(data, dtype=float)
    if options.method == AnomalyMethod.MAHALANOBIS:
        if X.ndim == 1:
            X = X[:, None]
        return _mahalanobis_anomalies(X, limit, options.full_covariance)

    values = X[:, 0] if X.ndim > 1 else X
    if options.method == AnomalyMethod.IQR:
        return _iqr_anomalies(values, limit)
    return _zscore_anomalies(values, limit)


def _result(anomalies: List[Anomaly], limit: float, method: AnomalyMethod, n: int, valid: bool = True) -> AnomalyResult:
    return AnomalyResult(
        anomalies=anomalies,
        threshold=limit,
        method=method.value,
        total_points=n,
        anomaly_rate=len(anomalies) / n if n else 0.0,
        valid=valid,
    )


def _zscore_anomalies(values: np.ndarray, limit: float) -> AnomalyResult:
    n = len(values)
    method = AnomalyMethod.ZSCORE
    if n < 2:
        return _result([], limit, method, n, valid=False)

    mean = float(values.mean())
    std = float(np.sqrt(np.sum((values - mean) ** 2) / (n - 1)))
    if std == 0.0:
        return _result([], limit, method, n, valid=False)

    anomalies = []
    for i, v in enumerate(values):
        z = abs((float(v) - mean) / std)
        if z > limit:
            anomalies.append(Anomaly(index=i, value=float(v), score=z, method=method.value))
    return _result(anomalies, limit, method, n)


def _iqr_anomalies(values: np.ndarray, multiplier: float) -> AnomalyResult:
    n = len(values)
    method = AnomalyMethod.IQR
    sorted_values = np.sort(values)
    q1 = quantile(sorted_values, 0.25)
    q3 = quantile(sorted_values, 0.75)
    iqr = q3 - q1
    lower = q1 - multiplier * iqr
    upper = q3 + multiplier * iqr
    unit = iqr if iqr != 0.0 else 1.0

    anomalies = []
    for i, v in enumerate(values):
        v = float(v)
        if v < lower:
            anomalies.append(Anomaly(index=i, value=v, score=(lower - v) / unit, method=method.value))
        elif v > upper:
            anomalies.append(Anomaly(index=i, value=v, score=(v - upper) / unit, method=method.value))
    return _result(anomalies, multiplier, method, n, valid=n >= 4)


def _safe_reciprocal(v: float) -> float:
    return 1.0 / v if v != 0.0 else 1.0


def _inverse_covariance(cov: np.ndarray, full: bool) -> np.ndarray:
    dims = cov.shape[0]
    if dims == 1:
        return np.array([[_safe_reciprocal(cov[0, 0])]])
    if full and dims > 2:
        try:
            return np.linalg.inv(cov)
        except np.linalg.LinAlgError:
            logger.debug("covariance singular, using pseudo-inverse")
            return np.linalg.pinv(cov)
    if dims == 2:
        det = cov[0, 0] * cov[1, 1] - cov[0, 1] * cov[1, 0]
        if abs(det) >= _SINGULAR_DET:
            return np.array([
                [cov[1, 1] / det, -cov[0, 1] / det],
                [-cov[1, 0] / det, cov[0, 0] / det],
            ])
        logger.debug("2x2 covariance near-singular (det=%g), using diagonal", det)
    return np.diag([_safe_reciprocal(cov[i, i]) for i in range(dims)])


def _mahalanobis_anomalies(X: np.ndarray, limit: float, full: bool) -> AnomalyResult:
    n = X.shape[0]
    method = AnomalyMethod.MAHALANOBIS
    if n < 2:
        return _result([], limit, method, n, valid=False)

    means = X.mean(axis=0)
    diff = X - means
    cov = (diff.T @ diff) / (n - 1)
    inv_cov = _inverse_covariance(cov, full)

    dist = np.sqrt(np.maximum(np.einsum("ij,jk,ik->i", diff, inv_cov, diff), 0.0))
    anomalies = [
        Anomaly(index=i, value=float(d), score=float(d), method=method.value)
        for i, d in enumerate(dist)
        if d > limit
    ]
    return _result(anomalies, limit, method, n, valid=bool(np.any(np.diag(cov) > 0.0)))
