"""mine_analytics.core.statistics.correlation

Pairwise correlation (Pearson, Spearman) and correlation matrices.

Significance of a Pearson coefficient r over n pairs uses
    t = r * sqrt((n - 2) / (1 - r^2)),  df = n - 2
with a two-tailed Student-t p-value.
"""

from __future__ import annotations

import math
from typing import Mapping, Sequence

import numpy as np

from .descriptive import as_array, rank_with_ties
from .distributions import t_dist_p_value
from ..models.options import CorrelationMethod
from ..results.analysis_result import CorrelationMatrix, CorrelationResult


def _pearson(a: np.ndarray, b: np.ndarray) -> float:
    """Sample Pearson correlation; NaN if either side is constant."""
    if len(a) != len(b) or len(a) < 2:
        return float("nan")
    da = a - a.mean()
    db = b - b.mean()
    denom = math.sqrt(float(np.sum(da * da)) * float(np.sum(db * db)))
    if denom == 0.0:
        return float("nan")
    r = float(np.sum(da * db)) / denom
    # rounding can push |r| a hair past 1
    return max(-1.0, min(1.0, r))


def correlation_p_value(r: float, n: int) -> float:
    """Two-tailed p-value of a Pearson coefficient r over n pairs."""
    if n <= 2 or math.isnan(r):
        return 1.0
    if abs(r) >= 1.0:
        return 0.0
    t = r * math.sqrt((n - 2) / (1.0 - r * r))
    return t_dist_p_value(abs(t), n - 2)


def spearman_correlation(a: Sequence[float], b: Sequence[float]) -> float:
    """Spearman rank correlation with tie-averaged ranks.

    Returns:
        coefficient in [-1, 1]; NaN for mismatched lengths or fewer than 2 pairs
    """
    xa = as_array(a)
    xb = as_array(b)
    if len(xa) != len(xb) or len(xa) < 2:
        return float("nan")
    return _pearson(rank_with_ties(xa), rank_with_ties(xb))


def correlation_pair(
    a: Sequence[float],
    b: Sequence[float],
    name_a: str = "a",
    name_b: str = "b",
) -> CorrelationResult:
    """Pearson + Spearman correlation of two paired samples with a p-value.

    Args:
        a, b: paired samples of equal length
        name_a, name_b: variable labels carried into the result

    Returns:
        CorrelationResult; NaN coefficients and p_value=1 when there are
        fewer than 2 pairs or the lengths differ
    """
    xa = as_array(a)
    xb = as_array(b)
    if len(xa) != len(xb) or len(xa) < 2:
        return CorrelationResult(
            pearson=float("nan"),
            spearman=float("nan"),
            p_value=1.0,
            variable_a=name_a,
            variable_b=name_b,
            valid=False,
        )

    pearson = _pearson(xa, xb)
    spearman = _pearson(rank_with_ties(xa), rank_with_ties(xb))
    return CorrelationResult(
        pearson=pearson,
        spearman=spearman,
        p_value=correlation_p_value(pearson, len(xa)),
        variable_a=name_a,
        variable_b=name_b,
        valid=not math.isnan(pearson),
    )


def correlation_matrix(
    variables: Mapping[str, Sequence[float]],
    method: CorrelationMethod | str = CorrelationMethod.PEARSON,
) -> CorrelationMatrix:
    """Pairwise correlation matrix over named variables.

    The diagonal is fixed at 1 and the matrix is symmetric by construction.
    Variable order follows the mapping's iteration order.
    A pair with fewer than 2 values, mismatched lengths or a constant
    side gives a NaN coefficient and marks the matrix invalid.
    """
    method = CorrelationMethod.from_string(method)
    names = list(variables.keys())
    k = len(names)
    matrix = [[0.0] * k for _ in range(k)]
    valid = True

    for i in range(k):
        matrix[i][i] = 1.0
        for j in range(i + 1, k):
            pair = correlation_pair(variables[names[i]], variables[names[j]], names[i], names[j])
            r = pair.spearman if method == CorrelationMethod.SPEARMAN else pair.pearson
            matrix[i][j] = r
            matrix[j][i] = r
            if math.isnan(r):
                valid = False

    return CorrelationMatrix(variables=names, matrix=matrix, method=method.value, valid=valid)
