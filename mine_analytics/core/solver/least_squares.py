"""mine_analytics.core.solver.least_squares

Ordinary least-squares regression (linear, polynomial, multivariate).

All fits solve the normal equations
    N = A^T W A,  u = A^T W y,  N beta = u
for a design matrix A whose first column is the constant term. W is the
identity for ordinary fits and a diagonal weight matrix for IRLS.
Polynomial regression is the same problem over the Vandermonde expansion
[1, x, x^2, ..., x^d].

If N is singular the minimum-norm least-squares solution is used and the
result is flagged ``valid=False``.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from ..results.analysis_result import RegressionResult, as_float_list

logger = logging.getLogger(__name__)


def solve_normal_equations(
    A: np.ndarray,
    y: np.ndarray,
    weights: Optional[np.ndarray] = None,
) -> Tuple[np.ndarray, bool]:
    """Solve the (weighted) normal equations for beta.

    Args:
        A: design matrix (m x n)
        y: observations (length m)
        weights: optional diagonal weights (length m)

    Returns:
        (beta, well_posed). well_posed is False when N was singular or the
        system is underdetermined (m < n) and a pseudo-inverse was used.
    """
    Pdiag = np.ones(A.shape[0]) if weights is None else np.asarray(weights, dtype=float)
    Aw = A * Pdiag[:, None]
    N = A.T @ Aw
    u = A.T @ (Pdiag * y)

    if A.shape[0] >= A.shape[1]:
        try:
            beta = np.linalg.solve(N, u)
            if np.all(np.isfinite(beta)):
                return beta, True
        except np.linalg.LinAlgError:
            pass

    logger.debug("normal equations singular (%d rows, %d params); using lstsq", A.shape[0], A.shape[1])
    sw = np.sqrt(Pdiag)
    beta, *_ = np.linalg.lstsq(A * sw[:, None], y * sw, rcond=None)
    return beta, False


def _r_squared(y: np.ndarray, predictions: np.ndarray) -> float:
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    ss_res = float(np.sum((y - predictions) ** 2))
    if ss_tot == 0.0:
        return 1.0
    return 1.0 - ss_res / ss_tot


def _empty_fit(kind: str) -> RegressionResult:
    return RegressionResult(
        type=kind,
        coefficients=[],
        intercept=float("nan"),
        r_squared=float("nan"),
        predictions=[],
        residuals=[],
        valid=False,
    )


def _paired_arrays(x: Sequence[float], y: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    xa = np.array(x, dtype=float).ravel()
    ya = np.array(y, dtype=float).ravel()
    if len(xa) != len(ya):
        raise ValueError(f"x and y must have the same length, got {len(xa)} and {len(ya)}")
    return xa, ya


def fit_design(
    A: np.ndarray,
    y: np.ndarray,
    kind: str,
    weights: Optional[np.ndarray] = None,
) -> Tuple[RegressionResult, np.ndarray]:
    """Fit a design matrix whose column 0 is the constant term.

    Returns:
        (RegressionResult with coefficients still in full beta order,
         beta vector)
    """
    beta, well_posed = solve_normal_equations(A, y, weights)
    predictions = A @ beta
    residuals = y - predictions
    result = RegressionResult(
        type=kind,
        coefficients=as_float_list(beta),
        intercept=float(beta[0]),
        r_squared=_r_squared(y, predictions),
        predictions=as_float_list(predictions),
        residuals=as_float_list(residuals),
        valid=well_posed,
    )
    return result, beta


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """Simple linear regression y = slope * x + intercept.

    Returns:
        RegressionResult with coefficients=[slope]

    Raises:
        ValueError: If x and y differ in length
    """
    xa, ya = _paired_arrays(x, y)
    if len(xa) == 0:
        return _empty_fit("linear")

    A = np.column_stack([np.ones(len(xa)), xa])
    result, beta = fit_design(A, ya, "linear")
    result.coefficients = [float(beta[1])]
    if len(xa) < 2:
        result.valid = False
    return result


def polynomial_regression(
    x: Sequence[float],
    y: Sequence[float],
    degree: int = 2,
) -> RegressionResult:
    """Polynomial regression y = c0 + c1 x + ... + cd x^d.

    Returns:
        RegressionResult with coefficients=[c0, ..., cd] and intercept=c0

    Raises:
        ValueError: If degree is negative or x and y differ in length
    """
    if degree < 0:
        raise ValueError("degree cannot be negative")
    xa, ya = _paired_arrays(x, y)
    if len(xa) == 0:
        return _empty_fit("polynomial")

    A = np.vander(xa, degree + 1, increasing=True)
    result, _ = fit_design(A, ya, "polynomial")
    return result


def multivariate_regression(
    features: Sequence[Sequence[float]],
    target: Sequence[float],
) -> RegressionResult:
    """Multiple linear regression y = b0 + b1 f1 + ... + bp fp.

    Args:
        features: one row of p feature values per observation
        target: observed response per row

    Returns:
        RegressionResult with one coefficient per feature and the intercept b0

    Raises:
        ValueError: If the number of rows and targets differ
    """
    ya = np.array(target, dtype=float).ravel()
    if len(features) != len(ya):
        raise ValueError(
            f"features and target must have the same number of rows, got {len(features)} and {len(ya)}"
        )
    if len(ya) == 0:
        return _empty_fit("multivariate")

    X = np.array(features, dtype=float)
    if X.ndim == 1:
        X = X[:, None]
    A = np.column_stack([np.ones(len(ya)), X])
    result, beta = fit_design(A, ya, "multivariate")
    result.coefficients = as_float_list(beta[1:])
    return result
