"""Robust regression module.

Implements Iteratively Reweighted Least Squares (IRLS) for simple linear
regression with several robust weight functions, so outliers are
downweighted instead of deleted.

Supported methods:
- Huber: soft downweighting, good for small to moderate outliers
- Danish: aggressive downweighting, good for larger outliers
- IGG-III: three-part function with hard rejection threshold

Residuals are standardized by a robust scale estimate,
    sigma = 1.4826 * median(|v - median(v)|)
which is consistent with the standard deviation for normal errors.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

import numpy as np

from .least_squares import _empty_fit, _paired_arrays, fit_design
from ..models.options import RobustMethod, RobustOptions
from ..results.analysis_result import RobustRegressionResult

logger = logging.getLogger(__name__)

_MAD_SCALE = 1.4826


# ---------------------------------------------------------------------------
# Robust Weight Functions
# ---------------------------------------------------------------------------

def huber_weight(w: float, c: float = 1.5) -> float:
    """Huber weight: 1 for |w| <= c, c/|w| beyond."""
    abs_w = abs(w)
    if abs_w <= c:
        return 1.0
    return c / abs_w


def danish_weight(w: float, c: float = 2.0) -> float:
    """Danish weight: 1 for |w| <= c, exp(-((|w|-c)/c)^2) beyond."""
    abs_w = abs(w)
    if abs_w <= c:
        return 1.0
    return math.exp(-((abs_w - c) / c) ** 2)


def igg3_weight(w: float, k0: float = 1.5, k1: float = 3.0) -> float:
    """IGG-III weight.

    u(|w|) = 1                                 if |w| <= k0
    u(|w|) = (k0/|w|) * ((k1-|w|)/(k1-k0))^2   if k0 < |w| < k1
    u(|w|) ~ 0                                 if |w| >= k1

    Rejected observations keep a weight of 1e-10 so the normal matrix
    stays regular.
    """
    abs_w = abs(w)
    if abs_w <= k0:
        return 1.0
    if abs_w >= k1:
        return 1e-10
    return (k0 / abs_w) * ((k1 - abs_w) / (k1 - k0)) ** 2


def get_weight_function(options: RobustOptions) -> Callable[[float], float]:
    """Weight function configured by the options' method and constants."""
    if options.method == RobustMethod.HUBER:
        return lambda w: huber_weight(w, options.huber_c)
    if options.method == RobustMethod.DANISH:
        return lambda w: danish_weight(w, options.danish_c)
    return lambda w: igg3_weight(w, options.igg3_k0, options.igg3_k1)


def robust_scale(residuals: np.ndarray) -> float:
    """Normal-consistent median absolute deviation of the residuals."""
    if len(residuals) == 0:
        return 0.0
    med = float(np.median(residuals))
    return _MAD_SCALE * float(np.median(np.abs(residuals - med)))


def compute_robust_weights(
    standardized_residuals: np.ndarray,
    weight_func: Callable[[float], float],
) -> np.ndarray:
    """Map standardized residuals to weight factors; non-finite entries keep weight 1."""
    weights = np.ones(len(standardized_residuals))
    for i, w in enumerate(standardized_residuals):
        if np.isfinite(w):
            weights[i] = weight_func(float(w))
    return weights


# ---------------------------------------------------------------------------
# IRLS
# ---------------------------------------------------------------------------

def robust_linear_regression(
    x: Sequence[float],
    y: Sequence[float],
    options: RobustOptions | None = None,
) -> RobustRegressionResult:
    """Fit y = slope * x + intercept by IRLS.

    Each iteration fits with the current weights, standardizes the
    residuals by their MAD scale and recomputes the weights. Iteration
    stops when the largest weight change falls below ``options.tolerance``.

    Args:
        x, y: paired samples
        options: robust settings (defaults to Huber)

    Returns:
        RobustRegressionResult with the final fit and per-observation weights
        (valid=False with fewer than 3 observations, where no reweighting
        happens)

    Raises:
        ValueError: If x and y differ in length
    """
    options = options or RobustOptions()
    xa, ya = _paired_arrays(x, y)
    A = np.column_stack([np.ones(len(xa)), xa])
    weight_func = get_weight_function(options)
    current_weights = np.ones(len(xa))

    def _fit(weights):
        res, beta = fit_design(A, ya, "linear", weights)
        res.coefficients = [float(beta[1])] if len(beta) > 1 else []
        if len(xa) < 2:
            res.valid = False
        return res

    if len(xa) < 3:
        return RobustRegressionResult(
            fit=_fit(current_weights) if len(xa) else _empty_fit("linear"),
            weights=current_weights.tolist(),
            method=options.method.value,
            converged=True,
            iterations=0,
            message="Too few observations for robust reweighting",
            valid=False,
        )

    fit = _fit(current_weights)
    for iteration in range(1, options.max_iterations + 1):
        residuals = ya - A @ np.array([fit.intercept, fit.coefficients[0]])
        scale = robust_scale(residuals)
        if scale == 0.0:
            # more than half the points lie exactly on the line
            return RobustRegressionResult(
                fit=fit,
                weights=current_weights.tolist(),
                method=options.method.value,
                converged=True,
                iterations=iteration,
                message="Residual scale is zero; weights unchanged",
                valid=fit.valid,
            )

        new_weights = compute_robust_weights(residuals / scale, weight_func)
        max_change = float(np.max(np.abs(new_weights - current_weights)))
        current_weights = new_weights
        fit = _fit(current_weights)

        if max_change < options.tolerance:
            return RobustRegressionResult(
                fit=fit,
                weights=current_weights.tolist(),
                method=options.method.value,
                converged=True,
                iterations=iteration,
                message=f"IRLS converged after {iteration} iterations (max weight change: {max_change:.6f})",
                valid=fit.valid,
            )

    logger.debug("IRLS did not converge after %d iterations", options.max_iterations)
    return RobustRegressionResult(
        fit=fit,
        weights=current_weights.tolist(),
        method=options.method.value,
        converged=False,
        iterations=options.max_iterations,
        message=f"IRLS did not converge after {options.max_iterations} iterations (max weight change: {max_change:.6f})",
        valid=fit.valid,
    )