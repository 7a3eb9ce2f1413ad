"""mine_analytics.core.timeseries.analysis

Trend, seasonality, change points and rolling statistics of a series
indexed 0..n-1.

Complexity per call:
- trend_detection, seasonality_decomposition: O(n)
- change_point_detection: O(n) for both scans (the window scan uses running sums)
- rolling_stats: O(n * window)
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional, Sequence

import numpy as np

from ..models.options import ChangePointMethod, ChangePointOptions
from ..models.series import values_of
from ..results.analysis_result import Decomposition, RollingWindowStats, TrendResult, as_float_list
from ..solver.least_squares import linear_regression
from ..statistics.correlation import correlation_p_value
from ..statistics.descriptive import as_array, sample_std

logger = logging.getLogger(__name__)

FLAT_SLOPE = 1e-10
TREND_ALPHA = 0.05
DEFAULT_SHIFT_THRESHOLD = 1.0


def trend_detection(series: Sequence[Any]) -> TrendResult:
    """Linear trend of the values against their index.

    Args:
        series: DataPoint objects, ``{"value": ...}`` mappings or numbers

    Returns:
        TrendResult. direction is "flat" when |slope| <= 1e-10; the trend is
        significant when the slope's two-tailed p-value is below 0.05.
        Fewer than two points give a flat, non-significant, invalid result.
    """
    values = values_of(series)
    n = len(values)
    if n < 2:
        return TrendResult(
            direction="flat", slope=0.0, r_squared=0.0, p_value=1.0,
            significant=False, valid=False,
        )

    fit = linear_regression(list(range(n)), values)
    slope = fit.coefficients[0]
    if abs(slope) <= FLAT_SLOPE:
        # constant series: SS_tot is 0, so the fit reports R^2 = 1
        return TrendResult(
            direction="flat", slope=slope, r_squared=0.0, p_value=1.0,
            significant=False, valid=fit.valid,
        )

    r = math.copysign(math.sqrt(max(fit.r_squared, 0.0)), slope)
    p_value = correlation_p_value(r, n)
    return TrendResult(
        direction="up" if slope > 0 else "down",
        slope=slope,
        r_squared=fit.r_squared,
        p_value=p_value,
        significant=p_value < TREND_ALPHA,
        valid=fit.valid,
    )


def _centered_moving_average(x: np.ndarray, period: int) -> np.ndarray:
    """Centered MA; even periods use the 2 x m weighting. Edges copy the nearest defined value."""
    n = len(x)
    if period % 2 == 1:
        kernel = np.full(period, 1.0 / period)
    else:
        kernel = np.full(period + 1, 1.0 / period)
        kernel[0] = kernel[-1] = 0.5 / period
    half = len(kernel) // 2

    trend = np.empty(n)
    trend[half:n - half] = np.convolve(x, kernel, mode="valid")
    trend[:half] = trend[half]
    trend[n - half:] = trend[n - half - 1]
    return trend


def seasonality_decomposition(values: Sequence[float], period: int) -> Decomposition:
    """Classical additive decomposition value = trend + seasonal + residual.

    The trend is a centered moving average over ``period``; the seasonal
    component averages the detrended values at each phase and is centered
    to sum to zero over one period.

    A series shorter than two periods cannot separate trend from season:
    trend is the series itself and seasonal and residual are zero
    (``valid=False``).

    Raises:
        ValueError: If period is not positive
    """
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")

    x = as_array(values)
    n = len(x)
    if n < 2 * period:
        logger.debug("series of %d values too short for period %d", n, period)
        return Decomposition(
            trend=as_float_list(x),
            seasonal=[0.0] * n,
            residual=[0.0] * n,
            period=period,
            valid=False,
        )

    trend = _centered_moving_average(x, period)
    detrended = x - trend
    phase_means = np.array([detrended[p::period].mean() for p in range(period)])
    phase_means -= phase_means.mean()
    seasonal = phase_means[np.arange(n) % period]
    residual = x - trend - seasonal

    return Decomposition(
        trend=as_float_list(trend),
        seasonal=as_float_list(seasonal),
        residual=as_float_list(residual),
        period=period,
        valid=True,
    )


def _window_change_points(x: np.ndarray, window: Optional[int], threshold: Optional[float]) -> List[int]:
    n = len(x)
    w = window if window is not None else max(2, min(10, n // 5))
    if n < 2 * w:
        return []
    std = sample_std(x)
    if not std > 0.0:
        return []
    limit = (threshold if threshold is not None else DEFAULT_SHIFT_THRESHOLD) * std

    csum = np.concatenate([[0.0], np.cumsum(x)])
    idx = np.arange(w, n - w + 1)
    left = (csum[idx] - csum[idx - w]) / w
    right = (csum[idx + w] - csum[idx]) / w
    shift = np.abs(right - left)

    # keep only the strongest index of each run of flagged positions
    points: List[int] = []
    run_best = -1
    for j in range(len(idx)):
        if shift[j] > limit:
            if run_best < 0 or shift[j] > shift[run_best]:
                run_best = j
        elif run_best >= 0:
            points.append(int(idx[run_best]))
            run_best = -1
    if run_best >= 0:
        points.append(int(idx[run_best]))
    return points


def _cusum_change_points(x: np.ndarray, threshold: Optional[float]) -> List[int]:
    n = len(x)
    if n < 4:
        return []
    mean = float(x.mean())
    limit = threshold if threshold is not None else 2.0 * sample_std(x)
    if not limit > 0.0:
        return []

    points: List[int] = []
    upper = 0.0
    lower = 0.0
    for i, v in enumerate(x):
        deviation = float(v) - mean
        upper = max(0.0, upper + deviation)
        lower = min(0.0, lower + deviation)
        if upper > limit or lower < -limit:
            points.append(i)
            upper = 0.0
            lower = 0.0
    return points


def change_point_detection(
    values: Sequence[float],
    method: ChangePointMethod | str = ChangePointMethod.WINDOW,
    window: Optional[int] = None,
    threshold: Optional[float] = None,
    options: ChangePointOptions | None = None,
) -> List[int]:
    """Indices where the local mean of the series shifts.

    WINDOW compares the means of the ``window`` values before and after
    each index and reports the strongest index of every run where the
    difference exceeds ``threshold`` global standard deviations. CUSUM
    reports each index where the two-sided cumulative sum of deviations
    from the global mean crosses ``threshold`` and then restarts.

    Returns:
        ascending candidate indices; empty for short or constant series
    """
    options = options or ChangePointOptions(method=method, window=window, threshold=threshold)
    x = as_array(values)
    if options.method == ChangePointMethod.CUSUM:
        return _cusum_change_points(x, options.threshold)
    return _window_change_points(x, options.window, options.threshold)


def rolling_stats(values: Sequence[float], window: int) -> List[RollingWindowStats]:
    """Statistics of the trailing window ending at each index.

    mean and std_dev (sample) are NaN until ``window`` values are available;
    min and max are taken over the partial window, which is reported with
    valid=False. A window of one reports std_dev 0.

    Returns:
        one RollingWindowStats per value; empty for empty input or window <= 0
    """
    x = as_array(values)
    if len(x) == 0 or window <= 0:
        return []

    out: List[RollingWindowStats] = []
    for i in range(len(x)):
        chunk = x[max(0, i - window + 1):i + 1]
        complete = len(chunk) >= window
        if not complete:
            mean = std = float("nan")
        else:
            mean = float(chunk.mean())
            std = sample_std(chunk) if window > 1 else 0.0
        out.append(RollingWindowStats(
            mean=mean,
            std_dev=std,
            min=float(chunk.min()),
            max=float(chunk.max()),
            valid=complete,
        ))
    return out
