"""mine_analytics.core.timeseries.smoothing

Moving averages and exponential smoothing forecasts.

Moving averages return a list of the input's length:
- SMA: mean of the trailing window; NaN until the window fills
- WMA: linearly weighted trailing window (newest weight = window); NaN
  until the window fills
- EMA: s_0 = x_0, s_i = a x_i + (1 - a) s_{i-1} with a = 2 / (window + 1)

Forecasts:
- SES: level l_i = a x_i + (1 - a) l_{i-1}; every horizon step repeats
  the final level
- Holt: level + trend, forecast_h = l_n + h b_n
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..models.options import ForecastMethod, ForecastOptions, MovingAverageType
from ..results.analysis_result import as_float_list
from ..statistics.descriptive import as_array

_SES_ALPHA_GRID = tuple(i / 10.0 for i in range(1, 10))


def moving_average(
    values: Sequence[float],
    window: int,
    kind: MovingAverageType | str = MovingAverageType.SMA,
) -> List[float]:
    """Moving average of a series.

    Returns:
        list with one entry per input value; empty for empty input or
        window <= 0; a copy of the input for window == 1
    """
    kind = MovingAverageType.from_string(kind)
    x = as_array(values)
    n = len(x)
    if n == 0 or window <= 0:
        return []
    if window == 1:
        return as_float_list(x)

    if kind == MovingAverageType.EMA:
        alpha = 2.0 / (window + 1.0)
        out = np.empty(n)
        out[0] = x[0]
        for i in range(1, n):
            out[i] = alpha * x[i] + (1.0 - alpha) * out[i - 1]
        return as_float_list(out)

    out = np.full(n, np.nan)
    if n < window:
        return as_float_list(out)

    if kind == MovingAverageType.WMA:
        weights = np.arange(1, window + 1, dtype=float)
        kernel = weights / weights.sum()
    else:
        kernel = np.full(window, 1.0 / window)
    # np.convolve flips the kernel; reverse so the largest weight hits the newest value
    out[window - 1:] = np.convolve(x, kernel[::-1], mode="valid")
    return as_float_list(out)


def _ses_level(x: np.ndarray, alpha: float) -> float:
    level = float(x[0])
    for v in x[1:]:
        level = alpha * float(v) + (1.0 - alpha) * level
    return level


def _ses_mse(x: np.ndarray, alpha: float) -> float:
    """Mean squared one-step-ahead error; the forecast for x_i is the level before seeing it."""
    level = float(x[0])
    sse = 0.0
    for v in x[1:]:
        sse += (float(v) - level) ** 2
        level = alpha * float(v) + (1.0 - alpha) * level
    return sse / (len(x) - 1)


def _best_ses_alpha(x: np.ndarray) -> float:
    if len(x) < 2:
        return 0.5
    best_alpha = _SES_ALPHA_GRID[0]
    best_mse = np.inf
    for alpha in _SES_ALPHA_GRID:
        mse = _ses_mse(x, alpha)
        if mse < best_mse:
            best_mse = mse
            best_alpha = alpha
    return best_alpha


def _holt_forecast(x: np.ndarray, horizon: int, alpha: float, beta: float) -> List[float]:
    if len(x) < 2:
        return [float(x[0])] * horizon

    level = float(x[0])
    trend = float(x[1] - x[0])
    for v in x[1:]:
        prev_level = level
        level = alpha * float(v) + (1.0 - alpha) * (prev_level + trend)
        trend = beta * (level - prev_level) + (1.0 - beta) * trend
    return [level + h * trend for h in range(1, horizon + 1)]


def forecast(
    values: Sequence[float],
    horizon: int,
    method: ForecastMethod | str = ForecastMethod.SES,
    options: ForecastOptions | None = None,
) -> List[float]:
    """Forecast the next ``horizon`` values.

    Args:
        values: history, oldest first
        horizon: number of steps to forecast
        method: SES or Holt (ignored when options is given)
        options: smoothing parameters

    Returns:
        forecast values; empty for empty history or horizon <= 0
    """
    options = options or ForecastOptions(method=method)
    x = as_array(values)
    if len(x) == 0 or horizon <= 0:
        return []

    if options.method == ForecastMethod.HOLT:
        return _holt_forecast(x, horizon, options.holt_alpha, options.holt_beta)

    alpha = options.ses_alpha if options.ses_alpha is not None else _best_ses_alpha(x)
    return [_ses_level(x, alpha)] * horizon
