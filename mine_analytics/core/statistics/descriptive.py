"""mine_analytics.core.statistics.descriptive

Moments, quantiles and ranks of a one-dimensional sample.

Conventions:
- variance / std_dev are sample estimates (divisor n-1)
- quantiles interpolate linearly at position q*(n-1) of the sorted sample
  (Hyndman-Fan type 7)
- mode is the most frequent value; ties go to the value seen first
- ranks are 1-based, tied values share the average of their ranks
"""

from __future__ import annotations

import math
from typing import Dict, Sequence

import numpy as np

from ..results.analysis_result import DescriptiveStats

PERCENTILES = (5, 10, 25, 50, 75, 90, 95)


def quantile(sorted_values: np.ndarray, q: float) -> float:
    """Linear-interpolation quantile of an already sorted sample.

    Args:
        sorted_values: ascending sample (length >= 1)
        q: quantile in [0, 1]

    Returns:
        value at position q*(n-1); NaN for an empty sample
    """
    n = len(sorted_values)
    if n == 0:
        return float("nan")
    pos = q * (n - 1)
    lo = int(math.floor(pos))
    hi = min(lo + 1, n - 1)
    frac = pos - lo
    return float(sorted_values[lo] + (sorted_values[hi] - sorted_values[lo]) * frac)


def rank_with_ties(values: Sequence[float]) -> np.ndarray:
    """1-based ranks with ties replaced by their average rank."""
    arr = np.asarray(values, dtype=float)
    n = len(arr)
    order = np.argsort(arr, kind="mergesort")
    ranks = np.empty(n, dtype=float)
    i = 0
    while i < n:
        j = i
        while j < n and arr[order[j]] == arr[order[i]]:
            j += 1
        # positions i..j-1 hold equal values -> ranks i+1..j
        ranks[order[i:j]] = 0.5 * (i + j - 1) + 1.0
        i = j
    return ranks


def _mode(values: np.ndarray) -> float:
    counts: Dict[float, int] = {}
    for v in values:
        key = float(v)
        counts[key] = counts.get(key, 0) + 1
    # dicts keep insertion order, so max() resolves ties to the first-seen value
    return max(counts, key=counts.__getitem__)


def sample_skewness(values: np.ndarray) -> float:
    """Adjusted Fisher-Pearson skewness G1; NaN for n < 3 or zero variance."""
    n = len(values)
    if n < 3:
        return float("nan")
    d = values - values.mean()
    s2 = float(np.sum(d ** 2)) / (n - 1)
    if s2 == 0.0:
        return float("nan")
    return n * float(np.sum(d ** 3)) / ((n - 1) * (n - 2) * s2 ** 1.5)


def sample_kurtosis(values: np.ndarray) -> float:
    """Adjusted excess kurtosis G2; NaN for n < 4 or zero variance."""
    n = len(values)
    if n < 4:
        return float("nan")
    d = values - values.mean()
    m2 = float(np.sum(d ** 2)) / n
    if m2 == 0.0:
        return float("nan")
    m4 = float(np.sum(d ** 4)) / n
    return ((n - 1) / ((n - 2) * (n - 3))) * ((n + 1) * m4 / m2 ** 2 - 3.0 * (n - 1))


def descriptive_stats(data: Sequence[float]) -> DescriptiveStats:
    """Compute descriptive statistics for a numeric sample.

    Args:
        data: sample values (not modified)

    Returns:
        DescriptiveStats. An empty sample yields NaN for every field except
        count=0; a single value yields zero spread and NaN shape moments.
    """
    values = np.array(data, dtype=float)
    n = len(values)
    nan = float("nan")

    if n == 0:
        return DescriptiveStats(
            count=0, mean=nan, median=nan, mode=nan, min=nan, max=nan,
            range=nan, variance=nan, std_dev=nan, q1=nan, q3=nan, iqr=nan,
            skewness=nan, kurtosis=nan, percentiles={}, valid=False,
        )

    if n == 1:
        v = float(values[0])
        return DescriptiveStats(
            count=1, mean=v, median=v, mode=v, min=v, max=v,
            range=0.0, variance=0.0, std_dev=0.0, q1=v, q3=v, iqr=0.0,
            skewness=nan, kurtosis=nan,
            percentiles={p: v for p in PERCENTILES}, valid=False,
        )

    sorted_values = np.sort(values)
    mean = float(values.mean())
    variance = float(np.sum((values - mean) ** 2)) / (n - 1)
    q1 = quantile(sorted_values, 0.25)
    q3 = quantile(sorted_values, 0.75)
    lo = float(sorted_values[0])
    hi = float(sorted_values[-1])

    return DescriptiveStats(
        count=n,
        mean=mean,
        median=quantile(sorted_values, 0.5),
        mode=_mode(values),
        min=lo,
        max=hi,
        range=hi - lo,
        variance=variance,
        std_dev=math.sqrt(variance),
        q1=q1,
        q3=q3,
        iqr=q3 - q1,
        skewness=sample_skewness(values),
        kurtosis=sample_kurtosis(values),
        percentiles={p: quantile(sorted_values, p / 100.0) for p in PERCENTILES},
        valid=True,
    )


def sample_std(values: np.ndarray) -> float:
    """Sample standard deviation (n-1); NaN for fewer than two values."""
    n = len(values)
    if n < 2:
        return float("nan")
    return math.sqrt(float(np.sum((values - values.mean()) ** 2)) / (n - 1))


def as_array(data: Sequence[float]) -> np.ndarray:
    """Copy a numeric sequence into a fresh float array."""
    return np.array(data, dtype=float).ravel()

