"""mine_analytics.core.statistics.tests

Classical hypothesis tests and experiment statistics.

Includes:
- Independent (pooled variance) and paired t-tests
- Chi-square goodness-of-fit test
- Mann-Whitney U test (normal approximation)
- Cohen's d effect size
- t-based confidence interval for a mean
- Per-group sample size for a two-sample comparison
- Jarque-Bera normality test

Degenerate inputs (too few observations, zero spread) return a defined
result with ``valid=False`` instead of raising.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence, Tuple

import numpy as np

from .descriptive import as_array, rank_with_ties, sample_kurtosis, sample_skewness
from .distributions import (
    chi_squared_sf,
    normal_cdf,
    normal_quantile,
    t_dist_p_value,
    t_dist_quantile,
)
from ..results.analysis_result import EffectSizeResult, HypothesisTest, NormalityResult

logger = logging.getLogger(__name__)

# Below this size skewness/kurtosis estimates are too unstable for Jarque-Bera
_MIN_NORMALITY_SAMPLES = 8


def _sample_variance(x: np.ndarray) -> float:
    return float(np.sum((x - x.mean()) ** 2)) / (len(x) - 1)


def _degenerate(name: str, alpha: float, dof: float | None = 0) -> HypothesisTest:
    return HypothesisTest(
        test_name=name,
        statistic=0.0,
        p_value=1.0,
        degrees_of_freedom=dof,
        significant=False,
        confidence_level=1.0 - alpha,
        valid=False,
    )


def t_test(
    group_a: Sequence[float],
    group_b: Sequence[float],
    paired: bool = False,
    alpha: float = 0.05,
) -> HypothesisTest:
    """Two-sample t-test.

    Independent samples use the pooled variance:
        sp^2 = ((nA-1) varA + (nB-1) varB) / (nA + nB - 2)
        t = (meanA - meanB) / sqrt(sp^2 (1/nA + 1/nB)),  df = nA + nB - 2

    Paired samples test the mean of the pairwise differences (truncated to
    the shorter group), df = n - 1.

    Args:
        group_a, group_b: samples
        paired: run the paired variant
        alpha: significance level

    Returns:
        HypothesisTest with a confidence interval for the mean difference.
        Fewer than 2 observations per group gives p_value=1. Zero standard
        error gives statistic=0 and p_value 1 (equal means) or 0 (unequal).
    """
    if not 0.0 < alpha < 1.0:
        raise ValueError("alpha must be in (0,1)")
    if paired:
        return _paired_t_test(as_array(group_a), as_array(group_b), alpha)

    a = as_array(group_a)
    b = as_array(group_b)
    name = "independent t-test"
    n_a, n_b = len(a), len(b)
    if n_a < 2 or n_b < 2:
        return _degenerate(name, alpha)

    mean_a = float(a.mean())
    mean_b = float(b.mean())
    df = n_a + n_b - 2
    sp2 = ((n_a - 1) * _sample_variance(a) + (n_b - 1) * _sample_variance(b)) / df
    se = math.sqrt(sp2 * (1.0 / n_a + 1.0 / n_b))
    return _t_result(name, mean_a - mean_b, se, df, alpha)


def _paired_t_test(a: np.ndarray, b: np.ndarray, alpha: float) -> HypothesisTest:
    name = "paired t-test"
    n = min(len(a), len(b))
    if n < 2:
        return _degenerate(name, alpha)

    diffs = a[:n] - b[:n]
    se = math.sqrt(_sample_variance(diffs)) / math.sqrt(n)
    return _t_result(name, float(diffs.mean()), se, n - 1, alpha)


def _t_result(name: str, diff: float, se: float, df: int, alpha: float) -> HypothesisTest:
    confidence = 1.0 - alpha
    if se == 0.0:
        logger.debug("%s: zero standard error, deciding on mean equality", name)
        equal = diff == 0.0
        return HypothesisTest(
            test_name=name,
            statistic=0.0,
            p_value=1.0 if equal else 0.0,
            degrees_of_freedom=df,
            significant=not equal,
            confidence_level=confidence,
            confidence_interval=(diff, diff),
            valid=False,
        )

    t = diff / se
    p_value = t_dist_p_value(abs(t), df)
    t_crit = t_dist_quantile(1.0 - alpha / 2.0, df)
    return HypothesisTest(
        test_name=name,
        statistic=t,
        p_value=p_value,
        degrees_of_freedom=df,
        significant=p_value < alpha,
        confidence_level=confidence,
        confidence_interval=(diff - t_crit * se, diff + t_crit * se),
    )


def chi_squared_test(
    observed: Sequence[float],
    expected: Sequence[float],
    alpha: float = 0.05,
) -> HypothesisTest:
    """Chi-square goodness-of-fit test.

    Statistic:
        X^2 = sum (O_i - E_i)^2 / E_i   over categories with E_i != 0
    df = number of categories - 1.

    Mismatched lengths or fewer than 2 categories give a not-significant
    result with ``valid=False``.
    """
    name = "chi-squared"
    obs = as_array(observed)
    exp = as_array(expected)
    if len(obs) != len(exp):
        logger.debug("chi-squared: %d observed vs %d expected categories", len(obs), len(exp))
        return _degenerate(name, alpha)
    if len(obs) < 2:
        return _degenerate(name, alpha)

    mask = exp != 0.0
    stat = float(np.sum((obs[mask] - exp[mask]) ** 2 / exp[mask]))
    df = len(obs) - 1
    p_value = chi_squared_sf(stat, df)
    return HypothesisTest(
        test_name=name,
        statistic=stat,
        p_value=p_value,
        degrees_of_freedom=df,
        significant=p_value < alpha,
        confidence_level=1.0 - alpha,
    )


def mann_whitney_u(
    group_a: Sequence[float],
    group_b: Sequence[float],
    alpha: float = 0.05,
) -> HypothesisTest:
    """Mann-Whitney U test with a two-tailed normal approximation.

    Pooled values are ranked with tie-averaged ranks;
        U_A = R_A - nA (nA + 1) / 2,  U = min(U_A, nA nB - U_A)
        z = (U - nA nB / 2) / sqrt(nA nB (nA + nB + 1) / 12)
    """
    name = "Mann-Whitney U"
    a = as_array(group_a)
    b = as_array(group_b)
    n_a, n_b = len(a), len(b)
    if n_a < 2 or n_b < 2:
        return _degenerate(name, alpha, dof=None)

    ranks = rank_with_ties(np.concatenate([a, b]))
    u_a = float(np.sum(ranks[:n_a])) - n_a * (n_a + 1) / 2.0
    u = min(u_a, n_a * n_b - u_a)

    mean_u = n_a * n_b / 2.0
    std_u = math.sqrt(n_a * n_b * (n_a + n_b + 1) / 12.0)
    if std_u == 0.0:
        result = _degenerate(name, alpha, dof=None)
        result.statistic = u
        return result

    z = (u - mean_u) / std_u
    p_value = min(1.0, 2.0 * normal_cdf(-abs(z)))
    return HypothesisTest(
        test_name=name,
        statistic=u,
        p_value=p_value,
        significant=p_value < alpha,
        confidence_level=1.0 - alpha,
    )


def interpret_cohens_d(d: float) -> str:
    """Conventional magnitude label for |d|."""
    d = abs(d)
    if d < 0.2:
        return "negligible"
    if d < 0.5:
        return "small"
    if d < 0.8:
        return "medium"
    return "large"


def effect_size(group_a: Sequence[float], group_b: Sequence[float]) -> EffectSizeResult:
    """Cohen's d: |meanA - meanB| / pooled standard deviation."""
    a = as_array(group_a)
    b = as_array(group_b)
    n_a, n_b = len(a), len(b)
    if n_a < 2 or n_b < 2:
        return EffectSizeResult(cohens_d=0.0, interpretation="negligible", valid=False)

    pooled_sd = math.sqrt(
        ((n_a - 1) * _sample_variance(a) + (n_b - 1) * _sample_variance(b)) / (n_a + n_b - 2)
    )
    if pooled_sd == 0.0:
        return EffectSizeResult(cohens_d=0.0, interpretation="negligible", valid=False)

    d = abs(float(a.mean()) - float(b.mean())) / pooled_sd
    return EffectSizeResult(cohens_d=d, interpretation=interpret_cohens_d(d))


def confidence_interval(data: Sequence[float], level: float = 0.95) -> Tuple[float, float]:
    """t-based confidence interval for the mean.

    mean +/- t_{(1+level)/2, n-1} * s / sqrt(n)

    Returns:
        (low, high). A single value gives the point interval (v, v);
        an empty sample gives (nan, nan).
    """
    if not 0.0 < level < 1.0:
        raise ValueError("level must be in (0,1)")
    x = as_array(data)
    n = len(x)
    if n == 0:
        return float("nan"), float("nan")
    if n == 1:
        v = float(x[0])
        return v, v

    mean = float(x.mean())
    se = math.sqrt(_sample_variance(x)) / math.sqrt(n)
    t_crit = t_dist_quantile(1.0 - (1.0 - level) / 2.0, n - 1)
    return mean - t_crit * se, mean + t_crit * se


def sample_size_calculation(
    effect: float,
    power: float = 0.8,
    alpha: float = 0.05,
) -> float:
    """Required sample size per group for a two-sided two-sample comparison.

    n = ceil(2 (z_{1-alpha/2} + z_{power})^2 / es^2)

    Returns:
        sample size as an int-valued number; math.inf when effect <= 0
    """
    if effect <= 0:
        return math.inf
    z_alpha = normal_quantile(1.0 - alpha / 2.0)
    z_power = normal_quantile(power)
    return math.ceil((z_alpha + z_power) ** 2 * 2.0 / (effect * effect))


def distribution_test(data: Sequence[float], alpha: float = 0.05) -> NormalityResult:
    """Jarque-Bera normality test.

    JB = n/6 * (S^2 + K^2/4), with S the sample skewness and K the excess
    kurtosis; JB ~ chi-square(2) under normality.

    Samples smaller than 8, or with zero spread, are reported as normal
    with p_value=1 and ``valid=False``.
    """
    x = as_array(data)
    n = len(x)
    skew = sample_skewness(x) if n >= _MIN_NORMALITY_SAMPLES else float("nan")
    kurt = sample_kurtosis(x) if n >= _MIN_NORMALITY_SAMPLES else float("nan")
    if math.isnan(skew) or math.isnan(kurt):
        return NormalityResult(
            is_normal=True,
            skewness_z=0.0,
            kurtosis_z=0.0,
            statistic=0.0,
            p_value=1.0,
            valid=False,
        )

    jb = (n / 6.0) * (skew * skew + kurt * kurt / 4.0)
    p_value = chi_squared_sf(jb, 2)
    return NormalityResult(
        is_normal=p_value > alpha,
        skewness_z=skew / math.sqrt(6.0 / n),
        kurtosis_z=kurt / math.sqrt(24.0 / n),
        statistic=jb,
        p_value=p_value,
    )
