"""Statistics utilities for the analytics engine.

This package contains the numerical building blocks and the inferential
layer:
- Special functions and distributions (gamma, beta, normal, Student t, chi-square)
- Descriptive statistics and quantiles
- Correlation (Pearson, Spearman, matrices)
- Hypothesis tests, effect sizes and sample-size planning

No SciPy dependency is required.
"""

from .distributions import (
    ln_gamma,
    regularized_incomplete_gamma,
    regularized_upper_incomplete_gamma,
    regularized_incomplete_beta,
    normal_cdf,
    normal_quantile,
    t_dist_p_value,
    t_dist_quantile,
    chi_squared_cdf,
    chi_squared_sf,
)
from .descriptive import descriptive_stats, quantile, rank_with_ties
from .correlation import correlation_pair, spearman_correlation, correlation_matrix
from .tests import (
    t_test,
    chi_squared_test,
    mann_whitney_u,
    effect_size,
    confidence_interval,
    sample_size_calculation,
    distribution_test,
)

__all__ = [
    "ln_gamma",
    "regularized_incomplete_gamma",
    "regularized_upper_incomplete_gamma",
    "regularized_incomplete_beta",
    "normal_cdf",
    "normal_quantile",
    "t_dist_p_value",
    "t_dist_quantile",
    "chi_squared_cdf",
    "chi_squared_sf",
    "descriptive_stats",
    "quantile",
    "rank_with_ties",
    "correlation_pair",
    "spearman_correlation",
    "correlation_matrix",
    "t_test",
    "chi_squared_test",
    "mann_whitney_u",
    "effect_size",
    "confidence_interval",
    "sample_size_calculation",
    "distribution_test",
]
