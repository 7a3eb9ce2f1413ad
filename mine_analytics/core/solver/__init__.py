"""mine_analytics.core.solver

Least-squares regression solvers (ordinary and IRLS robust).
"""

from .least_squares import (
    solve_normal_equations,
    linear_regression,
    polynomial_regression,
    multivariate_regression,
)
from .robust import robust_linear_regression

__all__ = [
    "solve_normal_equations",
    "linear_regression",
    "polynomial_regression",
    "multivariate_regression",
    "robust_linear_regression",
]
