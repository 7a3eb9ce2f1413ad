"""Tests for correlation and least-squares regression.

Complexity: correlation_pair is O(n log n) (ranking); correlation_matrix is
O(k^2 n log n) over k variables; regressions are O(n p^2 + p^3) for p
parameters; robust_linear_regression repeats the linear fit at most
max_iterations times.
"""

import math

import numpy as np
import pytest

from mine_analytics.core.models.options import RobustMethod, RobustOptions
from mine_analytics.core.statistics.correlation import (
    correlation_matrix,
    correlation_pair,
    spearman_correlation,
)
from mine_analytics.core.solver.least_squares import (
    linear_regression,
    multivariate_regression,
    polynomial_regression,
)
from mine_analytics.core.solver.robust import (
    compute_robust_weights,
    danish_weight,
    get_weight_function,
    huber_weight,
    igg3_weight,
    robust_linear_regression,
    robust_scale,
)


# -----------------------------------------------------------------------------
# Correlation
# -----------------------------------------------------------------------------

class TestCorrelationPair:
    """Pearson/Spearman with significance."""

    def test_hand_computed_example(self):
        res = correlation_pair([1, 2, 3, 4, 5], [2, 4, 5, 4, 5], "x", "y")
        assert res.pearson == pytest.approx(6.0 / math.sqrt(60.0))
        # t = 2.1213 with 3 df
        assert res.p_value == pytest.approx(0.1240, abs=1e-3)
        assert res.variable_a == "x"
        assert res.variable_b == "y"
        assert res.valid is True

    def test_symmetry(self):
        x = [1.0, 3.0, 2.0, 5.0, 4.0]
        y = [2.0, 1.0, 4.0, 3.0, 6.0]
        assert correlation_pair(x, y).pearson == pytest.approx(correlation_pair(y, x).pearson)

    def test_self_correlation(self):
        x = [1.0, 5.0, 2.0, 8.0]
        res = correlation_pair(x, x)
        assert res.pearson == pytest.approx(1.0)
        assert res.spearman == pytest.approx(1.0)
        assert res.p_value == pytest.approx(0.0, abs=1e-12)

    def test_spearman_sees_monotone_relation(self):
        x = [1, 2, 3, 4, 5, 6]
        y = [v ** 3 for v in x]
        res = correlation_pair(x, y)
        assert res.spearman == pytest.approx(1.0)
        assert res.pearson < 1.0
        assert spearman_correlation(x, y) == pytest.approx(1.0)

    def test_mismatched_lengths_are_degenerate(self):
        res = correlation_pair([1, 2, 3], [1, 2])
        assert math.isnan(res.pearson)
        assert res.p_value == 1.0
        assert res.valid is False

    def test_constant_variable(self):
        res = correlation_pair([1, 1, 1, 1], [1, 2, 3, 4])
        assert math.isnan(res.pearson)
        assert res.p_value == 1.0
        assert res.valid is False

    @pytest.mark.parametrize("a, b", [([3.0], [4.0]), ([], [])])
    def test_fewer_than_two_pairs(self, a, b):
        res = correlation_pair(a, b)
        assert math.isnan(res.pearson)
        assert math.isnan(res.spearman)
        assert res.p_value == 1.0
        assert res.valid is False
        assert math.isnan(spearman_correlation(a, b))


class TestCorrelationMatrix:
    """Named pairwise matrix."""

    @pytest.fixture
    def variables(self):
        return {
            "a": [1, 2, 3, 4],
            "b": [2, 4, 6, 8],
            "c": [4, 3, 2, 1],
        }

    def test_values_and_symmetry(self, variables):
        m = correlation_matrix(variables)
        assert m.variables == ["a", "b", "c"]
        for i in range(3):
            assert m.matrix[i][i] == 1.0
            for j in range(3):
                assert m.matrix[i][j] == pytest.approx(m.matrix[j][i])
        assert m.get("a", "b") == pytest.approx(1.0)
        assert m.get("b", "c") == pytest.approx(-1.0)

    def test_spearman_method(self, variables):
        m = correlation_matrix(variables, method="spearman")
        assert m.method == "spearman"
        assert m.get("a", "c") == pytest.approx(-1.0)

    def test_undefined_pair_marks_matrix_invalid(self, variables):
        assert correlation_matrix(variables).valid is True
        m = correlation_matrix({**variables, "flat": [5, 5, 5, 5]})
        assert math.isnan(m.get("a", "flat"))
        assert m.get("flat", "flat") == 1.0
        assert m.valid is False
        assert m.to_dict()["matrix"][0][3] is None

    def test_unknown_variable(self, variables):
        m = correlation_matrix(variables)
        with pytest.raises(KeyError):
            m.get("a", "z")

    def test_unknown_method(self, variables):
        with pytest.raises(ValueError):
            correlation_matrix(variables, method="kendall")


# -----------------------------------------------------------------------------
# Ordinary least squares
# -----------------------------------------------------------------------------

class TestLinearRegression:
    """y = slope * x + intercept."""

    def test_exact_line(self):
        res = linear_regression([1, 2, 3, 4, 5], [3, 5, 7, 9, 11])
        assert res.type == "linear"
        assert res.coefficients[0] == pytest.approx(2.0, abs=1e-5)
        assert res.intercept == pytest.approx(1.0, abs=1e-5)
        assert res.r_squared == pytest.approx(1.0, abs=1e-5)
        assert max(abs(r) for r in res.residuals) < 1e-9
        assert res.predict([6]) == pytest.approx([13.0])
        assert res.valid is True

    def test_residuals_are_actual_minus_predicted(self):
        x = [0, 1, 2, 3]
        y = [1.0, 2.5, 2.0, 4.5]
        res = linear_regression(x, y)
        for yi, p, r in zip(y, res.predictions, res.residuals):
            assert r == pytest.approx(yi - p)

    def test_mismatched_lengths_raise(self):
        with pytest.raises(ValueError):
            linear_regression([1, 2, 3], [1, 2])

    def test_empty(self):
        res = linear_regression([], [])
        assert res.valid is False
        assert math.isnan(res.intercept)

    def test_single_point_is_underdetermined(self):
        assert linear_regression([1.0], [2.0]).valid is False

    def test_constant_x_is_singular(self):
        res = linear_regression([2, 2, 2], [1, 2, 3])
        assert res.valid is False


class TestPolynomialRegression:
    """Vandermonde fits."""

    def test_exact_quadratic(self):
        x = [0, 1, 2, 3, 4, 5]
        y = [1 + 2 * v + 3 * v * v for v in x]
        res = polynomial_regression(x, y, degree=2)
        assert res.type == "polynomial"
        assert res.coefficients == pytest.approx([1.0, 2.0, 3.0], abs=1e-8)
        assert res.intercept == pytest.approx(1.0, abs=1e-8)
        assert res.r_squared == pytest.approx(1.0)
        assert res.predict([10]) == pytest.approx([321.0], abs=1e-6)

    def test_degree_zero_is_mean(self):
        res = polynomial_regression([1, 2, 3], [2, 4, 9], degree=0)
        assert res.coefficients == pytest.approx([5.0])

    def test_negative_degree_raises(self):
        with pytest.raises(ValueError):
            polynomial_regression([1, 2, 3], [1, 2, 3], degree=-1)


class TestMultivariateRegression:
    """y = b0 + sum(b_i f_i)."""

    def test_exact_plane(self):
        rows = [[0, 0], [1, 0], [0, 1], [1, 1], [2, 3], [3, 1]]
        target = [1 + 2 * a - b for a, b in rows]
        res = multivariate_regression(rows, target)
        assert res.type == "multivariate"
        assert res.coefficients == pytest.approx([2.0, -1.0], abs=1e-8)
        assert res.intercept == pytest.approx(1.0, abs=1e-8)
        assert res.r_squared == pytest.approx(1.0)
        assert res.predict([[4, 4]]) == pytest.approx([5.0], abs=1e-8)

    def test_underdetermined_fit_flagged(self):
        res = multivariate_regression([[1, 2], [3, 5]], [1, 2])
        assert res.valid is False

    def test_row_count_mismatch_raises(self):
        with pytest.raises(ValueError):
            multivariate_regression([[1], [2]], [1, 2, 3])


# -----------------------------------------------------------------------------
# Robust regression
# -----------------------------------------------------------------------------

class TestWeightFunctions:
    """Robust weight functions."""

    def test_huber(self):
        assert huber_weight(1.0, 1.5) == 1.0
        assert huber_weight(-3.0, 1.5) == pytest.approx(0.5)

    def test_danish(self):
        assert danish_weight(2.0, 2.0) == 1.0
        assert danish_weight(4.0, 2.0) == pytest.approx(math.exp(-1.0))

    def test_igg3_regions(self):
        assert igg3_weight(1.0) == 1.0
        assert igg3_weight(2.0) == pytest.approx((1.5 / 2.0) * (1.0 / 1.5) ** 2)
        assert igg3_weight(5.0) == pytest.approx(1e-10)

    def test_configured_weight_function(self):
        func = get_weight_function(RobustOptions(method="huber", huber_c=2.0))
        assert func(4.0) == pytest.approx(0.5)

    def test_non_finite_residuals_keep_full_weight(self):
        weights = compute_robust_weights([float("nan"), 10.0], lambda w: 0.25)
        assert weights.tolist() == [1.0, 0.25]

    def test_robust_scale_of_normal_like_residuals(self):
        assert robust_scale(np.array([-1.0, 0.0, 1.0])) == pytest.approx(1.4826)
        assert robust_scale(np.array([])) == 0.0


class TestRobustLinearRegression:
    """IRLS line fits with one gross outlier."""

    @pytest.fixture
    def contaminated(self):
        x = list(range(10))
        y = [2.0 * v + 1.0 for v in x]
        y[5] += 50.0
        return x, y

    def test_igg3_rejects_outlier(self, contaminated):
        x, y = contaminated
        res = robust_linear_regression(x, y, RobustOptions(method=RobustMethod.IGG3))
        assert res.fit.coefficients[0] == pytest.approx(2.0, abs=1e-4)
        assert res.fit.intercept == pytest.approx(1.0, abs=1e-3)
        assert 5 in res.downweighted
        assert res.weights[5] < 1e-6
        assert res.method == "igg3"

    def test_huber_beats_ordinary_fit(self, contaminated):
        x, y = contaminated
        ols = linear_regression(x, y)
        res = robust_linear_regression(x, y)
        assert abs(res.fit.intercept - 1.0) < abs(ols.intercept - 1.0)
        assert 5 in res.downweighted
        assert len(res.weights) == len(x)

    def test_too_few_points_skip_reweighting(self):
        res = robust_linear_regression([0, 1], [1, 3])
        assert res.iterations == 0
        assert res.converged is True
        assert res.valid is False
        assert res.weights == [1.0, 1.0]
        assert res.fit.coefficients[0] == pytest.approx(2.0)

    def test_to_dict_nests_fit(self, contaminated):
        x, y = contaminated
        d = robust_linear_regression(x, y).to_dict()
        assert d["fit"]["type"] == "linear"
        assert d["valid"] is True
        assert len(d["weights"]) == 10
