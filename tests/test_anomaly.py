"""Tests for anomaly detection.

Complexity: z-score is O(n); IQR is O(n log n) for the sort; Mahalanobis
is O(n * d^2) with the diagonal or 2-D closed-form inverse and adds
O(d^3) when the full covariance is inverted.
"""

import json

import pytest

from mine_analytics.core.clustering.anomaly import anomaly_detection
from mine_analytics.core.models.options import AnomalyMethod, AnomalyOptions


class TestZScore:
    """|x - mean| / s above threshold."""

    def test_single_spike(self):
        values = [0.0] * 19 + [100.0]
        res = anomaly_detection(values, "zscore")
        assert res.indices == [19]
        assert res.anomalies[0].score == pytest.approx(95.0 / 500 ** 0.5)
        assert res.anomaly_rate == pytest.approx(1 / 20)
        assert res.threshold == 3.0

    def test_constant_series_has_no_anomalies(self):
        res = anomaly_detection([5.0] * 10, "zscore", threshold=3.0)
        assert res.anomalies == []
        assert res.valid is False

    def test_custom_threshold(self):
        values = [0.0] * 19 + [100.0]
        assert anomaly_detection(values, "zscore", threshold=5.0).anomalies == []

    def test_method_name_is_case_insensitive(self):
        res = anomaly_detection([1, 2, 3], "ZScore")
        assert res.method == "zscore"

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError):
            anomaly_detection([1, 2, 3], "isolation_forest")


class TestIQR:
    """Tukey fences."""

    def test_revenue_outlier(self):
        res = anomaly_detection([50000, 52000, 48000, 55000, 47000, 200000], "iqr")
        assert res.indices == [5]
        # Q1 = 48500, Q3 = 54250, upper fence = 62875
        assert res.anomalies[0].score == pytest.approx((200000 - 62875) / 5750)
        assert res.threshold == 1.5
        assert res.total_points == 6

    def test_zero_iqr_scores_in_raw_units(self):
        res = anomaly_detection([1, 1, 1, 1, 1, 4], AnomalyMethod.IQR)
        assert res.indices == [5]
        assert res.anomalies[0].score == pytest.approx(3.0)

    def test_low_outlier(self):
        res = anomaly_detection([10, 11, 12, 11, 10, 12, -40], "iqr")
        assert res.indices == [6]

    def test_rows_use_first_column(self):
        rows = [[1, 0], [2, 0], [3, 0], [2, 0], [1, 1000]]
        assert anomaly_detection(rows, "iqr").indices == []


class TestMahalanobis:
    """Multivariate distance from the mean vector."""

    @pytest.fixture
    def grid_2d(self):
        return [[i, j] for i in range(5) for j in range(5)] + [[20, 20]]

    @pytest.fixture
    def grid_3d(self):
        return [[i, j, k] for i in range(3) for j in range(3) for k in range(3)] + [[15, 15, 15]]

    def test_two_dimensional(self, grid_2d):
        res = anomaly_detection(grid_2d, "mahalanobis")
        assert res.indices == [25]
        assert res.anomalies[0].value == res.anomalies[0].score
        assert res.valid is True

    def test_one_dimensional_values(self):
        res = anomaly_detection([1, 2, 3, 2, 1, 2, 3, 50], "mahalanobis", threshold=2.0)
        assert res.indices == [7]

    def test_collinear_2d_falls_back_to_diagonal(self):
        rows = [[i * 0.1, i * 0.1] for i in range(30)] + [[100.0, 100.0]]
        res = anomaly_detection(rows, "mahalanobis")
        assert 30 in res.indices

    def test_three_dimensional_diagonal(self, grid_3d):
        res = anomaly_detection(grid_3d, "mahalanobis")
        assert res.indices == [27]

    def test_three_dimensional_full_covariance(self, grid_3d):
        opts = AnomalyOptions(method="mahalanobis", full_covariance=True)
        res = anomaly_detection(grid_3d, options=opts)
        assert res.indices == [27]
        # correlated features shrink the distance relative to the diagonal approximation
        diag = anomaly_detection(grid_3d, "mahalanobis")
        assert res.anomalies[0].score < diag.anomalies[0].score

    def test_single_row(self):
        res = anomaly_detection([[1.0, 2.0]], "mahalanobis")
        assert res.anomalies == []
        assert res.valid is False


class TestResultShape:
    """Result bookkeeping."""

    def test_empty_input(self):
        res = anomaly_detection([], "iqr")
        assert res.total_points == 0
        assert res.anomaly_rate == 0.0
        assert res.valid is False

    def test_rate_invariant(self):
        values = [0.0] * 18 + [100.0, -100.0]
        res = anomaly_detection(values, "iqr")
        assert res.anomaly_rate == pytest.approx(len(res.anomalies) / res.total_points)

    def test_to_dict_is_json_serializable(self):
        res = anomaly_detection([50000, 52000, 48000, 55000, 47000, 200000], "iqr")
        d = res.to_dict()
        assert d["anomalies"][0]["index"] == 5
        json.dumps(d, allow_nan=False)
