"""Tests for k-means, silhouette scoring, the elbow curve and PCA.

Complexity: k_means_clustering is O(iterations * n * k * d) plus the
O(n^2 * d) silhouette; silhouette_score needs O(n^2) memory for the
distance matrix; elbow_method runs max_k clusterings; pca_analysis is
O(n * d^2 + d^3); normalize_data is O(n * d).
"""

import numpy as np
import pytest

from mine_analytics.core.clustering.kmeans import elbow_method, k_means_clustering, silhouette_score
from mine_analytics.core.clustering.pca import normalize_data, pca_analysis
from mine_analytics.core.models.options import KMeansOptions


@pytest.fixture
def two_blobs():
    return [
        [0, 0], [0, 1], [1, 0], [1, 1],
        [10, 10], [10, 11], [11, 10], [11, 11],
    ]


class TestKMeans:
    """Lloyd iterations with k-means++ seeding."""

    def test_separates_blobs(self, two_blobs):
        res = k_means_clustering(two_blobs, 2)
        assert res.k == 2
        assert len(set(res.labels[:4])) == 1
        assert len(set(res.labels[4:])) == 1
        assert res.labels[0] != res.labels[4]
        # each blob: four points at squared distance 0.5 from (x.5, y.5)
        assert res.inertia == pytest.approx(4.0)
        assert res.silhouette_score > 0.8
        assert res.converged is True

    def test_cluster_invariants(self, two_blobs):
        res = k_means_clustering(two_blobs, 3)
        assert len(res.clusters) == res.k
        assert sum(c.size for c in res.clusters) == len(res.labels) == len(two_blobs)
        for label, point in zip(res.labels, two_blobs):
            assert [float(v) for v in point] in res.clusters[label].points

    def test_empty_input(self):
        res = k_means_clustering([], 3)
        assert res.k == 0
        assert res.clusters == []
        assert res.labels == []
        assert res.silhouette_score == 0.0
        assert res.inertia == 0.0
        assert res.valid is False

    @pytest.mark.parametrize("k", [0, -1])
    def test_non_positive_k(self, two_blobs, k):
        res = k_means_clustering(two_blobs, k)
        assert res.k == 0
        assert res.clusters == []

    def test_k_is_clamped_to_point_count(self):
        res = k_means_clustering([[0.0], [5.0], [9.0]], 5)
        assert res.k == 3
        assert res.inertia == pytest.approx(0.0)
        # silhouette is undefined when every point is its own cluster
        assert res.silhouette_score == 0.0

    def test_fewer_distinct_points_than_k(self):
        res = k_means_clustering([[0.0], [0.0], [0.0], [1.0]], 3)
        assert res.k == 3
        assert len(res.clusters) == 3
        assert sum(c.size for c in res.clusters) == 4
        assert sorted(c.size for c in res.clusters) == [0, 1, 3]
        assert [c.valid for c in res.clusters].count(False) == 1
        assert res.valid is False

    def test_reproducible(self, two_blobs):
        first = k_means_clustering(two_blobs, 2, seed=7)
        second = k_means_clustering(two_blobs, 2, seed=7)
        assert first.labels == second.labels
        assert first.inertia == second.inertia

    def test_options_object(self, two_blobs):
        res = k_means_clustering(two_blobs, 2, options=KMeansOptions(max_iterations=1))
        assert res.iterations == 1

    def test_to_dict(self, two_blobs):
        d = k_means_clustering(two_blobs, 2).to_dict()
        assert d["k"] == 2
        assert d["valid"] is True
        assert all(c["valid"] for c in d["clusters"])
        assert sum(c["size"] for c in d["clusters"]) == 8


class TestSilhouette:
    """Mean silhouette coefficient."""

    def test_known_value(self):
        score = silhouette_score([[0], [1], [10], [11]], [0, 0, 1, 1])
        expected = (9.5 / 10.5 + 8.5 / 9.5) / 2.0
        assert score == pytest.approx(expected)

    def test_single_label(self):
        assert silhouette_score([[0], [1], [2]], [0, 0, 0]) == 0.0

    def test_single_point(self):
        assert silhouette_score([[0, 0]], [0]) == 0.0

    def test_singleton_cluster_scores_one(self):
        # the lone point has a = 0, so its own coefficient is 1
        score = silhouette_score([[0], [1], [5]], [0, 0, 1])
        s0 = (5.0 - 1.0) / 5.0
        s1 = (4.0 - 1.0) / 4.0
        assert score == pytest.approx((s0 + s1 + 1.0) / 3.0)


class TestElbow:
    """Inertia curve."""

    def test_curve(self, two_blobs):
        curve = elbow_method(two_blobs, max_k=4)
        assert [p.k for p in curve] == [1, 2, 3, 4]
        assert curve[0].inertia == pytest.approx(404.0)
        assert curve[1].inertia == pytest.approx(4.0)
        assert curve[0].valid and curve[1].valid

    def test_limited_by_point_count(self):
        curve = elbow_method([[0.0], [1.0], [2.0]], max_k=10)
        assert len(curve) == 3
        assert curve[-1].inertia == pytest.approx(0.0)


class TestNormalize:
    """Per-feature z-scores."""

    def test_columns_standardized(self):
        data = [[1, 10], [2, 20], [3, 30], [4, 45]]
        res = normalize_data(data)
        Z = np.array(res.normalized)
        assert Z.mean(axis=0) == pytest.approx([0.0, 0.0], abs=1e-12)
        assert Z.std(axis=0, ddof=1) == pytest.approx([1.0, 1.0])
        assert res.means == pytest.approx([2.5, 26.25])
        assert res.valid is True

    def test_constant_feature(self):
        res = normalize_data([[1, 5], [2, 5], [3, 5]])
        assert res.std_devs[1] == 1.0
        assert [row[1] for row in res.normalized] == [0.0, 0.0, 0.0]
        assert res.valid is False

    def test_single_row(self):
        res = normalize_data([[4.0, 2.0]])
        assert res.normalized == [[0.0, 0.0]]
        assert res.valid is False
        assert res.to_dict()["valid"] is False

    def test_empty(self):
        res = normalize_data([])
        assert res.normalized == []
        assert res.valid is False


class TestPCA:
    """Principal components of standardized data."""

    def test_perfectly_correlated_features(self):
        res = pca_analysis([[1, 2], [2, 4], [3, 6], [4, 8]])
        assert res.eigenvalues == pytest.approx([2.0, 0.0], abs=1e-10)
        assert res.explained_variance == pytest.approx([1.0, 0.0], abs=1e-10)
        assert res.cumulative_variance[-1] == pytest.approx(1.0)
        assert res.eigenvectors[0] == pytest.approx([2 ** -0.5, 2 ** -0.5])
        assert len(res.projections) == 4
        assert res.valid is True

    def test_component_truncation(self):
        rng = np.random.default_rng(3)
        data = rng.normal(size=(30, 4)).tolist()
        res = pca_analysis(data, components=2)
        assert len(res.eigenvalues) == 2
        assert len(res.eigenvectors) == 2
        assert len(res.eigenvectors[0]) == 4
        assert all(len(row) == 2 for row in res.projections)

    def test_eigenvalues_sorted_and_sum_to_feature_count(self):
        rng = np.random.default_rng(5)
        data = rng.normal(size=(50, 3)).tolist()
        res = pca_analysis(data)
        assert res.eigenvalues == sorted(res.eigenvalues, reverse=True)
        assert sum(res.eigenvalues) == pytest.approx(3.0)
        assert all(a <= b + 1e-12 for a, b in zip(res.cumulative_variance, res.cumulative_variance[1:]))

    def test_degenerate_inputs(self):
        assert pca_analysis([]).valid is False
        assert pca_analysis([[1.0, 2.0]]).valid is False
