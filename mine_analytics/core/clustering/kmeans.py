"""mine_analytics.core.clustering.kmeans

K-means clustering (Lloyd iterations, k-means++ seeding), silhouette
scoring and the elbow curve.

Complexity per call:
- k_means_clustering: O(iterations * n * k * d) plus O(n^2 * d) for the
  silhouette score
- silhouette_score: O(n^2 * d) time and O(n^2) memory for the distance matrix
- elbow_method: O(max_k) k-means runs
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..models.options import KMeansOptions
from ..results.analysis_result import Cluster, ClusterResult, ElbowPoint, as_float_list

logger = logging.getLogger(__name__)

_DEFAULT_SEED = 0


def as_matrix(data: Sequence[Sequence[float]]) -> np.ndarray:
    """Copy row data into a 2-D float array (a flat sequence becomes one column)."""
    X = np.array(data, dtype=float)
    if X.ndim == 1:
        X = X[:, None]
    return X


def _squared_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Squared Euclidean distances, shape (n, k)."""
    diff = X[:, None, :] - centroids[None, :, :]
    return np.sum(diff * diff, axis=2)


def _pairwise_distances(X: np.ndarray) -> np.ndarray:
    return np.sqrt(_squared_distances(X, X))


def _kmeans_plus_plus(X: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """Pick k initial centroids, each new one sampled proportional to D(x)^2."""
    n = X.shape[0]
    centroids = [X[rng.integers(n)]]
    for _ in range(1, k):
        d2 = np.min(_squared_distances(X, np.array(centroids)), axis=1)
        total = float(d2.sum())
        if total == 0.0:
            # every point coincides with a chosen centroid
            centroids.append(X[rng.integers(n)])
            continue
        centroids.append(X[rng.choice(n, p=d2 / total)])
    return np.array(centroids, dtype=float)


def k_means_clustering(
    data: Sequence[Sequence[float]],
    k: int,
    max_iterations: int = 100,
    seed: Optional[int] = None,
    options: KMeansOptions | None = None,
) -> ClusterResult:
    """Partition points into k clusters.

    k is clamped to the number of points. Iteration stops when no centroid
    moves more than the tolerance or after max_iterations. A cluster that
    loses all its points during iteration is re-seeded with the point
    farthest from its current centroid. When the data holds fewer distinct
    points than k, duplicate centroids can still leave a cluster empty in
    the final assignment; that cluster and the result report valid=False.

    Args:
        data: points as rows of equal dimension
        k: requested number of clusters
        max_iterations: iteration cap (ignored when options is given)
        seed: initialisation seed; None uses a fixed seed (ignored when
            options is given)
        options: full k-means settings

    Returns:
        ClusterResult. Empty data or k <= 0 gives an empty result with k=0.
    """
    options = options or KMeansOptions(max_iterations=max_iterations, seed=seed)
    if len(data) == 0 or k <= 0:
        return ClusterResult()

    X = as_matrix(data)
    n = X.shape[0]
    k = min(int(k), n)
    rng = np.random.default_rng(_DEFAULT_SEED if options.seed is None else options.seed)

    centroids = _kmeans_plus_plus(X, k, rng)
    labels = np.zeros(n, dtype=int)
    converged = False
    iterations = 0

    for iterations in range(1, options.max_iterations + 1):
        labels = np.argmin(_squared_distances(X, centroids), axis=1)
        new_centroids = centroids.copy()
        for c in range(k):
            members = X[labels == c]
            if len(members) == 0:
                far = int(np.argmax(np.min(_squared_distances(X, centroids), axis=1)))
                logger.debug("k-means cluster %d empty, re-seeding with point %d", c, far)
                new_centroids[c] = X[far]
                labels[far] = c
            else:
                new_centroids[c] = members.mean(axis=0)

        shift = float(np.max(np.sqrt(np.sum((new_centroids - centroids) ** 2, axis=1))))
        centroids = new_centroids
        if shift <= options.tolerance:
            converged = True
            break

    if not converged:
        logger.debug("k-means stopped at max_iterations=%d without converging", options.max_iterations)

    labels = np.argmin(_squared_distances(X, centroids), axis=1)
    inertia = float(np.sum((X - centroids[labels]) ** 2))

    clusters = [
        Cluster(
            centroid=as_float_list(centroids[c]),
            points=[as_float_list(row) for row in X[labels == c]],
        )
        for c in range(k)
    ]
    label_list = [int(v) for v in labels]
    score = silhouette_score(X, label_list) if n > k else 0.0

    return ClusterResult(
        k=k,
        clusters=clusters,
        labels=label_list,
        silhouette_score=score,
        inertia=inertia,
        iterations=iterations,
        converged=converged,
    )


def silhouette_score(data: Sequence[Sequence[float]], labels: Sequence[int]) -> float:
    """Mean silhouette coefficient of a labelling.

    For each point, a = mean distance to the other members of its cluster,
    b = smallest mean distance to the members of another cluster, and
    s = (b - a) / max(a, b) (0 when both are 0).

    Returns:
        mean s over all points; 0 for <= 1 point or <= 1 distinct label
    """
    X = as_matrix(data) if len(data) else np.zeros((0, 0))
    n = X.shape[0]
    if n <= 1:
        return 0.0
    lab = np.asarray(labels)
    unique = list(dict.fromkeys(int(v) for v in lab))
    if len(unique) <= 1:
        return 0.0

    D = _pairwise_distances(X)
    total = 0.0
    for i in range(n):
        same = lab == lab[i]
        same[i] = False
        a = float(D[i, same].mean()) if same.any() else 0.0
        b = np.inf
        for label in unique:
            if label == lab[i]:
                continue
            other = lab == label
            b = min(b, float(D[i, other].mean()))
        denom = max(a, b)
        total += 0.0 if denom == 0.0 else (b - a) / denom
    return total / n


def elbow_method(data: Sequence[Sequence[float]], max_k: int = 10) -> List[ElbowPoint]:
    """Inertia for k = 1..min(max_k, n).

    The curve is returned as-is; choosing the elbow is left to the caller.
    """
    limit = min(max_k, len(data))
    return [
        ElbowPoint(k=result.k, inertia=result.inertia, valid=result.valid)
        for result in (k_means_clustering(data, k) for k in range(1, limit + 1))
    ]
