"""mine_analytics.core.clustering.pca

Feature standardization and principal component analysis.

PCA standardizes every feature (zero mean, unit sample variance), so the
decomposed matrix is the correlation matrix of the input. The eigen-
decomposition uses numpy.linalg.eigh (symmetric), sorted by descending
eigenvalue. Each eigenvector's sign is fixed so its largest-magnitude
loading is positive, which makes results reproducible across platforms.

Complexity: O(n * d^2 + d^3).
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from .kmeans import as_matrix
from ..results.analysis_result import NormalizationResult, PCAResult, as_float_list


def _standardize(X: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Center and scale columns; zero-spread columns keep a divisor of 1."""
    n = X.shape[0]
    means = X.mean(axis=0)
    centered = X - means
    if n > 1:
        std = np.sqrt(np.sum(centered ** 2, axis=0) / (n - 1))
    else:
        std = np.zeros(X.shape[1])
    std = np.where(std == 0.0, 1.0, std)
    return centered / std, means, std


def normalize_data(data: Sequence[Sequence[float]]) -> NormalizationResult:
    """Per-feature z-score normalization.

    Features with zero standard deviation are divided by 1, so they become
    constant zero after centering; such features, or a single row, make the
    result invalid.
    """
    if len(data) == 0:
        return NormalizationResult(valid=False)
    X = as_matrix(data)
    Z, means, std = _standardize(X)
    return NormalizationResult(
        normalized=[as_float_list(row) for row in Z],
        means=as_float_list(means),
        std_devs=as_float_list(std),
        valid=X.shape[0] > 1 and bool(np.all(np.ptp(X, axis=0) > 0.0)),
    )


def pca_analysis(
    data: Sequence[Sequence[float]],
    components: Optional[int] = None,
) -> PCAResult:
    """Principal component analysis of row data.

    Args:
        data: observations as rows
        components: number of principal axes to keep;
            default min(features, observations)

    Returns:
        PCAResult truncated to ``components`` axes, with projections of the
        standardized data onto them. ``valid`` is False when there are fewer
        than two observations or the data has no variance at all.
    """
    if len(data) == 0:
        return PCAResult(valid=False)

    X = as_matrix(data)
    n, d = X.shape
    n_comp = min(d, n) if components is None else max(0, min(int(components), d))

    Z, _, _ = _standardize(X)
    cov = (Z.T @ Z) / (n - 1) if n > 1 else np.zeros((d, d))
    eigenvalues, eigenvectors = np.linalg.eigh(cov)

    order = np.argsort(eigenvalues)[::-1]
    eigenvalues = np.clip(eigenvalues[order], 0.0, None)
    eigenvectors = eigenvectors[:, order]
    for j in range(d):
        col = eigenvectors[:, j]
        if col[np.argmax(np.abs(col))] < 0:
            eigenvectors[:, j] = -col

    total = float(eigenvalues.sum())
    if total > 0.0:
        explained = eigenvalues / total
    else:
        explained = np.zeros(d)
    cumulative = np.minimum(np.cumsum(explained), 1.0)

    projections = Z @ eigenvectors[:, :n_comp]
    return PCAResult(
        eigenvalues=as_float_list(eigenvalues[:n_comp]),
        eigenvectors=[as_float_list(eigenvectors[:, j]) for j in range(n_comp)],
        explained_variance=as_float_list(explained[:n_comp]),
        cumulative_variance=as_float_list(cumulative[:n_comp]),
        projections=[as_float_list(row) for row in projections],
        valid=n > 1 and total > 0.0,
    )
