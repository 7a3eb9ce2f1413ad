"""mine_analytics.core.clustering

Unsupervised analysis: k-means, PCA and anomaly detection.
"""

from .kmeans import k_means_clustering, silhouette_score, elbow_method
from .pca import normalize_data, pca_analysis
from .anomaly import anomaly_detection

__all__ = [
    "k_means_clustering",
    "silhouette_score",
    "elbow_method",
    "normalize_data",
    "pca_analysis",
    "anomaly_detection",
]
