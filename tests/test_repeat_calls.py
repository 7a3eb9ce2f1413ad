"""Repeated calls give identical results and never modify their inputs.

Each case runs an analysis twice on the same input lists and compares the
JSON-safe dicts (NaN maps to None, so NaN-bearing results compare equal).
Cost is two calls of the function under test.
"""

import copy

import pytest

from mine_analytics.core.clustering.anomaly import anomaly_detection
from mine_analytics.core.clustering.kmeans import k_means_clustering
from mine_analytics.core.clustering.pca import normalize_data, pca_analysis
from mine_analytics.core.statistics.correlation import correlation_pair
from mine_analytics.core.statistics.descriptive import descriptive_stats
from mine_analytics.core.timeseries.analysis import rolling_stats, seasonality_decomposition
from mine_analytics.core.timeseries.smoothing import forecast, moving_average


SERIES = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0, 5.0, 3.0, 5.0, 8.0]
ROWS = [[2.5, 2.4], [0.5, 0.7], [2.2, 2.9], [1.9, 2.2], [3.1, 3.0], [2.3, 2.7], [9.0, 0.1]]


def _as_plain(result):
    if isinstance(result, list):
        return [_as_plain(r) for r in result]
    if hasattr(result, "to_dict"):
        return result.to_dict()
    return result


CASES = [
    ("zscore anomalies", lambda d: anomaly_detection(d["series"], "zscore", threshold=1.5)),
    ("iqr anomalies", lambda d: anomaly_detection(d["series"], "iqr")),
    ("mahalanobis anomalies", lambda d: anomaly_detection(d["rows"], "mahalanobis", threshold=1.5)),
    ("normalize", lambda d: normalize_data(d["rows"])),
    ("pca", lambda d: pca_analysis(d["rows"])),
    ("kmeans", lambda d: k_means_clustering(d["rows"], 2)),
    ("ses forecast", lambda d: forecast(d["series"], 3, "ses")),
    ("holt forecast", lambda d: forecast(d["series"], 3, "holt")),
    ("wma", lambda d: moving_average(d["series"], 3, "wma")),
    ("descriptive", lambda d: descriptive_stats(d["series"])),
    ("correlation", lambda d: correlation_pair(d["series"], d["series"][::-1])),
    ("decomposition", lambda d: seasonality_decomposition(d["series"], 4)),
    ("rolling", lambda d: rolling_stats(d["series"], 3)),
]


class TestRepeatCalls:
    """Analyses are pure functions of their input."""

    @pytest.mark.parametrize("name, run", CASES, ids=[c[0] for c in CASES])
    def test_same_result_twice(self, name, run):
        data = {"series": list(SERIES), "rows": copy.deepcopy(ROWS)}
        assert _as_plain(run(data)) == _as_plain(run(data))

    @pytest.mark.parametrize("name, run", CASES, ids=[c[0] for c in CASES])
    def test_input_untouched(self, name, run):
        data = {"series": list(SERIES), "rows": copy.deepcopy(ROWS)}
        run(data)
        assert data["series"] == SERIES
        assert data["rows"] == ROWS
