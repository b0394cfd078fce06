"""
Country Clustering Module.

Groups countries by their mortality profile with k-means:
- Per-country feature aggregation (average rate, GDP, trend)
- Random centroid initialisation from an injectable generator
- Lloyd iterations with empty-cluster re-seeding
- Cluster profiling and silhouette scoring
"""

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import silhouette_score

from mortality_insights.config import settings
from mortality_insights.core.aggregation import CLUSTER_FEATURES, country_features
from mortality_insights.core.records import Record
from mortality_insights.exceptions import InsufficientDataError

logger = logging.getLogger(__name__)


@dataclass
class ClusterResult:
    """Result of clustering analysis."""
    assignments: list[int]  # assignments[i] is the cluster of countries[i]
    centroids: list[list[float]]
    countries: list[str]
    feature_names: list[str]
    iterations: int
    converged: bool
    silhouette_score: float | None = None

    @property
    def n_clusters(self) -> int:
        return len(self.centroids)

    @property
    def labels(self) -> dict[str, int]:
        """Country -> cluster."""
        return dict(zip(self.countries, self.assignments))

    @property
    def cluster_sizes(self) -> dict[int, int]:
        sizes = {i: 0 for i in range(self.n_clusters)}
        for label in self.assignments:
            sizes[label] += 1
        return sizes

    @property
    def effective_clusters(self) -> int:
        """Number of clusters with at least one member."""
        return sum(1 for size in self.cluster_sizes.values() if size > 0)

    def get_cluster_members(self, cluster_id: int) -> list[str]:
        """Get countries in a specific cluster."""
        return [c for c, label in zip(self.countries, self.assignments) if label == cluster_id]

    def centroids_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(self.centroids, columns=self.feature_names)
        df.index.name = "cluster"
        return df

    def to_dict(self) -> dict[str, Any]:
        return {
            "n_clusters": self.n_clusters,
            "labels": self.labels,
            "cluster_sizes": self.cluster_sizes,
            "centroids": self.centroids,
            "iterations": self.iterations,
            "converged": self.converged,
            "silhouette_score": self.silhouette_score,
        }


class CountryClusterer:
    """
    Cluster countries on aggregated mortality features.
    """

    def __init__(self, max_iterations: int | None = None, reseed_empty: bool = True):
        if max_iterations is None:
            max_iterations = settings.max_iterations
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.max_iterations = max_iterations
        self.reseed_empty = reseed_empty
        self.features: np.ndarray | None = None
        self.country_names: list[str] = []

    def prepare_data(self, records: Sequence[Record]) -> "CountryClusterer":
        """
        Aggregate records into one feature vector per country.

        Args:
            records: Record set.

        Returns:
            Self for chaining.
        """
        self.country_names, self.features = country_features(records)

        if not self.country_names:
            raise InsufficientDataError("No countries to cluster")

        return self

    @staticmethod
    def _assign(features: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Index of the nearest centroid per point; ties go to the lowest index."""
        distances = np.linalg.norm(features[:, None, :] - centroids[None, :, :], axis=2)
        return np.argmin(distances, axis=1)

    @staticmethod
    def _reseed(features: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """
        Give every empty cluster the point farthest from its own centroid.

        Points are only taken from clusters with more than one member, so
        re-seeding never empties another cluster. Updates centroids in place.
        """
        labels = labels.copy()
        k = len(centroids)

        for j in range(k):
            if np.any(labels == j):
                continue
            sizes = np.bincount(labels, minlength=k)
            donors = sizes[labels] > 1
            if not donors.any():
                break
            distances = np.linalg.norm(features - centroids[labels], axis=1)
            distances[~donors] = -1.0
            idx = int(np.argmax(distances))
            labels[idx] = j
            centroids[j] = features[idx]

        return labels

    @staticmethod
    def _update(features: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Mean of each cluster's members; empty clusters keep their centroid."""
        updated = centroids.copy()
        for j in range(len(centroids)):
            members = features[labels == j]
            if len(members):
                updated[j] = members.mean(axis=0)
        return updated

    def kmeans(
        self,
        n_clusters: int | None = None,
        rng: np.random.Generator | None = None,
        random_state: int | None = None,
    ) -> ClusterResult:
        """
        Perform K-Means clustering.

        Initial centroids are k feature vectors drawn uniformly with
        replacement, so repeated calls differ unless the generator is
        seeded.

        Args:
            n_clusters: Number of clusters (settings.default_clusters if None).
            rng: Random generator used for initialisation.
            random_state: Seed for a fresh generator when rng is None.

        Returns:
            ClusterResult object.
        """
        if self.features is None:
            raise ValueError("No data prepared. Call prepare_data first.")

        k = n_clusters if n_clusters is not None else settings.default_clusters
        if k < 1:
            raise ValueError(f"n_clusters must be at least 1, got {k}")

        rng = rng if rng is not None else np.random.default_rng(random_state)
        features = self.features
        n = len(features)

        centroids = features[rng.integers(0, n, size=k)].astype(float)
        labels = np.zeros(n, dtype=int)
        changed = True
        iterations = 0

        while changed and iterations < self.max_iterations:
            new_labels = self._assign(features, centroids)
            if self.reseed_empty:
                new_labels = self._reseed(features, new_labels, centroids)

            changed = not np.array_equal(new_labels, labels)
            labels = new_labels
            centroids = self._update(features, labels, centroids)
            iterations += 1

        if changed:
            logger.warning("k-means stopped after %d iterations without converging", iterations)

        result = ClusterResult(
            assignments=labels.tolist(),
            centroids=centroids.tolist(),
            countries=list(self.country_names),
            feature_names=list(CLUSTER_FEATURES),
            iterations=iterations,
            converged=not changed,
            silhouette_score=self._silhouette(features, labels),
        )

        empty = k - result.effective_clusters
        if empty:
            logger.warning("%d of %d clusters ended with no members", empty, k)
        logger.debug("k-means over %d countries: k=%d, %d iterations", n, k, iterations)

        return result

    @staticmethod
    def _silhouette(features: np.ndarray, labels: np.ndarray) -> float | None:
        n_labels = len(np.unique(labels))
        if n_labels < 2 or n_labels > len(features) - 1:
            return None
        return float(silhouette_score(features, labels))

    def profile_clusters(self, cluster_result: ClusterResult) -> pd.DataFrame:
        """
        Mean feature values and member count per cluster.

        Args:
            cluster_result: Result from kmeans on the prepared data.

        Returns:
            DataFrame indexed by cluster.
        """
        if self.features is None:
            raise ValueError("No data available")

        df = pd.DataFrame(self.features, columns=CLUSTER_FEATURES, index=self.country_names)
        df["cluster"] = cluster_result.assignments
        profile = df.groupby("cluster")[CLUSTER_FEATURES].mean()
        profile["size"] = df.groupby("cluster").size()
        return profile


def kmeans(
    records: Sequence[Record],
    k: int | None = None,
    rng: np.random.Generator | None = None,
    random_state: int | None = None,
    reseed_empty: bool = True,
    max_iterations: int | None = None,
) -> ClusterResult:
    """
    Cluster countries by average rate, average GDP and rate trend.

    Args:
        records: Record set.
        k: Number of clusters.
        rng: Random generator for centroid initialisation.
        random_state: Seed used when rng is None.
        reseed_empty: Re-seed clusters that lose all members.
        max_iterations: Iteration cap (settings.max_iterations if None).

    Returns:
        ClusterResult object.
    """
    if k is not None and k < 1:
        raise ValueError(f"k must be at least 1, got {k}")

    clusterer = CountryClusterer(max_iterations=max_iterations, reseed_empty=reseed_empty)
    clusterer.prepare_data(records)
    return clusterer.kmeans(k, rng=rng, random_state=random_state)
