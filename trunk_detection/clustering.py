# =============================================================================
# Trunk Detection - Density Clustering
# =============================================================================
# DBSCAN-style grouping of scan points. Results depend only on the input
# order, so identical scans always produce identical clusters.
# =============================================================================

import numpy as np
from typing import List, Sequence, Any
from sklearn.neighbors import KDTree

from .types import Cluster, points_to_array

from .config import (
    DBSCAN_EPS,
    DBSCAN_MIN_POINTS
)


class SpatialClusterer:
    """
    Partitions 2D points into density-connected clusters.

    A point is a core point when at least ``min_points`` points, itself
    included, lie within ``eps`` of it. Clusters grow from core points
    through chains of core neighbourhoods. Points first seen as non-core
    seeds are noise and never join a cluster; every other point joins at
    most one cluster.
    """

    def __init__(self, eps: float = DBSCAN_EPS, min_points: int = DBSCAN_MIN_POINTS):
        """
        Args:
            eps: Neighbourhood radius (inclusive)
            min_points: Minimum neighbourhood size of a core point, itself included
        """
        if eps < 0:
            raise ValueError(f"eps must be non-negative, got {eps}")
        if min_points < 1:
            raise ValueError(f"min_points must be at least 1, got {min_points}")
        self.eps = eps
        self.min_points = min_points

    def neighborhoods(self, xy: np.ndarray) -> List[np.ndarray]:
        """
        Indices of the other points within ``eps`` of each point, ascending.

        The test is inclusive, so with ``eps=0`` points at identical
        coordinates are still neighbours of each other. Uses a KD-tree so
        the query cost stays low for large scans.
        """
        if len(xy) == 0:
            return []
        tree = KDTree(xy)
        found = tree.query_radius(xy, r=np.nextafter(self.eps, np.inf))

        neighborhoods = []
        for i, idx in enumerate(found):
            idx = idx[idx != i]
            # Exact inclusive distance test on the tree candidates
            dist = np.hypot(xy[idx, 0] - xy[i, 0], xy[idx, 1] - xy[i, 1])
            neighborhoods.append(np.sort(idx[dist <= self.eps]))
        return neighborhoods

    def cluster(self, points: Sequence[Any]) -> List[Cluster]:
        """
        Group points into clusters.

        Args:
            points: Points exposing x/y (or (x, y) pairs)

        Returns:
            List of clusters, each an input-ordered subsequence of ``points``
        """
        points = list(points)
        return [[points[k] for k in members]
                for members in self.cluster_indices(points)]

    def labels(self, points: Sequence[Any]) -> np.ndarray:
        """Per-point cluster label in result order, -1 for noise."""
        points = list(points)
        labels = np.full(len(points), -1, dtype=int)
        for label, members in enumerate(self.cluster_indices(points)):
            labels[members] = label
        return labels

    def cluster_indices(self, points: Sequence[Any]) -> List[List[int]]:
        """Same as ``cluster`` but returns ascending input indices."""
        n = len(points)
        if n == 0:
            return []

        neighborhoods = self.neighborhoods(points_to_array(points))

        visited = np.zeros(n, dtype=bool)
        noise = np.zeros(n, dtype=bool)
        assigned = np.zeros(n, dtype=bool)
        clusters = []

        for index in range(n):
            if visited[index]:
                continue
            visited[index] = True

            if not self._is_core(neighborhoods[index]):
                noise[index] = True
                continue

            members = [index]
            assigned[index] = True

            # Work list of neighbour indices, each queued once
            queued = np.zeros(n, dtype=bool)
            queued[index] = True
            work = []
            for j in neighborhoods[index]:
                queued[j] = True
                work.append(j)

            i = 0
            while i < len(work):
                j = work[i]
                i += 1

                if not visited[j]:
                    visited[j] = True
                    if self._is_core(neighborhoods[j]):
                        for k in neighborhoods[j]:
                            if not queued[k]:
                                queued[k] = True
                                work.append(k)

                if not noise[j] and not assigned[j]:
                    assigned[j] = True
                    members.append(j)

            clusters.append(sorted(int(k) for k in members))

        return clusters

    def _is_core(self, neighbors: np.ndarray) -> bool:
        # The neighbourhood counts the point itself
        return len(neighbors) + 1 >= self.min_points
