"""
Path Metrics on top of Heavy-Light Decomposition

Derived measurements that only need the O(log n) primitives of
HeavyLightDecomposition (path aggregate, LCA, depth).

Depth similarity (Wu-Palmer style):
    similarity(u, v) = 2 * depth(lca(u, v)) / (depth(u) + depth(v))

Properties:
- Range: [0, 1]
- 1.0 = identical nodes
- 0.0 = one of the nodes is the root
"""

from typing import Iterable, Tuple

import numpy as np

from heavy_light import HeavyLightDecomposition


class PathMetrics:
    """
    Path statistics computed with a built decomposition.

    Time Complexity:
    - distance / similarity: O(log n)
    - path_mean: O(log² n)
    """

    def __init__(self, decomposition: HeavyLightDecomposition):
        """
        Args:
            decomposition: Built HeavyLightDecomposition instance
        """
        self.hld = decomposition

    def distance(self, u: int, v: int) -> int:
        """Number of edges between u and v."""
        return self.hld.path_length(u, v)

    def path_mean(self, u: int, v: int) -> float:
        """
        Average node value on the path between u and v.

        Only meaningful when the decomposition aggregates with sum.
        """
        if self.hld.monoid.name != 'sum':
            raise ValueError(
                f"path_mean requires a sum decomposition, got '{self.hld.monoid.name}'"
            )
        return self.hld.query_path(u, v) / (self.distance(u, v) + 1)

    def depth_similarity(self, u: int, v: int) -> float:
        """
        Compute depth-based similarity between two nodes.

        Returns:
            Similarity score in [0, 1]
        """
        depth_u = self.hld.get_depth(u)
        depth_v = self.hld.get_depth(v)

        if u == v:
            return 1.0

        if depth_u == 0 or depth_v == 0:
            return 0.0

        depth_lca = self.hld.get_depth(self.hld.get_lca(u, v))
        return (2.0 * depth_lca) / (depth_u + depth_v)

    def batch_path_sums(self, pairs: Iterable[Tuple[int, int]]) -> np.ndarray:
        """
        Path aggregates for many (u, v) pairs.

        Args:
            pairs: Iterable of node pairs

        Returns:
            Array of aggregates, one per pair, in input order
        """
        return np.array([self.hld.query_path(u, v) for u, v in pairs])
