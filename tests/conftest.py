import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from heavy_light import HeavyLightDecomposition


def make_hld(values, edges, root=0, **kwargs):
    """Build a decomposition from a value list and an edge list."""
    hld = HeavyLightDecomposition(len(values), values, **kwargs)
    for u, v in edges:
        hld.add_edge(u, v)
    hld.build(root)
    return hld


def random_tree(rng, n):
    """Random labelled tree: returns (edges, root) with shuffled ids and edge order."""
    labels = rng.permutation(n)
    edges = []
    for v in range(1, n):
        p = int(rng.integers(0, v))
        edge = (int(labels[p]), int(labels[v]))
        edges.append(edge if rng.random() < 0.5 else edge[::-1])
    order = rng.permutation(len(edges))
    return [edges[i] for i in order], int(rng.integers(0, n))


class BruteForceTree:
    """O(n) per query reference: walks parent pointers."""

    def __init__(self, values, edges, root):
        n = len(values)
        self.values = list(values)
        adj = [[] for _ in range(n)]
        for u, v in edges:
            adj[u].append(v)
            adj[v].append(u)
        self.parent = [-1] * n
        self.depth = [0] * n
        seen = [False] * n
        seen[root] = True
        queue = [root]
        for u in queue:
            for v in adj[u]:
                if not seen[v]:
                    seen[v] = True
                    self.parent[v] = u
                    self.depth[v] = self.depth[u] + 1
                    queue.append(v)

    def path_nodes(self, u, v):
        """Nodes on the u-v path; the LCA is last."""
        nodes = []
        while u != v:
            if self.depth[u] < self.depth[v]:
                u, v = v, u
            nodes.append(u)
            u = self.parent[u]
        nodes.append(u)
        return nodes

    def path_sum(self, u, v):
        return sum(self.values[x] for x in self.path_nodes(u, v))

    def lca(self, u, v):
        return self.path_nodes(u, v)[-1]


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def sample_hld():
    """7-node tree rooted at 1."""
    return make_hld(
        [2, 10, 5, 3, 8, 1, 7],
        [(1, 0), (1, 2), (1, 3), (0, 4), (3, 5), (5, 6)],
        root=1,
    )
