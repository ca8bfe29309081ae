"""
Heavy-Light Decomposition for O(log² n) Path Queries

Maps a rooted tree onto a segment tree so that any root-to-node path is
covered by O(log n) contiguous position ranges ("chains").

This module provides:
- Iterative two-pass construction (subtree sizing, chain assignment)
- Path aggregate queries and point updates in O(log² n) / O(log n)
- LCA queries in O(log n) by chain-jumping
- Subtree aggregates, since the chain order is also a DFS pre-order

Lifecycle:
    hld = HeavyLightDecomposition(n, values)
    hld.add_edge(u, v)      # n - 1 times
    hld.build(root)         # exactly once
    hld.query_path(u, v); hld.get_lca(u, v); hld.update_node_value(u, x)
"""

import logging
import time
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from errors import InvalidIndexError, InvalidStateError, MalformedTreeError
from segment_tree import SUM, Monoid, SegmentTree

logger = logging.getLogger(__name__)


class HeavyLightDecomposition:
    """
    Heavy-light decomposition of a tree with mutable node values.

    Per-node metadata (filled by build, read-only afterwards):
        parent[u]       node above u, -1 for the root
        depth[u]        edge count from the root
        subtree_size[u] nodes in u's subtree, including u
        heavy_child[u]  child with the largest subtree, -1 for leaves
        head[u]         topmost node of u's chain
        pos[u]          u's slot in the segment tree

    Preprocessing: O(n)
    Path query: O(log² n)
    LCA / update: O(log n)
    """

    def __init__(self, node_count: int, initial_values: Sequence, monoid: Monoid = SUM):
        """
        Create an unbuilt decomposition.

        Args:
            node_count: Number of nodes, ids are 0..node_count-1
            initial_values: Value of each node, indexed by node id
            monoid: Aggregation used by path and subtree queries (default: sum)
        """
        if node_count < 0:
            raise ValueError(f"Node count must be non-negative, got {node_count}")
        if len(initial_values) != node_count:
            raise ValueError(
                f"Expected {node_count} initial values, got {len(initial_values)}"
            )

        self.node_count = node_count
        self.monoid = monoid
        self._values = list(initial_values)
        self._adj: List[List[int]] = [[] for _ in range(node_count)]
        self._edge_count = 0

        self._built = False
        self._root: Optional[int] = None
        self._parent: List[int] = []
        self._depth: List[int] = []
        self._subtree_size: List[int] = []
        self._heavy_child: List[int] = []
        self._head: List[int] = []
        self._pos: List[int] = []
        self._seg_tree = SegmentTree(node_count, monoid)

    @property
    def is_built(self) -> bool:
        return self._built

    def _check_node(self, u: int):
        if not 0 <= u < self.node_count:
            raise InvalidIndexError(f"Node {u} out of range [0, {self.node_count})")

    def _require_built(self):
        if not self._built:
            raise InvalidStateError("Decomposition not built. Call build() first.")

    def add_edge(self, u: int, v: int):
        """
        Add an undirected edge between u and v.

        Args:
            u: First node
            v: Second node
        """
        if self._built:
            raise InvalidStateError("Cannot add edges after build()")
        self._check_node(u)
        self._check_node(v)
        self._adj[u].append(v)
        self._adj[v].append(u)
        self._edge_count += 1

    def build(self, root: int = 0):
        """
        Run both traversal passes and build the segment tree.

        Metadata is only committed once the edge set has been validated, so a
        MalformedTreeError leaves the instance unbuilt and open for more edges.

        Args:
            root: Root node of the tree
        """
        if self._built:
            raise InvalidStateError("build() already called")

        n = self.node_count
        if n == 0:
            self._built = True
            logger.info("Built empty decomposition (0 nodes)")
            return

        self._check_node(root)
        if self._edge_count != n - 1:
            raise MalformedTreeError(
                f"A tree on {n} nodes needs {n - 1} edges, got {self._edge_count}"
            )

        start_time = time.time()
        parent, depth, subtree_size, heavy_child = self._size_pass(root)
        head, pos, chain_order = self._chain_pass(root, parent, heavy_child)

        self._seg_tree.build_from_ordered_values([self._values[u] for u in chain_order])

        self._root = root
        self._parent = parent
        self._depth = depth
        self._subtree_size = subtree_size
        self._heavy_child = heavy_child
        self._head = head
        self._pos = pos
        self._built = True

        logger.info(f"Built decomposition: {n} nodes, {self.chain_count()} chains, "
                    f"max depth {max(depth)} ({(time.time() - start_time) * 1000:.2f}ms)")

    def _size_pass(self, root: int) -> Tuple[List[int], List[int], List[int], List[int]]:
        """
        First pass: parents, depths, subtree sizes and heavy children.

        Uses an explicit stack so line-shaped trees cannot exhaust the call stack.
        """
        n = self.node_count
        parent = [-1] * n
        depth = [0] * n
        subtree_size = [1] * n
        heavy_child = [-1] * n
        visited = [False] * n

        visited[root] = True
        order = []
        stack = [root]
        while stack:
            u = stack.pop()
            order.append(u)
            for v in self._adj[u]:
                if v == parent[u]:
                    continue
                if visited[v]:
                    raise MalformedTreeError(f"Cycle detected through edge {u}-{v}")
                visited[v] = True
                parent[v] = u
                depth[v] = depth[u] + 1
                stack.append(v)

        if len(order) != n:
            unreachable = [u for u in range(n) if not visited[u]]
            raise MalformedTreeError(
                f"{len(unreachable)} node(s) unreachable from root {root}, "
                f"e.g. {unreachable[:5]}"
            )

        # Reverse pre-order visits every child before its parent
        for u in reversed(order):
            if parent[u] != -1:
                subtree_size[parent[u]] += subtree_size[u]

        for u in order:
            best = 0
            for v in self._adj[u]:
                if v == parent[u]:
                    continue
                # Strict comparison keeps the first child on ties
                if subtree_size[v] > best:
                    best = subtree_size[v]
                    heavy_child[u] = v

        return parent, depth, subtree_size, heavy_child

    def _chain_pass(self, root: int, parent: List[int],
                    heavy_child: List[int]) -> Tuple[List[int], List[int], List[int]]:
        """
        Second pass: chain heads and flattened positions.

        Pre-order with the heavy child visited first, so every chain occupies
        a contiguous run of positions starting at its head.

        Returns:
            (head, pos, chain_order) where chain_order[p] is the node at position p
        """
        n = self.node_count
        head = [0] * n
        pos = [0] * n
        chain_order = []

        stack = [(root, root)]
        while stack:
            u, h = stack.pop()
            head[u] = h
            pos[u] = len(chain_order)
            chain_order.append(u)

            light = [v for v in self._adj[u] if v != parent[u] and v != heavy_child[u]]
            # Pushed in reverse so they pop in adjacency order
            for v in reversed(light):
                stack.append((v, v))
            if heavy_child[u] != -1:
                stack.append((heavy_child[u], h))

        return head, pos, chain_order

    def update_node_value(self, u: int, new_value):
        """
        Set the value of node u.

        Args:
            u: Node to update
            new_value: New value for u
        """
        self._require_built()
        self._check_node(u)
        self._values[u] = new_value
        self._seg_tree.update(self._pos[u], new_value)
        logger.debug(f"Node {u} updated to {new_value}")

    def path_segments(self, u: int, v: int) -> List[Tuple[int, int]]:
        """
        Position ranges covering the path between u and v.

        Args:
            u: First node
            v: Second node

        Returns:
            List of closed (start, end) position ranges, O(log n) entries
        """
        self._require_built()
        self._check_node(u)
        self._check_node(v)

        head, depth, pos, parent = self._head, self._depth, self._pos, self._parent
        segments = []
        while head[u] != head[v]:
            if depth[head[u]] < depth[head[v]]:
                u, v = v, u
            segments.append((pos[head[u]], pos[u]))
            u = parent[head[u]]

        if depth[u] > depth[v]:
            u, v = v, u
        segments.append((pos[u], pos[v]))
        return segments

    def query_path(self, u: int, v: int):
        """
        Aggregate of node values on the path between u and v (inclusive).

        Args:
            u: First node
            v: Second node

        Returns:
            Path aggregate (sum by default)
        """
        result = self.monoid.identity
        for left, right in self.path_segments(u, v):
            result = self.monoid.operation(result, self._seg_tree.query(left, right))
        return result

    def get_lca(self, u: int, v: int) -> int:
        """
        Find the Lowest Common Ancestor of u and v.

        Args:
            u: First node
            v: Second node

        Returns:
            LCA node id
        """
        self._require_built()
        self._check_node(u)
        self._check_node(v)

        head, depth, parent = self._head, self._depth, self._parent
        while head[u] != head[v]:
            if depth[head[u]] < depth[head[v]]:
                u, v = v, u
            u = parent[head[u]]
        return u if depth[u] < depth[v] else v

    def query_subtree(self, u: int):
        """Aggregate of node values in u's rooted subtree."""
        self._require_built()
        self._check_node(u)
        start = self._pos[u]
        return self._seg_tree.query(start, start + self._subtree_size[u] - 1)

    def path_length(self, u: int, v: int) -> int:
        """
        Number of edges on the path between u and v.

        Path length = depth(u) + depth(v) - 2 * depth(lca(u, v))
        """
        lca = self.get_lca(u, v)
        return self._depth[u] + self._depth[v] - 2 * self._depth[lca]

    def get_value(self, u: int):
        """Get the current value of a node."""
        self._require_built()
        self._check_node(u)
        return self._values[u]

    def get_depth(self, u: int) -> int:
        """Get depth of a node."""
        self._require_built()
        self._check_node(u)
        return self._depth[u]

    def get_parent(self, u: int) -> int:
        """Get parent of a node (-1 for the root)."""
        self._require_built()
        self._check_node(u)
        return self._parent[u]

    def get_head(self, u: int) -> int:
        self._require_built()
        self._check_node(u)
        return self._head[u]

    def get_position(self, u: int) -> int:
        self._require_built()
        self._check_node(u)
        return self._pos[u]

    @property
    def root(self) -> Optional[int]:
        return self._root

    def chain_count(self) -> int:
        """Number of distinct chains (heavy paths)."""
        self._require_built()
        return len(set(self._head))

    def values(self) -> List:
        self._require_built()
        return list(self._values)

    def parents(self) -> List[int]:
        self._require_built()
        return list(self._parent)

    def depths(self) -> List[int]:
        self._require_built()
        return list(self._depth)

    def subtree_sizes(self) -> List[int]:
        self._require_built()
        return list(self._subtree_size)

    def heavy_children(self) -> List[int]:
        self._require_built()
        return list(self._heavy_child)

    def heads(self) -> List[int]:
        self._require_built()
        return list(self._head)

    def positions(self) -> List[int]:
        self._require_built()
        return list(self._pos)

    def stats(self) -> Dict:
        """Get statistics about the decomposition."""
        self._require_built()
        depths = np.asarray(self._depth, dtype=np.int64)
        return {
            'num_nodes': self.node_count,
            'num_chains': self.chain_count(),
            'max_depth': int(depths.max()) if depths.size else 0,
            'avg_depth': float(depths.mean()) if depths.size else 0.0,
            'root': self._root,
        }
