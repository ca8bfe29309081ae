"""
Demo - Heavy-Light Decomposition on a small sample tree

This example shows:
1. Building the decomposition
2. Path sum queries
3. Point updates
4. LCA queries
"""

import time

from heavy_light import HeavyLightDecomposition
from path_metrics import PathMetrics

#         1 (10)
#       /   |    \
#    0 (2) 2 (5)  3 (3)
#     |            |
#    4 (8)        5 (1)
#                  |
#                 6 (7)
SAMPLE_TREE = {
    'values': [2, 10, 5, 3, 8, 1, 7],
    'edges': [[1, 0], [1, 2], [1, 3], [0, 4], [3, 5], [5, 6]],
    'root': 1,
}


def build_sample_tree(monoid=None) -> HeavyLightDecomposition:
    """Build the decomposition of SAMPLE_TREE."""
    kwargs = {} if monoid is None else {'monoid': monoid}
    hld = HeavyLightDecomposition(len(SAMPLE_TREE['values']), SAMPLE_TREE['values'], **kwargs)
    for u, v in SAMPLE_TREE['edges']:
        hld.add_edge(u, v)
    hld.build(SAMPLE_TREE['root'])
    return hld


def run_sample():
    """Run the sample queries and print the results."""
    print("\n" + "=" * 60)
    print("Heavy-Light Decomposition Sample")
    print("=" * 60)

    start_time = time.time()
    hld = build_sample_tree()
    build_time = time.time() - start_time

    stats = hld.stats()
    print(f"\nBuild time: {build_time * 1000:.2f}ms")
    print(f"Nodes: {stats['num_nodes']} | Chains: {stats['num_chains']} | "
          f"Max depth: {stats['max_depth']}")

    print(f"\nPath sum (4 to 6): {hld.query_path(4, 6)}")
    print(f"Path sum (0 to 2): {hld.query_path(0, 2)}")
    print(f"Path sum (1 to 1): {hld.query_path(1, 1)}")

    print("\nUpdating node 1 value from 10 to 100")
    hld.update_node_value(1, 100)

    print(f"Path sum (4 to 6) after update: {hld.query_path(4, 6)}")
    print(f"Path sum (0 to 2) after update: {hld.query_path(0, 2)}")

    print(f"\nLCA(4, 6): {hld.get_lca(4, 6)}")
    print(f"LCA(4, 0): {hld.get_lca(4, 0)}")
    print(f"LCA(2, 5): {hld.get_lca(2, 5)}")

    metrics = PathMetrics(hld)
    print(f"\nDistance (4 to 6): {metrics.distance(4, 6)} edges")
    print(f"Mean value (4 to 6): {metrics.path_mean(4, 6):.2f}")
    print(f"Subtree sum of 3: {hld.query_subtree(3)}")
    print("=" * 60)
    return hld


if __name__ == "__main__":
    run_sample()
