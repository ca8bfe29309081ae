"""
Main Pipeline - Path queries on a tree file

Loads a tree (node values + edges) from YAML or JSON, builds the heavy-light
decomposition and runs path / LCA / subtree queries from the command line.

Usage:
    python pipeline.py --mode demo
    python pipeline.py --mode query --tree data/sample_tree.yaml --path 4 6 --lca 2 5
    python pipeline.py --mode query --tree data/sample_tree.yaml --update 1 100 --path 4 6
"""

import argparse
import copy
import logging
import os
import time
from typing import Dict, List, Optional, Tuple

import yaml

from demo import run_sample
from errors import HLDError
from heavy_light import HeavyLightDecomposition
from segment_tree import get_monoid

logger = logging.getLogger(__name__)


def default_config() -> Dict:
    """Default configuration."""
    return {
        'tree': {
            'default_root': 0,
        },
        'aggregator': {
            'operator': 'sum',
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        },
    }


def load_config(config_path: str = "config.yaml") -> Dict:
    """
    Load configuration, merging each section over the defaults.

    Args:
        config_path: Path to a YAML config file

    Returns:
        Config dict
    """
    config = default_config()
    if not os.path.exists(config_path):
        logger.warning(f"No config file found at {config_path}, using defaults")
        return config

    with open(config_path, 'r') as f:
        user_config = yaml.safe_load(f) or {}

    for section, values in user_config.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    logger.info(f"Loaded config from {config_path}")
    return config


def load_tree_file(tree_path: str) -> Dict:
    """
    Load a tree description from YAML (or JSON).

    Expected keys: values (list), edges (list of [u, v]), root (optional).
    """
    if not os.path.exists(tree_path):
        raise FileNotFoundError(f"Tree file not found: {tree_path}")

    with open(tree_path, 'r') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or 'values' not in data:
        raise ValueError(f"Tree file {tree_path} must define 'values'")
    if not isinstance(data['values'], list):
        raise ValueError("'values' must be a list")

    edges = data.get('edges') or []
    for edge in edges:
        if not isinstance(edge, (list, tuple)) or len(edge) != 2:
            raise ValueError(f"Malformed edge {edge!r}, expected [u, v]")

    logger.info(f"Loaded tree with {len(data['values'])} nodes and {len(edges)} edges "
                f"from {tree_path}")
    return {
        'values': data['values'],
        'edges': [(int(u), int(v)) for u, v in edges],
        'root': data.get('root'),
    }


class PathQueryPipeline:
    """
    Build a decomposition from a tree description and run queries against it.
    """

    def __init__(self, config: Optional[Dict] = None):
        self.config = copy.deepcopy(config) if config is not None else default_config()
        self.hld: Optional[HeavyLightDecomposition] = None

    def build(self, tree: Dict, root: Optional[int] = None) -> HeavyLightDecomposition:
        """
        Build the decomposition.

        Args:
            tree: Dict with 'values', 'edges' and optional 'root'
            root: Root override; falls back to the tree's root, then the config default
        """
        if root is None:
            root = tree.get('root')
        if root is None:
            root = self.config['tree']['default_root']

        monoid = get_monoid(self.config['aggregator']['operator'])
        start_time = time.time()

        hld = HeavyLightDecomposition(len(tree['values']), tree['values'], monoid=monoid)
        for u, v in tree['edges']:
            hld.add_edge(u, v)
        hld.build(root)
        self.hld = hld

        logger.info(f"Pipeline build complete in {(time.time() - start_time) * 1000:.2f}ms "
                    f"(root={root}, operator={monoid.name})")
        return hld

    def build_from_file(self, tree_path: str, root: Optional[int] = None) -> HeavyLightDecomposition:
        return self.build(load_tree_file(tree_path), root)

    def run_queries(self,
                    updates: List[Tuple[int, float]] = (),
                    paths: List[Tuple[int, int]] = (),
                    lcas: List[Tuple[int, int]] = (),
                    subtrees: List[int] = ()) -> List[Tuple[str, object]]:
        """
        Apply updates, then answer queries.

        Returns:
            List of (label, result): paths, then LCAs, then subtrees,
            each group in the order given
        """
        if self.hld is None:
            raise ValueError("Decomposition not initialized. Run build first.")

        for u, value in updates:
            self.hld.update_node_value(u, value)
            logger.debug(f"Applied update: node {u} = {value}")

        results = []
        for u, v in paths:
            results.append((f"path({u}, {v})", self.hld.query_path(u, v)))
        for u, v in lcas:
            results.append((f"lca({u}, {v})", self.hld.get_lca(u, v)))
        for u in subtrees:
            results.append((f"subtree({u})", self.hld.query_subtree(u)))
        return results


def _number(text: str):
    """Parse an int if possible, otherwise a float."""
    try:
        return int(text)
    except ValueError:
        return float(text)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description='Heavy-light decomposition path queries')
    parser.add_argument('--mode', choices=['demo', 'query'], required=True,
                        help='Mode: run the sample demo or query a tree file')
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to YAML config file')
    parser.add_argument('--tree', type=str,
                        help='Tree file (YAML/JSON with values, edges, root) for query mode')
    parser.add_argument('--root', type=int,
                        help='Root node (overrides the tree file and config)')
    parser.add_argument('--path', nargs=2, type=int, action='append', default=[],
                        metavar=('U', 'V'), help='Path aggregate between U and V')
    parser.add_argument('--lca', nargs=2, type=int, action='append', default=[],
                        metavar=('U', 'V'), help='Lowest common ancestor of U and V')
    parser.add_argument('--subtree', type=int, action='append', default=[],
                        metavar='U', help='Aggregate over the subtree of U')
    parser.add_argument('--update', nargs=2, type=_number, action='append', default=[],
                        metavar=('U', 'VALUE'), help='Set node U to VALUE before querying')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, str(config['logging']['level']).upper(), logging.INFO),
        format=config['logging']['format']
    )

    if args.mode == 'demo':
        run_sample()
        return

    if not args.tree:
        parser.error("--tree required for query mode")
    for u, _ in args.update:
        if not isinstance(u, int):
            parser.error(f"--update node must be an integer, got {u}")

    pipeline = PathQueryPipeline(config)
    try:
        pipeline.build_from_file(args.tree, args.root)
        results = pipeline.run_queries(
            updates=[tuple(update) for update in args.update],
            paths=[tuple(p) for p in args.path],
            lcas=[tuple(p) for p in args.lca],
            subtrees=args.subtree,
        )
    except (HLDError, ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        parser.exit(1, f"error: {e}\n")

    for label, value in results:
        print(f"{label} = {value}")


if __name__ == "__main__":
    main()
