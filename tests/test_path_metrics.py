import numpy as np
import pytest

from conftest import make_hld
from errors import InvalidIndexError, InvalidStateError
from heavy_light import HeavyLightDecomposition
from path_metrics import PathMetrics
from segment_tree import MAX


def test_distance_and_mean(sample_hld):
    metrics = PathMetrics(sample_hld)

    assert metrics.distance(4, 6) == 5
    assert metrics.path_mean(4, 6) == pytest.approx(31 / 6)
    assert metrics.path_mean(2, 2) == 5


def test_path_mean_requires_sum():
    hld = make_hld([1, 2, 3], [(0, 1), (1, 2)], monoid=MAX)
    with pytest.raises(ValueError):
        PathMetrics(hld).path_mean(0, 2)


def test_depth_similarity(sample_hld):
    metrics = PathMetrics(sample_hld)

    assert metrics.depth_similarity(6, 6) == 1.0
    assert metrics.depth_similarity(1, 4) == 0.0
    # lca(5, 6) = 5 at depth 2, depths 2 and 3
    assert metrics.depth_similarity(5, 6) == pytest.approx(0.8)
    # lca(4, 6) is the root
    assert metrics.depth_similarity(4, 6) == 0.0


def test_batch_path_sums(sample_hld):
    metrics = PathMetrics(sample_hld)
    sums = metrics.batch_path_sums([(4, 6), (0, 2), (1, 1)])

    assert isinstance(sums, np.ndarray)
    np.testing.assert_array_equal(sums, [31, 17, 10])


def test_depth_similarity_checks_node_range(sample_hld):
    metrics = PathMetrics(sample_hld)
    with pytest.raises(InvalidIndexError):
        metrics.depth_similarity(99, 99)


def test_depth_similarity_requires_build():
    hld = HeavyLightDecomposition(2, [1, 2])
    hld.add_edge(0, 1)
    with pytest.raises(InvalidStateError):
        PathMetrics(hld).depth_similarity(0, 0)
