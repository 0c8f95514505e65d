import os

import pytest

from pregel_pagerank.config import PageRankConfig
from pregel_pagerank.stage1_read import Graph, load

RESOURCES = os.path.join(os.path.dirname(__file__), 'resources')
SAMPLE_GRAPH = os.path.join(RESOURCES, 'pagerank.txt')


@pytest.fixture
def sample_path():
    return SAMPLE_GRAPH


@pytest.fixture
def sample_graph():
    return load(SAMPLE_GRAPH)


@pytest.fixture
def config():
    return PageRankConfig(damping=0.85, max_iterations=1000, tolerance=1.0e-10)


@pytest.fixture
def cycle_graph():
    return Graph({"A": ["B"], "B": ["C"], "C": ["D"], "D": ["A"]})


@pytest.fixture
def star_graph():
    # hub has no out-edges, every leaf points only at the hub
    return Graph({"hub": [], "a": ["hub"], "b": ["hub"], "c": ["hub"], "d": ["hub"]})
