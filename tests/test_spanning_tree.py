import pytest

from topograph.connectivity import is_connected
from topograph.graph import UnidirectionalGraph
from topograph.spanning_tree import compute_spanning_forest, compute_spanning_tree


@pytest.fixture
def connected_graph():
    graph = UnidirectionalGraph()
    graph.add_edge(0, 1)
    graph.add_edge(0, 2)
    graph.add_edge(1, 3)
    graph.add_edge(2, 3)
    return graph


def _edges(graph):
    return {(u, v) for u in graph.vertices() for v in graph.neighbors(u)}


def test_spanning_tree_of_connected_graph(connected_graph):
    tree = compute_spanning_tree(connected_graph)
    assert tree.edge_count() == 3
    assert tree.vertex_count() == 4
    assert is_connected(tree)


def test_spanning_tree_edges_come_from_graph(connected_graph):
    tree = compute_spanning_tree(connected_graph)
    assert _edges(tree) <= _edges(connected_graph)


def test_spanning_tree_disconnected_raises():
    graph = UnidirectionalGraph()
    graph.add_edge(0, 1)
    graph.add_edge(2, 3)
    with pytest.raises(RuntimeError):
        compute_spanning_tree(graph)


def test_spanning_tree_single_vertex():
    graph = UnidirectionalGraph()
    graph.add_vertex(0)
    tree = compute_spanning_tree(graph)
    assert tree.edge_count() == 0
    assert tree.vertices() == [0]


def test_spanning_tree_empty_raises():
    with pytest.raises(ValueError):
        compute_spanning_tree(UnidirectionalGraph())


def test_spanning_tree_of_star_covers_all_leaves():
    graph = UnidirectionalGraph()
    for leaf in (1, 2, 3, 4):
        graph.add_edge(0, leaf)
    tree = compute_spanning_tree(graph)
    assert tree.edge_count() == 4
    assert is_connected(tree)
    assert _edges(tree) == {(0, 1), (0, 2), (0, 3), (0, 4)}


def test_spanning_tree_keeps_edge_direction():
    graph = UnidirectionalGraph()
    graph.add_edge(1, 0)
    graph.add_edge(2, 1)
    tree = compute_spanning_tree(graph)
    assert _edges(tree) == {(1, 0), (2, 1)}


def test_spanning_forest_of_connected_graph(connected_graph):
    forest = compute_spanning_forest(connected_graph)
    assert forest.edge_count() == 3
    assert is_connected(forest)


def test_spanning_forest_disconnected_graph():
    graph = UnidirectionalGraph()
    graph.add_edge(0, 1)
    graph.add_edge(2, 3)
    graph.add_edge(3, 4)
    forest = compute_spanning_forest(graph)
    assert forest.edge_count() == 3
    assert sorted(forest.vertices()) == [0, 1, 2, 3, 4]


def test_spanning_forest_multiple_components():
    graph = UnidirectionalGraph()
    graph.add_vertex(0)
    graph.add_edge(1, 2)
    graph.add_edge(3, 4)
    graph.add_edge(4, 5)
    graph.add_edge(5, 3)
    forest = compute_spanning_forest(graph)
    assert forest.edge_count() == 3
    assert forest.vertex_count() == 6


def test_spanning_forest_empty_raises():
    with pytest.raises(ValueError):
        compute_spanning_forest(UnidirectionalGraph())


def test_spanning_forest_single_vertex():
    graph = UnidirectionalGraph()
    graph.add_vertex(7)
    forest = compute_spanning_forest(graph)
    assert forest.vertices() == [7]
    assert forest.edge_count() == 0