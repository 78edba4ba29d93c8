from topograph.connectivity import get_all_vertices, is_connected
from topograph.graph import UnidirectionalGraph


def _square():
    graph = UnidirectionalGraph()
    graph.add_edge(0, 1)
    graph.add_edge(0, 2)
    graph.add_edge(1, 3)
    graph.add_edge(2, 3)
    return graph


def test_connected_graph():
    assert is_connected(_square()) is True


def test_disconnected_graph():
    graph = UnidirectionalGraph()
    graph.add_edge(0, 1)
    graph.add_edge(2, 3)
    assert is_connected(graph) is False


def test_single_vertex_is_connected():
    graph = UnidirectionalGraph()
    graph.add_vertex(0)
    assert is_connected(graph) is True


def test_empty_graph_is_connected():
    assert is_connected(UnidirectionalGraph()) is True


def test_direction_is_ignored():
    graph = UnidirectionalGraph()
    graph.add_edge(1, 0)
    graph.add_edge(2, 0)
    graph.add_edge(3, 2)
    assert is_connected(graph) is True


def test_isolated_vertex_breaks_connectivity():
    graph = _square()
    graph.add_vertex(9)
    assert is_connected(graph) is False


def test_get_all_vertices():
    assert sorted(get_all_vertices(_square())) == [0, 1, 2, 3]


def test_get_all_vertices_empty():
    assert get_all_vertices(UnidirectionalGraph()) == []