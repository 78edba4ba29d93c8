import pytest

from topograph.collective import (
    all_reduce,
    all_reduce_hypercube,
    all_reduce_ring,
    all_reduce_tree,
    analyze_optimal_pattern,
    calculate_efficiency_metric,
    validate_initial_values,
    validate_topology_for_pattern,
)
from topograph.graph import UnidirectionalGraph
from topograph.reduction import (
    AllReduceResult,
    CommunicationPattern,
    MaxReduction,
    MinReduction,
    SumReduction,
)


def _graph(edges):
    graph = UnidirectionalGraph()
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


def _both_ways(pairs):
    return [edge for a, b in pairs for edge in ((a, b), (b, a))]


@pytest.fixture
def tree_graph():
    return _graph(_both_ways([(0, 1), (1, 2), (2, 3)]))


@pytest.fixture
def hypercube_graph():
    return _graph(_both_ways([(0, 1), (0, 2), (1, 3), (2, 3)]))


@pytest.fixture
def ring_graph():
    return _graph(_both_ways([(0, 1), (1, 2), (2, 3), (3, 0)]))


@pytest.fixture
def complete_graph():
    return _graph([(i, j) for i in range(4) for j in range(4) if i != j])


@pytest.fixture
def triangle():
    return _graph(_both_ways([(0, 1), (1, 2), (2, 0)]))


VALUES = {0: 1, 1: 2, 2: 3, 3: 4}


def test_validate_initial_values(tree_graph):
    validate_initial_values(tree_graph, VALUES)
    with pytest.raises(ValueError):
        validate_initial_values(tree_graph, {0: 1, 1: 2})
    with pytest.raises(ValueError):
        validate_initial_values(UnidirectionalGraph(), VALUES)
    with pytest.raises(ValueError):
        validate_initial_values(tree_graph, {})


def test_validate_topology_for_pattern(tree_graph, ring_graph, hypercube_graph):
    assert validate_topology_for_pattern(tree_graph, CommunicationPattern.TREE)
    assert validate_topology_for_pattern(ring_graph, CommunicationPattern.TREE)
    assert validate_topology_for_pattern(hypercube_graph, CommunicationPattern.HYPERCUBE)
    assert validate_topology_for_pattern(ring_graph, CommunicationPattern.RING)
    assert validate_topology_for_pattern(hypercube_graph, CommunicationPattern.MESH_2D)


def test_validate_topology_rejections(tree_graph, triangle):
    assert not validate_topology_for_pattern(tree_graph, CommunicationPattern.HYPERCUBE)
    assert not validate_topology_for_pattern(tree_graph, CommunicationPattern.BUTTERFLY)
    assert not validate_topology_for_pattern(triangle, CommunicationPattern.MESH_2D)
    disconnected = _graph([(0, 1), (2, 3)])
    assert not validate_topology_for_pattern(disconnected, CommunicationPattern.TREE)
    assert validate_topology_for_pattern(disconnected, CommunicationPattern.CUSTOM_GRAPH)


def test_analyze_optimal_pattern(hypercube_graph):
    assert analyze_optimal_pattern(hypercube_graph) is CommunicationPattern.HYPERCUBE
    triangle = _graph([(0, 1), (1, 2), (2, 0), (1, 0), (2, 1), (0, 2)])
    assert analyze_optimal_pattern(triangle) is CommunicationPattern.TREE


def test_all_reduce_tree_sum(tree_graph):
    result = all_reduce_tree(tree_graph, VALUES, SumReduction())
    assert result.final_value == 10
    assert result.total_rounds > 0
    assert result.total_messages > 0
    assert 0.0 < result.efficiency_metric <= 1.0


def test_all_reduce_tree_max(tree_graph):
    result = all_reduce_tree(tree_graph, {0: 1, 1: 8, 2: 3, 3: 4}, MaxReduction())
    assert result.final_value == 8
    assert result.total_rounds > 0
    assert result.total_messages > 0


def test_all_reduce_tree_min(tree_graph):
    result = all_reduce_tree(tree_graph, {0: 5, 1: 2, 2: 7, 3: 4}, MinReduction())
    assert result.final_value == 2
    assert result.total_rounds > 0
    assert result.total_messages > 0


def test_all_reduce_tree_single_node():
    graph = UnidirectionalGraph()
    graph.add_vertex(7)
    result = all_reduce_tree(graph, {7: 42}, SumReduction())
    assert result.final_value == 42
    assert result.efficiency_metric == 1.0
    assert result.communication_steps == []


def test_all_reduce_hypercube_sum(hypercube_graph):
    result = all_reduce_hypercube(hypercube_graph, VALUES, SumReduction())
    assert result.final_value == 10
    assert result.total_rounds == 2
    assert result.total_messages == 8
    assert result.efficiency_metric > 0.0


def test_all_reduce_hypercube_max(hypercube_graph):
    result = all_reduce_hypercube(hypercube_graph, {0: 1, 1: 8, 2: 3, 3: 4}, MaxReduction())
    assert result.final_value == 8
    assert result.total_rounds == 2


def test_all_reduce_hypercube_invalid_topology():
    triangle = _graph([(0, 1), (1, 2), (2, 0)])
    with pytest.raises(ValueError):
        all_reduce_hypercube(triangle, {0: 1, 1: 2, 2: 3}, SumReduction())


def test_all_reduce_ring_sum(ring_graph):
    result = all_reduce_ring(ring_graph, VALUES, SumReduction())
    assert result.final_value == 10
    assert result.total_rounds == 2
    assert result.total_messages == 6
    assert result.efficiency_metric > 0.0


def test_all_reduce_ring_single_vertex():
    graph = UnidirectionalGraph()
    graph.add_vertex(0)
    result = all_reduce_ring(graph, {0: 5}, SumReduction())
    assert result.final_value == 5
    assert result.total_rounds == 0
    assert result.total_messages == 0
    assert result.efficiency_metric == 1.0


def test_all_reduce_ring_steps_go_through_smallest_vertex(ring_graph):
    result = all_reduce_ring(ring_graph, VALUES, MaxReduction())
    assert result.final_value == 4
    reduce_steps = [s for s in result.communication_steps if s.round == 1]
    broadcast_steps = [s for s in result.communication_steps if s.round == 2]
    assert {s.target_node for s in reduce_steps} == {0}
    assert {s.source_node for s in broadcast_steps} == {0}
    assert all(s.operation == "RING_REDUCE MAX" for s in reduce_steps)
    assert all(s.operation == "RING_BROADCAST" for s in broadcast_steps)


def test_all_reduce_auto_pattern(hypercube_graph, triangle):
    result = all_reduce(hypercube_graph, VALUES, SumReduction(), CommunicationPattern.OPTIMAL)
    assert result.final_value == 10
    assert result.total_rounds == 2

    result = all_reduce(triangle, {0: 1, 1: 2, 2: 3}, SumReduction(), CommunicationPattern.OPTIMAL)
    assert result.final_value == 6


def test_all_reduce_default_pattern_is_optimal(hypercube_graph):
    result = all_reduce(hypercube_graph, VALUES, SumReduction())
    assert result.final_value == 10
    assert result.total_messages == 8


def test_communication_steps_tracking(tree_graph):
    result = all_reduce_tree(tree_graph, VALUES, SumReduction())
    assert len(result.communication_steps) > 0
    assert len(result.communication_steps) == result.total_messages
    for step in result.communication_steps:
        assert step.source_node >= 0
        assert step.target_node >= 0
        assert step.round >= 1
        assert step.operation


def test_efficiency_metric_calculation():
    result1 = AllReduceResult(total_rounds=2, total_messages=4)
    efficiency1 = calculate_efficiency_metric(result1, 4)
    assert 0.0 < efficiency1 <= 1.0

    result2 = AllReduceResult(total_rounds=1, total_messages=2)
    efficiency2 = calculate_efficiency_metric(result2, 4)
    assert efficiency2 > efficiency1


def test_efficiency_metric_single_node():
    assert calculate_efficiency_metric(AllReduceResult(total_rounds=5), 1) == 1.0


def test_different_data_types(tree_graph):
    double_result = all_reduce_tree(
        tree_graph, {0: 1.5, 1: 2.5, 2: 3.5, 3: 4.5}, SumReduction()
    )
    assert double_result.final_value == pytest.approx(12.0)

    float_result = all_reduce_tree(
        tree_graph, {0: 1.0, 1: 2.0, 2: 3.0, 3: 4.0}, SumReduction()
    )
    assert float_result.final_value == pytest.approx(10.0)


def test_error_handling(tree_graph):
    with pytest.raises(ValueError):
        all_reduce(tree_graph, VALUES, SumReduction(), CommunicationPattern.BUTTERFLY)
    with pytest.raises(ValueError):
        all_reduce(tree_graph, VALUES, SumReduction(), CommunicationPattern.HYPERCUBE)


def test_unimplemented_pattern_raises_runtime_error(tree_graph):
    with pytest.raises(RuntimeError):
        all_reduce(tree_graph, VALUES, SumReduction(), CommunicationPattern.MESH_2D)


def test_missing_initial_value_rejected_by_all_reduce(ring_graph):
    with pytest.raises(ValueError):
        all_reduce(ring_graph, {0: 1, 1: 2, 2: 3}, SumReduction(), CommunicationPattern.RING)


def test_performance_comparison(complete_graph, hypercube_graph, ring_graph):
    tree_result = all_reduce_tree(complete_graph, VALUES, SumReduction())
    hypercube_result = all_reduce_hypercube(hypercube_graph, VALUES, SumReduction())
    ring_result = all_reduce_ring(ring_graph, VALUES, SumReduction())

    assert tree_result.final_value == 10
    assert hypercube_result.final_value == 10
    assert ring_result.final_value == 10

    assert hypercube_result.total_rounds <= tree_result.total_rounds
    assert hypercube_result.total_rounds <= ring_result.total_rounds