"""Simulated all-reduce over a graph topology, with a record of every message sent."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from topograph.connectivity import get_all_vertices, is_connected
from topograph.graph import UnidirectionalGraph
from topograph.reduction import (
    AllReduceResult,
    CommunicationPattern,
    CommunicationStep,
    NodeState,
    ReductionOp,
)
from topograph.spanning_tree import compute_spanning_tree

__all__ = [
    "validate_initial_values",
    "calculate_efficiency_metric",
    "validate_topology_for_pattern",
    "analyze_optimal_pattern",
    "all_reduce",
    "all_reduce_tree",
    "all_reduce_hypercube",
    "all_reduce_ring",
]

_NO_CHILD = object()


def _is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def _is_perfect_square(n: int) -> bool:
    root = math.isqrt(n)
    return root * root == n


def validate_initial_values(
    graph: UnidirectionalGraph, initial_values: Mapping[int, Any]
) -> None:
    """Raise ValueError unless every vertex of a non-empty graph has an initial value."""
    vertices = get_all_vertices(graph)
    if not vertices:
        raise ValueError("Cannot perform all-reduce on empty graph")
    if not initial_values:
        raise ValueError("Initial values cannot be empty")
    for vertex in vertices:
        if vertex not in initial_values:
            raise ValueError(f"Missing initial value for vertex {vertex}")


def calculate_efficiency_metric(result: AllReduceResult, num_nodes: int) -> float:
    """Score a run against ``ceil(log2 n)`` rounds and ``n - 1`` messages.

    The score weighs round efficiency by 0.7 and message efficiency by 0.3.
    A single node (or none) scores 1.
    """
    if num_nodes <= 1:
        return 1.0
    ideal_rounds = math.ceil(math.log2(num_nodes))
    ideal_messages = num_nodes - 1
    round_efficiency = ideal_rounds / max(1, result.total_rounds)
    message_efficiency = ideal_messages / max(1, result.total_messages)
    return 0.7 * round_efficiency + 0.3 * message_efficiency


def _is_hypercube(graph: UnidirectionalGraph, n: int) -> bool:
    if not _is_power_of_two(n):
        return False
    dimensions = n.bit_length() - 1
    for node in range(n):
        neighbors = graph.neighbors(node)
        if len(neighbors) != dimensions:
            return False
        if any(node ^ (1 << dim) not in neighbors for dim in range(dimensions)):
            return False
    return True


def validate_topology_for_pattern(
    graph: UnidirectionalGraph, pattern: CommunicationPattern
) -> bool:
    """Return whether ``graph`` can carry an all-reduce with ``pattern``.

    A hypercube check needs vertices ``0 .. n-1``; a missing one raises KeyError.
    """
    n = len(get_all_vertices(graph))
    if pattern in (CommunicationPattern.TREE, CommunicationPattern.RING):
        return is_connected(graph)
    if pattern is CommunicationPattern.HYPERCUBE:
        return _is_hypercube(graph, n)
    if pattern is CommunicationPattern.MESH_2D:
        return _is_perfect_square(n)
    if pattern in (CommunicationPattern.CUSTOM_GRAPH, CommunicationPattern.OPTIMAL):
        return True
    return False


def analyze_optimal_pattern(graph: UnidirectionalGraph) -> CommunicationPattern:
    """Choose hypercube, then 2D mesh, falling back to a tree pattern."""
    n = len(get_all_vertices(graph))
    if _is_power_of_two(n) and validate_topology_for_pattern(
        graph, CommunicationPattern.HYPERCUBE
    ):
        return CommunicationPattern.HYPERCUBE
    if _is_perfect_square(n) and validate_topology_for_pattern(
        graph, CommunicationPattern.MESH_2D
    ):
        return CommunicationPattern.MESH_2D
    return CommunicationPattern.TREE


def all_reduce(
    graph: UnidirectionalGraph,
    initial_values: Mapping[int, Any],
    reduction_op: ReductionOp,
    pattern: CommunicationPattern = CommunicationPattern.OPTIMAL,
) -> AllReduceResult:
    """Run an all-reduce with ``pattern``, choosing one when it is OPTIMAL.

    Raises ValueError for bad initial values or a topology that does not
    support the pattern, and RuntimeError for patterns with no implementation.
    """
    validate_initial_values(graph, initial_values)
    if pattern is CommunicationPattern.OPTIMAL:
        pattern = analyze_optimal_pattern(graph)
    if not validate_topology_for_pattern(graph, pattern):
        raise ValueError(
            "Graph topology does not support requested communication pattern"
        )
    if pattern is CommunicationPattern.TREE:
        return all_reduce_tree(graph, initial_values, reduction_op)
    if pattern is CommunicationPattern.HYPERCUBE:
        return all_reduce_hypercube(graph, initial_values, reduction_op)
    if pattern is CommunicationPattern.RING:
        return all_reduce_ring(graph, initial_values, reduction_op)
    raise RuntimeError("Communication pattern not yet implemented")


def _tree_depth(tree: UnidirectionalGraph, root: int) -> int:
    """Return the greatest BFS depth reachable from ``root`` along edge directions."""
    depths = {root: 0}
    frontier = [root]
    deepest = 0
    while frontier:
        next_frontier = []
        for current in frontier:
            for neighbor in tree.neighbors(current):
                if neighbor not in depths:
                    depths[neighbor] = depths[current] + 1
                    deepest = max(deepest, depths[neighbor])
                    next_frontier.append(neighbor)
        frontier = next_frontier
    return deepest


def _find_tree_root(tree: UnidirectionalGraph) -> int:
    """Return the first vertex whose directed BFS depth is smallest."""
    vertices = get_all_vertices(tree)
    if not vertices:
        raise ValueError("Cannot find root of empty tree")
    return min(vertices, key=lambda vertex: _tree_depth(tree, vertex))


def _tree_reduction(
    nodes: list[NodeState],
    tree: UnidirectionalGraph,
    reduction_op: ReductionOp,
    result: AllReduceResult,
) -> None:
    vertices = get_all_vertices(tree)
    if not vertices:
        return
    values = {node.node_id: node.value for node in nodes}
    operation = f"REDUCE {reduction_op.name()}"

    if len(vertices) == 2:
        first, second = vertices
        result.total_rounds = 1
        result.total_messages = 1
        result.communication_steps.append(CommunicationStep(second, first, 1, operation))
        result.final_value = reduction_op(values[first], values[second])
        return

    root = next(
        (
            vertex
            for vertex in vertices
            if not any(
                other != vertex and tree.has_edge(other, vertex) for other in vertices
            )
        ),
        vertices[0],
    )
    children = {vertex: tree.neighbors(vertex) for vertex in vertices}

    # Post-order walk: a child's subtree is reduced before it reports to its parent.
    stack = [(root, iter(children[root]))]
    while stack:
        node, pending = stack[-1]
        child = next(pending, _NO_CHILD)
        if child is not _NO_CHILD:
            stack.append((child, iter(children[child])))
            continue
        stack.pop()
        if children[node]:
            result.total_rounds += 1
        if stack:
            parent = stack[-1][0]
            result.communication_steps.append(
                CommunicationStep(node, parent, result.total_rounds + 1, operation)
            )
            result.total_messages += 1
            values[parent] = reduction_op(values[parent], values[node])

    result.final_value = values[root]


def _tree_broadcast(
    nodes: list[NodeState],
    tree: UnidirectionalGraph,
    final_value: Any,
    result: AllReduceResult,
) -> None:
    root = _find_tree_root(tree)
    children: dict[int, list[int]] = {}
    visited = {root}
    queue = [root]
    for current in queue:
        for neighbor in tree.neighbors(current):
            if neighbor not in visited:
                visited.add(neighbor)
                children.setdefault(current, []).append(neighbor)
                queue.append(neighbor)

    broadcast = [root]
    for current in broadcast:
        kids = children.get(current, [])
        if not kids:
            continue
        result.total_rounds += 1
        for child in kids:
            result.communication_steps.append(
                CommunicationStep(current, child, result.total_rounds, "BROADCAST")
            )
            result.total_messages += 1
            broadcast.append(child)

    for node in nodes:
        node.update_value(final_value)


def all_reduce_tree(
    graph: UnidirectionalGraph,
    initial_values: Mapping[int, Any],
    reduction_op: ReductionOp,
) -> AllReduceResult:
    """Reduce up a spanning tree of ``graph``, then broadcast the result down it."""
    validate_initial_values(graph, initial_values)
    result = AllReduceResult()
    if len(initial_values) == 1:
        result.final_value = next(iter(initial_values.values()))
        result.efficiency_metric = 1.0
        return result

    tree = compute_spanning_tree(graph)
    nodes = [NodeState(node_id, value) for node_id, value in sorted(initial_values.items())]
    _tree_reduction(nodes, tree, reduction_op, result)
    _tree_broadcast(nodes, tree, result.final_value, result)
    result.efficiency_metric = calculate_efficiency_metric(result, len(initial_values))
    return result


def all_reduce_hypercube(
    graph: UnidirectionalGraph,
    initial_values: Mapping[int, Any],
    reduction_op: ReductionOp,
) -> AllReduceResult:
    """Exchange values with the partner across each dimension, one round per dimension.

    Raises ValueError unless the vertex count is a power of two.
    """
    validate_initial_values(graph, initial_values)
    vertices = get_all_vertices(graph)
    n = len(vertices)
    if not _is_power_of_two(n):
        raise ValueError("Graph must have power-of-2 vertices for hypercube all-reduce")

    result = AllReduceResult()
    values = dict(sorted(initial_values.items()))
    for dim in range(n.bit_length() - 1):
        result.total_rounds += 1
        snapshot = dict(values)
        operation = f"HYPERCUBE {reduction_op.name()} dim={dim}"
        for node in vertices:
            partner = node ^ (1 << dim)
            if partner not in initial_values:
                continue
            result.communication_steps.append(
                CommunicationStep(node, partner, result.total_rounds, operation)
            )
            result.total_messages += 1
            if node < partner:
                combined = reduction_op(snapshot[node], snapshot[partner])
                values[node] = combined
                values[partner] = combined

    if values:
        result.final_value = next(iter(values.values()))
    result.efficiency_metric = calculate_efficiency_metric(result, n)
    return result


def all_reduce_ring(
    graph: UnidirectionalGraph,
    initial_values: Mapping[int, Any],
    reduction_op: ReductionOp,
) -> AllReduceResult:
    """Gather every value at the smallest vertex, then send the total to all others."""
    validate_initial_values(graph, initial_values)
    vertices = sorted(get_all_vertices(graph))
    n = len(vertices)
    result = AllReduceResult()
    if n <= 1:
        if n == 1:
            result.final_value = next(iter(initial_values.values()))
        result.efficiency_metric = 1.0
        return result

    values = dict(sorted(initial_values.items()))
    leader = vertices[0]
    operation = f"RING_REDUCE {reduction_op.name()}"
    total = reduction_op.identity()
    for position, current in enumerate(vertices):
        total = reduction_op(total, values[current])
        if position > 0:
            result.communication_steps.append(
                CommunicationStep(current, leader, 1, operation)
            )
            result.total_messages += 1
    result.total_rounds = 1

    for current in vertices[1:]:
        result.communication_steps.append(
            CommunicationStep(leader, current, 2, "RING_BROADCAST")
        )
        result.total_messages += 1
        values[current] = total
    result.total_rounds = 2
    values[leader] = total

    result.final_value = next(iter(values.values()))
    result.efficiency_metric = calculate_efficiency_metric(result, n)
    return result