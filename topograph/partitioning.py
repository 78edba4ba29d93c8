"""Bisectional bandwidth: balanced two-way partitions with the fewest crossing edges."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field
from itertools import combinations

from topograph.connectivity import get_all_vertices
from topograph.graph import UnidirectionalGraph

# Largest vertex count for which every balanced partition is tried.
EXACT_VERTEX_LIMIT = 20


class PartitioningMethod(enum.Enum):
    """Ways of searching for a minimum bisection."""

    EXACT_BRUTE_FORCE = enum.auto()
    EXACT_BRANCH_BOUND = enum.auto()
    SPECTRAL = enum.auto()
    KERNIGHAN_LIN = enum.auto()
    KNOWN_TOPOLOGY = enum.auto()
    AUTO = enum.auto()


class GraphTopology(enum.Enum):
    """Graph families with a closed-form bisectional bandwidth."""

    MESH_2D = enum.auto()
    MESH_3D = enum.auto()
    TORUS_2D = enum.auto()
    TORUS_3D = enum.auto()
    HYPERCUBE = enum.auto()
    COMPLETE_GRAPH = enum.auto()
    TREE = enum.auto()
    UNKNOWN = enum.auto()


@dataclass
class GraphPartition:
    """Two vertex sets, the directed edges between them and the cut size."""

    partition1: list[int] = field(default_factory=list)
    partition2: list[int] = field(default_factory=list)
    cut_edges: list[tuple[int, int]] = field(default_factory=list)
    bandwidth: int = 0

    def is_balanced(self) -> bool:
        """Return whether the two sides differ in size by at most one vertex."""
        return abs(len(self.partition1) - len(self.partition2)) <= 1


def validate_graph_for_partitioning(graph: UnidirectionalGraph) -> None:
    """Raise ValueError if ``graph`` has no vertices."""
    if not get_all_vertices(graph):
        raise ValueError("Cannot compute bisectional bandwidth of empty graph")


def _index_edges(
    graph: UnidirectionalGraph, vertices: Sequence[int]
) -> list[tuple[int, int, int]]:
    """Return ``(i, j, count)`` for index pairs ``i < j`` joined by ``count`` directed edges."""
    pairs = []
    for i, j in combinations(range(len(vertices)), 2):
        a, b = vertices[i], vertices[j]
        count = int(graph.has_edge(a, b)) + int(graph.has_edge(b, a))
        if count:
            pairs.append((i, j, count))
    return pairs


def _cut_from_pairs(pairs: list[tuple[int, int, int]], mask: int) -> int:
    return sum(
        count for i, j, count in pairs if ((mask >> i) & 1) != ((mask >> j) & 1)
    )


def calculate_cut_size(
    graph: UnidirectionalGraph, vertices: Sequence[int], partition_mask: int
) -> int:
    """Return the number of directed edges crossing the partition given by ``partition_mask``.

    Bit ``i`` of the mask set means ``vertices[i]`` is in the first partition.
    """
    return _cut_from_pairs(_index_edges(graph, vertices), partition_mask)


def _partition_from_mask(
    graph: UnidirectionalGraph, vertices: Sequence[int], mask: int
) -> GraphPartition:
    partition = GraphPartition()
    for i, vertex in enumerate(vertices):
        side = partition.partition1 if (mask >> i) & 1 else partition.partition2
        side.append(vertex)
    for v1 in partition.partition1:
        for v2 in partition.partition2:
            if graph.has_edge(v1, v2):
                partition.cut_edges.append((v1, v2))
            if graph.has_edge(v2, v1):
                partition.cut_edges.append((v2, v1))
    partition.bandwidth = len(partition.cut_edges)
    return partition


def _balanced_masks(n: int):
    """Yield, in increasing order, masks whose set-bit count makes a balanced split."""
    half = n // 2
    sizes = {half, half + 1} if n % 2 else {half}
    for mask in range(1 << n):
        if mask.bit_count() in sizes:
            yield mask


def _pair_edge_count(graph: UnidirectionalGraph, a: int, b: int) -> int:
    return int(graph.has_edge(a, b)) + int(graph.has_edge(b, a))


def compute_exact_bisectional_bandwidth(graph: UnidirectionalGraph) -> int:
    """Return the minimum number of directed edges cut by a balanced bisection.

    Raises ValueError for an empty graph and RuntimeError for graphs with
    more than 20 vertices.
    """
    validate_graph_for_partitioning(graph)
    vertices = get_all_vertices(graph)
    n = len(vertices)
    if n <= 1:
        return 0
    if n == 2:
        return _pair_edge_count(graph, vertices[0], vertices[1])
    if n > EXACT_VERTEX_LIMIT:
        raise RuntimeError(
            f"Graph too large for exact computation (>{EXACT_VERTEX_LIMIT} "
            "vertices). Use approximation methods."
        )
    pairs = _index_edges(graph, vertices)
    return min(_cut_from_pairs(pairs, mask) for mask in _balanced_masks(n))


def find_bisectional_partition(
    graph: UnidirectionalGraph,
    method: PartitioningMethod = PartitioningMethod.AUTO,
) -> GraphPartition:
    """Return a balanced partition of ``graph`` with the fewest crossing edges.

    Raises ValueError for an empty graph, and RuntimeError for methods other
    than exact brute force or graphs with more than 20 vertices.
    """
    validate_graph_for_partitioning(graph)
    vertices = get_all_vertices(graph)
    n = len(vertices)
    if n == 1:
        return GraphPartition(partition1=[vertices[0]])
    if n == 2:
        return _partition_from_mask(graph, vertices, 0b01)

    if method is PartitioningMethod.AUTO:
        method = PartitioningMethod.EXACT_BRUTE_FORCE
    if method is not PartitioningMethod.EXACT_BRUTE_FORCE:
        raise RuntimeError("Only EXACT_BRUTE_FORCE method is currently implemented")
    if n > EXACT_VERTEX_LIMIT:
        raise RuntimeError("Graph too large for exact computation")

    pairs = _index_edges(graph, vertices)
    best_mask = min(_balanced_masks(n), key=lambda mask: _cut_from_pairs(pairs, mask))
    return _partition_from_mask(graph, vertices, best_mask)


def compute_approximate_bisectional_bandwidth(
    graph: UnidirectionalGraph,
    method: PartitioningMethod = PartitioningMethod.AUTO,
) -> int:
    """Return the bisectional bandwidth by the chosen approximation method.

    Only AUTO is available, and it uses the exact search on graphs of up to
    20 vertices. Any other case raises RuntimeError; an empty graph raises
    ValueError.
    """
    validate_graph_for_partitioning(graph)
    if method is PartitioningMethod.AUTO:
        if len(get_all_vertices(graph)) <= EXACT_VERTEX_LIMIT:
            return compute_exact_bisectional_bandwidth(graph)
        raise RuntimeError("Approximation methods not yet available for large graphs")
    raise RuntimeError("Approximation methods not yet available")


def compute_bisectional_bandwidth(graph: UnidirectionalGraph) -> int:
    """Return the bisectional bandwidth, choosing the method by graph size.

    Raises ValueError for an empty graph and RuntimeError for graphs with
    more than 20 vertices.
    """
    validate_graph_for_partitioning(graph)
    if len(get_all_vertices(graph)) <= EXACT_VERTEX_LIMIT:
        return compute_exact_bisectional_bandwidth(graph)
    raise RuntimeError("Large graphs not yet supported.")


def compute_known_topology_bandwidth(
    graph: UnidirectionalGraph, topology: GraphTopology
) -> int:
    """Return the closed-form bisectional bandwidth for a known topology.

    Complete graphs give ``n * n // 4`` and trees give 1 (0 for a single
    vertex). Other topologies raise ValueError, as does an empty graph.
    """
    validate_graph_for_partitioning(graph)
    n = len(get_all_vertices(graph))
    if topology is GraphTopology.COMPLETE_GRAPH:
        return (n * n) // 4
    if topology is GraphTopology.TREE:
        return 1 if n > 1 else 0
    raise ValueError("Topology not yet supported")