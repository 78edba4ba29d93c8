"""Approximate travelling-salesman tours and minimum spanning trees."""

from __future__ import annotations

import heapq
import math
from collections.abc import Sequence
from typing import Optional

from topograph.graph import UnidirectionalGraph

WeightMatrix = Optional[Sequence[Sequence[float]]]

# Weights used by the tour search when no explicit weight applies.
_ADJACENT_WEIGHT = 1.0
_NON_ADJACENT_WEIGHT = 2.0


def _explicit_weight(weights: WeightMatrix, source: int, target: int) -> float | None:
    """Return ``weights[source][target]`` if the matrix covers that pair."""
    if not weights:
        return None
    if 0 <= source < len(weights) and 0 <= target < len(weights[source]):
        return float(weights[source][target])
    return None


def _undirected_edges(
    graph: UnidirectionalGraph, vertices: list[int], weights: WeightMatrix
) -> list[tuple[int, int, float]]:
    """Return the graph's edges as undirected ``(i, j, weight)`` triples over vertex indices.

    An edge present in both directions appears once, oriented as first found.
    Missing weights default to 1.
    """
    index = {v: i for i, v in enumerate(vertices)}
    edges: dict[frozenset[int], tuple[int, int, float]] = {}
    for source in vertices:
        for target in graph.neighbors(source):
            key = frozenset((index[source], index[target]))
            if key in edges:
                continue
            weight = _explicit_weight(weights, source, target)
            edges[key] = (
                index[source],
                index[target],
                _ADJACENT_WEIGHT if weight is None else weight,
            )
    return list(edges.values())


def _graph_on(vertices: list[int]) -> UnidirectionalGraph:
    graph = UnidirectionalGraph()
    for v in vertices:
        graph.add_vertex(v)
    return graph


def compute_mst_kruskal(
    graph: UnidirectionalGraph, weights: WeightMatrix = None
) -> UnidirectionalGraph:
    """Return a minimum spanning forest of ``graph`` found with Kruskal's algorithm.

    Edge directions are ignored for the search; each chosen edge keeps the
    orientation it has in ``graph``. ``weights[u][v]`` gives the weight of
    ``u -> v`` where the matrix covers it, otherwise 1.
    """
    vertices = graph.vertices()
    edges = _undirected_edges(graph, vertices, weights)
    parent = list(range(len(vertices)))

    def find(i: int) -> int:
        while parent[i] != i:
            parent[i] = parent[parent[i]]
            i = parent[i]
        return i

    mst = _graph_on(vertices)
    for i, j, _ in sorted(edges, key=lambda edge: edge[2]):
        root_i, root_j = find(i), find(j)
        if root_i != root_j:
            parent[root_i] = root_j
            mst.add_edge(vertices[i], vertices[j])
    return mst


def compute_mst_prim(
    graph: UnidirectionalGraph, weights: WeightMatrix = None
) -> UnidirectionalGraph:
    """Return a minimum spanning tree grown by Prim's algorithm from the first vertex.

    Each tree edge points from a vertex's predecessor to the vertex. Vertices
    not reachable from the first vertex get no edges.
    """
    vertices = graph.vertices()
    if not vertices:
        return UnidirectionalGraph()

    adjacency: list[list[tuple[int, float]]] = [[] for _ in vertices]
    for i, j, weight in _undirected_edges(graph, vertices, weights):
        adjacency[i].append((j, weight))
        adjacency[j].append((i, weight))

    n = len(vertices)
    predecessor = list(range(n))
    key = [math.inf] * n
    key[0] = 0.0
    done = [False] * n
    heap: list[tuple[float, int]] = [(0.0, 0)]
    while heap:
        _, u = heapq.heappop(heap)
        if done[u]:
            continue
        done[u] = True
        for v, weight in adjacency[u]:
            if not done[v] and weight < key[v]:
                key[v] = weight
                predecessor[v] = u
                heapq.heappush(heap, (weight, v))

    mst = _graph_on(vertices)
    for i, pred in enumerate(predecessor):
        if pred != i:
            mst.add_edge(vertices[pred], vertices[i])
    return mst


def _tour_weights(
    graph: UnidirectionalGraph, vertices: list[int], weights: WeightMatrix
) -> list[list[float]]:
    """Return the symmetric weight matrix of the complete graph on ``vertices``."""
    n = len(vertices)
    matrix = [[0.0] * n for _ in range(n)]
    for i, a in enumerate(vertices):
        for j in range(i + 1, n):
            b = vertices[j]
            weight = _explicit_weight(weights, a, b)
            if weight is None:
                adjacent = graph.has_edge(a, b) or graph.has_edge(b, a)
                weight = _ADJACENT_WEIGHT if adjacent else _NON_ADJACENT_WEIGHT
            matrix[i][j] = matrix[j][i] = weight
    return matrix


def find_approximate_hamiltonian_cycle(
    graph: UnidirectionalGraph, weights: WeightMatrix = None
) -> list[int]:
    """Return an approximate shortest tour through every vertex of ``graph``.

    The graph is completed: pairs get ``weights[u][v]`` where the matrix covers
    them, otherwise 1 if they are adjacent in either direction and 2 if not.
    The tour is the preorder walk of a minimum spanning tree rooted at the
    first vertex, closed by repeating that vertex. Graphs with fewer than
    three vertices give an empty list.
    """
    vertices = graph.vertices()
    n = len(vertices)
    if n < 3:
        return []

    matrix = _tour_weights(graph, vertices, weights)
    in_tree = [False] * n
    key = [math.inf] * n
    predecessor = list(range(n))
    key[0] = 0.0
    for _ in range(n):
        u = min((i for i in range(n) if not in_tree[i]), key=lambda i: key[i])
        in_tree[u] = True
        for v in range(n):
            if not in_tree[v] and matrix[u][v] < key[v]:
                key[v] = matrix[u][v]
                predecessor[v] = u

    children: list[list[int]] = [[] for _ in range(n)]
    for v, pred in enumerate(predecessor):
        if pred != v:
            children[pred].append(v)

    tour: list[int] = []
    stack = [0]
    while stack:
        u = stack.pop()
        tour.append(vertices[u])
        stack.extend(reversed(children[u]))

    tour.append(tour[0])
    return tour