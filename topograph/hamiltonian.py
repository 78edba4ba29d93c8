"""Exact and approximate Hamiltonian cycle search."""

from __future__ import annotations

from topograph import tsp
from topograph.graph import UnidirectionalGraph

__all__ = [
    "get_all_vertices",
    "find_exact_hamiltonian_cycle",
    "find_approximate_hamiltonian_cycle",
]


def get_all_vertices(graph: UnidirectionalGraph) -> list[int]:
    """Return every vertex of ``graph``."""
    return list(graph.vertices())


def _extend(
    graph: UnidirectionalGraph,
    vertices: list[int],
    path: list[int],
    visited: set[int],
) -> bool:
    """Extend ``path`` by backtracking until it is a Hamiltonian cycle."""
    if len(path) == len(vertices):
        return graph.has_edge(path[-1], path[0])
    last = path[-1]
    for vertex in vertices:
        if vertex in visited or not graph.has_edge(last, vertex):
            continue
        path.append(vertex)
        visited.add(vertex)
        if _extend(graph, vertices, path, visited):
            return True
        path.pop()
        visited.discard(vertex)
    return False


def find_exact_hamiltonian_cycle(graph: UnidirectionalGraph) -> list[int]:
    """Return a directed Hamiltonian cycle of ``graph``, or an empty list if none exists.

    The cycle lists every vertex once and repeats the start at the end.
    Graphs with fewer than three vertices have no cycle.
    """
    vertices = sorted(get_all_vertices(graph))
    if len(vertices) < 3:
        return []
    for start in vertices:
        path = [start]
        if _extend(graph, vertices, path, {start}):
            return path + [start]
    return []


def find_approximate_hamiltonian_cycle(
    graph: UnidirectionalGraph, weights: tsp.WeightMatrix = None
) -> list[int]:
    """Return an approximate Hamiltonian tour; see ``tsp.find_approximate_hamiltonian_cycle``."""
    return tsp.find_approximate_hamiltonian_cycle(graph, weights)