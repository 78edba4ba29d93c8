"""Connectivity queries on directed graphs."""

from __future__ import annotations

from topograph.graph import UnidirectionalGraph


def get_all_vertices(graph: UnidirectionalGraph) -> list[int]:
    """Return all vertices of ``graph``."""
    return graph.vertices()


def is_connected(graph: UnidirectionalGraph) -> bool:
    """Return whether ``graph`` is weakly connected.

    Edge directions are ignored. Empty and single-vertex graphs count as
    connected.
    """
    vertices = get_all_vertices(graph)
    if len(vertices) <= 1:
        return True

    start = vertices[0]
    visited = {start}
    stack = [start]
    while stack:
        current = stack.pop()
        for vertex in vertices:
            if vertex in visited:
                continue
            if graph.has_edge(current, vertex) or graph.has_edge(vertex, current):
                visited.add(vertex)
                stack.append(vertex)

    return len(visited) == len(vertices)