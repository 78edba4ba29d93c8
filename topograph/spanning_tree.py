"""Spanning trees and forests built by depth-first search."""

from __future__ import annotations

from topograph.connectivity import get_all_vertices, is_connected
from topograph.graph import UnidirectionalGraph


def _grow_tree(
    graph: UnidirectionalGraph,
    vertices: list[int],
    start: int,
    visited: set[int],
    tree: UnidirectionalGraph,
) -> None:
    """Extend ``tree`` with a DFS tree of the component holding ``start``.

    Edges are treated as undirected for reachability; each tree edge keeps
    the direction it has in ``graph``, preferring ``current -> neighbour``.
    """
    visited.add(start)
    stack = [start]
    while stack:
        current = stack[-1]
        for neighbor in vertices:
            if neighbor in visited:
                continue
            if graph.has_edge(current, neighbor):
                tree.add_edge(current, neighbor)
            elif graph.has_edge(neighbor, current):
                tree.add_edge(neighbor, current)
            else:
                continue
            visited.add(neighbor)
            stack.append(neighbor)
            break
        else:
            stack.pop()


def compute_spanning_tree(graph: UnidirectionalGraph) -> UnidirectionalGraph:
    """Return a spanning tree of ``graph``, ignoring edge directions for reachability.

    Raises ValueError for an empty graph and RuntimeError if the graph is not
    connected.
    """
    vertices = get_all_vertices(graph)
    if not vertices:
        raise ValueError("Cannot compute spanning tree of empty graph")
    if not is_connected(graph):
        raise RuntimeError("Graph is not connected - no spanning tree exists")

    tree = UnidirectionalGraph()
    for vertex in vertices:
        tree.add_vertex(vertex)
    if len(vertices) > 1:
        _grow_tree(graph, vertices, vertices[0], set(), tree)
    return tree


def compute_spanning_forest(graph: UnidirectionalGraph) -> UnidirectionalGraph:
    """Return a spanning forest of ``graph``: one tree per weakly connected component.

    Raises ValueError for an empty graph.
    """
    vertices = get_all_vertices(graph)
    if not vertices:
        raise ValueError("Cannot compute spanning forest of empty graph")

    forest = UnidirectionalGraph()
    for vertex in vertices:
        forest.add_vertex(vertex)
    if len(vertices) == 1:
        return forest

    visited: set[int] = set()
    for start in vertices:
        if start not in visited:
            _grow_tree(graph, vertices, start, visited, forest)
    return forest