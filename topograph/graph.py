"""A directed graph stored as an adjacency list."""

from __future__ import annotations

import sys
from typing import TextIO


class UnidirectionalGraph:
    """A directed graph whose edges run from a source vertex to a target vertex.

    Vertices are integers. Adding an edge creates any missing endpoint, and
    duplicate vertices or edges are ignored.
    """

    def __init__(self) -> None:
        # Each neighbour collection is a dict used as an insertion-ordered set.
        self._adjacency: dict[int, dict[int, None]] = {}
        self._edge_count = 0

    def add_vertex(self, v: int) -> None:
        """Add vertex ``v``; nothing happens if it is already present."""
        self._adjacency.setdefault(v, {})

    def add_edge(self, source: int, target: int) -> None:
        """Add the directed edge ``source -> target``, creating both vertices."""
        self.add_vertex(source)
        self.add_vertex(target)
        targets = self._adjacency[source]
        if target not in targets:
            targets[target] = None
            self._edge_count += 1

    def has_vertex(self, v: int) -> bool:
        """Return whether ``v`` is a vertex of the graph."""
        return v in self._adjacency

    def has_edge(self, source: int, target: int) -> bool:
        """Return whether the directed edge ``source -> target`` exists."""
        return target in self._adjacency.get(source, ())

    def vertex_count(self) -> int:
        """Return the number of vertices."""
        return len(self._adjacency)

    def edge_count(self) -> int:
        """Return the number of directed edges."""
        return self._edge_count

    def neighbors(self, v: int) -> list[int]:
        """Return the targets of the edges leaving ``v``.

        Raises KeyError if ``v`` is not a vertex of the graph.
        """
        try:
            return list(self._adjacency[v])
        except KeyError:
            raise KeyError("Vertex not found in graph.") from None

    def vertices(self) -> list[int]:
        """Return all vertices of the graph."""
        return list(self._adjacency)

    def print_graph(self, file: TextIO | None = None) -> None:
        """Write one ``v -> { n1 n2 }`` line per vertex to ``file`` (stdout by default)."""
        out = sys.stdout if file is None else file
        for vertex, targets in self._adjacency.items():
            body = "".join(f"{t} " for t in targets)
            out.write(f"{vertex} -> {{ {body}}}\n")

    def __contains__(self, v: object) -> bool:
        return v in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(vertices={self.vertex_count()}, "
            f"edges={self.edge_count()})"
        )