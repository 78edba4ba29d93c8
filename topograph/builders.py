"""Builders for ring, tensor-product and torus graphs, plus a small expression language."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from functools import reduce
from itertools import product

from topograph.graph import UnidirectionalGraph

# Only vertices in [0, _VERTEX_SCAN_LIMIT) take part in a tensor product.
_VERTEX_SCAN_LIMIT = 1000
_INT_MAX = 2**31 - 1
_TRIM_CHARS = " \t\n\r"
_TENSOR_OPERATOR = " x "
_RING_PATTERN = re.compile(r"(?P<kind>[ub])R\[(?P<size>[0-9]+)\]")


def _check_ring_size(n: int) -> None:
    if n <= 1:
        raise ValueError("Ring size must be greater than 1")


def create_ring(n: int) -> UnidirectionalGraph:
    """Return the ring ``0 -> 1 -> ... -> n-1 -> 0``.

    Raises ValueError if ``n <= 1``.
    """
    _check_ring_size(n)
    graph = UnidirectionalGraph()
    for v in range(n):
        graph.add_vertex(v)
    for v in range(n):
        graph.add_edge(v, (v + 1) % n)
    return graph


def create_bidirectional_ring(n: int) -> UnidirectionalGraph:
    """Return the ring on ``0 .. n-1`` with edges in both directions.

    Raises ValueError if ``n <= 1``.
    """
    _check_ring_size(n)
    graph = create_ring(n)
    for v in range(1, n):
        graph.add_edge(v, v - 1)
    graph.add_edge(0, n - 1)
    return graph


def _scanned_vertices(graph: UnidirectionalGraph) -> list[int]:
    return sorted(v for v in graph.vertices() if 0 <= v < _VERTEX_SCAN_LIMIT)


def create_tensor_product(
    g1: UnidirectionalGraph, g2: UnidirectionalGraph
) -> UnidirectionalGraph:
    """Return the tensor product of ``g1`` and ``g2``.

    The pair ``(u, v)`` becomes vertex ``u * (max_v + 1) + v``, where ``max_v``
    is the largest vertex of ``g2``. ``(u1, v1) -> (u2, v2)`` is an edge exactly
    when ``u1 -> u2`` is in ``g1`` and ``v1 -> v2`` is in ``g2``. Only vertices
    in ``0 .. 999`` are considered.

    Raises ValueError if either graph has no vertices.
    """
    if g1.vertex_count() == 0 or g2.vertex_count() == 0:
        raise ValueError("Both graphs must have at least one vertex")

    vertices1 = _scanned_vertices(g1)
    vertices2 = _scanned_vertices(g2)
    stride = (vertices2[-1] if vertices2 else -1) + 1

    def combine(u: int, v: int) -> int:
        return u * stride + v

    result = UnidirectionalGraph()
    for u, v in product(vertices1, vertices2):
        result.add_vertex(combine(u, v))

    successors1 = {u: [w for w in vertices1 if g1.has_edge(u, w)] for u in vertices1}
    successors2 = {v: [w for w in vertices2 if g2.has_edge(v, w)] for v in vertices2}
    for u1, v1 in product(vertices1, vertices2):
        for u2, v2 in product(successors1[u1], successors2[v1]):
            result.add_edge(combine(u1, v1), combine(u2, v2))
    return result


def create_torus(dimensions: Iterable[int]) -> UnidirectionalGraph:
    """Return the tensor product of bidirectional rings of the given sizes.

    Raises ValueError if ``dimensions`` is empty or any size is at most 1.
    """
    sizes = list(dimensions)
    if not sizes:
        raise ValueError("Dimensions vector cannot be empty")
    if any(size <= 1 for size in sizes):
        raise ValueError("All dimensions must be greater than 1")
    rings = (create_bidirectional_ring(size) for size in sizes)
    return reduce(create_tensor_product, rings)


def _wraps_whole(text: str) -> bool:
    """Return whether the leading '(' of ``text`` closes at its last character."""
    depth = 0
    for char in text[:-1]:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if depth == 0:
            return False
    return True


def _rightmost_top_level_operator(text: str) -> int | None:
    depth = 0
    position = None
    for i in range(len(text) - len(_TENSOR_OPERATOR) + 1):
        char = text[i]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif depth == 0 and text.startswith(_TENSOR_OPERATOR, i):
            position = i
    return position


_RING_BUILDERS: dict[str, Callable[[int], UnidirectionalGraph]] = {
    "u": create_ring,
    "b": create_bidirectional_ring,
}


def parse_graph_expression(expression: str) -> UnidirectionalGraph:
    """Build the graph described by ``expression``.

    Supported forms: ``uR[N]`` (ring), ``bR[N]`` (bidirectional ring),
    ``E1 x E2`` (tensor product, left associative, spaces around ``x``
    required) and ``(E)`` for grouping.

    Raises ValueError for malformed expressions or invalid sizes, and
    OverflowError for a ring size that does not fit in a 32-bit integer.
    """
    text = expression.strip(_TRIM_CHARS)
    if not text:
        raise ValueError("Empty or whitespace-only expression")

    if len(text) >= 2 and text[0] == "(" and text[-1] == ")" and _wraps_whole(text):
        return parse_graph_expression(text[1:-1])

    split_at = _rightmost_top_level_operator(text)
    if split_at is not None:
        left = text[:split_at]
        right = text[split_at + len(_TENSOR_OPERATOR):]
        try:
            return create_tensor_product(
                parse_graph_expression(left), parse_graph_expression(right)
            )
        except (ValueError, OverflowError) as exc:
            raise ValueError(
                f"Error in tensor product expression '{expression}': {exc}"
            ) from exc

    compact = "".join(text.split())
    match = _RING_PATTERN.fullmatch(compact)
    if match is None:
        raise ValueError(f"Invalid graph expression: {expression}")

    digits = match["size"]
    size = int(digits)
    if size > _INT_MAX:
        raise OverflowError(f"Ring size out of range: {digits}")
    try:
        return _RING_BUILDERS[match["kind"]](size)
    except ValueError:
        raise ValueError(f"Invalid ring size: {digits}") from None