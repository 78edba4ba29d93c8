"""Reduction operations and the records produced by simulated all-reduce runs."""

from __future__ import annotations

import abc
import enum
import math
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class CommunicationPattern(enum.Enum):
    """Communication schemes for an all-reduce."""

    TREE = enum.auto()
    HYPERCUBE = enum.auto()
    BUTTERFLY = enum.auto()
    RING = enum.auto()
    MESH_2D = enum.auto()
    CUSTOM_GRAPH = enum.auto()
    OPTIMAL = enum.auto()


@dataclass
class CommunicationStep:
    """One message sent from ``source_node`` to ``target_node`` in a given round."""

    source_node: int
    target_node: int
    round: int
    operation: str


@dataclass
class AllReduceResult(Generic[T]):
    """The reduced value of an all-reduce together with its communication record."""

    final_value: Any = None
    communication_steps: list[CommunicationStep] = field(default_factory=list)
    total_rounds: int = 0
    total_messages: int = 0
    efficiency_metric: float = 0.0


class ReductionOp(abc.ABC, Generic[T]):
    """A binary reduction with an identity element and a display name."""

    @abc.abstractmethod
    def __call__(self, a: T, b: T) -> T:
        """Combine two values."""

    @abc.abstractmethod
    def identity(self) -> Any:
        """Return the identity element of the operation."""

    @abc.abstractmethod
    def name(self) -> str:
        """Return the operation's name."""


class SumReduction(ReductionOp[T]):
    """Addition, with identity 0."""

    def __call__(self, a: T, b: T) -> T:
        return a + b  # type: ignore[operator]

    def identity(self) -> Any:
        return 0

    def name(self) -> str:
        return "SUM"


class MaxReduction(ReductionOp[T]):
    """Maximum, with identity negative infinity."""

    def __call__(self, a: T, b: T) -> T:
        return b if a < b else a  # type: ignore[operator]

    def identity(self) -> Any:
        return -math.inf

    def name(self) -> str:
        return "MAX"


class MinReduction(ReductionOp[T]):
    """Minimum, with identity positive infinity."""

    def __call__(self, a: T, b: T) -> T:
        return b if b < a else a  # type: ignore[operator]

    def identity(self) -> Any:
        return math.inf

    def name(self) -> str:
        return "MIN"


class AverageReduction(ReductionOp[T]):
    """Summation whose total is divided by ``count`` in :meth:`finalize`."""

    def __init__(self, count: int) -> None:
        self.count = count

    def __call__(self, a: T, b: T) -> T:
        return a + b  # type: ignore[operator]

    def identity(self) -> Any:
        return 0

    def name(self) -> str:
        return "AVERAGE"

    def finalize(self, total: Any) -> Any:
        """Return ``total / count``; integer totals are divided truncating toward zero."""
        if isinstance(total, int) and not isinstance(total, bool):
            quotient = abs(total) // abs(self.count)
            negative = (total < 0) != (self.count < 0)
            return -quotient if negative else quotient
        return total / self.count

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={self.count})"


@dataclass
class NodeState(Generic[T]):
    """The current value held by a node and the neighbours it knows of."""

    node_id: int
    value: Any
    neighbors: list[int] = field(default_factory=list)

    def update_value(self, new_value: Any) -> None:
        """Replace the node's value."""
        self.value = new_value

    def add_neighbor(self, neighbor_id: int) -> None:
        """Record ``neighbor_id`` as a neighbour of this node."""
        self.neighbors.append(neighbor_id)