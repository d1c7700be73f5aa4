"""Weighted points and the basic operations on them."""

from __future__ import annotations

from collections.abc import Iterator, MutableSequence, Sequence
from dataclasses import dataclass, field

from streamclust.rand48 import Rand48


@dataclass
class Point:
    """A weighted point and its current assignment.

    ``assign`` is the index of the point this one is assigned to and
    ``cost`` is the cost of that assignment, weight times distance.
    """

    coord: list[float]
    weight: float = 1.0
    assign: int = 0
    cost: float = 0.0


@dataclass
class Points:
    """A collection of points of a common dimensionality."""

    dim: int
    p: list[Point] = field(default_factory=list)

    @property
    def num(self) -> int:
        """Number of points held."""
        return len(self.p)

    def __len__(self) -> int:
        return len(self.p)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.p)

    def __getitem__(self, index: int) -> Point:
        return self.p[index]


def dist(p1: Point, p2: Point, dim: int) -> float:
    """Squared Euclidean distance over the first ``dim`` coordinates."""
    return sum((a - b) * (a - b) for a, b in zip(p1.coord[:dim], p2.coord[:dim]))


def is_identical(a: Sequence[float], b: Sequence[float], dim: int) -> bool:
    """Tell whether the first ``dim`` coordinates of two points are equal."""
    return all(x == y for x, y in zip(a[:dim], b[:dim]))


def shuffle(points: Points, rng: Rand48) -> None:
    """Put the points into a random order, in place."""
    items = points.p
    n = len(items)
    for i in range(n - 1):
        j = rng.lrand48() % (n - i) + i
        items[i], items[j] = items[j], items[i]


def int_shuffle(values: MutableSequence[int], rng: Rand48) -> None:
    """Put a sequence of integers into a random order, in place."""
    n = len(values)
    for i in range(n):
        j = rng.lrand48() % (n - i) + i
        values[i], values[j] = values[j], values[i]