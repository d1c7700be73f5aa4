"""Sources of points for the streaming clusterer."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from array import array
from os import PathLike

from streamclust.rand48 import Rand48

_FLOAT_SIZE = array("f").itemsize


class PointStream(ABC):
    """A stream that hands out points in chunks."""

    @abstractmethod
    def read(self, dim: int, num: int) -> list[list[float]]:
        """Read up to ``num`` points of ``dim`` coordinates each."""

    @abstractmethod
    def at_eof(self) -> bool:
        """Tell whether the stream has been exhausted."""


class SimStream(PointStream):
    """A synthetic stream of ``n`` points with coordinates drawn from ``rng``."""

    def __init__(self, n: int, rng: Rand48 | None = None) -> None:
        self.remaining = n
        self.rng = rng if rng is not None else Rand48()

    def read(self, dim: int, num: int) -> list[list[float]]:
        rows: list[list[float]] = []
        while len(rows) < num and self.remaining > 0:
            rows.append([self.rng.uniform() for _ in range(dim)])
            self.remaining -= 1
        return rows

    def at_eof(self) -> bool:
        return self.remaining <= 0


class FileStream(PointStream):
    """Points stored as consecutive native-endian 32-bit floats in a file."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self.path = path
        self._file = open(path, "rb")
        self._eof = False

    def read(self, dim: int, num: int) -> list[list[float]]:
        record = _FLOAT_SIZE * dim
        wanted = record * num
        data = self._file.read(wanted) if wanted > 0 else b""
        if len(data) < wanted:
            self._eof = True
        if record == 0:
            return []
        count = len(data) // record
        values = array("f")
        values.frombytes(data[: count * record])
        return [list(values[i * dim:(i + 1) * dim]) for i in range(count)]

    def at_eof(self) -> bool:
        return self._eof

    def close(self) -> None:
        """Close the underlying file."""
        if not self._file.closed:
            print("closing file stream", file=sys.stderr)
            self._file.close()

    @property
    def closed(self) -> bool:
        """Whether the underlying file has been closed."""
        return self._file.closed

    def __enter__(self) -> FileStream:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()