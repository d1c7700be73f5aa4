"""A reusable two-phase centralized barrier built on a condition variable."""

from __future__ import annotations

import errno
import threading
from dataclasses import dataclass
from enum import IntEnum

# Returned by ``Barrier.wait`` to exactly one thread per round: the first to
# arrive. A real barrier wait can never yield EINTR, so it cannot be confused
# with the ordinary return value of 0.
SERIAL_THREAD = errno.EINTR


class PShared(IntEnum):
    """Process-sharing mode of a barrier."""

    SHARED = 0
    PRIVATE = 1


class UnsupportedAttributeError(NotImplementedError):
    """Raised when a barrier feature that is not supported is requested."""


class BarrierBusyError(RuntimeError):
    """Raised when a barrier is destroyed while threads are still inside it."""


@dataclass
class BarrierAttributes:
    """Attributes that can be handed to a :class:`Barrier`."""

    pshared: PShared = PShared.PRIVATE

    def set_pshared(self, pshared: int) -> None:
        """Set the process-sharing mode; only private barriers are supported."""
        try:
            mode = PShared(pshared)
        except ValueError:
            raise ValueError(f"invalid process-sharing mode: {pshared!r}") from None
        if mode is not PShared.PRIVATE:
            raise UnsupportedAttributeError("process-shared barriers are not supported")
        self.pshared = mode


class Barrier:
    """Block threads until ``count`` of them have called :meth:`wait`.

    The barrier alternates between an arrival phase, in which threads
    accumulate, and a departure phase, in which they leave. A thread that
    arrives during a departure phase waits until the previous round has fully
    drained, so the barrier can be reused immediately.
    """

    def __init__(self, count: int, attributes: BarrierAttributes | None = None) -> None:
        if count <= 0:
            raise ValueError("barrier count must be positive")
        if attributes is not None and attributes.pshared is not PShared.PRIVATE:
            raise UnsupportedAttributeError("process-shared barriers are not supported")
        self.count = count
        self._inside = 0
        self._arrival_phase = True
        self._destroyed = False
        self._cond = threading.Condition()

    @property
    def waiting(self) -> int:
        """Number of threads currently inside the barrier."""
        with self._cond:
            return self._inside

    def wait(self) -> int:
        """Wait for the round to complete.

        Returns :data:`SERIAL_THREAD` to the first thread of the round and 0
        to every other thread.
        """
        with self._cond:
            if self._destroyed:
                raise RuntimeError("barrier has been destroyed")
            self._cond.wait_for(lambda: self._arrival_phase)

            master = self._inside == 0
            self._inside += 1
            if self._inside >= self.count:
                self._arrival_phase = False
                self._cond.notify_all()
            else:
                self._cond.wait_for(lambda: not self._arrival_phase)

            self._inside -= 1
            if self._inside == 0:
                self._arrival_phase = True
                self._cond.notify_all()

        return SERIAL_THREAD if master else 0

    def destroy(self) -> None:
        """Release the barrier; it must not be in use."""
        with self._cond:
            if self._inside != 0:
                raise BarrierBusyError("barrier is still in use")
            self._destroyed = True

    def __enter__(self) -> Barrier:
        return self

    def __exit__(self, *args: object) -> None:
        self.destroy()