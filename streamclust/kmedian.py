"""Approximate k-median clustering by facility-location local search."""

from __future__ import annotations

import math
from bisect import bisect_right
from collections import defaultdict
from collections.abc import MutableSequence

from streamclust.points import Point, Points, dist, int_shuffle, shuffle
from streamclust.rand48 import Rand48

# Number of extra chances "speedy" gets to open enough facilities.
SP = 1
# Iterations of local search run ITER * k * log(k) gain evaluations.
ITER = 3


def _ratio(num: float, den: float) -> float:
    """Divide the way IEEE arithmetic does, without raising on zero."""
    if den == 0:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num)
    return num / den


def _feasible_limit(kmin: int) -> float:
    if kmin <= 0:
        return math.nan
    return ITER * kmin * math.log(kmin)


class KMedianSolver:
    """Local-search k-median solver over a set of weighted points.

    Work is split into ``nproc`` contiguous blocks whose partial sums are
    combined in block order; the random decisions are all drawn from ``rng``.
    """

    def __init__(self, rng: Rand48 | None = None, nproc: int = 1) -> None:
        if nproc <= 0:
            raise ValueError("nproc must be positive")
        self.rng = rng if rng is not None else Rand48()
        self.nproc = nproc
        self.k = 0
        self.is_center: list[bool] = []
        self._center_table: list[int] = []
        self._switch_membership: list[bool] = []

    def _blocks(self, n: int) -> list[range]:
        bsize = n // self.nproc
        last = self.nproc - 1
        return [
            range(bsize * pid, n if pid == last else bsize * (pid + 1))
            for pid in range(self.nproc)
        ]

    def _reset_state(self, n: int) -> None:
        self.is_center = [False] * n
        self._center_table = [0] * n
        self._switch_membership = [False] * n

    def _ensure_state(self, n: int) -> None:
        if len(self.is_center) != n:
            self.is_center = [False] * n
        if len(self._center_table) != n:
            self._center_table = [0] * n
        if len(self._switch_membership) != n:
            self._switch_membership = [False] * n

    def speedy(self, points: Points, z: float) -> tuple[float, int]:
        """Build a quick initial solution with facility cost ``z``.

        Returns the total cost and the number of centers opened.
        """
        pts = points.p
        if not pts:
            raise ValueError("cannot cluster an empty set of points")
        dim = points.dim
        first = pts[0]
        for p in pts:
            p.cost = dist(p, first, dim) * p.weight
            p.assign = 0

        kcenter = 1
        for i in range(1, len(pts)):
            candidate = pts[i]
            if self.rng.uniform() < _ratio(candidate.cost, z):
                kcenter += 1
                for p in pts:
                    cost = dist(candidate, p, dim) * p.weight
                    if cost < p.cost:
                        p.cost = cost
                        p.assign = i

        total = z * kcenter
        for block in self._blocks(len(pts)):
            total += sum(pts[k].cost for k in block)
        self.k = kcenter
        return total, kcenter

    def gain(self, x: int, points: Points, z: float) -> float:
        """Open a center at ``x`` if that lowers the cost.

        Points closer to ``x`` switch to it and centers whose members are
        cheaper to serve from ``x`` are closed. Returns the cost saved, or 0
        if nothing was changed.
        """
        pts = points.p
        n = len(pts)
        dim = points.dim
        self._ensure_state(n)
        is_center = self.is_center
        table = self._center_table
        switch = self._switch_membership
        blocks = self._blocks(n)

        count = 0
        for i, centre in enumerate(is_center):
            if centre:
                table[i] = count
                count += 1
        switch[:] = [False] * n

        target = pts[x]
        lowers: list[defaultdict[int, float]] = [defaultdict(float) for _ in blocks]
        opening = [0.0] * len(blocks)
        for b, block in enumerate(blocks):
            lower = lowers[b]
            for i in block:
                p = pts[i]
                x_cost = dist(p, target, dim) * p.weight
                if x_cost < p.cost:
                    switch[i] = True
                    opening[b] += x_cost - p.cost
                else:
                    lower[table[p.assign]] += p.cost - x_cost

        gl_lower: dict[int, float] = {}
        closing = [0] * len(blocks)
        for b, block in enumerate(blocks):
            for i in block:
                if not is_center[i]:
                    continue
                slot = table[i]
                low = z
                for lower in lowers:
                    low += lower.get(slot, 0.0)
                gl_lower[slot] = low
                if low > 0:
                    closing[b] += 1
                    opening[b] -= low

        total_opening = z
        to_close = 0
        for b in range(len(blocks)):
            to_close += closing[b]
            total_opening += opening[b]

        if total_opening >= 0:
            return 0.0

        for i, p in enumerate(pts):
            if switch[i] or gl_lower.get(table[p.assign], 0.0) > 0:
                p.cost = p.weight * dist(p, target, dim)
                p.assign = x
        for i in range(n):
            if is_center[i] and gl_lower.get(table[i], 0.0) > 0:
                is_center[i] = False
        is_center[x] = True
        self.k = self.k + 1 - to_close
        return -total_opening

    def facility_location(
        self,
        points: Points,
        feasible: MutableSequence[int],
        z: float,
        cost: float,
        iterations: int,
        epsilon: float,
    ) -> float:
        """Improve a solution by local search until the relative gain is small.

        ``feasible`` is shuffled in place on every round. Returns the new cost.
        """
        if iterations > 0 and not feasible:
            raise ValueError("no feasible centers to search over")
        change = cost
        while _ratio(change, cost) > epsilon:
            change = 0.0
            int_shuffle(feasible, self.rng)
            for i in range(iterations):
                change += self.gain(feasible[i % len(feasible)], points, z)
            cost -= change
        return cost

    def select_feasible(self, points: Points, kmin: int) -> list[int]:
        """Pick candidate centers, drawn with probability proportional to weight."""
        n = len(points.p)
        numfeasible = n
        limit = _feasible_limit(kmin)
        if numfeasible > limit:
            numfeasible = int(limit)
        if numfeasible == n:
            return list(range(n))

        accum: list[float] = []
        running = 0.0
        for p in points.p:
            running = p.weight if not accum else running + p.weight
            accum.append(running)
        total = accum[-1]

        feasible = []
        for _ in range(numfeasible):
            w = self.rng.uniform() * total
            if accum[0] > w:
                feasible.append(0)
            else:
                feasible.append(min(bisect_right(accum, w), n - 1))
        return feasible

    def solve(self, points: Points, kmin: int, kmax: int) -> tuple[float, int]:
        """Cluster ``points`` into between ``kmin`` and ``kmax`` centers.

        Each point's ``assign`` and ``cost`` describe the result. Returns the
        solution cost and the number of centers.
        """
        pts = points.p
        n = len(pts)
        dim = points.dim

        hiz = 0.0
        if pts:
            first = pts[0]
            for block in self._blocks(n):
                hiz += sum(dist(pts[k], first, dim) * pts[k].weight for k in block)
        loz = 0.0
        z = (hiz + loz) / 2.0

        if n <= kmax:
            for i, p in enumerate(pts):
                p.assign = i
                p.cost = 0.0
            self.k = n
            return 0.0, n
        if kmax < 1:
            raise ValueError("kmax must be at least 1")
        if kmin > n:
            raise ValueError("kmin exceeds the number of points")

        self._reset_state(n)
        shuffle(points, self.rng)
        cost, k = self.speedy(points, z)

        attempts = 0
        while k < kmin and attempts < SP:
            cost, k = self.speedy(points, z)
            attempts += 1

        while k < kmin:
            if attempts >= SP:
                hiz = z
                z = (hiz + loz) / 2.0
                attempts = 0
            shuffle(points, self.rng)
            cost, k = self.speedy(points, z)
            attempts += 1

        feasible = self.select_feasible(points, kmin)
        for p in pts:
            self.is_center[p.assign] = True

        iterations = int(ITER * kmax * math.log(kmax))
        while True:
            cost = self.facility_location(points, feasible, z, cost, iterations, 0.1)
            k = self.k
            if (0.9 * kmin <= k <= 1.1 * kmax) or (kmin - 2 <= k <= kmax + 2):
                cost = self.facility_location(points, feasible, z, cost, iterations, 0.001)
                k = self.k

            if k > kmax:
                loz = z
                z = (hiz + loz) / 2.0
                cost += (z - loz) * k
            if k < kmin:
                hiz = z
                z = (hiz + loz) / 2.0
                cost += (z - hiz) * k

            if kmin <= k <= kmax or loz >= 0.999 * hiz:
                break

        return cost, k


def local_search(
    points: Points,
    kmin: int,
    kmax: int,
    rng: Rand48 | None = None,
    nproc: int = 1,
) -> int:
    """Cluster ``points`` in place and return the number of centers."""
    _, k = KMedianSolver(rng, nproc).solve(points, kmin, kmax)
    return k


def compute_centers(points: Points) -> None:
    """Move every center to the weighted mean of its members, in place."""
    dim = points.dim
    for i, p in enumerate(points.p):
        if p.assign == i:
            continue
        center = points.p[p.assign]
        relweight = p.weight / (center.weight + p.weight)
        for ii in range(dim):
            center.coord[ii] *= 1.0 - relweight
            center.coord[ii] += p.coord[ii] * relweight
        center.weight += p.weight


def copy_centers(
    points: Points,
    centers: Points,
    center_ids: list[int],
    offset: int,
) -> int:
    """Append the centers of ``points`` to ``centers``.

    Each center's id, its index plus ``offset``, is appended to
    ``center_ids``. Returns the number of centers copied.
    """
    medians = {p.assign for p in points.p}
    copied = 0
    for i, p in enumerate(points.p):
        if i in medians:
            centers.p.append(Point(coord=list(p.coord[: points.dim]), weight=p.weight))
            center_ids.append(i + offset)
            copied += 1
    return copied