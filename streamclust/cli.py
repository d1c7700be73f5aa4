"""Cluster a stream of points and write out the final centers."""

from __future__ import annotations

import re
import sys
from collections.abc import Sequence
from os import PathLike

from streamclust.kmedian import compute_centers, copy_centers, local_search
from streamclust.points import Point, Points
from streamclust.rand48 import DEFAULT_SEED, Rand48
from streamclust.streams import FileStream, PointStream, SimStream

_USAGE = """\
usage: {prog} k1 k2 d n chunksize clustersize infile outfile nproc
  k1:          Min. number of centers allowed
  k2:          Max. number of centers allowed
  d:           Dimension of each data point
  n:           Number of data points
  chunksize:   Number of data points to handle per step
  clustersize: Maximum number of intermediate centers
  infile:      Input file (if n<=0)
  outfile:     Output file
  nproc:       Number of threads to use

if n > 0, points will be randomly generated instead of reading from infile."""

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Parse a leading integer, yielding 0 when there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def stream_cluster(
    stream: PointStream,
    kmin: int,
    kmax: int,
    dim: int,
    chunk_size: int,
    center_size: int,
    outfile: str | PathLike[str],
    rng: Rand48 | None = None,
    nproc: int = 1,
) -> Points:
    """Cluster the stream chunk by chunk, then cluster the kept centers.

    The final centers are written to ``outfile`` and returned.
    """
    rng = rng if rng is not None else Rand48()
    centers = Points(dim)
    center_ids: list[int] = []
    offset = 0

    while True:
        rows = stream.read(dim, chunk_size)
        num_read = len(rows)
        print(f"read {num_read} points", file=sys.stderr)
        if num_read < chunk_size and not stream.at_eof():
            raise OSError("error reading data!")

        points = Points(dim, [Point(coord=row, weight=1.0) for row in rows])
        kfinal = local_search(points, kmin, kmax, rng, nproc)
        compute_centers(points)
        if kfinal + centers.num > center_size:
            raise RuntimeError("oops! no more space for centers")
        copy_centers(points, centers, center_ids, offset)
        offset += num_read

        if stream.at_eof():
            break

    local_search(centers, kmin, kmax, rng, nproc)
    compute_centers(centers)
    write_centers(centers, center_ids, outfile)
    return centers


def write_centers(
    centers: Points,
    center_ids: Sequence[int],
    path: str | PathLike[str],
) -> None:
    """Write every center's id, weight and coordinates to ``path``."""
    medians = {p.assign for p in centers.p}
    with open(path, "w") as out:
        for i, p in enumerate(centers.p):
            if i not in medians:
                continue
            out.write(f"{center_ids[i]}\n")
            out.write(f"{p.weight:f}\n")
            out.write("".join(f"{c:f} " for c in p.coord[: centers.dim]))
            out.write("\n\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the clusterer from command-line arguments; return an exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 9:
        print(_USAGE.format(prog="streamclust"), file=sys.stderr)
        return 1

    kmin, kmax, dim, n, chunk_size, center_size = (_atoi(a) for a in args[:6])
    infile, outfile = args[6], args[7]
    nproc = _atoi(args[8])

    rng = Rand48(DEFAULT_SEED)
    stream: PointStream
    if n > 0:
        stream = SimStream(n, rng)
    else:
        try:
            stream = FileStream(infile)
        except OSError:
            print(f"error opening file {infile}", file=sys.stderr)
            return 1

    try:
        stream_cluster(stream, kmin, kmax, dim, chunk_size, center_size, outfile, rng, nproc)
    except (OSError, RuntimeError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    finally:
        if isinstance(stream, FileStream):
            stream.close()
    return 0