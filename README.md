# streamclust

This package performs online k-median clustering on a stream of points.

Points are read in chunks. A facility-location local search reduces each chunk to a small set of weighted intermediate centers. When the stream ends, the package clusters those centers once more, moves each final center to the weighted mean of its members, and writes the result to a file.

All random choices come from a `rand48`-style generator seeded with 1. A run with the same arguments therefore gives the same result every time.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
streamclust k1 k2 d n chunksize clustersize infile outfile nproc
```

- `k1`, `k2`: the minimum and maximum number of centers allowed.
- `d`: the dimension of each data point.
- `n`: the number of data points. If `n > 0`, the points are generated randomly and `infile` is ignored.
- `chunksize`: the number of points handled per step.
- `clustersize`: the maximum number of intermediate centers.
- `infile`: the input file, used when `n <= 0`. It holds raw native-endian 32-bit floats, `d` per point.
- `outfile`: the output file.
- `nproc`: the number of blocks the per-point work is split into (see below).

Each numeric argument is read as a leading integer. Text with no leading integer counts as 0.

Progress messages such as `read 200 points` go to standard error.

The command exits with status 1 in these cases:

- fewer than nine arguments are given (the usage text is printed)
- the input file cannot be opened
- clustering fails, for example when the intermediate centers exceed `clustersize`

For each final center, the output file holds:

1. its ID, which is the point's position in the stream
2. its weight, in `%f` format
3. its coordinates, each followed by a space

A blank line follows each center.

## Library use

```python
from streamclust.rand48 import Rand48
from streamclust.streams import SimStream
from streamclust.cli import stream_cluster

rng = Rand48(1)
stream = SimStream(1000, rng)
centers = stream_cluster(stream, 5, 10, 3, 200, 100, "centers.txt", rng, 2)
```

`stream_cluster` writes the centers file and also returns the final centers as a `Points` object.

### Modules

- `streamclust.rand48`
  - `Rand48`: a 48-bit linear congruential generator, with `seed`, `lrand48` and `uniform`.
- `streamclust.points`
  - `Point` and `Points`.
  - `dist`: squared Euclidean distance.
  - `is_identical`.
  - `shuffle` and `int_shuffle`: in-place shuffles driven by a `Rand48`.
- `streamclust.kmedian`
  - `KMedianSolver`, with `speedy`, `gain`, `facility_location`, `select_feasible` and `solve`.
  - `local_search`: clusters points in place and returns the number of centers.
  - `compute_centers`.
  - `copy_centers`.
- `streamclust.streams`
  - `PointStream`: the abstract base.
  - `SimStream`: synthetic points.
  - `FileStream`: raw float file. It can be used as a context manager.
- `streamclust.cli`
  - `stream_cluster`.
  - `write_centers`.
  - `main`.
- `streamclust.barrier`
  - `Barrier`: a reusable two-phase thread barrier. `wait()` returns `SERIAL_THREAD` to the first thread to arrive in each round and 0 to the others. `destroy()` raises `BarrierBusyError` while threads are still inside. The barrier works as a context manager.
  - `BarrierAttributes`: attributes for a barrier. Only private (`PShared.PRIVATE`) barriers are supported. Asking for a shared one raises `UnsupportedAttributeError`.

## What it does not do

The clustering runs in a single thread. `nproc` starts no threads. It only splits the per-point work into that many contiguous blocks, whose partial sums are combined in block order.

`Barrier` is provided as a standalone synchronisation primitive. The clustering code does not use it.