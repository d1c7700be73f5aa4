"""Online k-median clustering of point streams, with a rand48 generator and a thread barrier."""

__version__ = "0.1.0"
__all__ = ["barrier", "rand48", "points", "kmedian", "streams", "cli"]