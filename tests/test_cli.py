from array import array

import pytest

from streamclust.cli import main, stream_cluster, write_centers
from streamclust.points import Point, Points
from streamclust.rand48 import Rand48
from streamclust.streams import PointStream, SimStream


def _entries(text):
    return [block.split("\n") for block in text.split("\n\n") if block]


class _ShortStream(PointStream):
    def read(self, dim, num):
        return [[0.0] * dim]

    def at_eof(self):
        return False


def test_write_centers_format(tmp_path):
    centers = Points(2, [
        Point(coord=[1.0, 2.0], weight=2.0, assign=0),
        Point(coord=[3.0, 4.0], weight=1.0, assign=0),
    ])
    out = tmp_path / "out.txt"
    write_centers(centers, [5, 7], out)
    assert out.read_text() == "5\n2.000000\n1.000000 2.000000 \n\n"


def test_write_centers_keeps_all_self_assigned(tmp_path):
    centers = Points(1, [
        Point(coord=[0.5], weight=1.0, assign=0),
        Point(coord=[0.25], weight=3.0, assign=1),
    ])
    out = tmp_path / "out.txt"
    write_centers(centers, [10, 11], out)
    entries = _entries(out.read_text())
    assert [e[0] for e in entries] == ["10", "11"]
    assert [float(e[1]) for e in entries] == [1.0, 3.0]


def test_stream_cluster_small_keeps_every_point(tmp_path):
    out = tmp_path / "out.txt"
    centers = stream_cluster(SimStream(3, Rand48(1)), 1, 5, 2, 2, 10, out, Rand48(1), 1)
    entries = _entries(out.read_text())
    assert sorted(int(e[0]) for e in entries) == [0, 1, 2]
    assert all(float(e[1]) == 1.0 for e in entries)
    assert len(centers) == 3


def test_stream_cluster_larger_run_is_consistent(tmp_path):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    stream_cluster(SimStream(40, Rand48(1)), 2, 4, 2, 20, 50, first, Rand48(1), 2)
    stream_cluster(SimStream(40, Rand48(1)), 2, 4, 2, 20, 50, second, Rand48(1), 2)
    assert first.read_text() == second.read_text()
    entries = _entries(first.read_text())
    ids = [int(e[0]) for e in entries]
    assert len(entries) >= 1
    assert len(set(ids)) == len(ids)
    assert all(0 <= i < 40 for i in ids)
    assert all(float(e[1]) > 0 for e in entries)


def test_stream_cluster_too_many_centers(tmp_path):
    with pytest.raises(RuntimeError):
        stream_cluster(SimStream(10, Rand48(1)), 1, 5, 2, 5, 6, tmp_path / "o.txt", Rand48(1), 1)


def test_stream_cluster_read_error(tmp_path):
    with pytest.raises(OSError):
        stream_cluster(_ShortStream(), 1, 5, 2, 4, 10, tmp_path / "o.txt", Rand48(1), 1)


def test_main_usage(capsys):
    assert main(["1", "2"]) == 1
    assert "usage" in capsys.readouterr().err


def test_main_simulated(tmp_path):
    out = tmp_path / "out.txt"
    args = ["2", "5", "2", "4", "2", "10", "unused", str(out), "1"]
    assert main(args) == 0
    entries = _entries(out.read_text())
    assert sorted(int(e[0]) for e in entries) == [0, 1, 2, 3]


def test_main_reads_file(tmp_path):
    data = tmp_path / "in.bin"
    data.write_bytes(array("f", [0.5, 1.5, 2.5, 3.5, 4.5, 5.5]).tobytes())
    out = tmp_path / "out.txt"
    args = ["1", "5", "2", "0", "10", "10", str(data), str(out), "1"]
    assert main(args) == 0
    entries = _entries(out.read_text())
    coords = sorted(tuple(float(v) for v in e[2].split()) for e in entries)
    assert coords == [(0.5, 1.5), (2.5, 3.5), (4.5, 5.5)]


def test_main_missing_input(tmp_path, capsys):
    args = ["1", "5", "2", "0", "10", "10", str(tmp_path / "none.bin"), str(tmp_path / "o"), "1"]
    assert main(args) == 1
    assert "error opening file" in capsys.readouterr().err


def test_main_rejects_bad_nproc(tmp_path):
    args = ["1", "5", "2", "4", "2", "10", "unused", str(tmp_path / "o.txt"), "0"]
    assert main(args) == 1