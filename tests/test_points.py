from streamclust.points import Point, Points, dist, int_shuffle, is_identical, shuffle
from streamclust.rand48 import Rand48


def _make_points(n, dim=2):
    return Points(dim=dim, p=[Point(coord=[float(i)] * dim) for i in range(n)])


def test_dist_three_four_five():
    assert dist(Point([0.0, 0.0]), Point([3.0, 4.0]), 2) == 25.0


def test_dist_to_self_is_zero():
    p = Point([1.5, -2.0, 7.25])
    assert dist(p, p, 3) == 0.0


def test_dist_symmetric():
    a = Point([1.0, 2.0, 3.0])
    b = Point([-4.0, 0.5, 9.0])
    assert dist(a, b, 3) == dist(b, a, 3)


def test_dist_respects_dimension():
    a = Point([1.0, 5.0])
    b = Point([1.0, 9.0])
    assert dist(a, b, 1) == 0.0
    assert dist(a, b, 2) > 0.0


def test_is_identical():
    assert is_identical([1.0, 2.0, 3.0], [1.0, 2.0, 3.0], 3) is True
    assert is_identical([1.0, 2.0, 3.0], [1.0, 2.0, 4.0], 3) is False
    assert is_identical([1.0, 2.0, 3.0], [1.0, 2.0, 4.0], 2) is True


def test_points_num_and_indexing():
    pts = _make_points(4)
    assert pts.num == 4
    assert len(pts) == 4
    assert pts[2].coord == [2.0, 2.0]
    assert [p.coord[0] for p in pts] == [0.0, 1.0, 2.0, 3.0]


def test_shuffle_is_permutation():
    pts = _make_points(30)
    originals = list(pts.p)
    shuffle(pts, Rand48(1))
    assert sorted(id(p) for p in pts.p) == sorted(id(p) for p in originals)
    assert pts.num == 30


def test_shuffle_deterministic():
    a = _make_points(25)
    b = _make_points(25)
    shuffle(a, Rand48(4))
    shuffle(b, Rand48(4))
    assert [p.coord for p in a] == [p.coord for p in b]


def test_shuffle_changes_order():
    identity = [float(i) for i in range(40)]
    pts = _make_points(40)
    shuffle(pts, Rand48(1))
    order = [p.coord[0] for p in pts.p]
    assert pts.num == 40
    assert sorted(order) == identity
    moved = sum(1 for value, expected in zip(order, identity) if value != expected)
    assert moved > 0


def test_shuffle_draws_n_minus_one_numbers():
    rng = Rand48(11)
    shuffle(_make_points(5), rng)
    reference = Rand48(11)
    for _ in range(4):
        reference.lrand48()
    assert rng.lrand48() == reference.lrand48()


def test_shuffle_single_point_draws_nothing():
    rng = Rand48(11)
    pts = _make_points(1)
    shuffle(pts, rng)
    assert pts[0].coord == [0.0, 0.0]
    assert rng.lrand48() == Rand48(11).lrand48()


def test_int_shuffle_is_permutation():
    values = list(range(50))
    int_shuffle(values, Rand48(2))
    assert sorted(values) == list(range(50))


def test_int_shuffle_deterministic():
    a = list(range(20))
    b = list(range(20))
    int_shuffle(a, Rand48(8))
    int_shuffle(b, Rand48(8))
    assert a == b


def test_int_shuffle_draws_length_numbers():
    rng = Rand48(3)
    int_shuffle([1, 2, 3], rng)
    reference = Rand48(3)
    for _ in range(3):
        reference.lrand48()
    assert rng.lrand48() == reference.lrand48()


def test_int_shuffle_empty():
    values = []
    rng = Rand48(3)
    int_shuffle(values, rng)
    assert values == []
    assert rng.lrand48() == Rand48(3).lrand48()