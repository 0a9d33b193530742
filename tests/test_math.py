import pytest

from crossing.internal.math import Direction, Extent, Vector2D


class TestExtent:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            (Extent(0, 80), Extent(40, 120), True),
            (Extent(0, 80), Extent(0, 80), True),
            (Extent(0, 80), Extent(10, 20), True),
            (Extent(0, 80), Extent(80, 160), False),
            (Extent(0, 80), Extent(200, 280), False),
        ],
    )
    def test_overlap_is_symmetric(self, a, b, expected):
        assert a.overlaps(b) is expected
        assert b.overlaps(a) is expected

    def test_touching_edges_do_not_overlap(self):
        """left == right on either side counts as apart."""
        assert not Extent(0, 80).overlaps(Extent(80, 100))
        assert not Extent(80, 100).overlaps(Extent(0, 80))

    def test_extent_is_reflexive(self):
        extent = Extent(33, 113)
        assert extent.overlaps(extent)

    def test_from_left_and_shift(self):
        extent = Extent.from_left(441, 80)
        assert extent == Extent(441, 521)
        assert extent.width == 80
        assert extent.shifted(-41) == Extent(400, 480)


class TestVector2D:
    def test_arithmetic(self):
        assert Vector2D(1, 2) + Vector2D(3, 4) == Vector2D(4, 6)
        assert Vector2D(3, 4) - Vector2D(1, 2) == Vector2D(2, 2)

    def test_copy_is_independent(self):
        v = Vector2D(1, 2)
        c = v.copy()
        c.x = 10
        assert v.x == 1


def test_direction_sign():
    assert Direction.RIGHT.sign == 1
    assert Direction.LEFT.sign == -1
    assert Direction.UP.sign == 0
    assert Direction.DOWN.sign == 0
