"""
Unit tests for rectangle geometry helpers
"""

from tableside.core.geometry import Rect, contains, inset, overlaps


class TestOverlaps:
    """Test the axis-aligned overlap rule"""

    def test_edge_touching_rectangles_do_not_overlap(self):
        """Test rectangles sharing only an edge are not overlapping"""
        assert overlaps(Rect(0, 0, 4, 4), Rect(4, 0, 4, 4)) is False
        assert overlaps(Rect(4, 0, 4, 4), Rect(0, 0, 4, 4)) is False
        assert overlaps(Rect(0, 0, 4, 4), Rect(0, 4, 4, 4)) is False

    def test_corner_touching_rectangles_do_not_overlap(self):
        """Test rectangles sharing only a corner are not overlapping"""
        assert overlaps(Rect(0, 0, 4, 4), Rect(4, 4, 2, 2)) is False

    def test_intersecting_rectangles_overlap(self):
        """Test one unit of shared width is an overlap"""
        assert overlaps(Rect(0, 0, 4, 4), Rect(3, 0, 4, 4)) is True
        assert overlaps(Rect(3, 0, 4, 4), Rect(0, 0, 4, 4)) is True

    def test_nested_rectangles_overlap(self):
        """Test a rectangle inside another overlaps it"""
        assert overlaps(Rect(0, 0, 10, 10), Rect(2, 2, 1, 1)) is True

    def test_separate_rectangles_do_not_overlap(self):
        """Test distant rectangles are independent"""
        assert overlaps(Rect(0, 0, 2, 2), Rect(10, 10, 2, 2)) is False


class TestContainment:
    """Test containment and inset helpers"""

    def test_right_and_bottom_edges(self):
        """Test derived edges of a rectangle"""
        rect = Rect(2, 3, 4, 5)
        assert rect.right == 6
        assert rect.bottom == 8

    def test_contains_flush_rectangle(self):
        """Test a rectangle flush with the outer edges is contained"""
        assert contains(Rect(0, 0, 20, 20), Rect(16, 16, 4, 4)) is True

    def test_does_not_contain_protruding_rectangle(self):
        """Test a rectangle sticking out on any side is not contained"""
        outer = Rect(0, 0, 20, 20)
        assert contains(outer, Rect(17, 0, 4, 4)) is False
        assert contains(outer, Rect(-1, 0, 4, 4)) is False
        assert contains(outer, Rect(0, 17, 4, 4)) is False

    def test_inset_shrinks_every_side(self):
        """Test inset moves the origin in and shrinks both dimensions"""
        assert inset(Rect(0, 0, 20, 20), 2) == Rect(2, 2, 16, 16)

    def test_inset_never_goes_negative(self):
        """Test insetting a small rectangle collapses it to zero size"""
        assert inset(Rect(0, 0, 3, 3), 2) == Rect(2, 2, 0, 0)
