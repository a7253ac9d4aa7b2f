"""
Unit tests for overlap detection
"""
from datetime import time
import pytest
from booking_engine.scheduling.overlap import find_overlapping, overlaps


@pytest.mark.unit
class TestOverlaps:
    """Test the half-open overlap predicate"""

    def test_touching_intervals_do_not_overlap(self):
        """Appointment ending when another starts is not a conflict"""
        assert not overlaps(time(9, 0), time(10, 0), time(10, 0), time(11, 0))
        assert not overlaps(time(10, 0), time(11, 0), time(9, 0), time(10, 0))

    def test_partial_overlap(self):
        assert overlaps(time(9, 0), time(10, 0), time(9, 30), time(10, 30))
        assert overlaps(time(9, 30), time(10, 30), time(9, 0), time(10, 0))

    def test_containment(self):
        assert overlaps(time(9, 0), time(12, 0), time(10, 0), time(10, 30))
        assert overlaps(time(10, 0), time(10, 30), time(9, 0), time(12, 0))

    def test_identical_intervals(self):
        assert overlaps(time(10, 0), time(10, 30), time(10, 0), time(10, 30))

    def test_disjoint_intervals(self):
        assert not overlaps(time(8, 0), time(9, 0), time(13, 0), time(14, 0))

    def test_works_with_minutes(self):
        """Predicate is type agnostic"""
        assert overlaps(540, 600, 570, 630)
        assert not overlaps(540, 600, 600, 660)


@pytest.mark.unit
class TestFindOverlapping:
    """Test filtering busy intervals"""

    def test_returns_only_conflicting_intervals(self):
        busy = [
            (time(9, 0), time(9, 30)),
            (time(10, 0), time(10, 30)),
            (time(10, 15), time(11, 0)),
        ]
        result = find_overlapping(time(10, 0), time(10, 30), busy)

        assert result == [(time(10, 0), time(10, 30)), (time(10, 15), time(11, 0))]

    def test_empty_busy_list(self):
        assert find_overlapping(time(10, 0), time(10, 30), []) == []
