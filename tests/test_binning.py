"""Tests for the UCSC binning scheme"""

import random

import pytest


class TestIntervalToBin:
    """Tests for interval_to_bin"""

    @pytest.mark.parametrize(
        "begin,end,expected",
        [
            (0, 1, 4681),
            (0, 1 << 14, 4681),
            ((1 << 14) - 1, (1 << 14) + 1, 585),
            (1 << 14, 2 << 14, 4682),
            (0, 1 << 17, 585),
            (0, (1 << 17) + 1, 73),
            (0, 1 << 26, 1),
            (0, 1 << 29, 0),
            ((1 << 26) - 1, (1 << 26) + 1, 0),
        ],
    )
    def test_known_bins(self, begin, end, expected):
        """Test bins of intervals at level boundaries"""
        from tabixindex.binning import interval_to_bin

        assert interval_to_bin(begin, end) == expected

    def test_last_window_has_highest_bin(self):
        """Test the last 16 kb window maps to the highest bin id"""
        from tabixindex.binning import interval_to_bin
        from tabixindex.constants import MAX_BIN

        assert interval_to_bin((1 << 29) - 1, 1 << 29) == 37448
        assert interval_to_bin((1 << 29) - 1, 1 << 29) < MAX_BIN


class TestBinsOverlapping:
    """Tests for bins_overlapping"""

    def test_single_point_overlaps_six_bins(self):
        """Test a point overlaps one bin per level plus the root"""
        from tabixindex.binning import bins_overlapping

        assert bins_overlapping(0, 1) == [0, 1, 9, 73, 585, 4681]

    def test_empty_range(self):
        """Test begin >= end yields no bins"""
        from tabixindex.binning import bins_overlapping

        assert bins_overlapping(10, 10) == []
        assert bins_overlapping(20, 10) == []

    def test_range_spanning_windows(self):
        """Test a range covering two 16 kb windows includes both leaf bins"""
        from tabixindex.binning import bins_overlapping

        bins = bins_overlapping((1 << 14) - 10, (1 << 14) + 10)
        assert 4681 in bins
        assert 4682 in bins
        assert bins == sorted(bins)

    def test_end_clamped_to_coordinate_ceiling(self):
        """Test ends beyond 2^29 behave like 2^29"""
        from tabixindex.binning import bins_overlapping

        assert bins_overlapping(0, 1 << 40) == bins_overlapping(0, 1 << 29)
        assert len(bins_overlapping(0, 1 << 29)) == 37449

    def test_properties_on_random_intervals(self):
        """Test the containing bin is always among the overlapping bins"""
        from tabixindex.binning import bins_overlapping, interval_to_bin

        rng = random.Random(1234)
        for _ in range(500):
            begin = rng.randrange(0, 1 << 28)
            end = begin + rng.randrange(1, 1 << rng.randrange(1, 27))
            end = min(end, 1 << 29)
            bins = bins_overlapping(begin, end)
            assert bins[0] == 0
            assert interval_to_bin(begin, end) in bins


class TestInterval:
    """Tests for the Interval value type"""

    def test_bin_is_computed(self):
        """Test the bin attribute matches interval_to_bin"""
        from tabixindex.binning import Interval, interval_to_bin

        interval = Interval(0, 100, 20000)
        assert interval.bin == interval_to_bin(100, 20000)

    def test_overlaps(self):
        """Test the half-open overlap predicate"""
        from tabixindex.binning import Interval

        interval = Interval(1, 100, 200)
        assert interval.overlaps(1, 150, 160)
        assert interval.overlaps(1, 199, 300)
        assert not interval.overlaps(1, 200, 300)
        assert not interval.overlaps(1, 0, 100)
        assert not interval.overlaps(2, 150, 160)
