"""Tests for region string parsing"""

import pytest


class TestParseRegion:
    """Tests for parse_region"""

    def test_parse_sequence_only(self):
        """Test parsing a sequence name without coordinates."""
        from tabixindex.utils import parse_region

        name, start, end = parse_region("chr1")
        assert name == "chr1"
        assert start is None
        assert end is None

    def test_parse_sequence_with_range(self):
        """Test parsing a sequence with a coordinate range."""
        from tabixindex.utils import parse_region

        assert parse_region("chr1:1000-2000") == ("chr1", 1000, 2000)

    def test_parse_sequence_with_start_only(self):
        """Test a single coordinate leaves the end open."""
        from tabixindex.utils import parse_region

        assert parse_region("chr1:1000") == ("chr1", 1000, None)

    def test_parse_region_with_commas(self):
        """Test parsing region with comma separators."""
        from tabixindex.utils import parse_region

        assert parse_region("chr1:1,000-2,000") == ("chr1", 1000, 2000)

    def test_parse_region_with_whitespace(self):
        """Test parsing region with extra whitespace."""
        from tabixindex.utils import parse_region

        assert parse_region("  chr1 : 1000 - 2000  ") == ("chr1", 1000, 2000)

    def test_parse_name_containing_colons(self):
        """Test coordinates are taken from the last colon."""
        from tabixindex.utils import parse_region

        assert parse_region("HLA-A*01:01:01:01:100-200") == (
            "HLA-A*01:01:01:01",
            100,
            200,
        )

    @pytest.mark.parametrize(
        "region", ["", "   ", None, "chr1:abc-def", "chr1:1-2-3", ":100-200", "chr1:"]
    )
    def test_parse_invalid_region(self, region):
        """Test parsing invalid region strings."""
        from tabixindex.utils import parse_region

        assert parse_region(region) == (None, None, None)


class TestRegionToInterval:
    """Tests for region_to_interval"""

    def test_one_based_to_half_open(self):
        """Test 1-based inclusive coordinates become 0-based half-open"""
        from tabixindex.utils import region_to_interval

        assert region_to_interval("chr1:100-200") == ("chr1", 99, 200)

    def test_defaults(self):
        """Test a missing start or end extends to the sequence bounds"""
        from tabixindex.constants import MAX_REGION_END
        from tabixindex.utils import region_to_interval

        assert region_to_interval("chr1") == ("chr1", 0, MAX_REGION_END)
        assert region_to_interval("chr1:500") == ("chr1", 499, MAX_REGION_END)

    def test_known_name_with_colon(self):
        """Test a region equal to a known sequence name is the whole sequence"""
        from tabixindex.constants import MAX_REGION_END
        from tabixindex.utils import region_to_interval

        known = {"HLA-A*01:01"}
        assert region_to_interval("HLA-A*01:01", known) == (
            "HLA-A*01:01",
            0,
            MAX_REGION_END,
        )
        assert region_to_interval("HLA-A*01:01") == ("HLA-A*01", 0, MAX_REGION_END)

    @pytest.mark.parametrize("region", ["chr1:abc", "chr1:0-10", "chr1:200-100", ""])
    def test_invalid(self, region):
        """Test unusable regions raise ValueError"""
        from tabixindex.utils import region_to_interval

        with pytest.raises(ValueError):
            region_to_interval(region)
