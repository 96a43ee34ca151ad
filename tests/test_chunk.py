"""Tests for virtual offsets and chunks"""

import pytest


class TestVirtualOffsets:
    """Tests for virtual offset arithmetic"""

    def test_make_and_split(self):
        """Test packing block address and in-block offset"""
        from tabixindex.chunk import make_virtual_offset, split_virtual_offset

        voff = make_virtual_offset(12345, 678)
        assert voff == (12345 << 16) | 678
        assert split_virtual_offset(voff) == (12345, 678)

    def test_make_rejects_out_of_range(self):
        """Test component range checks"""
        from tabixindex.chunk import make_virtual_offset

        with pytest.raises(ValueError):
            make_virtual_offset(0, 1 << 16)
        with pytest.raises(ValueError):
            make_virtual_offset(-1, 0)
        with pytest.raises(ValueError):
            make_virtual_offset(1 << 48, 0)

    def test_unsigned_comparison(self):
        """Test the all-ones 64-bit value compares above 1"""
        from tabixindex.chunk import compare_offsets

        assert compare_offsets(-1, 1) == 1
        assert compare_offsets(0xFFFF_FFFF_FFFF_FFFF, 1) == 1
        assert compare_offsets(1, -1) == -1
        assert compare_offsets(-1, 0xFFFF_FFFF_FFFF_FFFF) == 0
        assert compare_offsets(3, 7) == -1

    def test_block_tests(self):
        """Test same-block and same-or-adjacent-block predicates"""
        from tabixindex.chunk import same_block, same_or_adjacent_blocks

        a = (10 << 16) | 500
        b = (10 << 16) | 20
        c = (11 << 16) | 0
        d = (12 << 16) | 0

        assert same_block(a, b)
        assert not same_block(a, c)
        assert same_or_adjacent_blocks(a, c)
        assert not same_or_adjacent_blocks(a, d)
        assert not same_or_adjacent_blocks(c, a)


class TestChunk:
    """Tests for the Chunk value type"""

    def test_begin_after_end_is_malformed(self):
        """Test a chunk with begin > end is rejected"""
        from tabixindex.chunk import Chunk
        from tabixindex.errors import MalformedOffset

        with pytest.raises(MalformedOffset):
            Chunk(10, 5)

    def test_out_of_range_is_malformed(self):
        """Test offsets outside the u64 range are rejected"""
        from tabixindex.chunk import Chunk
        from tabixindex.errors import MalformedOffset

        with pytest.raises(MalformedOffset):
            Chunk(-1, 5)
        with pytest.raises(MalformedOffset):
            Chunk(0, 1 << 64)

    def test_malformed_offset_is_value_error(self):
        """Test MalformedOffset can be caught as ValueError"""
        from tabixindex.chunk import Chunk

        with pytest.raises(ValueError):
            Chunk(2, 1)

    def test_ordering(self):
        """Test chunks sort by begin, then end"""
        from tabixindex.chunk import Chunk

        chunks = [Chunk(5, 9), Chunk(1, 8), Chunk(1, 3)]
        assert sorted(chunks) == [Chunk(1, 3), Chunk(1, 8), Chunk(5, 9)]

    def test_repr(self):
        """Test repr shows block:offset pairs"""
        from tabixindex.chunk import Chunk

        assert repr(Chunk((3 << 16) | 7, (4 << 16) | 1)) == "<Chunk 3:7-4:1>"
