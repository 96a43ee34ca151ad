"""Tests for the SequenceIndex aggregate"""


class TestSequenceDictionary:
    """Tests for sequence name to id mapping"""

    def test_ids_in_first_appearance_order(self):
        """Test ids are assigned in order and reused for known names"""
        from tabixindex.config import BED
        from tabixindex.index import SequenceIndex

        index = SequenceIndex(BED)
        assert index.get_or_create_sequence_id("chr2") == 0
        assert index.get_or_create_sequence_id("chr1") == 1
        assert index.get_or_create_sequence_id("chr2") == 0

        assert index.sequence_names == ["chr2", "chr1"]
        assert index.sequence_name(1) == "chr1"
        assert len(index) == 2
        assert "chr1" in index
        assert "chrX" not in index

    def test_new_sequence_gets_empty_indices(self):
        """Test a new sequence appends an empty bin and linear index"""
        from tabixindex.config import BED
        from tabixindex.index import SequenceIndex

        index = SequenceIndex(BED)
        index.get_or_create_sequence_id("chr1")

        assert len(index.bin_indices) == 1
        assert len(index.bin_indices[0]) == 0
        assert len(index.linear_indices[0]) == 0

    def test_lookup_does_not_create(self):
        """Test sequence_id returns None for unknown names"""
        from tabixindex.config import BED
        from tabixindex.index import SequenceIndex

        index = SequenceIndex(BED)
        assert index.sequence_id("chr1") is None
        assert len(index) == 0


class TestRecordToInterval:
    """Tests for SequenceIndex.record_to_interval"""

    def test_creates_sequence(self):
        """Test building-time interpretation assigns sequence ids"""
        from tabixindex.binning import Interval
        from tabixindex.config import BED
        from tabixindex.index import SequenceIndex

        index = SequenceIndex(BED)
        interval = index.record_to_interval(["chr7", "10", "20"])

        assert interval == Interval(0, 10, 20)
        assert index.sequence_names == ["chr7"]

    def test_query_time_unknown_sequence(self):
        """Test query-time interpretation leaves the index unchanged"""
        from tabixindex.config import BED
        from tabixindex.index import SequenceIndex

        index = SequenceIndex(BED)
        assert index.record_to_interval(["chr7", "10", "20"], create=False) is None
        assert len(index) == 0

    def test_repr(self):
        """Test repr summarises sequences and bins"""
        from tabixindex.config import BED
        from tabixindex.index import SequenceIndex

        index = SequenceIndex(BED)
        index.get_or_create_sequence_id("chr1")
        assert repr(index) == "<SequenceIndex: 1 sequences, 0 bins>"
