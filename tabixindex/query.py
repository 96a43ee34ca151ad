"""
Region queries against an indexed, block-compressed file

A query runs in two phases. QueryEngine.candidate_chunks() uses the bin and
linear indices to pick the chunks of the file that can hold overlapping
records and cleans them up into a short, ordered, non-overlapping list.
QueryCursor then seeks to each chunk and scans it, yielding records that
overlap the query interval.
"""

from collections.abc import Iterator
from pathlib import Path

from .binning import bins_overlapping
from .chunk import Chunk, same_block
from .constants import MAX_REGION_END
from .errors import MalformedRecord
from .index import SequenceIndex
from .io.files import default_index_path, load_index
from .io.stream import BgzfStream, VirtualOffsetStream
from .logging_config import get_logger
from .utils.region import region_to_interval

logger = get_logger(__name__)


def merge_chunks(chunks: list[Chunk]) -> list[Chunk]:
    """
    Reduce candidate chunks to an ascending list that needs few seeks

    After sorting by begin offset:

    1. chunks ending no later than an earlier chunk are dropped (they are
       contained in it)
    2. a chunk overlapping the next one is clipped to end where it begins
    3. consecutive chunks where one ends in the block the next begins in
       are joined

    Args:
        chunks: Candidate chunks in any order

    Returns:
        New list of chunks, sorted and disjoint

    Examples:
        >>> merge_chunks([Chunk(10, 50), Chunk(0, 100)])
        [<Chunk 0:0-0:100>]
    """
    if not chunks:
        return []
    chunks = sorted(chunks)

    kept = [chunks[0]]
    for chunk in chunks[1:]:
        if chunk.end > kept[-1].end:
            kept.append(chunk)

    for i in range(len(kept) - 1):
        if kept[i].end >= kept[i + 1].begin:
            kept[i] = Chunk(kept[i].begin, kept[i + 1].begin)

    merged = [kept[0]]
    for chunk in kept[1:]:
        if same_block(merged[-1].end, chunk.begin):
            merged[-1] = Chunk(merged[-1].begin, chunk.end)
        else:
            merged.append(chunk)
    return merged


class QueryCursor:
    """
    Single-pass iterator over records overlapping one query interval

    Yields each matching record as its list of tab-separated columns. The
    cursor owns the stream position while it is being consumed; start a new
    query rather than re-iterating.

    Attributes:
        chunks: Chunks that will be scanned, in file order
        n_seeks: Number of seeks performed so far
    """

    def __init__(
        self,
        index: SequenceIndex,
        stream: VirtualOffsetStream,
        sequence_id: int | None,
        begin: int,
        end: int,
        chunks: list[Chunk],
    ):
        self._index = index
        self._stream = stream
        self.sequence_id = sequence_id
        self.begin = begin
        self.end = end
        self.chunks = chunks
        self.n_seeks = 0
        self._records = self._scan()

    def __iter__(self) -> "QueryCursor":
        return self

    def __next__(self) -> list[str]:
        return next(self._records)

    def _scan(self) -> Iterator[list[str]]:
        config = self._index.config
        position = None
        for chunk in self.chunks:
            if position != chunk.begin:
                self._stream.seek(chunk.begin)
                self.n_seeks += 1
                logger.debug(f"Seek {self.n_seeks} to {chunk!r}")
            position = chunk.begin

            while position < chunk.end:
                line = self._stream.read_line()
                if line is None:
                    return
                position = self._stream.current_virtual_offset()
                if not line or line.startswith(config.comment_char):
                    continue

                columns = line.split("\t")
                try:
                    interval = self._index.record_to_interval(columns, create=False)
                except MalformedRecord as e:
                    logger.warning(f"Skipping unparseable record during query: {e}")
                    continue

                if (
                    interval is None
                    or interval.sequence_id != self.sequence_id
                    or interval.begin >= self.end
                ):
                    # Sorted input: nothing further in this chunk can match
                    break
                if interval.end > self.begin:
                    yield columns

    def __repr__(self) -> str:
        return (
            f"<QueryCursor: sequence {self.sequence_id}, [{self.begin}, {self.end}), "
            f"{len(self.chunks)} chunks, {self.n_seeks} seeks>"
        )


class QueryEngine:
    """
    Finds records overlapping a region using a loaded index

    Args:
        index: Index of the data file
        stream: Open stream over the compressed data file

    Examples:
        >>> engine = QueryEngine(index, stream)
        >>> for columns in engine.query("chr1", 99, 200):
        ...     print(columns)
    """

    def __init__(self, index: SequenceIndex, stream: VirtualOffsetStream):
        self.index = index
        self.stream = stream

    def candidate_chunks(self, sequence_id: int, begin: int, end: int) -> list[Chunk]:
        """
        Chunks that may hold records overlapping [begin, end) on a sequence

        Args:
            sequence_id: Id of the queried sequence
            begin: Query start (0-based, inclusive)
            end: Query end (0-based, exclusive)

        Returns:
            Ascending, disjoint chunk list; empty for an empty range or an
            unknown sequence id
        """
        if not 0 <= sequence_id < len(self.index):
            return []
        bins = bins_overlapping(begin, end)
        if not bins:
            return []

        bin_index = self.index.bin_indices[sequence_id]
        min_offset = self.index.linear_indices[sequence_id].minimum_offset(begin)
        candidates = [
            chunk
            for bin_number in bins
            for chunk in bin_index.get(bin_number) or ()
            if chunk.end > min_offset
        ]
        chunks = merge_chunks(candidates)
        logger.debug(
            f"{len(bins)} bins, {len(candidates)} candidate chunks, "
            f"{len(chunks)} after merging (min offset {min_offset:#x})"
        )
        return chunks

    def query(
        self, sequence: str | int, begin: int = 0, end: int = MAX_REGION_END
    ) -> QueryCursor:
        """
        Start a query for records overlapping [begin, end) on a sequence

        Args:
            sequence: Sequence name or id
            begin: Query start (0-based, inclusive)
            end: Query end (0-based, exclusive)

        Returns:
            QueryCursor yielding the column lists of matching records; empty
            when the sequence is not in the index

        Raises:
            ValueError: If begin is negative
        """
        if begin < 0:
            raise ValueError(f"Query start must be >= 0, got {begin}")

        if isinstance(sequence, str):
            sequence_id = self.index.sequence_id(sequence)
        elif 0 <= sequence < len(self.index):
            sequence_id = sequence
        else:
            sequence_id = None

        if sequence_id is None:
            logger.debug(f"Sequence {sequence!r} is not in the index")
            return QueryCursor(self.index, self.stream, None, begin, end, [])

        chunks = self.candidate_chunks(sequence_id, begin, end)
        return QueryCursor(self.index, self.stream, sequence_id, begin, end, chunks)


class TabixReader:
    """
    An indexed BGZF file opened for region queries

    Bundles the compressed data stream with its loaded index. Only one query
    cursor should be consumed at a time; open another reader for concurrent
    cursors over the same file.

    Args:
        path: BGZF-compressed data file
        index_path: Index file (default: path + ".tbi")

    Examples:
        >>> with TabixReader("genes.bed.gz") as reader:
        ...     for columns in reader.query("chr1:1,000-2,000"):
        ...         print(columns[3])
    """

    def __init__(self, path: str | Path, index_path: str | Path | None = None):
        self.path = Path(path)
        self.index_path = (
            Path(index_path) if index_path else default_index_path(self.path)
        )
        self.index = load_index(self.index_path)
        self._stream = BgzfStream(self.path)
        self._engine = QueryEngine(self.index, self._stream)

    @property
    def sequence_names(self) -> list[str]:
        return self.index.sequence_names

    def query(
        self, region: str | int, begin: int | None = None, end: int | None = None
    ) -> QueryCursor:
        """
        Query by region string or by sequence and 0-based coordinates

        Args:
            region: "chr1:1,000-2,000" style region (1-based, inclusive) when
                begin and end are omitted, otherwise a sequence name or id
            begin: Query start (0-based, inclusive)
            end: Query end (0-based, exclusive)

        Returns:
            QueryCursor over matching records

        Raises:
            ValueError: If the region string is invalid
        """
        if isinstance(region, str) and begin is None and end is None:
            sequence, begin, end = region_to_interval(region, self.index)
        else:
            sequence = region
            begin = 0 if begin is None else begin
            end = MAX_REGION_END if end is None else end
        return self._engine.query(sequence, begin, end)

    def read_headers(self) -> list[str]:
        """Leading header/comment lines of the data file"""
        config = self.index.config
        headers = []
        self._stream.seek(0)
        line_number = 0
        while (line := self._stream.read_line()) is not None:
            line_number += 1
            if not config.is_header(line, line_number):
                break
            headers.append(line)
        return headers

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "TabixReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<TabixReader: {self.path.name}, {len(self.index):,} sequences>"
