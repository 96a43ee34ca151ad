"""
Single-pass index construction from sorted records

IndexBuilder consumes records in (sequence, begin) order together with the
virtual offsets they occupy in the compressed file, and accumulates the bin
and linear index of one sequence at a time. The driver functions at the end
of the module connect a builder to the different record sources: an
arbitrary iterator of offset-annotated records, an existing BGZF file, or
plain text being compressed on the fly.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

from .bin_index import BinIndex
from .chunk import Chunk
from .config import TabixConfig
from .errors import MalformedRecord, OutOfOrder
from .index import SequenceIndex
from .io.stream import BgzfStream
from .linear_index import LinearIndex
from .logging_config import get_logger

logger = get_logger(__name__)


class BuilderState(Enum):
    """Lifecycle of an IndexBuilder"""

    IDLE = "idle"  # no record seen yet
    ACCUMULATING = "accumulating"  # collecting records of one sequence
    FINALIZING = "finalizing"  # installing a completed sequence
    FINISHED = "finished"  # finish() called; the index is complete


class IndexBuilder:
    """
    Accumulates a SequenceIndex from records sorted by (sequence, begin)

    Records of one sequence are collected into a working BinIndex and
    LinearIndex. When a record on a new sequence arrives (or finish() is
    called) those are finalized and installed into the SequenceIndex.

    Records that cannot be interpreted are logged and left out of the
    index. Sort order violations abort the build with OutOfOrder.

    Args:
        config: How records map onto intervals

    Examples:
        >>> from tabixindex.config import BED
        >>> builder = IndexBuilder(BED)
        >>> builder.add_record("chr1\\t100\\t200", 0, 14)
        True
        >>> builder.finish()
        <SequenceIndex: 1 sequences, 1 bins>
    """

    def __init__(self, config: TabixConfig):
        self.index = SequenceIndex(config)
        self.state = BuilderState.IDLE
        self.n_indexed = 0
        self.n_skipped = 0
        self._current_id = -1
        self._previous_begin = -1
        self._bin_index = BinIndex()
        self._linear_index = LinearIndex()

    @property
    def config(self) -> TabixConfig:
        return self.index.config

    def add_record(
        self,
        record: str | Sequence[str],
        begin_offset: int,
        end_offset: int,
        line_number: int | None = None,
    ) -> bool:
        """
        Index one data record

        Args:
            record: Record text (tab-delimited, without line terminator) or
                its columns
            begin_offset: Virtual offset of the record's first byte
            end_offset: Virtual offset just past the record
            line_number: 1-based line number, used in diagnostics

        Returns:
            True if the record was indexed, False if it was skipped as malformed

        Raises:
            OutOfOrder: If the record sorts before the previous one
            MalformedOffset: If begin_offset > end_offset
            RuntimeError: If called after finish()
        """
        if self.state == BuilderState.FINISHED:
            raise RuntimeError("Cannot add records after finish() was called")

        columns = record.split("\t") if isinstance(record, str) else record
        chunk = Chunk(begin_offset, end_offset)

        try:
            interval = self.index.record_to_interval(columns)
        except MalformedRecord as e:
            self.n_skipped += 1
            where = f" at line {line_number}" if line_number is not None else ""
            logger.warning(f"Skipping malformed record{where}: {e}")
            return False

        if interval.sequence_id != self._current_id:
            if interval.sequence_id < self._current_id:
                raise OutOfOrder(
                    "Sequence appears again after other sequences",
                    line_number=line_number,
                    sequence=self.index.sequence_name(interval.sequence_id),
                    position=interval.begin,
                )
            if self.state == BuilderState.ACCUMULATING:
                self._finish_sequence()
            self._current_id = interval.sequence_id
            self._previous_begin = -1
            self.state = BuilderState.ACCUMULATING
        elif interval.begin < self._previous_begin:
            raise OutOfOrder(
                "Record starts before the previous record",
                line_number=line_number,
                sequence=self.index.sequence_name(interval.sequence_id),
                position=interval.begin,
            )

        self._bin_index.insert(interval.bin, chunk)
        self._linear_index.record_offset(interval.begin, interval.end, chunk.begin)
        self._previous_begin = interval.begin
        self.n_indexed += 1
        return True

    def _finish_sequence(self) -> None:
        """Finalize the working indices and install them for the current sequence"""
        self.state = BuilderState.FINALIZING
        self._bin_index.finalize()
        self._linear_index.fill_gaps()
        self.index.install(self._current_id, self._bin_index, self._linear_index)
        logger.debug(
            f"Finished sequence '{self.index.sequence_name(self._current_id)}': "
            f"{len(self._bin_index):,} bins, "
            f"{len(self._linear_index):,} linear index windows"
        )
        self._bin_index = BinIndex()
        self._linear_index = LinearIndex()

    def finish(self) -> SequenceIndex:
        """
        Finalize the last sequence and return the completed index

        Calling finish() again returns the same index.
        """
        if self.state == BuilderState.FINISHED:
            return self.index
        if self.state == BuilderState.ACCUMULATING:
            self._finish_sequence()
        self.state = BuilderState.FINISHED
        logger.info(
            f"Indexed {self.n_indexed:,} records on {len(self.index):,} sequences"
            + (f" ({self.n_skipped:,} malformed records skipped)" if self.n_skipped else "")
        )
        return self.index

    def __repr__(self) -> str:
        return (
            f"<IndexBuilder: {self.state.value}, {self.n_indexed:,} records, "
            f"{len(self.index):,} sequences>"
        )


def _is_header(config: TabixConfig, record: str | Sequence[str], line_number: int) -> bool:
    text = record if isinstance(record, str) else (record[0] if record else "")
    return config.is_header(text, line_number)


def _is_blank(record: str | Sequence[str]) -> bool:
    if isinstance(record, str):
        return not record.strip()
    return not any(record)


def index_records(
    records: Iterable[tuple[str | Sequence[str], int, int]], config: TabixConfig
) -> SequenceIndex:
    """
    Build an index from records annotated with their virtual offsets

    Header lines (per the configuration) and blank lines are not indexed.

    Args:
        records: (record text or columns, begin virtual offset, end virtual
            offset) triples in file order
        config: How records map onto intervals

    Returns:
        Completed SequenceIndex
    """
    builder = IndexBuilder(config)
    for line_number, (record, begin_offset, end_offset) in enumerate(records, start=1):
        if _is_header(config, record, line_number) or _is_blank(record):
            continue
        builder.add_record(record, begin_offset, end_offset, line_number)
    return builder.finish()


def index_bgzf_file(path: str | Path, config: TabixConfig) -> SequenceIndex:
    """
    Build an index for an existing BGZF-compressed file

    Args:
        path: Sorted, BGZF-compressed, tab-delimited file
        config: How records map onto intervals

    Returns:
        Completed SequenceIndex

    Raises:
        OutOfOrder: If the file is not sorted
        OSError: If the file cannot be read as BGZF
    """
    logger.info(f"Indexing {path}")
    builder = IndexBuilder(config)
    line_number = 0
    with BgzfStream(path) as stream:
        while True:
            begin_offset = stream.current_virtual_offset()
            line = stream.read_line()
            if line is None:
                break
            line_number += 1
            if config.is_header(line, line_number) or not line.strip():
                continue
            builder.add_record(
                line, begin_offset, stream.current_virtual_offset(), line_number
            )
    return builder.finish()


def compress_and_index(
    lines: Iterable[str], out_path: str | Path, config: TabixConfig
) -> SequenceIndex:
    """
    BGZF-compress plain text lines into `out_path` while indexing them

    Every line is written, but only data lines are indexed; header and
    blank lines are passed through untouched.

    Args:
        lines: Text lines, with or without trailing newlines
        out_path: Destination for the compressed data (e.g. "calls.vcf.gz")
        config: How records map onto intervals

    Returns:
        Completed SequenceIndex

    Raises:
        OutOfOrder: If the lines are not sorted; the output is then incomplete
    """
    logger.info(f"Compressing and indexing into {out_path}")
    builder = IndexBuilder(config)
    with BgzfStream(out_path, "w") as out:
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            if config.is_header(line, line_number) or not line.strip():
                out.write(line + "\n")
                continue
            begin_offset = out.current_virtual_offset()
            out.write(line + "\n")
            builder.add_record(
                line, begin_offset, out.current_virtual_offset(), line_number
            )
    return builder.finish()
