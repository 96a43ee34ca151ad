"""Per-sequence binning index: bin number -> ordered list of chunks"""

from collections.abc import Iterator
from dataclasses import dataclass

from .chunk import Chunk, same_block, same_or_adjacent_blocks


@dataclass(frozen=True)
class ReferenceStats:
    """
    Contents of the htslib pseudo-bin (bin 37450)

    htslib stores per-sequence bookkeeping in a fake bin holding two chunks:
    the virtual offset span of the sequence's records, then the mapped and
    unmapped record counts. It is preserved across load/save but never used
    for queries.
    """

    off_begin: int
    off_end: int
    n_mapped: int
    n_unmapped: int


class BinIndex:
    """
    Maps bin numbers to the chunks holding records filed under each bin

    Bin ids are sparse within the 37,450-wide space, so a dict is used; its
    insertion order is the order in which bins were first seen.

    Attributes:
        stats: htslib pseudo-bin contents, when loaded from such an index

    Examples:
        >>> idx = BinIndex()
        >>> idx.insert(4681, Chunk(0, 100))
        >>> idx.insert(4681, Chunk(100, 180))  # same block: coalesced
        >>> idx[4681]
        [<Chunk 0:0-0:180>]
    """

    def __init__(self):
        self._bins: dict[int, list[Chunk]] = {}
        self.stats: ReferenceStats | None = None

    def insert(self, bin_number: int, chunk: Chunk) -> None:
        """
        Add a record's chunk to a bin, coalescing with the bin's last chunk

        When the new chunk starts in the same (or the next) compressed block
        as the last chunk of the bin ends, the two are replaced by a single
        chunk spanning both.

        Args:
            bin_number: Bin the record is filed under
            chunk: Virtual offset span of the record
        """
        chunks = self._bins.setdefault(bin_number, [])
        if chunks and same_or_adjacent_blocks(chunks[-1].end, chunk.begin):
            chunks[-1] = Chunk(chunks[-1].begin, max(chunks[-1].end, chunk.end))
        else:
            chunks.append(chunk)

    def set_chunks(self, bin_number: int, chunks: list[Chunk]) -> None:
        """Install a complete chunk list for a bin (used when loading)"""
        self._bins[bin_number] = chunks

    def finalize(self) -> None:
        """
        Merge each bin's chunks into a minimal, ascending, disjoint list

        Consecutive chunks are merged when they overlap or when the first
        ends in the same compressed block the second begins in. Running this
        more than once has no further effect.
        """
        for bin_number, chunks in self._bins.items():
            if len(chunks) < 2:
                continue
            chunks.sort()
            merged = [chunks[0]]
            for chunk in chunks[1:]:
                last = merged[-1]
                if chunk.begin <= last.end or same_block(last.end, chunk.begin):
                    merged[-1] = Chunk(last.begin, max(last.end, chunk.end))
                else:
                    merged.append(chunk)
            self._bins[bin_number] = merged

    def get(self, bin_number: int) -> list[Chunk] | None:
        return self._bins.get(bin_number)

    def __getitem__(self, bin_number: int) -> list[Chunk]:
        return self._bins[bin_number]

    def __contains__(self, bin_number: int) -> bool:
        return bin_number in self._bins

    def __iter__(self) -> Iterator[int]:
        return iter(self._bins)

    def __len__(self) -> int:
        return len(self._bins)

    def bins(self) -> list[int]:
        """Bin numbers present in this index, in insertion order"""
        return list(self._bins)

    def items(self):
        return self._bins.items()

    def n_chunks(self) -> int:
        """Total number of chunks across all bins"""
        return sum(len(chunks) for chunks in self._bins.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinIndex):
            return NotImplemented
        return self._bins == other._bins and self.stats == other.stats

    def __repr__(self) -> str:
        return f"<BinIndex: {len(self._bins):,} bins, {self.n_chunks():,} chunks>"
