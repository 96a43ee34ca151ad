"""
Binary encoding of a SequenceIndex (the uncompressed .tbi byte stream)

Layout, little-endian throughout:

    magic            4 bytes  "TBI\\1"
    n_seq            i32
    preset, seq_col, begin_col, end_col, comment_char, lines_to_skip   6 x i32
    l_nm             i32      length of the NUL-terminated sequence names
    names            l_nm bytes, in sequence id order
    per sequence:
        n_bin        i32
        per bin:     bin i32, n_chunk i32, n_chunk x (begin u64, end u64)
        n_intv       i32
        offsets      n_intv x u64
    [n_no_coor       u64]     optional, written by htslib

The BGZF framing of the file itself is handled in tabixindex.io.files.
"""

import struct

import numpy as np

from ..bin_index import BinIndex, ReferenceStats
from ..chunk import Chunk
from ..config import TabixConfig
from ..constants import MAX_BIN, TBI_MAGIC
from ..errors import CorruptIndex, MalformedOffset
from ..index import SequenceIndex
from ..linear_index import LinearIndex
from ..logging_config import get_logger

logger = get_logger(__name__)

_INT = struct.Struct("<i")
_CHUNK = struct.Struct("<QQ")
_UINT64 = struct.Struct("<Q")
_HEADER = struct.Struct("<7i")  # n_seq + the six configuration fields


def serialize_index(index: SequenceIndex) -> bytes:
    """
    Encode an index into the uncompressed .tbi byte layout

    Bins are written in ascending bin order; an htslib pseudo-bin loaded
    with the index is written back after the regular bins.

    Args:
        index: Finalized SequenceIndex

    Returns:
        Encoded bytes (before BGZF compression)
    """
    config = index.config
    out = bytearray(TBI_MAGIC)
    out += _HEADER.pack(
        len(index),
        config.preset,
        config.seq_col,
        config.begin_col,
        config.end_col,
        ord(config.comment_char),
        config.lines_to_skip,
    )

    names = b"".join(name.encode("utf-8") + b"\0" for name in index.sequence_names)
    out += _INT.pack(len(names))
    out += names

    for bin_index, linear_index in zip(
        index.bin_indices, index.linear_indices, strict=True
    ):
        n_bin = len(bin_index) + (1 if bin_index.stats is not None else 0)
        out += _INT.pack(n_bin)
        for bin_number in sorted(bin_index):
            chunks = bin_index[bin_number]
            out += _INT.pack(bin_number)
            out += _INT.pack(len(chunks))
            for chunk in chunks:
                out += _CHUNK.pack(chunk.begin, chunk.end)
        if bin_index.stats is not None:
            stats = bin_index.stats
            out += _INT.pack(MAX_BIN)
            out += _INT.pack(2)
            out += _CHUNK.pack(stats.off_begin, stats.off_end)
            out += _CHUNK.pack(stats.n_mapped, stats.n_unmapped)

        offsets = linear_index.to_array()
        out += _INT.pack(len(offsets))
        out += offsets.astype("<u8").tobytes()

    if index.n_no_coor is not None:
        out += _UINT64.pack(index.n_no_coor)

    return bytes(out)


class _Cursor:
    """Bounds-checked sequential reader over the encoded bytes"""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def take(self, fmt: struct.Struct, what: str) -> tuple:
        if self.remaining < fmt.size:
            raise CorruptIndex(
                f"Index truncated while reading {what} at byte {self.pos}"
            )
        values = fmt.unpack_from(self.data, self.pos)
        self.pos += fmt.size
        return values

    def count(self, what: str, item_size: int) -> int:
        """Read an i32 element count and check the elements fit in the data"""
        (n,) = self.take(_INT, what)
        if n < 0:
            raise CorruptIndex(f"Negative {what}: {n}")
        if n * item_size > self.remaining:
            raise CorruptIndex(
                f"{what} of {n} exceeds the {self.remaining} bytes left in the index"
            )
        return n

    def raw(self, size: int, what: str) -> bytes:
        if self.remaining < size:
            raise CorruptIndex(f"Index truncated while reading {what}")
        chunk = self.data[self.pos : self.pos + size]
        self.pos += size
        return chunk


def deserialize_index(data: bytes) -> SequenceIndex:
    """
    Decode uncompressed .tbi bytes into a SequenceIndex

    Args:
        data: Encoded index bytes (after BGZF decompression)

    Returns:
        SequenceIndex with sequences in file order and frozen linear indices

    Raises:
        CorruptIndex: On a bad magic number, inconsistent counts or truncation
    """
    data = bytes(data)
    if data[:4] != TBI_MAGIC:
        raise CorruptIndex(f"Not a Tabix index (magic {bytes(data[:4])!r})")
    cursor = _Cursor(data)
    cursor.pos = len(TBI_MAGIC)

    n_seq, preset, seq_col, begin_col, end_col, meta, skip = cursor.take(
        _HEADER, "header"
    )
    if n_seq < 0:
        raise CorruptIndex(f"Negative sequence count: {n_seq}")
    try:
        config = TabixConfig(preset, seq_col, begin_col, end_col, chr(meta), skip)
    except ValueError as e:
        raise CorruptIndex(f"Invalid configuration block: {e}") from e
    index = SequenceIndex(config)

    l_nm = cursor.count("sequence name block", 1)
    names = cursor.raw(l_nm, "sequence names")
    if n_seq and not names.endswith(b"\0"):
        raise CorruptIndex("Sequence name block is not NUL-terminated")
    name_list = names.split(b"\0")[:-1] if names else []
    if len(name_list) != n_seq:
        raise CorruptIndex(
            f"Header declares {n_seq} sequences but names {len(name_list)}"
        )

    for raw_name in name_list:
        try:
            name = raw_name.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptIndex(f"Sequence name is not valid UTF-8: {raw_name!r}") from e
        if name in index:
            raise CorruptIndex(f"Sequence '{name}' is listed more than once")
        sequence_id = index.get_or_create_sequence_id(name)
        index.install(
            sequence_id, _read_bin_index(cursor), _read_linear_index(cursor)
        )

    if cursor.remaining >= _UINT64.size:
        (index.n_no_coor,) = cursor.take(_UINT64, "unplaced record count")
    if cursor.remaining:
        logger.warning(f"Ignoring {cursor.remaining} trailing bytes in index")

    logger.debug(f"Decoded index: {index!r}")
    return index


def _read_bin_index(cursor: _Cursor) -> BinIndex:
    bin_index = BinIndex()
    n_bin = cursor.count("bin count", 8)
    for _ in range(n_bin):
        (bin_number,) = cursor.take(_INT, "bin number")
        n_chunk = cursor.count(f"chunk count of bin {bin_number}", _CHUNK.size)
        pairs = [cursor.take(_CHUNK, "chunk") for _ in range(n_chunk)]
        if bin_number == MAX_BIN:
            if n_chunk != 2:
                raise CorruptIndex(f"Pseudo-bin holds {n_chunk} chunks, expected 2")
            (off_begin, off_end), (n_mapped, n_unmapped) = pairs
            bin_index.stats = ReferenceStats(off_begin, off_end, n_mapped, n_unmapped)
            continue
        if not 0 <= bin_number < MAX_BIN:
            raise CorruptIndex(f"Bin number out of range: {bin_number}")
        if bin_number in bin_index:
            raise CorruptIndex(f"Bin {bin_number} appears more than once")
        try:
            bin_index.set_chunks(bin_number, [Chunk(b, e) for b, e in pairs])
        except MalformedOffset as e:
            raise CorruptIndex(f"Invalid chunk in bin {bin_number}: {e}") from e
    return bin_index


def _read_linear_index(cursor: _Cursor) -> LinearIndex:
    n_intv = cursor.count("linear index length", 8)
    if n_intv == 0:
        return LinearIndex.frozen_from_array(np.zeros(0, dtype=np.uint64))
    offsets = np.frombuffer(cursor.data, dtype="<u8", count=n_intv, offset=cursor.pos)
    cursor.pos += n_intv * 8
    return LinearIndex.frozen_from_array(offsets.astype(np.uint64))
