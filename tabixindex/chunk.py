"""Virtual offsets and chunks of a block-compressed (BGZF) stream

A virtual offset packs the file position of a compressed block (upper 48 bits)
together with a byte offset inside that block's uncompressed data (lower 16
bits). Python integers are unbounded, so offsets are compared as plain
non-negative ints; values arriving from signed sources (e.g. a struct '<q'
field) are normalised with to_unsigned() first.
"""

from dataclasses import dataclass

from .constants import BLOCK_SHIFT, UINT64_MASK, WITHIN_BLOCK_MASK
from .errors import MalformedOffset


def to_unsigned(value: int) -> int:
    """Reinterpret a signed 64-bit value as unsigned (two's complement)"""
    return value & UINT64_MASK


def compare_offsets(u: int, v: int) -> int:
    """
    Compare two 64-bit offsets as unsigned values

    Args:
        u: First offset (signed or unsigned representation)
        v: Second offset (signed or unsigned representation)

    Returns:
        -1, 0 or 1 as u is less than, equal to, or greater than v

    Examples:
        >>> compare_offsets(-1, 1)  # 0xFFFF_FFFF_FFFF_FFFF > 1
        1
    """
    u = to_unsigned(u)
    v = to_unsigned(v)
    return (u > v) - (u < v)


def make_virtual_offset(block_address: int, within_block: int) -> int:
    """
    Build a virtual offset from a compressed block address and in-block offset

    Raises:
        ValueError: If either component is out of range
    """
    if not 0 <= within_block <= WITHIN_BLOCK_MASK:
        raise ValueError(f"Within-block offset out of range: {within_block}")
    if not 0 <= block_address < (1 << (64 - BLOCK_SHIFT)):
        raise ValueError(f"Block address out of range: {block_address}")
    return (block_address << BLOCK_SHIFT) | within_block


def split_virtual_offset(virtual_offset: int) -> tuple[int, int]:
    """Split a virtual offset into (block_address, within_block)"""
    virtual_offset = to_unsigned(virtual_offset)
    return virtual_offset >> BLOCK_SHIFT, virtual_offset & WITHIN_BLOCK_MASK


def block_address(virtual_offset: int) -> int:
    """File position of the compressed block a virtual offset points into"""
    return to_unsigned(virtual_offset) >> BLOCK_SHIFT


def same_block(first: int, second: int) -> bool:
    """True when both virtual offsets point into the same compressed block"""
    return block_address(first) == block_address(second)


def same_or_adjacent_blocks(first: int, second: int) -> bool:
    """
    Coalescing test used while chunks are inserted during an index build

    True when `second` lies in the same block as `first` or in the block
    address immediately after it.
    """
    delta = block_address(second) - block_address(first)
    return delta == 0 or delta == 1


@dataclass(frozen=True, order=True)
class Chunk:
    """
    A span [begin, end) of virtual offsets in the indexed stream

    Chunks order by (begin, end), matching the unsigned comparison of the
    on-disk format.

    Attributes:
        begin: Virtual offset of the first byte of the span
        end: Virtual offset just past the span

    Raises:
        MalformedOffset: If begin > end or an offset exceeds 64 bits
    """

    begin: int
    end: int

    def __post_init__(self):
        for value in (self.begin, self.end):
            if not 0 <= value <= UINT64_MASK:
                raise MalformedOffset(f"Virtual offset outside u64 range: {value}")
        if self.begin > self.end:
            raise MalformedOffset(
                f"Chunk begins after it ends: {self.begin:#x} > {self.end:#x}"
            )

    def __repr__(self) -> str:
        b_block, b_within = split_virtual_offset(self.begin)
        e_block, e_within = split_virtual_offset(self.end)
        return f"<Chunk {b_block}:{b_within}-{e_block}:{e_within}>"
