"""UCSC-style hierarchical binning shared by the TBI and BAI index formats

Bins form a fixed six-level hierarchy over [0, 2^29): the root bin 0 covers
everything, and each deeper level splits its parent's window eight ways down
to 16 kb windows. An interval is filed under the smallest bin that fully
contains it, so a query only has to inspect the handful of bins on the paths
from its windows up to the root.
"""

from dataclasses import dataclass
from functools import cached_property

from .constants import BIN_LEVELS, MAX_COORDINATE


def interval_to_bin(begin: int, end: int) -> int:
    """
    Compute the smallest bin fully containing a half-open interval

    Args:
        begin: Start coordinate (0-based, inclusive)
        end: End coordinate (0-based, exclusive)

    Returns:
        Bin number in [0, 37448]

    Examples:
        >>> interval_to_bin(0, 1)
        4681
        >>> interval_to_bin(0, 1 << 29)
        0
    """
    end -= 1
    for shift, offset in BIN_LEVELS:
        if begin >> shift == end >> shift:
            return offset + (begin >> shift)
    return 0


def bins_overlapping(begin: int, end: int) -> list[int]:
    """
    List every bin that may hold records overlapping [begin, end)

    The root bin comes first, followed by the contiguous bin range of each
    level from the largest windows down to the smallest. A single point
    overlaps exactly six bins.

    Args:
        begin: Start coordinate (0-based, inclusive)
        end: End coordinate (0-based, exclusive); clamped to 2^29

    Returns:
        Ascending list of bin numbers, empty when begin >= end
    """
    if begin >= end:
        return []
    begin = max(begin, 0)
    if end > MAX_COORDINATE:
        end = MAX_COORDINATE
    end -= 1

    bins = [0]
    for shift, offset in reversed(BIN_LEVELS):
        bins.extend(range(offset + (begin >> shift), offset + (end >> shift) + 1))
    return bins


@dataclass(frozen=True)
class Interval:
    """
    A record's location: half-open, 0-based coordinates on one sequence

    Attributes:
        sequence_id: Numeric id of the sequence in its SequenceIndex
        begin: Start coordinate (inclusive)
        end: End coordinate (exclusive)
    """

    sequence_id: int
    begin: int
    end: int

    @cached_property
    def bin(self) -> int:
        """Bin number, computed on first access"""
        return interval_to_bin(self.begin, self.end)

    def overlaps(self, sequence_id: int, begin: int, end: int) -> bool:
        """Check overlap with [begin, end) on the given sequence"""
        return (
            self.sequence_id == sequence_id and self.begin < end and self.end > begin
        )
