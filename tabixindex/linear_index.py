"""Per-sequence linear index: lowest record offset per 16 kb window"""

from collections.abc import Iterable

import numpy as np

from .constants import LIDX_SHIFT

# Initial number of windows allocated for a new sequence
_INITIAL_CAPACITY = 64


class LinearIndex:
    """
    Lowest virtual offset of any record overlapping each 16 kb window

    Slot w covers coordinates [w * 2^14, (w + 1) * 2^14). While the index is
    being built a zero slot means "no record seen yet"; fill_gaps() replaces
    those with the nearest preceding offset, after which the index is frozen.

    A separate `assigned` mask tracks windows that received an offset, so a
    record stored at virtual offset 0 (the first record of a file without a
    header) is not mistaken for an unset window and overwritten by a later,
    larger offset.

    Attributes:
        frozen: True once fill_gaps() has run or the index was loaded

    Examples:
        >>> lidx = LinearIndex.from_offsets([0, 5, 0, 0, 9])
        >>> lidx.fill_gaps()
        >>> lidx.to_list()
        [0, 5, 5, 5, 9]
    """

    def __init__(self, capacity: int = _INITIAL_CAPACITY):
        self._offsets = np.zeros(max(capacity, 1), dtype=np.uint64)
        self._assigned = np.zeros(max(capacity, 1), dtype=bool)
        self._size = 0
        self.frozen = False

    @classmethod
    def from_offsets(cls, offsets: Iterable[int] | np.ndarray) -> "LinearIndex":
        """
        Create an unfrozen index from raw slot values (zero = unset)

        Args:
            offsets: Virtual offsets, one per window

        Returns:
            LinearIndex holding a copy of the values
        """
        if not isinstance(offsets, np.ndarray):
            offsets = list(offsets)
        values = np.asarray(offsets, dtype=np.uint64)
        lidx = cls(capacity=len(values))
        lidx._offsets[: len(values)] = values
        lidx._assigned[: len(values)] = values != 0
        lidx._size = len(values)
        return lidx

    @classmethod
    def frozen_from_array(cls, offsets: np.ndarray) -> "LinearIndex":
        """Wrap slot values read from disk; the array is used as-is, read-only"""
        lidx = cls.__new__(cls)
        lidx._offsets = offsets
        lidx._assigned = None
        lidx._size = len(offsets)
        lidx._freeze()
        return lidx

    def _ensure_size(self, size: int) -> None:
        if size <= len(self._offsets):
            return
        capacity = len(self._offsets)
        while capacity < size:
            capacity *= 2
        offsets = np.zeros(capacity, dtype=np.uint64)
        offsets[: self._size] = self._offsets[: self._size]
        assigned = np.zeros(capacity, dtype=bool)
        assigned[: self._size] = self._assigned[: self._size]
        self._offsets = offsets
        self._assigned = assigned

    def record_offset(self, begin: int, end: int, stream_offset: int) -> None:
        """
        Record that a record starting at `stream_offset` covers [begin, end)

        Every window from begin >> 14 to (end - 1) >> 14 keeps the smaller of
        its current offset and `stream_offset`.

        Args:
            begin: Record start (0-based, inclusive)
            end: Record end (0-based, exclusive)
            stream_offset: Virtual offset where the record starts

        Raises:
            ValueError: If the index is frozen
        """
        if self.frozen:
            raise ValueError("Linear index is frozen and cannot be modified")
        first = max(begin, 0) >> LIDX_SHIFT
        last = max(end - 1, begin, 0) >> LIDX_SHIFT
        self._ensure_size(last + 1)
        self._size = max(self._size, last + 1)

        window = slice(first, last + 1)
        offset = np.uint64(stream_offset)
        replace = ~self._assigned[window] | (self._offsets[window] > offset)
        self._offsets[window][replace] = offset
        self._assigned[window] = True

    def fill_gaps(self) -> None:
        """
        Forward-fill unset windows from the nearest preceding window, then freeze

        A window with no record starting in it may still be overlapped by an
        earlier record, so the preceding offset is a safe lower bound. Leading
        unset windows stay 0 (start of file).
        """
        if self.frozen:
            return
        size = self._size
        positions = np.where(self._assigned[:size], np.arange(size), 0)
        np.maximum.accumulate(positions, out=positions)
        self._offsets = self._offsets[:size][positions]
        self._assigned = None
        self._freeze()

    def _freeze(self) -> None:
        self._offsets = self._offsets[: self._size]
        self._offsets.flags.writeable = False
        self.frozen = True

    def minimum_offset(self, query_begin: int) -> int:
        """
        Lowest virtual offset that can hold a record overlapping `query_begin`

        Args:
            query_begin: Query start (0-based)

        Returns:
            Offset from the query's window, the last window when the query
            starts beyond the indexed range, or 0 for an empty index
        """
        if self._size == 0:
            return 0
        window = max(query_begin, 0) >> LIDX_SHIFT
        if window >= self._size:
            window = self._size - 1
        return int(self._offsets[window])

    def to_array(self) -> np.ndarray:
        """Slot values as a uint64 array (a read-only view once frozen)"""
        return self._offsets[: self._size]

    def to_list(self) -> list[int]:
        return [int(value) for value in self._offsets[: self._size]]

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, window: int) -> int:
        if not -self._size <= window < self._size:
            raise IndexError(f"Linear index window out of range: {window}")
        return int(self._offsets[: self._size][window])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinearIndex):
            return NotImplemented
        return np.array_equal(self.to_array(), other.to_array())

    def __repr__(self) -> str:
        state = " (frozen)" if self.frozen else ""
        return f"<LinearIndex: {self._size:,} windows{state}>"
