"""Exception hierarchy for tabixindex

Stream failures are not wrapped: errors raised by pysam or the operating
system propagate as OSError. Queries for unknown sequences return an empty
result instead of raising.
"""


class TabixError(Exception):
    """Base class for all tabixindex errors"""


class MalformedRecord(TabixError, ValueError):
    """A record's coordinate or column data could not be interpreted

    Recoverable: builders and query cursors log the record and skip it.
    """

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class MalformedOffset(TabixError, ValueError):
    """A chunk whose begin offset is past its end, or outside the u64 range"""


class OutOfOrder(TabixError):
    """Records are not sorted by (sequence, begin); fatal to an index build"""

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        sequence: str | None = None,
        position: int | None = None,
    ):
        details = []
        if line_number is not None:
            details.append(f"line {line_number}")
        if sequence is not None:
            details.append(f"sequence '{sequence}'")
        if position is not None:
            details.append(f"pos {position + 1}")
        if details:
            message = f"{message} [{', '.join(details)}]. Is the file sorted?"
        super().__init__(message)
        self.line_number = line_number
        self.sequence = sequence
        self.position = position


class CorruptIndex(TabixError):
    """Binary index data is invalid or truncated"""
