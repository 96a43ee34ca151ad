"""Block-compressed stream access addressed by virtual offsets"""

from pathlib import Path
from typing import Protocol

from pysam.libcbgzf import BGZFile

from ..logging_config import get_logger

logger = get_logger(__name__)


class VirtualOffsetStream(Protocol):
    """
    What the index builder and query engine need from a compressed stream

    Implementations own a single position; callers must not interleave
    reads and writes on one stream.
    """

    def current_virtual_offset(self) -> int: ...

    def seek(self, virtual_offset: int) -> None: ...

    def read_line(self) -> str | None: ...

    def write(self, text: str) -> None: ...

    def close(self) -> None: ...


class BgzfStream:
    """
    BGZF file opened through pysam/htslib, positioned by virtual offsets

    Args:
        path: BGZF file to open
        mode: "r" to read, "w" to write (a new file is created)
        encoding: Text encoding of records

    Examples:
        >>> with BgzfStream("records.bed.gz", "w") as out:
        ...     out.write("chr1\\t100\\t200\\n")
        >>> with BgzfStream("records.bed.gz") as stream:
        ...     stream.read_line()
        'chr1\\t100\\t200'
    """

    def __init__(self, path: str | Path, mode: str = "r", encoding: str = "utf-8"):
        if mode not in ("r", "w"):
            raise ValueError(f"mode must be 'r' or 'w', got {mode!r}")
        self.path = Path(path)
        self.mode = mode
        self.encoding = encoding
        self._file = BGZFile(str(self.path), mode + "b")
        self._at_eof = False
        logger.debug(f"Opened {self.path} for {'reading' if mode == 'r' else 'writing'}")

    def current_virtual_offset(self) -> int:
        return self._file.tell()

    def seek(self, virtual_offset: int) -> None:
        self._file.seek(virtual_offset)
        self._at_eof = False

    def read_line(self) -> str | None:
        """
        Read the next line without its terminator

        Bytes that are not valid in the stream's encoding are kept as
        surrogate escapes, so they are written back unchanged.

        Returns:
            The line, or None at end of file
        """
        if self._at_eof:
            return None
        before = self._file.tell()
        raw = self._file.readline()
        if not raw:
            # Empty lines and EOF both come back empty; only a line moves
            # the stream forward
            if self._file.tell() == before:
                self._at_eof = True
                return None
            return ""
        line = raw.decode(self.encoding, errors="surrogateescape")
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def read(self) -> bytes:
        """Read the remaining uncompressed bytes"""
        return self._file.read()

    def write(self, text: str | bytes) -> None:
        if isinstance(text, str):
            data = text.encode(self.encoding, errors="surrogateescape")
        else:
            data = text
        self._file.write(data)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "BgzfStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._file is None else self.mode
        return f"<BgzfStream: {self.path.name} ({state})>"
