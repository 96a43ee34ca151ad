"""Pytest configuration and shared fixtures."""

import pytest


class MemoryStream:
    """In-memory stand-in for a BGZF stream

    Uncompressed data is cut into fixed-size blocks. Block k is given the
    block address k * block_stride, so virtual offsets behave like those of a
    real compressed file: (address << 16) | offset within the block.
    """

    def __init__(self, block_size: int = 64, block_stride: int = 50):
        self.block_size = block_size
        self.block_stride = block_stride
        self.data = bytearray()
        self.pos = 0
        self.n_seeks = 0

    def to_virtual(self, pos: int) -> int:
        block, within = divmod(pos, self.block_size)
        return (block * self.block_stride) << 16 | within

    def from_virtual(self, virtual_offset: int) -> int:
        address, within = virtual_offset >> 16, virtual_offset & 0xFFFF
        return (address // self.block_stride) * self.block_size + within

    def current_virtual_offset(self) -> int:
        return self.to_virtual(self.pos)

    def seek(self, virtual_offset: int) -> None:
        self.n_seeks += 1
        self.pos = self.from_virtual(virtual_offset)

    def read_line(self) -> str | None:
        if self.pos >= len(self.data):
            return None
        newline = self.data.find(b"\n", self.pos)
        if newline < 0:
            line = self.data[self.pos :]
            self.pos = len(self.data)
        else:
            line = self.data[self.pos : newline]
            self.pos = newline + 1
        return line.decode("utf-8")

    def write(self, text: str) -> None:
        self.data += text.encode("utf-8")
        self.pos = len(self.data)

    def close(self) -> None:
        pass


def write_lines(stream: MemoryStream, lines: list[str]) -> list[tuple[str, int, int]]:
    """Append lines to a stream, returning (line, begin, end) virtual offsets"""
    records = []
    for line in lines:
        begin = stream.current_virtual_offset()
        stream.write(line + "\n")
        records.append((line, begin, stream.current_virtual_offset()))
    return records


@pytest.fixture
def memory_stream():
    """Return an empty in-memory virtual-offset stream."""
    return MemoryStream()


@pytest.fixture
def build_indexed():
    """Return a helper that writes lines to a MemoryStream and indexes them.

    The helper returns (index, stream); the stream is ready for queries.
    """
    from tabixindex.builder import index_records

    def _build(lines, config, block_size=64, block_stride=50):
        stream = MemoryStream(block_size=block_size, block_stride=block_stride)
        records = write_lines(stream, lines)
        return index_records(records, config), stream

    return _build


@pytest.fixture
def example_bed_lines():
    """Three sorted BED records on two sequences."""
    return [
        "chr1\t100\t200\tfirst",
        "chr1\t500\t600\tsecond",
        "chr2\t50\t150\tthird",
    ]


@pytest.fixture
def bed_file(tmp_path, example_bed_lines):
    """Write a small plain-text BED file with a header line."""
    path = tmp_path / "features.bed"
    path.write_text("#chrom\tstart\tend\tname\n" + "\n".join(example_bed_lines) + "\n")
    return path


@pytest.fixture(autouse=True)
def reset_log_level():
    """Restore the package log level after tests that change it."""
    from tabixindex.logging_config import get_logger

    logger = get_logger("tabixindex")
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture
def record_writer():
    """Return write_lines for tests that need raw (line, begin, end) records."""
    return write_lines
