"""
tabixindex - Tabix (.tbi) indexing for sorted, block-compressed genomic files

Build an index for a BGZF-compressed, tab-delimited file sorted by sequence
and start position, save it in the standard .tbi format, and fetch the
records overlapping any region without scanning the whole file.

Example:
    >>> from tabixindex import BED, compress_and_index, save_index, TabixReader
    >>> index = compress_and_index(open("genes.bed"), "genes.bed.gz", BED)
    >>> save_index(index, "genes.bed.gz.tbi")
    >>> with TabixReader("genes.bed.gz") as reader:
    ...     records = list(reader.query("chr1:1,000-2,000"))
"""

__version__ = "0.1.0"

from .bin_index import BinIndex, ReferenceStats
from .binning import Interval, bins_overlapping, interval_to_bin
from .builder import (
    BuilderState,
    IndexBuilder,
    compress_and_index,
    index_bgzf_file,
    index_records,
)
from .chunk import (
    Chunk,
    compare_offsets,
    make_virtual_offset,
    split_virtual_offset,
)
from .config import BED, GFF, PSLTBL, SAM, VCF, TabixConfig, get_preset
from .constants import Preset
from .errors import (
    CorruptIndex,
    MalformedOffset,
    MalformedRecord,
    OutOfOrder,
    TabixError,
)
from .index import SequenceIndex
from .io import (
    BgzfStream,
    default_index_path,
    deserialize_index,
    load_index,
    save_index,
    serialize_index,
)
from .linear_index import LinearIndex
from .query import QueryCursor, QueryEngine, TabixReader, merge_chunks
from .utils.region import parse_region, region_to_interval

__all__ = [
    # Version
    "__version__",
    # Binning and offsets
    "interval_to_bin",
    "bins_overlapping",
    "Interval",
    "Chunk",
    "compare_offsets",
    "make_virtual_offset",
    "split_virtual_offset",
    # Index structures
    "BinIndex",
    "ReferenceStats",
    "LinearIndex",
    "SequenceIndex",
    # Configuration
    "TabixConfig",
    "Preset",
    "GFF",
    "BED",
    "PSLTBL",
    "SAM",
    "VCF",
    "get_preset",
    # Building
    "BuilderState",
    "IndexBuilder",
    "index_records",
    "index_bgzf_file",
    "compress_and_index",
    # Index files
    "serialize_index",
    "deserialize_index",
    "save_index",
    "load_index",
    "default_index_path",
    "BgzfStream",
    # Querying
    "QueryEngine",
    "QueryCursor",
    "TabixReader",
    "merge_chunks",
    "parse_region",
    "region_to_interval",
    # Errors
    "TabixError",
    "MalformedRecord",
    "MalformedOffset",
    "OutOfOrder",
    "CorruptIndex",
]
