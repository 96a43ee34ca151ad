"""Reading and writing .tbi index files"""

from pathlib import Path

from ..constants import INDEX_SUFFIX
from ..index import SequenceIndex
from ..logging_config import get_logger
from .codec import deserialize_index, serialize_index
from .stream import BgzfStream

logger = get_logger(__name__)

# First two bytes of every gzip member (BGZF blocks included)
GZIP_MAGIC = b"\x1f\x8b"


def default_index_path(data_path: str | Path) -> Path:
    """
    Conventional index location for a data file: the data path plus ".tbi"

    Examples:
        >>> default_index_path("calls.vcf.gz")
        PosixPath('calls.vcf.gz.tbi')
    """
    data_path = Path(data_path)
    return data_path.with_name(data_path.name + INDEX_SUFFIX)


def save_index(index: SequenceIndex, path: str | Path) -> Path:
    """
    Write an index to disk, BGZF-compressed like the data file it describes

    Args:
        index: Finalized SequenceIndex
        path: Destination .tbi path

    Returns:
        Path the index was written to
    """
    path = Path(path)
    data = serialize_index(index)
    with BgzfStream(path, "w") as out:
        out.write(data)
    logger.info(f"Wrote index for {len(index):,} sequences to {path}")
    return path


def load_index(path: str | Path) -> SequenceIndex:
    """
    Read an index from disk

    Both BGZF-compressed indices (as written by tabix/htslib and
    save_index) and raw uncompressed index bytes are accepted.

    Args:
        path: .tbi path

    Returns:
        SequenceIndex ready for querying

    Raises:
        FileNotFoundError: If the index file does not exist
        CorruptIndex: If the contents are not a valid index
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Index file not found: {path}")

    with open(path, "rb") as f:
        magic = f.read(len(GZIP_MAGIC))

    if magic == GZIP_MAGIC:
        with BgzfStream(path) as stream:
            data = stream.read()
    else:
        data = path.read_bytes()

    index = deserialize_index(data)
    logger.debug(f"Loaded {index!r} from {path}")
    return index
