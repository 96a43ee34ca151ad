"""
I/O layer: BGZF stream access and the .tbi binary format
"""

from .codec import deserialize_index, serialize_index
from .files import default_index_path, load_index, save_index
from .stream import BgzfStream, VirtualOffsetStream

__all__ = [
    "BgzfStream",
    "VirtualOffsetStream",
    "default_index_path",
    "deserialize_index",
    "load_index",
    "save_index",
    "serialize_index",
]
