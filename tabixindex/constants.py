"""Constants and configuration for the Tabix index format"""

from enum import IntEnum

# ==============================================================================
# File Format
# ==============================================================================

TBI_MAGIC = b"TBI\x01"
INDEX_SUFFIX = ".tbi"  # Default index path is <data file> + suffix

# ==============================================================================
# Binning Scheme
# ==============================================================================

MAX_BIN = 37450  # Bound on bin ids; also the id of the htslib pseudo-bin
MAX_COORDINATE = 1 << 29  # Coordinate ceiling of the TBI binning scheme

# (shift, first bin id) per level, smallest windows first
BIN_LEVELS = (
    (14, 4681),  # 16 kb windows
    (17, 585),  # 128 kb windows
    (20, 73),  # 1 Mb windows
    (23, 9),  # 8 Mb windows
    (26, 1),  # 64 Mb windows
)

# ==============================================================================
# Linear Index
# ==============================================================================

LIDX_SHIFT = 14  # 16,384-base linear index windows

# ==============================================================================
# Virtual Offsets
# ==============================================================================

BLOCK_SHIFT = 16  # virtual offset = block_address << 16 | within-block offset
WITHIN_BLOCK_MASK = (1 << BLOCK_SHIFT) - 1
UINT64_MASK = (1 << 64) - 1
MIN_CHUNK_GAP = 32768

# ==============================================================================
# Record Interpretation
# ==============================================================================

FLAG_UCSC = 0x10000  # Coordinates are 0-based, half-open (BED-style)
PRESET_MASK = 0xFFFF

# Region end used when a region string gives no end coordinate
MAX_REGION_END = 0x7FFFFFFF


class Preset(IntEnum):
    """Record formats understood by the index (low 16 bits of the preset)"""

    GENERIC = 0  # begin/end read from configured columns
    SAM = 1  # end derived from the CIGAR string
    VCF = 2  # end derived from REF length or INFO END=


# CIGAR operations that consume reference bases
CIGAR_REFERENCE_OPS = frozenset("MDN=X")
