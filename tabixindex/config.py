"""Record interpretation: which columns hold a record's sequence and coordinates"""

from collections.abc import Sequence
from dataclasses import dataclass

from .constants import (
    CIGAR_REFERENCE_OPS,
    FLAG_UCSC,
    MAX_COORDINATE,
    PRESET_MASK,
    Preset,
)
from .errors import MalformedRecord


@dataclass(frozen=True)
class TabixConfig:
    """
    How records of an indexed file map onto genomic intervals

    Mirrors the configuration block stored in every .tbi header. Column
    numbers are 1-based; end_col is ignored by the SAM and VCF presets.

    Attributes:
        preset: Record format (Preset) optionally OR-ed with FLAG_UCSC
        seq_col: Column holding the sequence name
        begin_col: Column holding the start coordinate
        end_col: Column holding the end coordinate (0 if derived)
        comment_char: Lines starting with this character are headers
        lines_to_skip: Number of leading lines that are always headers

    Examples:
        >>> BED.parse_record(["chr1", "100", "200"])
        ('chr1', 100, 200)
        >>> GFF.parse_record(["chr1", "src", "gene", "101", "200"])
        ('chr1', 100, 200)
    """

    preset: int = Preset.GENERIC
    seq_col: int = 1
    begin_col: int = 4
    end_col: int = 5
    comment_char: str = "#"
    lines_to_skip: int = 0

    def __post_init__(self):
        if len(self.comment_char) != 1:
            raise ValueError(
                f"comment_char must be a single character, got {self.comment_char!r}"
            )
        if self.seq_col < 1 or self.begin_col < 1:
            raise ValueError("seq_col and begin_col are 1-based and must be >= 1")
        if self.format == Preset.GENERIC and self.end_col < 1:
            raise ValueError("end_col is required for the generic preset")
        if self.lines_to_skip < 0:
            raise ValueError("lines_to_skip must be >= 0")

    @property
    def format(self) -> int:
        """Record format without flags (a Preset value for known formats)"""
        return self.preset & PRESET_MASK

    @property
    def zero_based(self) -> bool:
        """True for UCSC-style (0-based, half-open) coordinates"""
        return bool(self.preset & FLAG_UCSC)

    def is_header(self, line: str, line_number: int) -> bool:
        """
        Check whether a line is a header/comment line excluded from indexing

        Args:
            line: Record text
            line_number: 1-based line number within the file
        """
        return line_number <= self.lines_to_skip or line.startswith(self.comment_char)

    def parse_record(self, columns: Sequence[str]) -> tuple[str, int, int]:
        """
        Extract a record's sequence name and 0-based half-open coordinates

        Args:
            columns: Tab-separated fields of one record

        Returns:
            (sequence_name, begin, end)

        Raises:
            MalformedRecord: If a needed column is missing or not numeric
        """
        try:
            name = columns[self.seq_col - 1]
            begin = int(columns[self.begin_col - 1])
            end = begin
            if self.zero_based:
                end += 1
            else:
                begin -= 1
            begin = max(begin, 0)
            end = max(end, 1)

            fmt = self.format
            if fmt == Preset.GENERIC:
                end = int(columns[self.end_col - 1])
            elif fmt == Preset.SAM:
                end = begin + cigar_reference_length(columns[5])
            elif fmt == Preset.VCF:
                ref = columns[3]
                if ref:
                    end = begin + len(ref)
                info_end = _info_end(columns[7]) if len(columns) > 7 else None
                if info_end is not None:
                    end = info_end
        except IndexError as e:
            raise MalformedRecord(
                f"Record has {len(columns)} columns, too few for this configuration"
            ) from e
        except ValueError as e:
            raise MalformedRecord(f"Non-numeric coordinate in record: {e}") from e

        # An empty or inverted span (unmapped SAM record, zero-length feature)
        # still occupies its start position
        if end <= begin:
            end = begin + 1
        if end > MAX_COORDINATE:
            raise MalformedRecord(
                f"Coordinate {end:,} is beyond the indexable range (max {MAX_COORDINATE:,})"
            )
        # Undecodable bytes survive reading as surrogates; names are stored as UTF-8
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise MalformedRecord(f"Sequence name is not valid UTF-8: {name!r}") from e
        return name, begin, end


def cigar_reference_length(cigar: str) -> int:
    """
    Number of reference bases consumed by a CIGAR string

    Sums the lengths of M, D, N, = and X operations. An unavailable CIGAR
    ("*") consumes nothing.

    Raises:
        ValueError: If the string is not a valid CIGAR
    """
    if cigar == "*":
        return 0
    length = 0
    digits_start = 0
    for i, op in enumerate(cigar):
        if op.isdigit():
            continue
        if i == digits_start:
            raise ValueError(f"CIGAR operation without length: {cigar!r}")
        if op in CIGAR_REFERENCE_OPS:
            length += int(cigar[digits_start:i])
        digits_start = i + 1
    if digits_start != len(cigar):
        raise ValueError(f"Trailing length without operation: {cigar!r}")
    return length


def _info_end(info: str) -> int | None:
    """Value of an END= key in a semicolon-delimited VCF INFO field"""
    for entry in info.split(";"):
        if entry.startswith("END="):
            return int(entry[4:])
    return None


# ==============================================================================
# Presets
# ==============================================================================

GFF = TabixConfig(Preset.GENERIC, 1, 4, 5, "#", 0)
BED = TabixConfig(FLAG_UCSC | Preset.GENERIC, 1, 2, 3, "#", 0)
PSLTBL = TabixConfig(FLAG_UCSC | Preset.GENERIC, 15, 17, 18, "#", 0)
SAM = TabixConfig(Preset.SAM, 3, 4, 0, "@", 0)
VCF = TabixConfig(Preset.VCF, 1, 2, 0, "#", 0)

PRESETS = {
    "gff": GFF,
    "bed": BED,
    "psltbl": PSLTBL,
    "sam": SAM,
    "vcf": VCF,
}


def get_preset(name: str) -> TabixConfig:
    """
    Look up a named preset configuration

    Raises:
        ValueError: If the preset name is unknown
    """
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'. Available presets: {', '.join(PRESETS)}"
        ) from None
