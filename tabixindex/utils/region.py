"""
Region string parsing for queries

Regions use the samtools/tabix convention: 1-based, inclusive coordinates.
"""

from collections.abc import Container

from ..constants import MAX_REGION_END


def parse_region(region_str: str) -> tuple[str | None, int | None, int | None]:
    """Parse a genomic region string into components

    Supports formats:
    - "chr1" (entire sequence)
    - "chr1:1000" (position 1000 to the end of the sequence)
    - "chr1:1000-2000" (range)
    - "chr1:1,000-2,000" (with commas)

    The coordinates are split off at the last colon, so sequence names
    containing colons (e.g. "HLA-A*01:01:01:01:100-200") still parse.

    Args:
        region_str: Region string to parse

    Returns:
        (sequence, start, end) where start/end are None if not specified.
        Returns (None, None, None) if parsing fails

    Examples:
        >>> parse_region("chr1")
        ('chr1', None, None)
        >>> parse_region("chr1:1000-2000")
        ('chr1', 1000, 2000)
        >>> parse_region("chr1:1,000")
        ('chr1', 1000, None)
    """
    if not region_str or not region_str.strip():
        return None, None, None

    region_str = region_str.strip()

    name, colon, coords = region_str.rpartition(":")
    if not colon:
        return region_str, None, None

    name = name.strip()
    coords = coords.strip().replace(",", "")  # Remove commas
    if not name or not coords:
        return None, None, None

    # Check for range (start-end)
    if "-" in coords:
        coord_parts = coords.split("-")
        if len(coord_parts) != 2:
            return None, None, None
        try:
            start = int(coord_parts[0].strip())
            end = int(coord_parts[1].strip())
            return name, start, end
        except ValueError:
            return None, None, None

    try:
        return name, int(coords), None
    except ValueError:
        return None, None, None


def region_to_interval(
    region_str: str, known_sequences: Container[str] | None = None
) -> tuple[str, int, int]:
    """
    Convert a region string to a 0-based, half-open query interval

    A missing start means the beginning of the sequence and a missing end
    means its end. A region that exactly matches a known sequence name is
    taken as that whole sequence, even if the name contains a colon.

    Args:
        region_str: Region such as "chr1:1,000-2,000"
        known_sequences: Sequence names of the index being queried

    Returns:
        (sequence, begin, end) with begin 0-based and end exclusive

    Raises:
        ValueError: If the region cannot be parsed or its range is invalid

    Examples:
        >>> region_to_interval("chr1:100-200")
        ('chr1', 99, 200)
        >>> region_to_interval("chr1")
        ('chr1', 0, 2147483647)
    """
    if known_sequences is not None and region_str in known_sequences:
        return region_str, 0, MAX_REGION_END

    name, start, end = parse_region(region_str)
    if name is None:
        raise ValueError(f"Invalid region: {region_str!r}")

    begin = 0 if start is None else start - 1
    if end is None:
        end = MAX_REGION_END
    if begin < 0:
        raise ValueError(f"Region start must be >= 1: {region_str!r}")
    if end <= begin:
        raise ValueError(f"Region end precedes its start: {region_str!r}")
    return name, begin, end
