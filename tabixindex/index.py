"""SequenceIndex - the complete in-memory Tabix index"""

from collections.abc import Sequence

from .bin_index import BinIndex
from .binning import Interval
from .config import TabixConfig
from .linear_index import LinearIndex


class SequenceIndex:
    """
    Sequence dictionary plus one binning and one linear index per sequence

    Sequence ids are assigned in order of first appearance and index the
    parallel `bin_indices` / `linear_indices` lists. The index grows while a
    file is being indexed and is treated as read-only once loaded.

    Attributes:
        config: How records map onto intervals
        bin_indices: BinIndex per sequence id
        linear_indices: LinearIndex per sequence id
        n_no_coor: Trailing unplaced-record count of htslib indices, if present

    Examples:
        >>> from tabixindex.config import BED
        >>> index = SequenceIndex(BED)
        >>> index.get_or_create_sequence_id("chr1")
        0
        >>> index.get_or_create_sequence_id("chr2")
        1
        >>> index.sequence_id("chrX") is None
        True
    """

    def __init__(self, config: TabixConfig):
        self.config = config
        self._name_to_id: dict[str, int] = {}
        self.bin_indices: list[BinIndex] = []
        self.linear_indices: list[LinearIndex] = []
        self.n_no_coor: int | None = None

    def get_or_create_sequence_id(self, name: str) -> int:
        """
        Look up a sequence id, appending a new sequence if the name is unseen

        Args:
            name: Sequence name

        Returns:
            Numeric sequence id
        """
        sequence_id = self._name_to_id.get(name)
        if sequence_id is None:
            sequence_id = len(self._name_to_id)
            self._name_to_id[name] = sequence_id
            self.bin_indices.append(BinIndex())
            self.linear_indices.append(LinearIndex())
        return sequence_id

    def sequence_id(self, name: str) -> int | None:
        """Look up a sequence id without creating one"""
        return self._name_to_id.get(name)

    def sequence_name(self, sequence_id: int) -> str:
        """Name of the sequence with the given id"""
        return self.sequence_names[sequence_id]

    @property
    def sequence_names(self) -> list[str]:
        """Sequence names in id (first appearance) order"""
        return list(self._name_to_id)

    def record_to_interval(
        self, columns: Sequence[str], create: bool = True
    ) -> Interval | None:
        """
        Interpret one record's columns as an Interval

        Args:
            columns: Tab-separated fields of the record
            create: Assign a new id to an unseen sequence (index building).
                When False, records on unknown sequences yield None.

        Returns:
            Interval, or None for an unknown sequence when create is False

        Raises:
            MalformedRecord: If the coordinates cannot be parsed
        """
        name, begin, end = self.config.parse_record(columns)
        if create:
            sequence_id = self.get_or_create_sequence_id(name)
        else:
            sequence_id = self._name_to_id.get(name)
            if sequence_id is None:
                return None
        return Interval(sequence_id, begin, end)

    def install(
        self, sequence_id: int, bin_index: BinIndex, linear_index: LinearIndex
    ) -> None:
        """Replace the indices of a sequence with finalized ones"""
        self.bin_indices[sequence_id] = bin_index
        self.linear_indices[sequence_id] = linear_index

    def __len__(self) -> int:
        return len(self._name_to_id)

    def __contains__(self, name: object) -> bool:
        return name in self._name_to_id

    def __repr__(self) -> str:
        n_bins = sum(len(b) for b in self.bin_indices)
        return f"<SequenceIndex: {len(self):,} sequences, {n_bins:,} bins>"
