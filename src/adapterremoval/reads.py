"""
The Read record: a name, a nucleotide sequence and Phred+33 qualities.

Unlike dnaio.SequenceRecord, a Read is modified in place by the trimming
functions. Conversion to and from dnaio records happens only at the
file boundary (see files.py).
"""
import re
from typing import Optional

from dnaio import SequenceRecord

from .errors import FormatError
from .qualities import QualityFormat

COMPLEMENT = str.maketrans("ACGTN", "TGCAN")

_NORMALIZE = str.maketrans("acgtn.", "ACGTNN")
_INVALID_NUCLEOTIDE = re.compile("[^ACGTN]")


def reverse_complement(sequence: str) -> str:
    return sequence.translate(COMPLEMENT)[::-1]


class Read:
    __slots__ = ("name", "_sequence", "_qualities")

    def __init__(self, name: str, sequence: str, qualities: str):
        if len(sequence) != len(qualities):
            raise ValueError(
                f"In read named {name!r}: length of quality sequence "
                f"({len(qualities)}) and length of read ({len(sequence)}) do not match"
            )
        self.name = name
        self._sequence = sequence
        self._qualities = qualities

    @property
    def sequence(self) -> str:
        return self._sequence

    @property
    def qualities(self) -> str:
        return self._qualities

    def __len__(self) -> int:
        return len(self._sequence)

    def __repr__(self):
        return f"Read(name={self.name!r}, sequence={self._sequence!r}, qualities={self._qualities!r})"

    def __eq__(self, other):
        if not isinstance(other, Read):
            return NotImplemented
        return (
            self.name == other.name
            and self._sequence == other._sequence
            and self._qualities == other._qualities
        )

    def copy(self) -> "Read":
        return Read(self.name, self._sequence, self._qualities)

    def reverse_complement(self) -> None:
        self._sequence = reverse_complement(self._sequence)
        self._qualities = self._qualities[::-1]

    def truncate(self, start: int = 0, length: Optional[int] = None) -> None:
        """Keep only the bases in the interval [start, start + length)"""
        stop = None if length is None else start + length
        self._sequence = self._sequence[start:stop]
        self._qualities = self._qualities[start:stop]

    def add_prefix_to_header(self, prefix: str) -> None:
        self.name = prefix + self.name

    def count_ns(self) -> int:
        return self._sequence.count("N")

    @classmethod
    def from_record(cls, record: SequenceRecord, quality_format: QualityFormat) -> "Read":
        sequence = record.sequence.translate(_NORMALIZE)
        match = _INVALID_NUCLEOTIDE.search(sequence)
        if match:
            raise FormatError(
                f"In read named {record.name!r}: invalid character "
                f"{match.group()!r} in sequence"
            )
        if record.qualities is None:
            raise FormatError(f"In read named {record.name!r}: no quality values")
        try:
            qualities = quality_format.decode(record.qualities)
        except FormatError as e:
            raise FormatError(f"In read named {record.name!r}: {e}") from None
        return cls(record.name, sequence, qualities)

    def to_record(self, quality_format: QualityFormat) -> SequenceRecord:
        return SequenceRecord(
            self.name, self._sequence, quality_format.encode(self._qualities)
        )
