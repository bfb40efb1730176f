"""
Adapter and barcode sequences
"""
import re
import logging
from typing import List, Optional

from xopen import xopen

from .reads import reverse_complement

logger = logging.getLogger(__name__)

# Illumina TruSeq adapters as they appear in mate 1 and mate 2 reads
DEFAULT_ADAPTER1 = "AGATCGGAAGAGCACACGTCTGAACTCCAGTCACNNNNNNATCTCGTATGCCGTCTTCTGCTTG"
DEFAULT_ADAPTER2 = "AGATCGGAAGAGCGTCGTGTAGGGAAAGAGTGTAGATCTCGGTGGTCGCCGTATCATT"

_INVALID_CHARACTER = re.compile("[^ACGTN]")


class InvalidCharacter(Exception):
    pass


def parse_sequence(sequence: str, what: str = "adapter") -> str:
    """Upper-case an adapter or barcode sequence and check its alphabet"""
    sequence = sequence.strip().upper()
    if not sequence:
        raise InvalidCharacter(f"The {what} sequence is empty")
    match = _INVALID_CHARACTER.search(sequence)
    if match:
        raise InvalidCharacter(
            f"Character {match.group()!r} in {what} sequence {sequence!r} is not "
            f"valid; only A, C, G, T and N are allowed"
        )
    return sequence


class AdapterPair:
    """
    The adapters ligated to the two ends of a fragment.

    adapter1 is the sequence as it is seen in mate 1 reads and adapter2 the
    sequence as it is seen in mate 2 reads.
    """

    def __init__(self, adapter1: str, adapter2: Optional[str] = None):
        self.adapter1 = parse_sequence(adapter1)
        self.adapter2 = parse_sequence(adapter2) if adapter2 is not None else ""

    def __repr__(self):
        return f"AdapterPair(adapter1={self.adapter1!r}, adapter2={self.adapter2!r})"

    def __eq__(self, other):
        if not isinstance(other, AdapterPair):
            return NotImplemented
        return self.adapter1 == other.adapter1 and self.adapter2 == other.adapter2

    @property
    def adapter2_rc(self) -> str:
        """adapter2 in the orientation of a reverse-complemented mate 2 read"""
        return reverse_complement(self.adapter2)


def read_adapter_list(path: str, paired: bool) -> List[AdapterPair]:
    """
    Read adapters from a whitespace-separated table with one adapter (single-end)
    or one pair of adapters (paired-end) per line. Empty lines and lines starting
    with '#' are ignored.
    """
    adapters = []
    with xopen(path, "rt") as f:
        for line_number, line in enumerate(f, 1):
            fields = line.split()
            if not fields or fields[0].startswith("#"):
                continue
            if paired and len(fields) < 2:
                raise ValueError(
                    f"{path}, line {line_number}: expected two adapter sequences "
                    f"for paired-end mode, found {len(fields)}"
                )
            if len(fields) > 2:
                raise ValueError(
                    f"{path}, line {line_number}: expected at most two adapter "
                    f"sequences, found {len(fields)}"
                )
            adapters.append(AdapterPair(*fields))
    logger.debug("Read %d adapter(s) from %s", len(adapters), path)
    return adapters
