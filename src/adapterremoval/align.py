"""
Ungapped alignment of adapters against reads and read pairs

The aligner compares two sequences at every admissible offset without gaps
and keeps the best-scoring alignment. Offsets are tried in ascending order
and adapters in ascending index order; a candidate replaces the current best
alignment only if it is strictly better, so among equally good alignments
the one with the lowest adapter index and then the smallest offset wins.
"""
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Sequence, Tuple, Union

from .adapters import AdapterPair
from .reads import Read

__all__ = [
    "AlignmentInfo",
    "AlignmentType",
    "Classification",
    "compare_subsequences",
    "pairwise_align_sequences",
    "align_single_ended_sequence",
    "align_paired_ended_sequences",
    "evaluate_alignment",
    "classify",
]


@dataclass
class AlignmentInfo:
    """
    An ungapped alignment.

    offset is the position in the first sequence (the read, or read 1 for
    paired-end data) at which the second sequence starts. It is negative if
    the second sequence starts before the first one.
    """

    offset: int = 0
    length: int = 0
    n_mismatches: int = 0
    n_ambiguous: int = 0
    adapter_id: int = 0

    @property
    def score(self) -> int:
        """Number of matches minus number of mismatches"""
        return self.length - self.n_ambiguous - 2 * self.n_mismatches

    def is_better_than(self, other: "AlignmentInfo") -> bool:
        if self.score > other.score:
            return True
        return self.score == other.score and self.n_ambiguous < other.n_ambiguous


class AlignmentType(Enum):
    NOT_ALIGNED = 0
    POOR_ALIGNMENT = 1
    VALID_ALIGNMENT = 2


class Classification(NamedTuple):
    type: AlignmentType
    # None if type is NOT_ALIGNED
    alignment: Optional[AlignmentInfo]


def compare_subsequences(seq1: str, seq2: str, offset: int) -> AlignmentInfo:
    """
    Compare seq2 placed at the given offset of seq1 over the overlapping
    positions. N in either sequence counts as ambiguous, not as a mismatch.
    """
    if offset >= 0:
        sub1, sub2 = seq1[offset:], seq2
    else:
        sub1, sub2 = seq1, seq2[-offset:]
    length = min(len(sub1), len(sub2))
    n_mismatches = n_ambiguous = 0
    for nt1, nt2 in zip(sub1[:length], sub2[:length]):
        if nt1 == "N" or nt2 == "N":
            n_ambiguous += 1
        elif nt1 != nt2:
            n_mismatches += 1
    return AlignmentInfo(
        offset=offset,
        length=length,
        n_mismatches=n_mismatches,
        n_ambiguous=n_ambiguous,
    )


def pairwise_align_sequences(
    best: AlignmentInfo, seq1: str, seq2: str, min_offset: int, adapter_id: int = 0
) -> AlignmentInfo:
    """
    Try all offsets from min_offset up to len(seq1) - 1 and return the best of
    the given alignment and the alignments found.
    """
    for offset in range(min_offset, len(seq1)):
        # Upper bound for the score is the length of the overlap
        overlap = min(len(seq1) - max(offset, 0), len(seq2) - max(-offset, 0))
        if overlap <= 0 or overlap < best.score:
            continue
        candidate = compare_subsequences(seq1, seq2, offset)
        if candidate.is_better_than(best):
            candidate.adapter_id = adapter_id
            best = candidate
    return best


def align_single_ended_sequence(
    read: Read, adapters: Sequence[AdapterPair], max_shift: int
) -> AlignmentInfo:
    """Find the best alignment of a mate 1 adapter against the read"""
    best = AlignmentInfo()
    for adapter_id, adapter in enumerate(adapters):
        best = pairwise_align_sequences(
            best, read.sequence, adapter.adapter1, -max_shift, adapter_id
        )
    return best


def align_paired_ended_sequences(
    read1: Read, read2: Read, adapters: Sequence[AdapterPair], max_shift: int
) -> AlignmentInfo:
    """
    Align read 1 against read 2, which must already be reverse-complemented.

    Each read is extended with the adapter expected upstream (read 1) or
    downstream (read 2) of it, so that short inserts, in which both reads
    run into the adapters, align over the adapter sequences as well.
    The returned offset is relative to the start of read 1.
    """
    best = AlignmentInfo()
    best_adapter2_length = 0
    for adapter_id, adapter in enumerate(adapters):
        adapter2_rc = adapter.adapter2_rc
        seq1 = adapter2_rc + read1.sequence
        seq2 = read2.sequence + adapter.adapter1
        min_offset = len(adapter2_rc) - len(read2) - max_shift
        candidate = pairwise_align_sequences(best, seq1, seq2, min_offset, adapter_id)
        if candidate is not best:
            best = candidate
            best_adapter2_length = len(adapter2_rc)
    if best.length:
        best.offset -= best_adapter2_length
    return best


def evaluate_alignment(
    alignment: AlignmentInfo,
    mismatch_threshold: float,
    min_adapter_overlap: int = 0,
) -> Classification:
    """
    Classify an alignment as not aligned, poorly aligned or validly aligned.

    Short alignments are held to a stricter standard: no mismatches below
    6 bp and at most one mismatch below 10 bp.
    """
    if not alignment.length:
        return Classification(AlignmentType.NOT_ALIGNED, None)
    if alignment.length < min_adapter_overlap:
        return Classification(AlignmentType.POOR_ALIGNMENT, alignment)

    max_mismatches = int(mismatch_threshold * alignment.length)
    if alignment.length < 6:
        max_mismatches = 0
    elif alignment.length < 10:
        max_mismatches = min(1, max_mismatches)

    if alignment.n_mismatches > max_mismatches:
        return Classification(AlignmentType.POOR_ALIGNMENT, alignment)
    return Classification(AlignmentType.VALID_ALIGNMENT, alignment)


def classify(
    reads: Union[Read, Tuple[Read, Read]],
    adapters: Sequence[AdapterPair],
    max_shift: int,
    mismatch_threshold: float,
    min_adapter_overlap: int = 0,
) -> Tuple[AlignmentInfo, Classification]:
    """
    Align the adapters against a single read or a (read1, read2) pair (read 2
    reverse-complemented) and classify the best alignment.
    """
    if isinstance(reads, Read):
        alignment = align_single_ended_sequence(reads, adapters, max_shift)
    else:
        read1, read2 = reads
        alignment = align_paired_ended_sequences(read1, read2, adapters, max_shift)
    return alignment, evaluate_alignment(
        alignment, mismatch_threshold, min_adapter_overlap
    )
