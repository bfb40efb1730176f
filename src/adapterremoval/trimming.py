"""
Removal of adapter sequences given an alignment, and merging of overlapping
read pairs into a single consensus read
"""
from typing import Callable, Optional, Sequence

from .align import AlignmentInfo, AlignmentType, Classification, pairwise_align_sequences
from .reads import Read

__all__ = [
    "truncate_single_ended_sequence",
    "truncate_paired_ended_sequences",
    "collapse_paired_ended_sequences",
    "trim_barcodes",
]


def truncate_single_ended_sequence(alignment: AlignmentInfo, read: Read) -> None:
    """Remove the adapter and everything downstream of it"""
    read.truncate(0, max(0, alignment.offset))


def truncate_paired_ended_sequences(
    alignment: AlignmentInfo, read1: Read, read2: Read
) -> int:
    """
    Remove adapter sequences from both reads of a pair. read2 must be
    reverse-complemented, so that its adapter (if any) is a prefix.

    Return the number of reads (0, 1 or 2) in which an adapter was removed.
    """
    if alignment.offset > len(read1):
        raise ValueError(
            f"invalid alignment offset {alignment.offset} for read of length {len(read1)}"
        )
    template_length = max(0, len(read2) + alignment.offset)
    had_adapter = 0
    if len(read1) > template_length:
        read1.truncate(0, template_length)
        had_adapter += 1
    if len(read2) > template_length:
        read2.truncate(len(read2) - template_length)
        had_adapter += 1
    return had_adapter


def _consensus(nt1: str, qual1: str, nt2: str, qual2: str):
    if nt1 == "N" and nt2 != "N":
        return nt2, qual2
    if nt2 == "N" and nt1 != "N":
        return nt1, qual1
    if nt1 == nt2:
        return nt1, max(qual1, qual2)
    if qual1 > qual2:
        return nt1, qual1
    if qual2 > qual1:
        return nt2, qual2
    # Disagreeing bases with identical qualities
    return "N", min(qual1, qual2)


def collapse_paired_ended_sequences(
    alignment: AlignmentInfo, read1: Read, read2: Read
) -> Read:
    """
    Merge two reads that have been truncated with truncate_paired_ended_sequences
    into one read covering the whole insert. Overlapping positions are merged
    base by base, keeping the base with the higher quality score.
    """
    if alignment.offset > len(read1):
        raise ValueError(
            f"invalid alignment offset {alignment.offset} for read of length {len(read1)}"
        )
    # After truncation, read 2 never starts before read 1
    offset = max(0, alignment.offset)
    overlap = min(len(read1) - offset, len(read2))

    sequence = [read1.sequence[:offset]]
    qualities = [read1.qualities[:offset]]
    for i in range(overlap):
        nt, qual = _consensus(
            read1.sequence[offset + i],
            read1.qualities[offset + i],
            read2.sequence[i],
            read2.qualities[i],
        )
        sequence.append(nt)
        qualities.append(qual)
    # Only one of the two reads can extend past the overlap
    sequence.append(read1.sequence[offset + overlap:])
    qualities.append(read1.qualities[offset + overlap:])
    sequence.append(read2.sequence[overlap:])
    qualities.append(read2.qualities[overlap:])

    return Read(read1.name, "".join(sequence), "".join(qualities))


def trim_barcodes(
    read: Read,
    barcodes: Sequence[str],
    evaluate: Callable[[AlignmentInfo], Classification],
) -> Optional[int]:
    """
    Find the best-matching barcode at the 5' end of the read and remove it
    together with any upstream bases.

    The read and barcodes are reversed so that the barcode can be located in
    the same way as a 3' adapter; matches may extend past the 5' end of the
    read, but not past its 3' end. Return the id of the removed barcode or None.
    """
    reversed_sequence = read.sequence[::-1]
    best = AlignmentInfo()
    for barcode_id, barcode in enumerate(barcodes):
        best = pairwise_align_sequences(
            best, reversed_sequence, barcode[::-1], 0, barcode_id
        )
    if evaluate(best).type is not AlignmentType.VALID_ALIGNMENT:
        return None
    # Bases [0, len(read) - offset) of the original read precede the end of the match
    read.truncate(len(read) - best.offset)
    return best.adapter_id
