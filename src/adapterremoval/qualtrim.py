"""
Quality trimming.
"""
from typing import Tuple

from .qualities import PHRED_OFFSET_33
from .reads import Read


def low_quality_trim_interval(
    sequence: str, qualities: str, low_quality_score: int, trim_ns: bool = False
) -> Tuple[int, int]:
    """
    Find the interval [start, stop) that remains after removing low-quality
    bases from both ends. A base is low-quality if its Phred score is at most
    low_quality_score or, if trim_ns is set, if it is an N.

    Qualities are assumed to be ASCII-encoded as chr(qual + 33). A negative
    low_quality_score disables trimming by quality.
    """

    def is_low_quality(i: int) -> bool:
        if trim_ns and sequence[i] == "N":
            return True
        return ord(qualities[i]) - PHRED_OFFSET_33 <= low_quality_score

    start = 0
    stop = len(sequence)
    while start < stop and is_low_quality(start):
        start += 1
    while stop > start and is_low_quality(stop - 1):
        stop -= 1
    return start, stop


def trim_by_quality(
    read: Read, low_quality_score: int, trim_ns: bool = False
) -> Tuple[bool, bool]:
    """
    Remove low-quality bases from both ends of the read (in place).

    Return a pair of booleans telling whether the 5' and the 3' end,
    respectively, were trimmed. A read that was trimmed away completely
    reports (True, False).
    """
    start, stop = low_quality_trim_interval(
        read.sequence, read.qualities, low_quality_score, trim_ns
    )
    trimmed = (start > 0, stop < len(read))
    if any(trimmed):
        read.truncate(start, stop - start)
    return trimmed
