"""
Filtering criteria (predicates)
"""
from abc import ABC, abstractmethod

from .reads import Read


class Predicate(ABC):
    @abstractmethod
    def test(self, read: Read) -> bool:
        """
        Return True if the filtering criterion matches.
        """


class TooShort(Predicate):
    """Select reads that are shorter than the specified minimum length"""

    def __init__(self, minimum_length: int):
        self.minimum_length = minimum_length

    def __repr__(self):
        return f"TooShort(minimum_length={self.minimum_length})"

    def test(self, read: Read) -> bool:
        return len(read) < self.minimum_length


class TooManyN(Predicate):
    """
    Select reads that have too many 'N' bases.

    Both a raw count or a proportion (relative to the sequence length) can be used.
    """

    def __init__(self, count: float):
        """
        count -- if it is below 1.0, it will be considered a proportion, and above and equal to
        1 will be considered as discarding reads with a number of N's greater than this cutoff.
        """
        assert count >= 0
        self.is_proportion = count < 1.0
        self.cutoff = count

    def __repr__(self):
        return f"TooManyN(cutoff={self.cutoff}, is_proportion={self.is_proportion})"

    def test(self, read: Read) -> bool:
        n_count = read.count_ns()
        if self.is_proportion:
            if len(read) == 0:
                return False
            return n_count / len(read) > self.cutoff
        else:
            return n_count > self.cutoff


def is_acceptable(read: Read, min_length: int, max_ambiguous: float) -> bool:
    """Return True if the read is long enough and has few enough N bases"""
    return not (
        TooShort(min_length).test(read) or TooManyN(max_ambiguous).test(read)
    )
