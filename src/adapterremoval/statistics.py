from typing import List


def safe_divide(numerator: int, denominator: int) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


class RunStatistics:
    """
    Counters for a single run. One instance is created per run and passed
    through the pipeline; nothing else holds on to it.

    For paired-end data, records counts read pairs, and keep1/keep2 count
    reads written to the singleton output only.
    """

    def __init__(self, n_adapters: int = 1, n_barcodes: int = 0) -> None:
        self.records = 0
        self.unaligned_reads = 0
        self.well_aligned_reads = 0
        self.poorly_aligned_reads = 0
        self.keep1 = 0
        self.keep2 = 0
        self.discard1 = 0
        self.discard2 = 0
        self.number_of_reads_with_adapter: List[int] = [0] * n_adapters
        self.number_of_barcodes_trimmed: List[int] = [0] * n_barcodes
        self.number_of_full_length_collapsed = 0
        self.number_of_truncated_collapsed = 0
        self.total_number_of_good_reads = 0
        self.total_number_of_nucleotides = 0

    def __repr__(self):
        return (
            f"RunStatistics(records={self.records}, "
            f"unaligned_reads={self.unaligned_reads}, "
            f"well_aligned_reads={self.well_aligned_reads}, "
            f"poorly_aligned_reads={self.poorly_aligned_reads}, "
            f"total_number_of_good_reads={self.total_number_of_good_reads})"
        )

    def average_read_length(self) -> float:
        return safe_divide(
            self.total_number_of_nucleotides, self.total_number_of_good_reads
        )

    def aligned_total(self) -> int:
        """Sum of the three alignment classes; equals records after a complete run"""
        return self.unaligned_reads + self.well_aligned_reads + self.poorly_aligned_reads
