"""
Per-record processing of single-end reads and read pairs

Each read (or read pair) is aligned against the adapters, truncated and/or
collapsed, quality trimmed, filtered and finally written to exactly one
output. Every branch updates the run statistics exactly once, so that the
counters always account for every record that was read.
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, NamedTuple, Tuple

from .align import AlignmentType, align_paired_ended_sequences, align_single_ended_sequence
from .config import RunConfiguration
from .errors import PairingError
from .reads import Read
from .statistics import RunStatistics
from .trimming import (
    collapse_paired_ended_sequences,
    truncate_paired_ended_sequences,
    truncate_single_ended_sequence,
)

logger = logging.getLogger(__name__)

# Log progress after this many records
PROGRESS_INTERVAL = 100_000

FULL_LENGTH_COLLAPSED_PREFIX = "M_"
TRUNCATED_COLLAPSED_PREFIX = "MT_"


class SingleEndOutputs(NamedTuple):
    output: object
    discarded: object


class PairedEndOutputs(NamedTuple):
    output1: object
    output2: object
    singleton: object
    collapsed: object
    collapsed_truncated: object
    discarded: object


def read_pairs(reads1: Iterable[Read], reads2: Iterable[Read]) -> Iterator[Tuple[Read, Read]]:
    """
    Iterate over two inputs in lock-step. Raise PairingError as soon as one
    input ends before the other.
    """
    it1 = iter(reads1)
    it2 = iter(reads2)
    while True:
        read1 = next(it1, None)
        read2 = next(it2, None)
        if (read1 is None) != (read2 is None):
            raise PairingError("files contain unequal number of records")
        if read1 is None:
            return
        yield read1, read2


class Pipeline(ABC):
    """
    Processing pipeline that loops over reads, trims and filters them and
    writes them to the outputs
    """

    paired = False

    def __init__(self, config: RunConfiguration):
        self._config = config

    @abstractmethod
    def process_reads(self, reads, outputs, stats: RunStatistics) -> None:
        pass


class SingleEndPipeline(Pipeline):
    """
    Processing pipeline for single-end reads
    """

    paired = False

    def process_reads(
        self, reads: Iterable[Read], outputs: SingleEndOutputs, stats: RunStatistics
    ) -> None:
        for read in reads:
            stats.records += 1
            self.process_read(read, outputs, stats)
            if stats.records % PROGRESS_INTERVAL == 0:
                logger.debug("Processed %d reads", stats.records)

    def process_read(
        self, read: Read, outputs: SingleEndOutputs, stats: RunStatistics
    ) -> None:
        config = self._config
        config.trim_barcodes_if_enabled(read, stats)

        alignment = align_single_ended_sequence(read, config.adapters, config.shift)
        aln_type = config.evaluate_alignment(alignment).type
        if aln_type is AlignmentType.VALID_ALIGNMENT:
            truncate_single_ended_sequence(alignment, read)
            stats.number_of_reads_with_adapter[alignment.adapter_id] += 1
            stats.well_aligned_reads += 1
        elif aln_type is AlignmentType.POOR_ALIGNMENT:
            stats.poorly_aligned_reads += 1
        else:
            stats.unaligned_reads += 1

        config.trim_sequence_by_quality_if_enabled(read)
        if config.is_acceptable_read(read):
            stats.keep1 += 1
            stats.total_number_of_good_reads += 1
            stats.total_number_of_nucleotides += len(read)
            outputs.output.write(read)
        else:
            stats.discard1 += 1
            outputs.discarded.write(read)


class PairedEndPipeline(Pipeline):
    """
    Processing pipeline for paired-end reads.
    """

    paired = True

    def process_reads(
        self,
        reads: Tuple[Iterable[Read], Iterable[Read]],
        outputs: PairedEndOutputs,
        stats: RunStatistics,
    ) -> None:
        reads1, reads2 = reads
        for read1, read2 in read_pairs(reads1, reads2):
            stats.records += 1
            self.process_pair(read1, read2, outputs, stats)
            if stats.records % PROGRESS_INTERVAL == 0:
                logger.debug("Processed %d read pairs", stats.records)

    def process_pair(
        self, read1: Read, read2: Read, outputs: PairedEndOutputs, stats: RunStatistics
    ) -> None:
        config = self._config
        config.trim_barcodes_if_enabled(read1, stats)

        # Reverse complement to match the orientation of read1
        read2.reverse_complement()

        alignment = align_paired_ended_sequences(read1, read2, config.adapters, config.shift)
        aln_type = config.evaluate_alignment(alignment).type
        if aln_type is AlignmentType.VALID_ALIGNMENT:
            stats.well_aligned_reads += 1
            n_adapters = truncate_paired_ended_sequences(alignment, read1, read2)
            stats.number_of_reads_with_adapter[alignment.adapter_id] += n_adapters

            if config.is_alignment_collapsible(alignment):
                self._write_collapsed(alignment, read1, read2, outputs, stats)
                # The original (uncollapsed) reads are not written
                return
        elif aln_type is AlignmentType.POOR_ALIGNMENT:
            stats.poorly_aligned_reads += 1
        else:
            stats.unaligned_reads += 1

        # Undo reverse complementation (after truncation of adapters)
        read2.reverse_complement()

        config.trim_sequence_by_quality_if_enabled(read1)
        config.trim_sequence_by_quality_if_enabled(read2)
        read1_acceptable = config.is_acceptable_read(read1)
        read2_acceptable = config.is_acceptable_read(read2)

        if read1_acceptable:
            stats.total_number_of_good_reads += 1
            stats.total_number_of_nucleotides += len(read1)
        if read2_acceptable:
            stats.total_number_of_good_reads += 1
            stats.total_number_of_nucleotides += len(read2)

        if read1_acceptable and read2_acceptable:
            outputs.output1.write(read1)
            outputs.output2.write(read2)
        else:
            # Keep one or none of the reads
            stats.keep1 += read1_acceptable
            stats.keep2 += read2_acceptable
            stats.discard1 += not read1_acceptable
            stats.discard2 += not read2_acceptable
            (outputs.singleton if read1_acceptable else outputs.discarded).write(read1)
            (outputs.singleton if read2_acceptable else outputs.discarded).write(read2)

    def _write_collapsed(self, alignment, read1, read2, outputs, stats) -> None:
        config = self._config
        collapsed = collapse_paired_ended_sequences(alignment, read1, read2)
        trimmed = config.trim_sequence_by_quality_if_enabled(collapsed)

        # A quality trimmed read no longer spans the whole insert
        was_trimmed = any(trimmed)
        if was_trimmed:
            collapsed.add_prefix_to_header(TRUNCATED_COLLAPSED_PREFIX)
            stats.number_of_truncated_collapsed += 1
        else:
            collapsed.add_prefix_to_header(FULL_LENGTH_COLLAPSED_PREFIX)
            stats.number_of_full_length_collapsed += 1

        if config.is_acceptable_read(collapsed):
            stats.total_number_of_good_reads += 1
            stats.total_number_of_nucleotides += len(collapsed)
            if was_trimmed:
                outputs.collapsed_truncated.write(collapsed)
            else:
                outputs.collapsed.write(collapsed)
        else:
            stats.discard1 += 1
            stats.discard2 += 1
            outputs.discarded.write(collapsed)
