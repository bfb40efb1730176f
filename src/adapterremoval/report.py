"""
Routines for writing the settings and statistics report.
"""
from io import StringIO
from typing import TextIO

from . import __version__
from .config import RunConfiguration
from .qualities import describe_quality_format
from .statistics import RunStatistics

NAME = "adapterremoval"


def yes_no(value: bool, capitalize: bool = True) -> str:
    answer = "Yes" if value else "No"
    return answer if capitalize else answer.lower()


def settings_report(config: RunConfiguration) -> str:
    """Return the description of the run parameters"""
    sio = StringIO()

    def print_s(*args, **kwargs):
        kwargs["file"] = sio
        print(*args, **kwargs)

    print_s(f"Running {NAME} {__version__} using the following options:")
    print_s(f"RNG seed: {config.seed}")
    print_s("Paired end mode" if config.paired_ended_mode else "Single end mode")

    for adapter_id, adapter in enumerate(config.adapters):
        print_s(f"PCR1[{adapter_id}]: {adapter.adapter1}")
        if config.paired_ended_mode:
            print_s(f"PCR2[{adapter_id}]: {adapter.adapter2}")

    if config.trim_barcodes_mode:
        for barcode_id, barcode in enumerate(config.barcodes):
            print_s(f"Mate 1 5' barcode[{barcode_id}]: {barcode}")

    print_s(f"Alignment shift value: {config.shift}")
    print_s(f"Global mismatch threshold: {config.mismatch_threshold:g}")
    print_s(f"Quality format (input): {describe_quality_format(config.quality_input_fmt)}")
    print_s(f"Quality format (output): {describe_quality_format(config.quality_output_fmt)}")
    print_s(f"Trimming Ns: {yes_no(config.trim_ambiguous_bases)}")
    print_s(
        f"Trimming Phred scores <= {config.low_quality_score}: "
        f"{yes_no(config.trim_by_quality, capitalize=False)}"
    )
    print_s(f"Minimum genomic length: {config.min_genomic_length}")
    print_s(f"Collapse overlapping reads: {yes_no(config.collapse)}")
    print_s(f"Minimum overlap (in case of collapse): {config.min_alignment_length}")
    return sio.getvalue()


def statistics_report(config: RunConfiguration, stats: RunStatistics) -> str:
    """Return the run statistics as text"""
    reads_type = "read pairs: " if config.paired_ended_mode else "reads: "
    sio = StringIO()

    def print_s(*args, **kwargs):
        kwargs["file"] = sio
        print(*args, **kwargs)

    print_s()
    print_s(f"Total number of {reads_type}{stats.records}")
    print_s(f"Number of unaligned {reads_type}{stats.unaligned_reads}")
    print_s(f"Number of well aligned {reads_type}{stats.well_aligned_reads}")
    print_s(f"Number of inadequate alignments: {stats.poorly_aligned_reads}")
    print_s(f"Number of discarded mate 1 reads: {stats.discard1}")
    print_s(f"Number of singleton mate 1 reads: {stats.keep1}")
    if config.paired_ended_mode:
        print_s(f"Number of discarded mate 2 reads: {stats.discard2}")
        print_s(f"Number of singleton mate 2 reads: {stats.keep2}")

    print_s()
    if config.trim_barcodes_mode:
        for barcode_id, count in enumerate(stats.number_of_barcodes_trimmed):
            print_s(f"Number of reads with barcode[{barcode_id}]: {count}")

    for adapter_id, count in enumerate(stats.number_of_reads_with_adapter):
        print_s(f"Number of reads with adapters[{adapter_id}]: {count}")

    if config.collapse:
        print_s(f"Number of full-length collapsed pairs: {stats.number_of_full_length_collapsed}")
        print_s(f"Number of truncated collapsed pairs: {stats.number_of_truncated_collapsed}")

    print_s(f"Number of retained reads: {stats.total_number_of_good_reads}")
    print_s(f"Number of retained nucleotides: {stats.total_number_of_nucleotides}")
    print_s(f"Average read length of trimmed reads: {stats.average_read_length():g}")
    return sio.getvalue()


def write_settings(config: RunConfiguration, stream: TextIO) -> None:
    stream.write(settings_report(config))
    stream.flush()


def write_statistics(
    config: RunConfiguration, stream: TextIO, stats: RunStatistics
) -> None:
    stream.write(statistics_report(config, stats))
    stream.flush()
