"""
Run a complete adapter removal: write the settings, open all files, process
the reads and append the statistics
"""
import logging
from contextlib import ExitStack
from enum import IntEnum
from typing import Optional, TextIO

from .config import RunConfiguration
from .errors import ConfigError, FormatError
from .files import FastqReader, FileOpener, OutputFiles
from .pipeline import (
    PairedEndOutputs,
    PairedEndPipeline,
    SingleEndOutputs,
    SingleEndPipeline,
)
from .report import write_settings, write_statistics
from .statistics import RunStatistics

logger = logging.getLogger(__name__)


class RunStatus(IntEnum):
    OK = 0
    # Settings file could not be opened or written
    SETTINGS_ERROR = 1
    # An input or output file could not be opened, read or written
    IO_ERROR = 2
    # Malformed input record or unequally long paired inputs
    READ_ERROR = 3

    def exit_code(self) -> int:
        return 0 if self is RunStatus.OK else 1


def _open_single_ended(stack: ExitStack, config: RunConfiguration, opener: FileOpener):
    reader = stack.enter_context(
        FastqReader(config.input_file_1, config.quality_input_fmt, opener)
    )
    outfiles = stack.enter_context(OutputFiles(config, opener))
    outputs = SingleEndOutputs(
        discarded=outfiles.open_record_writer("--discarded", ".discarded"),
        output=outfiles.open_record_writer("--output1", ".truncated"),
    )
    return reader, outputs


def _open_paired_ended(stack: ExitStack, config: RunConfiguration, opener: FileOpener):
    reader1 = stack.enter_context(
        FastqReader(config.input_file_1, config.quality_input_fmt, opener)
    )
    reader2 = stack.enter_context(
        FastqReader(config.input_file_2, config.quality_input_fmt, opener)
    )
    outfiles = stack.enter_context(OutputFiles(config, opener))
    discarded = outfiles.open_record_writer("--discarded", ".discarded")
    output1 = outfiles.open_record_writer("--output1", ".pair1.truncated")
    output2 = outfiles.open_record_writer("--output2", ".pair2.truncated")
    singleton = outfiles.open_record_writer("--singleton", ".singleton.truncated")
    collapsed = collapsed_truncated = None
    if config.collapse:
        collapsed = outfiles.open_record_writer("--outputcollapsed", ".collapsed")
        collapsed_truncated = outfiles.open_record_writer(
            "--outputcollapsedtruncated", ".collapsed.truncated"
        )
    outputs = PairedEndOutputs(
        output1=output1,
        output2=output2,
        singleton=singleton,
        collapsed=collapsed,
        collapsed_truncated=collapsed_truncated,
        discarded=discarded,
    )
    return (reader1, reader2), outputs


def process_reads(config: RunConfiguration, stats: RunStatistics) -> RunStatus:
    """
    Open input and output files and run the single-end or paired-end pipeline.
    All files are closed before this function returns.
    """
    opener = FileOpener(compression_level=config.compression_level)
    with ExitStack() as stack:
        try:
            if config.paired_ended_mode:
                reads, outputs = _open_paired_ended(stack, config, opener)
                pipeline = PairedEndPipeline(config)
            else:
                reads, outputs = _open_single_ended(stack, config, opener)
                pipeline = SingleEndPipeline(config)
        except FormatError as e:
            logger.error("Error reading FASTQ record (1); aborting:\n    %s", e)
            return RunStatus.READ_ERROR
        except OSError as e:
            logger.error("IO error opening file; aborting:\n    %s", e)
            return RunStatus.IO_ERROR

        logger.info(
            "Processing %s reads ...", "paired-end" if pipeline.paired else "single-end"
        )
        try:
            pipeline.process_reads(reads, outputs, stats)
        except FormatError as e:
            logger.error(
                "Error reading FASTQ record (%d); aborting:\n    %s", stats.records + 1, e
            )
            return RunStatus.READ_ERROR
        except OSError as e:
            # The failing record has already been counted
            logger.error(
                "Error processing FASTQ record (%d); aborting:\n    %s", stats.records, e
            )
            return RunStatus.IO_ERROR
    return RunStatus.OK


def remove_adapter_sequences(
    config: RunConfiguration, stats: Optional[RunStatistics] = None
) -> RunStatus:
    """
    Run adapter removal as described by the configuration.

    The settings are written to the settings file before any reads are
    processed; the statistics are appended to the same file afterwards.
    If stats is given, the counters are accumulated in it.
    """
    if stats is None:
        stats = config.create_stats()
    opener = FileOpener()
    settings: TextIO
    try:
        settings = opener.xopen(config.output_path("--settings", ".settings"), "wt")
    except OSError as e:
        logger.error("IO error opening file; aborting:\n    %s", e)
        return RunStatus.SETTINGS_ERROR

    with settings:
        try:
            write_settings(config, settings)
        except (OSError, ConfigError) as e:
            logger.error("Error writing settings file; aborting:\n    %s", e)
            return RunStatus.SETTINGS_ERROR

        status = process_reads(config, stats)
        if status is not RunStatus.OK:
            return status

        try:
            write_statistics(config, settings, stats)
        except OSError as e:
            logger.error("Error writing statistics to settings file:\n    %s", e)
            return RunStatus.SETTINGS_ERROR

    logger.info(
        "Processed %d %s; %d reads retained",
        stats.records,
        "read pairs" if config.paired_ended_mode else "reads",
        stats.total_number_of_good_reads,
    )
    return RunStatus.OK
