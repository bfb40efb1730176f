#!/usr/bin/env python
#
# Copyright (C) 2011 Stinus Lindgreen
# Copyright (C) 2014 Mikkel Schubert
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
adapterremoval version {version}

adapterremoval removes adapter sequences from high-throughput sequencing
reads and, for paired-end data, collapses mates that overlap into a single
consensus read.

Usage:
    adapterremoval --file1 reads.fastq [options]

For paired-end reads:
    adapterremoval --file1 reads_1.fastq --file2 reads_2.fastq [options]

Output files are named after the --basename (default: your_output) unless
given explicitly. Compressed input and output is supported and auto-detected
from the file name (.gz, .xz, .bz2).

Run "adapterremoval --help" to see all command-line options.
"""
import sys
import random
import shutil
import logging
import platform
from typing import Dict, List
from argparse import ArgumentParser, SUPPRESS, HelpFormatter

import dnaio
import xopen

from adapterremoval import __version__
from adapterremoval.adapters import (
    AdapterPair,
    DEFAULT_ADAPTER1,
    DEFAULT_ADAPTER2,
    InvalidCharacter,
    parse_sequence,
    read_adapter_list,
)
from adapterremoval.config import RunConfiguration
from adapterremoval.errors import ConfigError
from adapterremoval.log import setup_logging
from adapterremoval.qualities import QualityFormat
from adapterremoval.runners import remove_adapter_sequences

logger = logging.getLogger()

# Options that override the name of an output file derived from --basename
OUTPUT_OPTIONS = [
    "--settings",
    "--output1",
    "--output2",
    "--singleton",
    "--outputcollapsed",
    "--outputcollapsedtruncated",
    "--discarded",
]


class AdapterRemovalArgumentParser(ArgumentParser):
    """
    This ArgumentParser customizes two things:
    - The usage message is not prefixed with 'usage:'
    - A brief message is shown on errors, not full usage
    """

    class CustomUsageHelpFormatter(HelpFormatter):
        def __init__(self, *args, **kwargs):
            kwargs["width"] = min(24 + 80, shutil.get_terminal_size().columns)
            super().__init__(*args, **kwargs)

        def add_usage(self, usage, actions, groups, prefix=None):
            if usage is not SUPPRESS:  # pragma: no cover
                args = usage, actions, groups, ""
                self._add_item(self._format_usage, args)

    def __init__(self, *args, **kwargs):
        kwargs["formatter_class"] = self.CustomUsageHelpFormatter
        kwargs["usage"] = kwargs["usage"].replace("{version}", __version__)
        super().__init__(*args, **kwargs)

    def error(self, message):
        """
        If you override this in a subclass, it should not return -- it
        should either exit or raise an exception.
        """
        print('Run "adapterremoval --help" to see command-line options.', file=sys.stderr)
        self.exit(2, f"\n{self.prog}: error: {message}\n")


# fmt: off
def get_argument_parser() -> ArgumentParser:
    parser = AdapterRemovalArgumentParser(usage=__doc__, add_help=False)
    group = parser.add_argument_group("Options")
    group.add_argument("-h", "--help", action="help", help="Show this help message and exit")
    group.add_argument("--version", action="version", help="Show version number and exit",
        version=__version__)
    group.add_argument("--debug", action="count", default=0,
        help="Print debug log")
    group.add_argument("--quiet", default=False, action="store_true",
        help="Print only error messages")
    # Compression level for gzipped output files
    group.add_argument("--compression-level", type=int, default=6,
        help=SUPPRESS)

    group = parser.add_argument_group("Input files")
    group.add_argument("--file1", metavar="FILE",
        help="Input file containing mate 1 reads (or single-end reads)")
    group.add_argument("--file2", metavar="FILE",
        help="Input file containing mate 2 reads; enables paired-end mode")
    group.add_argument("--qualitybase", choices=["33", "64", "solexa"], default="33",
        help="Quality score encoding of the input files. Default: %(default)s")

    group = parser.add_argument_group("Output files",
        description="Unless given explicitly, output files are named after "
            "the --basename with a fixed suffix appended.")
    group.add_argument("--basename", default="your_output", metavar="NAME",
        help="Prefix of all output files. Default: %(default)s")
    group.add_argument("--settings", metavar="FILE",
        help="Run settings and statistics. Default: BASENAME.settings")
    group.add_argument("--output1", metavar="FILE",
        help="Trimmed mate 1 reads (or single-end reads). "
            "Default: BASENAME.pair1.truncated (single-end: BASENAME.truncated)")
    group.add_argument("--output2", metavar="FILE",
        help="Trimmed mate 2 reads. Default: BASENAME.pair2.truncated")
    group.add_argument("--singleton", metavar="FILE",
        help="Reads whose mate was discarded. Default: BASENAME.singleton.truncated")
    group.add_argument("--outputcollapsed", metavar="FILE",
        help="Full-length collapsed pairs. Default: BASENAME.collapsed")
    group.add_argument("--outputcollapsedtruncated", metavar="FILE",
        help="Collapsed pairs that were quality trimmed. "
            "Default: BASENAME.collapsed.truncated")
    group.add_argument("--discarded", metavar="FILE",
        help="Reads that did not pass the filters. Default: BASENAME.discarded")
    group.add_argument("--qualitybase-output", choices=["33", "64", "solexa"], default=None,
        help="Quality score encoding of the output files. Default: same as --qualitybase")

    group = parser.add_argument_group("Finding adapters")
    group.add_argument("--adapter1", metavar="SEQUENCE",
        help="Adapter sequence expected to be found in mate 1 reads. "
            f"Default: {DEFAULT_ADAPTER1}")
    group.add_argument("--adapter2", metavar="SEQUENCE",
        help="Adapter sequence expected to be found in mate 2 reads. "
            f"Default: {DEFAULT_ADAPTER2}")
    group.add_argument("--adapter-list", metavar="FILE",
        help="Read adapters (single-end) or pairs of adapters (paired-end) "
            "from FILE, one per line. Cannot be combined with --adapter1/--adapter2.")
    group.add_argument("--5prime", dest="barcodes", action="append", default=[],
        metavar="SEQUENCE",
        help="Barcode at the 5' end of mate 1 reads. Can be given multiple times.")
    group.add_argument("--mm", type=float, default=3, metavar="MISMATCHES",
        help="Maximum mismatch rate. Values above 1 are taken as 1/MISMATCHES. "
            "Default: 1/%(default)g")
    group.add_argument("--minadapteroverlap", type=int, default=0, metavar="LENGTH",
        help="Alignments shorter than LENGTH are not trimmed. Default: %(default)s")
    group.add_argument("--shift", type=int, default=2, metavar="N",
        help="Allow the alignment to shift by up to N bases to account for "
            "missing bases at the 5' end. Default: %(default)s")

    group = parser.add_argument_group("Trimming and filtering")
    group.add_argument("--trimns", default=False, action="store_true",
        help="Trim ambiguous bases (N) at both ends of reads")
    group.add_argument("--trimqualities", default=False, action="store_true",
        help="Trim low-quality bases at both ends of reads")
    group.add_argument("--minquality", type=int, default=2, metavar="SCORE",
        help="Bases with a quality score (Phred) at or below SCORE are trimmed "
            "by --trimqualities. Default: %(default)s")
    group.add_argument("--minlength", type=int, default=15, metavar="LENGTH",
        help="Discard reads shorter than LENGTH after trimming. Default: %(default)s")
    group.add_argument("--maxns", type=float, default=1000, metavar="COUNT",
        help="Discard reads with more than COUNT ambiguous bases after trimming. "
            "A value below 1 is a fraction of the read length. Default: %(default)g")

    group = parser.add_argument_group("Collapsing overlapping mates")
    group.add_argument("--collapse", default=False, action="store_true",
        help="Combine overlapping mates into a single consensus read")
    group.add_argument("--minalignmentlength", type=int, default=11, metavar="LENGTH",
        help="Minimum overlap required to collapse a pair. Default: %(default)s")
    group.add_argument("--seed", type=int, default=None,
        help="Seed for the random number generator. Default: random")

    return parser
# fmt: on


def parse_mismatch_rate(value: float) -> float:
    """
    >>> parse_mismatch_rate(3)
    0.3333333333333333
    >>> parse_mismatch_rate(0.1)
    0.1
    """
    if value < 0:
        raise ConfigError("The mismatch rate (--mm) must not be negative")
    if value > 1:
        return 1 / value
    return value


def adapters_from_args(args, paired: bool) -> List[AdapterPair]:
    if args.adapter_list is not None:
        if args.adapter1 is not None or args.adapter2 is not None:
            raise ConfigError(
                "--adapter-list cannot be used together with --adapter1 or --adapter2"
            )
        adapters = read_adapter_list(args.adapter_list, paired)
        if not adapters:
            raise ConfigError(f"No adapters found in {args.adapter_list}")
        return adapters

    adapter1 = args.adapter1 if args.adapter1 is not None else DEFAULT_ADAPTER1
    adapter2 = args.adapter2 if args.adapter2 is not None else DEFAULT_ADAPTER2
    return [AdapterPair(adapter1, adapter2)]


def output_paths_from_args(args) -> Dict[str, str]:
    paths = {}
    for option in OUTPUT_OPTIONS:
        path = getattr(args, option[2:])
        if path is not None:
            paths[option] = path
    return paths


def configuration_from_args(args) -> RunConfiguration:
    """
    Build the run configuration from parsed command-line arguments.
    Raise ConfigError, InvalidCharacter or ValueError for unusable values.
    """
    paired = args.file2 is not None
    quality_input_fmt = QualityFormat(args.qualitybase)
    if args.qualitybase_output is not None:
        quality_output_fmt = QualityFormat(args.qualitybase_output)
    else:
        quality_output_fmt = quality_input_fmt
    if args.collapse and not paired:
        logger.warning("Option --collapse has no effect on single-end reads")

    config = RunConfiguration(
        input_file_1=args.file1,
        input_file_2=args.file2,
        basename=args.basename,
        paired_ended_mode=paired,
        adapters=adapters_from_args(args, paired),
        barcodes=[parse_sequence(barcode, "barcode") for barcode in args.barcodes],
        quality_input_fmt=quality_input_fmt,
        quality_output_fmt=quality_output_fmt,
        shift=args.shift,
        mismatch_threshold=parse_mismatch_rate(args.mm),
        min_adapter_overlap=args.minadapteroverlap,
        trim_ambiguous_bases=args.trimns,
        trim_by_quality=args.trimqualities,
        low_quality_score=args.minquality,
        min_genomic_length=args.minlength,
        max_ambiguous_bases=args.maxns,
        collapse=args.collapse and paired,
        min_alignment_length=args.minalignmentlength,
        seed=args.seed if args.seed is not None else random.getrandbits(32),
        output_paths=output_paths_from_args(args),
        compression_level=args.compression_level,
    )
    config.validate()
    return config


def log_header(cmdlineargs):
    """Print the "This is adapterremoval ..." header"""

    implementation = platform.python_implementation()
    opt = " (" + implementation + ")" if implementation != "CPython" else ""
    logger.info(
        "This is adapterremoval %s with Python %s%s",
        __version__,
        platform.python_version(),
        opt,
    )
    logger.info("Command line parameters: %s", " ".join(cmdlineargs))


def log_system_info():
    logger.debug("Python executable: %s", sys.executable)
    logger.debug("dnaio version: %s", dnaio.__version__)
    logger.debug("xopen version: %s", xopen.__version__)


def log_adapters(adapters: List[AdapterPair], paired: bool):
    logger.debug("Adapters (%d):", len(adapters))
    for adapter in adapters[:20]:
        if paired:
            logger.debug("- %s / %s", adapter.adapter1, adapter.adapter2)
        else:
            logger.debug("- %s", adapter.adapter1)
    if len(adapters) > 20:
        logger.debug("- (%d more)", len(adapters) - 20)


def main_cli():  # pragma: no cover
    """Entry point for command-line script"""
    return main(sys.argv[1:])


def main(cmdlineargs) -> int:
    """
    Build a run configuration from the command-line arguments, run adapter
    removal and return the exit code (0 on success, 1 if the run failed).

    Problems with the arguments themselves are reported through the parser,
    which exits with code 2.
    """
    parser = get_argument_parser()
    args, leftover_args = parser.parse_known_args(args=cmdlineargs)
    # Setup logging only if there are not already any handlers (can happen when
    # this function is being called externally such as from unit tests)
    if not logging.root.handlers:
        setup_logging(logger, quiet=args.quiet, debug=args.debug)
    log_header(cmdlineargs)
    log_system_info()

    if leftover_args:
        parser.error("unrecognized arguments: " + " ".join(leftover_args))

    try:
        config = configuration_from_args(args)
    except (ConfigError, InvalidCharacter, ValueError) as e:
        logger.debug("Command line error. Traceback:", exc_info=True)
        parser.error(str(e))
    except OSError as e:
        logger.error("%s", e)
        return 1
    log_adapters(config.adapters, config.paired_ended_mode)

    try:
        status = remove_adapter_sequences(config)
    except KeyboardInterrupt:
        if args.debug:
            raise
        print("Interrupted", file=sys.stderr)
        return 130
    return status.exit_code()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main_cli())
