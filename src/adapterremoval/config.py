"""
Run configuration

A RunConfiguration is built once (usually from the command line) and is not
modified while reads are processed. Decisions that depend only on the
configuration, such as whether an alignment is good enough or a read long
enough, are made here so that both pipelines make them the same way.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .adapters import AdapterPair, DEFAULT_ADAPTER1, DEFAULT_ADAPTER2
from .align import AlignmentInfo, Classification, evaluate_alignment
from .errors import ConfigError
from .predicates import is_acceptable
from .qualities import QualityFormat
from .qualtrim import trim_by_quality
from .reads import Read
from .statistics import RunStatistics
from .trimming import trim_barcodes


def default_adapters() -> List[AdapterPair]:
    return [AdapterPair(DEFAULT_ADAPTER1, DEFAULT_ADAPTER2)]


@dataclass
class RunConfiguration:
    input_file_1: Optional[str] = None
    input_file_2: Optional[str] = None
    basename: str = "your_output"
    paired_ended_mode: bool = False
    adapters: List[AdapterPair] = field(default_factory=default_adapters)
    # Mate 1 5' barcodes
    barcodes: List[str] = field(default_factory=list)
    quality_input_fmt: QualityFormat = QualityFormat.PHRED_33
    quality_output_fmt: QualityFormat = QualityFormat.PHRED_33
    shift: int = 2
    mismatch_threshold: float = 1 / 3
    min_adapter_overlap: int = 0
    trim_ambiguous_bases: bool = False
    trim_by_quality: bool = False
    low_quality_score: int = 2
    min_genomic_length: int = 15
    max_ambiguous_bases: float = 1000
    collapse: bool = False
    min_alignment_length: int = 11
    seed: int = 0
    # Explicit output paths by option name, for example {"--output1": "out.fq"}
    output_paths: Dict[str, str] = field(default_factory=dict)
    compression_level: int = 6

    @property
    def trim_barcodes_mode(self) -> bool:
        return bool(self.barcodes)

    def validate(self) -> None:
        """Raise ConfigError if the configuration cannot be used for a run"""
        if self.input_file_1 is None:
            raise ConfigError("No input file was given (use --file1)")
        if self.paired_ended_mode and self.input_file_2 is None:
            raise ConfigError("Paired-end mode requires a second input file (--file2)")
        if not self.adapters:
            raise ConfigError("At least one adapter sequence is required")
        if self.paired_ended_mode and any(not a.adapter2 for a in self.adapters):
            raise ConfigError("Paired-end mode requires a mate 2 adapter for every adapter")
        if self.shift < 0:
            raise ConfigError("The alignment shift must not be negative")
        if not 0 <= self.mismatch_threshold <= 1:
            raise ConfigError("The mismatch threshold must be between 0 and 1")
        if self.min_genomic_length < 0:
            raise ConfigError("The minimum read length must not be negative")
        if self.max_ambiguous_bases < 0:
            raise ConfigError("The maximum number of Ns must not be negative")
        if self.min_alignment_length < 0:
            raise ConfigError("The minimum alignment length must not be negative")

    def create_stats(self) -> RunStatistics:
        return RunStatistics(len(self.adapters), len(self.barcodes))

    def evaluate_alignment(self, alignment: AlignmentInfo) -> Classification:
        return evaluate_alignment(
            alignment, self.mismatch_threshold, self.min_adapter_overlap
        )

    def is_alignment_collapsible(self, alignment: AlignmentInfo) -> bool:
        return self.collapse and alignment.length >= self.min_alignment_length

    def is_acceptable_read(self, read: Read) -> bool:
        return is_acceptable(read, self.min_genomic_length, self.max_ambiguous_bases)

    def trim_sequence_by_quality_if_enabled(self, read: Read) -> Tuple[bool, bool]:
        if not (self.trim_ambiguous_bases or self.trim_by_quality):
            return False, False
        low_quality_score = self.low_quality_score if self.trim_by_quality else -1
        return trim_by_quality(read, low_quality_score, self.trim_ambiguous_bases)

    def trim_barcodes_if_enabled(self, read: Read, stats: RunStatistics) -> None:
        if not self.trim_barcodes_mode:
            return
        barcode_id = trim_barcodes(read, self.barcodes, self.evaluate_alignment)
        if barcode_id is not None:
            stats.number_of_barcodes_trimmed[barcode_id] += 1

    def output_path(self, option: str, default_suffix: str) -> str:
        """
        Return the path given for the option on the command line or, if there
        is none, the basename with the default suffix appended
        """
        path = self.output_paths.get(option)
        if path is None:
            path = self.basename + default_suffix
        return path
