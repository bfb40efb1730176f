from adapterremoval import __version__
from adapterremoval.adapters import AdapterPair, DEFAULT_ADAPTER1, DEFAULT_ADAPTER2
from adapterremoval.config import RunConfiguration
from adapterremoval.qualities import QualityFormat
from adapterremoval.report import settings_report, statistics_report, write_settings
from adapterremoval.statistics import RunStatistics


def test_settings_report_single_end():
    config = RunConfiguration(input_file_1="in.fastq", seed=1234)
    assert settings_report(config).splitlines() == [
        f"Running adapterremoval {__version__} using the following options:",
        "RNG seed: 1234",
        "Single end mode",
        f"PCR1[0]: {DEFAULT_ADAPTER1}",
        "Alignment shift value: 2",
        "Global mismatch threshold: 0.333333",
        "Quality format (input): Phred+33",
        "Quality format (output): Phred+33",
        "Trimming Ns: No",
        "Trimming Phred scores <= 2: no",
        "Minimum genomic length: 15",
        "Collapse overlapping reads: No",
        "Minimum overlap (in case of collapse): 11",
    ]


def test_settings_report_paired_end():
    config = RunConfiguration(
        input_file_1="in_1.fastq",
        input_file_2="in_2.fastq",
        paired_ended_mode=True,
        adapters=[AdapterPair(DEFAULT_ADAPTER1, DEFAULT_ADAPTER2), AdapterPair("AAAA", "CCCC")],
        barcodes=["ACGTAC"],
        quality_input_fmt=QualityFormat.PHRED_64,
        quality_output_fmt=QualityFormat.SOLEXA,
        mismatch_threshold=0.1,
        trim_ambiguous_bases=True,
        trim_by_quality=True,
        low_quality_score=10,
        collapse=True,
        seed=1,
    )
    lines = settings_report(config).splitlines()
    assert lines[2] == "Paired end mode"
    assert lines[3:8] == [
        f"PCR1[0]: {DEFAULT_ADAPTER1}",
        f"PCR2[0]: {DEFAULT_ADAPTER2}",
        "PCR1[1]: AAAA",
        "PCR2[1]: CCCC",
        "Mate 1 5' barcode[0]: ACGTAC",
    ]
    assert "Global mismatch threshold: 0.1" in lines
    assert "Quality format (input): Phred+64" in lines
    assert "Quality format (output): Solexa" in lines
    assert "Trimming Ns: Yes" in lines
    assert "Trimming Phred scores <= 10: yes" in lines
    assert "Collapse overlapping reads: Yes" in lines


def test_statistics_report_single_end():
    config = RunConfiguration(input_file_1="in.fastq")
    stats = RunStatistics()
    stats.records = 10
    stats.unaligned_reads = 5
    stats.well_aligned_reads = 4
    stats.poorly_aligned_reads = 1
    stats.discard1 = 2
    stats.keep1 = 8
    stats.number_of_reads_with_adapter[0] = 4
    stats.total_number_of_good_reads = 8
    stats.total_number_of_nucleotides = 300
    assert statistics_report(config, stats).splitlines() == [
        "",
        "Total number of reads: 10",
        "Number of unaligned reads: 5",
        "Number of well aligned reads: 4",
        "Number of inadequate alignments: 1",
        "Number of discarded mate 1 reads: 2",
        "Number of singleton mate 1 reads: 8",
        "",
        "Number of reads with adapters[0]: 4",
        "Number of retained reads: 8",
        "Number of retained nucleotides: 300",
        "Average read length of trimmed reads: 37.5",
    ]


def test_statistics_report_paired_end_with_collapse():
    config = RunConfiguration(
        input_file_1="in_1.fastq",
        input_file_2="in_2.fastq",
        paired_ended_mode=True,
        collapse=True,
    )
    stats = config.create_stats()
    stats.records = 3
    stats.number_of_full_length_collapsed = 2
    stats.number_of_truncated_collapsed = 1
    lines = statistics_report(config, stats).splitlines()
    assert "Total number of read pairs: 3" in lines
    assert "Number of unaligned read pairs: 0" in lines
    assert "Number of discarded mate 2 reads: 0" in lines
    assert "Number of singleton mate 2 reads: 0" in lines
    assert "Number of full-length collapsed pairs: 2" in lines
    assert "Number of truncated collapsed pairs: 1" in lines
    assert "Average read length of trimmed reads: 0" in lines


def test_write_settings(tmp_path):
    config = RunConfiguration(input_file_1="in.fastq", seed=5)
    path = tmp_path / "out.settings"
    with open(path, "w") as f:
        write_settings(config, f)
    assert path.read_text() == settings_report(config)
