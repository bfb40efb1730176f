import pytest

from adapterremoval.adapters import AdapterPair, DEFAULT_ADAPTER1, DEFAULT_ADAPTER2
from adapterremoval.align import (
    AlignmentInfo,
    AlignmentType,
    align_paired_ended_sequences,
    align_single_ended_sequence,
    classify,
    compare_subsequences,
    evaluate_alignment,
    pairwise_align_sequences,
)
from adapterremoval.reads import reverse_complement
from utils import make_read

INSERT = (
    "ACGTTGCAAGGCTTACCGATGACTGGTCAATCCGTAGCATGCTAACGGTTCAGTCGATCCAGTGAACTGT"
)
DEFAULT_ADAPTERS = [AdapterPair(DEFAULT_ADAPTER1, DEFAULT_ADAPTER2)]


def overlapping_pair():
    """Two 50 bp mates of a 70 bp insert; mate 2 already reverse-complemented"""
    read1 = make_read(INSERT[:50], name="pair")
    read2 = make_read(INSERT[20:70], name="pair")
    return read1, read2


def short_insert_pair():
    """Two 50 bp mates of a 40 bp insert that read 10 bp into the adapters"""
    insert = INSERT[:40]
    read1 = make_read(insert + DEFAULT_ADAPTER1[:10], name="pair")
    read2 = make_read(reverse_complement(insert) + DEFAULT_ADAPTER2[:10], name="pair")
    read2.reverse_complement()
    return read1, read2


def test_score():
    assert AlignmentInfo().score == 0
    assert AlignmentInfo(length=10, n_mismatches=2, n_ambiguous=1).score == 5


def test_is_better_than():
    a = AlignmentInfo(length=10)
    assert a.is_better_than(AlignmentInfo(length=9))
    assert not AlignmentInfo(length=9).is_better_than(a)
    # Same score, fewer ambiguous positions
    b = AlignmentInfo(length=11, n_ambiguous=1)
    assert a.is_better_than(b)
    assert not b.is_better_than(a)
    assert not a.is_better_than(AlignmentInfo(length=10))


@pytest.mark.parametrize(
    "seq1,seq2,offset,length,mismatches,ambiguous",
    [
        ("ACGT", "ACGA", 0, 4, 1, 0),
        ("ACGT", "TTACG", -2, 3, 0, 0),
        ("ACGTAA", "TAAC", 3, 3, 0, 0),
        ("ANGT", "ACCT", 0, 4, 1, 1),
        ("ACGT", "NNNN", 0, 4, 0, 4),
        ("ACGT", "ACGT", 4, 0, 0, 0),
    ],
)
def test_compare_subsequences(seq1, seq2, offset, length, mismatches, ambiguous):
    alignment = compare_subsequences(seq1, seq2, offset)
    assert alignment.offset == offset
    assert alignment.length == length
    assert alignment.n_mismatches == mismatches
    assert alignment.n_ambiguous == ambiguous


def test_pairwise_prefers_smallest_offset_on_ties():
    best = pairwise_align_sequences(AlignmentInfo(), "AAAA", "A", 0)
    assert best.offset == 0
    assert best.length == 1


def test_pairwise_keeps_better_incumbent():
    incumbent = AlignmentInfo(offset=5, length=10, adapter_id=3)
    assert pairwise_align_sequences(incumbent, "ACGT", "ACGT", 0) is incumbent


def test_all_ambiguous_never_aligns():
    best = pairwise_align_sequences(AlignmentInfo(), "NNNNNN", "ACGT", -2)
    assert best.length == 0


def test_align_single_ended():
    read = make_read("T" * 20 + "C" * 8)
    alignment = align_single_ended_sequence(read, [AdapterPair("C" * 12)], max_shift=2)
    assert alignment.offset == 20
    assert alignment.length == 8
    assert alignment.n_mismatches == 0
    assert alignment.adapter_id == 0


def test_align_single_ended_lowest_adapter_wins_ties():
    read = make_read("T" * 20 + "C" * 8)
    adapters = [AdapterPair("G" * 12), AdapterPair("C" * 12), AdapterPair("C" * 12)]
    alignment = align_single_ended_sequence(read, adapters, max_shift=2)
    assert alignment.adapter_id == 1


def test_align_single_ended_shift():
    read = make_read("CGTAAAAAAA")
    adapters = [AdapterPair("TACGT")]
    alignment = align_single_ended_sequence(read, adapters, max_shift=2)
    assert alignment.offset == -2
    assert alignment.length == 3
    assert align_single_ended_sequence(read, adapters, max_shift=0).length == 0


def test_align_paired_overlapping_mates():
    read1, read2 = overlapping_pair()
    alignment = align_paired_ended_sequences(read1, read2, DEFAULT_ADAPTERS, max_shift=2)
    assert alignment.offset == 20
    assert alignment.length == 30
    assert alignment.n_mismatches == 0


def test_align_paired_short_insert():
    read1, read2 = short_insert_pair()
    alignment = align_paired_ended_sequences(read1, read2, DEFAULT_ADAPTERS, max_shift=2)
    # read 2 starts 10 bp upstream of read 1; the alignment spans both adapters
    assert alignment.offset == -10
    assert alignment.length == 60
    assert alignment.n_mismatches == 0


def test_align_paired_no_alignment():
    read1 = make_read("N" * 30)
    read2 = make_read("N" * 30)
    alignment = align_paired_ended_sequences(read1, read2, DEFAULT_ADAPTERS, max_shift=2)
    assert alignment.length == 0


@pytest.mark.parametrize(
    "length,mismatches,expected",
    [
        (0, 0, AlignmentType.NOT_ALIGNED),
        (1, 0, AlignmentType.VALID_ALIGNMENT),
        (5, 0, AlignmentType.VALID_ALIGNMENT),
        (5, 1, AlignmentType.POOR_ALIGNMENT),
        (9, 1, AlignmentType.VALID_ALIGNMENT),
        (9, 2, AlignmentType.POOR_ALIGNMENT),
        (12, 4, AlignmentType.VALID_ALIGNMENT),
        (12, 5, AlignmentType.POOR_ALIGNMENT),
        (30, 10, AlignmentType.VALID_ALIGNMENT),
    ],
)
def test_evaluate_alignment(length, mismatches, expected):
    alignment = AlignmentInfo(length=length, n_mismatches=mismatches)
    classification = evaluate_alignment(alignment, mismatch_threshold=1 / 3)
    assert classification.type is expected
    if expected is AlignmentType.NOT_ALIGNED:
        assert classification.alignment is None
    else:
        assert classification.alignment is alignment


def test_evaluate_alignment_min_adapter_overlap():
    alignment = AlignmentInfo(length=9)
    assert evaluate_alignment(alignment, 1 / 3, min_adapter_overlap=10).type is (
        AlignmentType.POOR_ALIGNMENT
    )
    assert evaluate_alignment(alignment, 1 / 3, min_adapter_overlap=9).type is (
        AlignmentType.VALID_ALIGNMENT
    )


def test_classify_single_read():
    read = make_read(DEFAULT_ADAPTER1)
    alignment, classification = classify(read, DEFAULT_ADAPTERS, 2, 1 / 3)
    assert classification.type is AlignmentType.VALID_ALIGNMENT
    assert alignment.offset == 0
    assert alignment.length == len(DEFAULT_ADAPTER1)
    assert alignment.n_ambiguous == 6
    # Pure function: the read is not modified
    assert read.sequence == DEFAULT_ADAPTER1


def test_classify_pair():
    alignment, classification = classify(overlapping_pair(), DEFAULT_ADAPTERS, 2, 1 / 3)
    assert classification.type is AlignmentType.VALID_ALIGNMENT
    assert alignment.offset == 20
