import pytest

from adapterremoval.predicates import TooManyN, TooShort, is_acceptable
from utils import make_read


@pytest.mark.parametrize(
    "seq,count,expected",
    [
        ("AAA", 0, False),
        ("AAA", 1, False),
        ("AAACCTTGGN", 1, False),
        ("AAACNNNCTTGGN", 0.5, False),
        ("NNNNNN", 1, True),
        ("ANAAAA", 1 / 6, False),
        ("ANAAAA", 0, True),
        ("", 0.5, False),
    ],
)
def test_too_many_n(seq, count, expected):
    predicate = TooManyN(count=count)
    assert predicate.test(make_read(seq)) == expected


@pytest.mark.parametrize(
    "length,minimum,expected",
    [(0, 0, False), (0, 1, True), (14, 15, True), (15, 15, False), (16, 15, False)],
)
def test_too_short(length, minimum, expected):
    assert TooShort(minimum).test(make_read("A" * length)) == expected


def test_is_acceptable():
    assert is_acceptable(make_read("A" * 15), 15, 1000)
    assert not is_acceptable(make_read("A" * 14), 15, 1000)
    assert not is_acceptable(make_read("A" * 13 + "NN"), 15, 1)
    assert is_acceptable(make_read("A" * 14 + "N"), 15, 1)
    # An empty read is never acceptable once a minimum length is required
    assert not is_acceptable(make_read(""), 1, 1000)
