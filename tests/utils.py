import os

import dnaio

from adapterremoval.reads import Read


def make_read(sequence, qualities=None, name="read"):
    """Build a Read with uniformly high qualities unless qualities are given"""
    if qualities is None:
        qualities = "I" * len(sequence)
    return Read(name, sequence, qualities)


def write_fastq(path, records):
    """Write (name, sequence, qualities) tuples as FASTQ"""
    with open(path, "w") as f:
        for name, sequence, qualities in records:
            f.write(f"@{name}\n{sequence}\n+\n{qualities}\n")
    return os.fspath(path)


def read_fastq(path):
    with dnaio.open(os.fspath(path), fileformat="fastq") as f:
        return [(record.name, record.sequence, record.qualities) for record in f]


class ListWriter:
    """Collects written reads in memory"""

    def __init__(self):
        self.reads = []

    def write(self, read):
        self.reads.append(read.copy())

    def __len__(self):
        return len(self.reads)

    def __repr__(self):
        return f"ListWriter({self.reads!r})"
