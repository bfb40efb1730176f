"""
Quality score encodings

Qualities are kept as Phred+33 characters internally (the same representation
dnaio uses) and only converted when reading and writing records.
"""
import math
import re
from enum import Enum
from typing import Dict

from .errors import ConfigError, FormatError

PHRED_OFFSET_33 = 33
PHRED_OFFSET_64 = 64
MAX_PHRED_SCORE_33 = 93
MAX_PHRED_SCORE_64 = 62
MIN_SOLEXA_SCORE = -5


def solexa_to_phred(score: int) -> int:
    return round(10 * math.log10(10 ** (score / 10) + 1))


def phred_to_solexa(score: int) -> int:
    if score <= 0:
        return MIN_SOLEXA_SCORE
    return max(MIN_SOLEXA_SCORE, round(10 * math.log10(10 ** (score / 10) - 1)))


class QualityFormat(Enum):
    PHRED_33 = "33"
    PHRED_64 = "64"
    SOLEXA = "solexa"

    def decode(self, qualities: str) -> str:
        """Convert qualities in this encoding to Phred+33"""
        if _INVALID_CHARACTERS[self].search(qualities):
            raise FormatError(self._describe_invalid(qualities))
        if self is QualityFormat.PHRED_33:
            return qualities
        return qualities.translate(_DECODING[self])

    def encode(self, qualities: str) -> str:
        """Convert Phred+33 qualities to this encoding"""
        if self is QualityFormat.PHRED_33:
            return qualities
        return qualities.translate(_ENCODING[self])

    def _describe_invalid(self, qualities: str) -> str:
        lowest, highest = min(qualities), max(qualities)
        found = f"found {lowest!r}..{highest!r}"
        if self is QualityFormat.PHRED_33:
            return f"Phred+33 quality score out of range: {found}"
        if self is QualityFormat.PHRED_64:
            message = f"Phred+64 quality score out of range: {found}"
            if ord(lowest) < PHRED_OFFSET_64:
                message += "; input may be Phred+33 encoded (use --qualitybase 33)"
            return message
        return f"Solexa quality score out of range: {found}"


def _character_class(offset: int, minimum: int, maximum: int) -> "re.Pattern[str]":
    low = re.escape(chr(offset + minimum))
    high = re.escape(chr(offset + maximum))
    return re.compile(f"[^{low}-{high}]")


def _decoding_table(minimum: int, convert=None) -> Dict[int, int]:
    table = {}
    for score in range(minimum, MAX_PHRED_SCORE_64 + 1):
        phred = convert(score) if convert is not None else score
        table[score + PHRED_OFFSET_64] = phred + PHRED_OFFSET_33
    return table


def _encoding_table(convert=None) -> Dict[int, int]:
    table = {}
    for phred in range(MAX_PHRED_SCORE_33 + 1):
        score = convert(phred) if convert is not None else phred
        table[phred + PHRED_OFFSET_33] = min(score, MAX_PHRED_SCORE_64) + PHRED_OFFSET_64
    return table


_INVALID_CHARACTERS = {
    QualityFormat.PHRED_33: _character_class(PHRED_OFFSET_33, 0, MAX_PHRED_SCORE_33),
    QualityFormat.PHRED_64: _character_class(PHRED_OFFSET_64, 0, MAX_PHRED_SCORE_64),
    QualityFormat.SOLEXA: _character_class(
        PHRED_OFFSET_64, MIN_SOLEXA_SCORE, MAX_PHRED_SCORE_64
    ),
}

_DECODING = {
    QualityFormat.PHRED_64: _decoding_table(0),
    QualityFormat.SOLEXA: _decoding_table(MIN_SOLEXA_SCORE, solexa_to_phred),
}

_ENCODING = {
    QualityFormat.PHRED_64: _encoding_table(),
    QualityFormat.SOLEXA: _encoding_table(phred_to_solexa),
}


def describe_quality_format(fmt) -> str:
    if fmt is QualityFormat.PHRED_33:
        return "Phred+33"
    elif fmt is QualityFormat.PHRED_64:
        return "Phred+64"
    elif fmt is QualityFormat.SOLEXA:
        return "Solexa"
    raise ConfigError(f"invalid quality score format: {fmt!r}")
