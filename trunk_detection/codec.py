# =============================================================================
# Trunk Detection - SCIP Range Value Codec
# =============================================================================
# SCIP 2.0 encodes every value as a run of printable characters, each
# carrying 6 bits (character code minus 0x30), most significant first.
# =============================================================================

from typing import Sequence

from .errors import FormatError

from .config import (
    SCIP_CHAR_OFFSET,
    SCIP_BITS_PER_CHAR
)

_DIGIT_MASK = (1 << SCIP_BITS_PER_CHAR) - 1
_ZERO_GROUP = '000'


def _digit(char: str, group: str) -> int:
    digit = (ord(char) - ord('!') + 33) - SCIP_CHAR_OFFSET
    if digit < 0 or digit > _DIGIT_MASK:
        raise FormatError(
            f"Invalid SCIP character {char!r} (code {ord(char)}) in group {group!r}",
            group=group
        )
    return digit


def decode_range_value(group: Sequence[str]) -> int:
    """
    Decode a 2- or 3-character SCIP group into an integer distance.

    Args:
        group: Encoded characters (string or sequence of 1-char strings)

    Returns:
        Decoded value: 0-4095 for 2 characters, 0-262143 for 3 characters

    Raises:
        FormatError: wrong group length or a character outside '0'..'o'
    """
    group = ''.join(group)
    if len(group) not in (2, 3):
        raise FormatError(
            f"SCIP group must have 2 or 3 characters, got {len(group)}",
            group=group
        )
    if group == _ZERO_GROUP:
        return 0

    value = 0
    for char in group:
        value = (value << SCIP_BITS_PER_CHAR) | _digit(char, group)
    return value


def encode_range_value(value: int, width: int = 3) -> str:
    """
    Encode a non-negative integer on ``width`` SCIP characters.

    Raises:
        ValueError: value negative or too large for the width
    """
    if value < 0 or value >= 1 << (SCIP_BITS_PER_CHAR * width):
        raise ValueError(f"{value} does not fit in {width} SCIP characters")
    chars = []
    for shift in range(width - 1, -1, -1):
        digit = (value >> (shift * SCIP_BITS_PER_CHAR)) & _DIGIT_MASK
        chars.append(chr(digit + SCIP_CHAR_OFFSET))
    return ''.join(chars)


def scip_checksum(data: str) -> str:
    """Checksum character closing every SCIP line."""
    return chr((sum(ord(c) for c in data) & _DIGIT_MASK) + SCIP_CHAR_OFFSET)


class RangeValueCodec:
    """Stateless wrapper exposing the codec as a component."""

    def decode(self, group: Sequence[str]) -> int:
        return decode_range_value(group)

    def encode(self, value: int, width: int = 3) -> str:
        return encode_range_value(value, width)
