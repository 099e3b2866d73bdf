"""Translation between dot masks and Unicode braille characters.

Two bit orders are in play. Unicode braille (ISO 11548-1) numbers the dots

    0 3
    1 4
    2 5
    6 7

while the sampler fills cells column by column, which is more convenient
when walking a pixel grid:

    0 4
    1 5
    2 6
    3 7

Masks handed around inside brailletone use the second ("internal") order and
are only converted to the ISO order when a character is produced.
"""
from __future__ import annotations

from typing import Final, Iterable, NamedTuple

from bitarray import bitarray
from bitarray.util import ba2int

from brailletone.base import BRAILLE_DOTS, BRAILLE_RANGE_START

_MASK_RANGE: Final[int] = 1 << BRAILLE_DOTS


class Pattern(NamedTuple):
    """A braille character along with its mask in both bit orders."""

    index: int
    standard_index: int
    braille: str


def _check_mask(mask: int) -> None:
    if not 0 <= mask < _MASK_RANGE:
        raise ValueError(f"Mask must be in range [0, {_MASK_RANGE - 1}], got {mask!r}")


def to_standard_index(internal_mask: int) -> int:
    """Convert a mask in the internal column-major order to ISO 11548-1.

    Dots 0-2 and 7 keep their position, the right column's upper dots (4-6)
    move down one bit and the bottom-left dot (3) moves up to bit 6.

    >>> bin(to_standard_index(0b00001000))
    '0b1000000'
    """
    _check_mask(internal_mask)
    return (
        (internal_mask & 0b10000111)
        | ((internal_mask & 0b01110000) >> 1)
        | ((internal_mask & 0b00001000) << 3)
    )


def to_internal_index(standard_mask: int) -> int:
    """Convert an ISO 11548-1 mask to the internal column-major order.

    This is the inverse of to_standard_index.

    >>> bin(to_internal_index(0b1000000))
    '0b1000'
    """
    _check_mask(standard_mask)
    return (
        (standard_mask & 0b10000111)
        | ((standard_mask & 0b00111000) << 1)
        | ((standard_mask & 0b01000000) >> 3)
    )


def _build_pattern(internal_mask: int) -> Pattern:
    standard_mask = to_standard_index(internal_mask)
    return Pattern(
        index=internal_mask,
        standard_index=standard_mask,
        braille=chr(BRAILLE_RANGE_START + standard_mask),
    )


# Computed once at import time; indexed by internal mask.
PATTERNS: Final[tuple[Pattern, ...]] = tuple(_build_pattern(i) for i in range(_MASK_RANGE))


def pattern_for(internal_mask: int) -> Pattern:
    _check_mask(internal_mask)
    return PATTERNS[internal_mask]


def pattern_for_standard(standard_mask: int) -> Pattern:
    return PATTERNS[to_internal_index(standard_mask)]


def glyph_for(internal_mask: int) -> str:
    """Return the braille character for a mask in the internal order.

    >>> glyph_for(0b00000001)
    '⠁'
    >>> glyph_for(0b11111111)
    '⣿'
    """
    return pattern_for(internal_mask).braille


def glyph_for_standard(standard_mask: int) -> str:
    """Return the braille character for an ISO 11548-1 mask."""
    return pattern_for_standard(standard_mask).braille


def dot_bit(position: int) -> int:
    """Return the single-bit mask for a dot position (internal order)."""
    if not 0 <= position < BRAILLE_DOTS:
        raise ValueError(f"Dot position must be in range [0, {BRAILLE_DOTS - 1}], got {position!r}")
    return 1 << position


def mask_from_dots(dots: Iterable[bool]) -> int:
    """Pack up to eight dot flags, given in internal order, into a mask.

    Missing trailing flags are treated as unset.

    >>> mask_from_dots([True, False, False, False, True])
    17
    """
    bits = bitarray((bool(dot) for dot in dots), endian="little")
    if len(bits) > BRAILLE_DOTS:
        raise ValueError(f"A braille cell has {BRAILLE_DOTS} dots, got {len(bits)} flags")
    bits.extend([0] * (BRAILLE_DOTS - len(bits)))
    return ba2int(bits)
