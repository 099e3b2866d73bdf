from brailletone.base import BRAILLE_COLS, BRAILLE_RANGE_START, BRAILLE_ROWS
from brailletone.encoder import (
    PATTERNS,
    Pattern,
    dot_bit,
    glyph_for,
    glyph_for_standard,
    mask_from_dots,
    pattern_for,
    pattern_for_standard,
    to_internal_index,
    to_standard_index,
)
from brailletone.errors import BrailleError, ConfigurationError, TransformError
from brailletone.transformer import ImageTransformer, TransformConfig

__all__ = [
    "BRAILLE_COLS",
    "BRAILLE_RANGE_START",
    "BRAILLE_ROWS",
    "PATTERNS",
    "BrailleError",
    "ConfigurationError",
    "ImageTransformer",
    "Pattern",
    "TransformConfig",
    "TransformError",
    "dot_bit",
    "glyph_for",
    "glyph_for_standard",
    "mask_from_dots",
    "pattern_for",
    "pattern_for_standard",
    "to_internal_index",
    "to_standard_index",
]
