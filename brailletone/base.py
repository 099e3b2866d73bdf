from typing import Final

BRAILLE_COLS: Final[int] = 2
BRAILLE_ROWS: Final[int] = 4
BRAILLE_DOTS: Final[int] = BRAILLE_COLS * BRAILLE_ROWS

BRAILLE_RANGE_START: Final[int] = 0x2800

# Each dot is a 2x2 pixel core plus a 1-pixel rim shared with its neighbours,
# so dots sit 3 scaled pixels apart.
DOT_PITCH: Final[int] = 3

LINE_TERMINATOR: Final[str] = "\r\n"

# Rec. 709 relative luminance coefficients, scaled to integers so that pure
# white maps to exactly 1.0
LUMA_WEIGHTS: Final[tuple[int, int, int]] = (2126, 7152, 722)
LUMA_SCALE: Final[int] = 255 * sum(LUMA_WEIGHTS)
