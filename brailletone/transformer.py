from __future__ import annotations

import dataclasses
import logging
import math
import numbers
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import PIL.Image
from PIL.Image import Image, Resampling

from brailletone.base import (
    BRAILLE_COLS,
    BRAILLE_ROWS,
    DOT_PITCH,
    LINE_TERMINATOR,
    LUMA_SCALE,
    LUMA_WEIGHTS,
)
from brailletone.encoder import dot_bit, glyph_for
from brailletone.errors import ConfigurationError, TransformError

logger = logging.getLogger(__name__)

# Offsets of the 4x4 neighbourhood sampled around a dot's top-left core pixel.
# 0 and 1 are the 2x2 core, -1 and 2 the rim.
_CHUNK_OFFSETS = (-1, 0, 1, 2)
_CORE_OFFSETS = (0, 1)

HTML_STYLE = (
    "body { font: normal 12px/1.1em monospace; display: block; margin: 1em; white-space: nowrap; } "
    "body > span { display: inline-block; width: 0.5em; }"
)

DarknessGrid = Sequence[Sequence[float]]


def _is_int(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class TransformConfig:
    """Parameters of an image to braille transformation.

    Attributes:
        width: Width of the output in characters.
        height: Height of the output in characters.
        tracking: Extra spacing between characters, in dots.
        leading: Extra spacing between lines, in dots.
        threshold: Darkness, between 0 (white) and 1 (black), at or above which
            a dot is plotted.
        edge_weight: Weight of the rim pixels surrounding each dot's 2x2 core.
        resample: Pillow filter used to rescale the source image.
    """

    width: int
    height: int
    tracking: int = 0
    leading: int = 0
    threshold: float = 0.5
    edge_weight: float = 1.0
    resample: Resampling = Resampling.BOX

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not _is_int(value) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        for name in ("tracking", "leading"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
        if not _is_real(self.threshold) or not 0 <= self.threshold <= 1:
            raise ConfigurationError(f"threshold must be in range [0, 1], got {self.threshold!r}")
        if (
            not _is_real(self.edge_weight)
            or not math.isfinite(self.edge_weight)
            or self.edge_weight < 0
        ):
            raise ConfigurationError(
                f"edge_weight must be a finite non-negative number, got {self.edge_weight!r}"
            )
        try:
            Resampling(self.resample)
        except ValueError:
            raise ConfigurationError(f"Unknown resampling filter {self.resample!r}") from None

    @property
    def x_step(self) -> int:
        """Horizontal distance between character origins, in scaled pixels."""
        return (BRAILLE_COLS + self.tracking) * DOT_PITCH

    @property
    def y_step(self) -> int:
        """Vertical distance between character origins, in scaled pixels."""
        return (BRAILLE_ROWS + self.leading) * DOT_PITCH

    @property
    def scaled_size(self) -> tuple[int, int]:
        """Size the source image is rescaled to before sampling.

        The trailing rim of the last dot in each direction is left out, hence
        the -1.
        """
        dots_x = self.width * BRAILLE_COLS + self.tracking * (self.width - 1)
        dots_y = self.height * BRAILLE_ROWS + self.leading * (self.height - 1)
        return dots_x * DOT_PITCH - 1, dots_y * DOT_PITCH - 1

    def without_spacing(self) -> TransformConfig:
        return dataclasses.replace(self, tracking=0, leading=0)


def darkness_grid(image: Image) -> list[list[float]]:
    """Return the darkness (1 - relative luminance) of every pixel, row by row.

    Alpha is ignored.
    """
    image = image.convert("RGB")
    if image.width < 1 or image.height < 1:
        return []
    raw = image.tobytes()
    stride = image.width * 3
    w_r, w_g, w_b = LUMA_WEIGHTS
    return [
        [
            1.0 - (w_r * raw[i] + w_g * raw[i + 1] + w_b * raw[i + 2]) / LUMA_SCALE
            for i in range(row_start, row_start + stride, 3)
        ]
        for row_start in range(0, len(raw), stride)
    ]


class ImageTransformer:
    """Converts images to a grid of braille characters.

    The image is rescaled so that every dot of the output maps onto a 2x2 block
    of pixels surrounded by a 1-pixel rim. A dot is plotted when the weighted
    mean darkness over its block and rim reaches the threshold.

    Examples:
        >>> from PIL import Image
        >>> transformer = ImageTransformer(width=2, height=1)
        >>> transformer.transform(Image.new("RGB", (10, 10), "black"))
        '⣿⣿\\r\\n'
    """

    __slots__ = ("config",)

    def __init__(
        self,
        width: int,
        height: int,
        tracking: int = 0,
        leading: int = 0,
        threshold: float = 0.5,
        edge_weight: float = 1.0,
        resample: Resampling = Resampling.BOX,
    ) -> None:
        self.config = TransformConfig(
            width=width,
            height=height,
            tracking=tracking,
            leading=leading,
            threshold=threshold,
            edge_weight=edge_weight,
            resample=resample,
        )

    @classmethod
    def from_config(cls, config: TransformConfig) -> ImageTransformer:
        return cls(**{f.name: getattr(config, f.name) for f in dataclasses.fields(config)})

    def __repr__(self) -> str:
        return f"ImageTransformer({self.config!r})"

    def chunk_darkness(self, darkness: DarknessGrid, x_start: int, y_start: int) -> float:
        """Return the weighted darkness of the dot whose core starts at (x_start, y_start).

        Pixels outside the image are skipped. If no pixel of the neighbourhood
        carries any weight (the dot lies entirely off the image), the dot is
        considered white.
        """
        height = len(darkness)
        width = len(darkness[0]) if height else 0
        edge_weight = self.config.edge_weight

        total = 0.0
        weights = 0.0
        for dx in _CHUNK_OFFSETS:
            x = x_start + dx
            if x < 0 or x >= width:
                continue
            for dy in _CHUNK_OFFSETS:
                y = y_start + dy
                if y < 0 or y >= height:
                    continue
                if dx in _CORE_OFFSETS and dy in _CORE_OFFSETS:
                    total += darkness[y][x]
                    weights += 1.0
                else:
                    total += darkness[y][x] * edge_weight
                    weights += edge_weight

        if weights == 0:
            return 0.0
        return total / weights

    def check_chunk_brightness(self, darkness: DarknessGrid, x_start: int, y_start: int) -> bool:
        """Whether the dot whose core starts at (x_start, y_start) should be plotted."""
        return self.chunk_darkness(darkness, x_start, y_start) >= self.config.threshold

    def transform_masks(self, image: Image | str | Path) -> list[list[int]]:
        """Return the dot mask (internal order) of every output character, row by row."""
        return self._masks(image, self.config)

    def transform_rows(self, image: Image | str | Path) -> list[str]:
        """Return the braille lines of the image, without line terminators."""
        return ["".join(glyph_for(mask) for mask in row) for row in self.transform_masks(image)]

    def transform(self, image: Image | str | Path) -> str:
        """Transform an image into braille text.

        Every line, including the last one, is terminated by CR-LF, so the
        result is exactly (width + 2) * height characters long.
        """
        return "".join(row + LINE_TERMINATOR for row in self.transform_rows(image))

    def transform_compact_html(self, image: Image | str | Path) -> str:
        """Transform an image into an HTML document.

        Each character is wrapped in a fixed-width span, so tracking and leading
        are ignored in this mode.
        """
        parts = [f"<head><style>{HTML_STYLE}</style></head><body>"]
        for row in self._masks(image, self.config.without_spacing()):
            parts.extend(f"<span>{glyph_for(mask)}</span>" for mask in row)
            parts.append("<br>")
        parts.append("</body>")
        return "".join(parts)

    def _masks(self, image: Image | str | Path, config: TransformConfig) -> list[list[int]]:
        darkness = darkness_grid(self._rescale(image, config))

        rows = []
        for char_y in range(config.height):
            y_origin = char_y * config.y_step
            row = []
            for char_x in range(config.width):
                x_origin = char_x * config.x_step
                mask = 0
                for dot_y in range(BRAILLE_ROWS):
                    for dot_x in range(BRAILLE_COLS):
                        if self.check_chunk_brightness(
                            darkness,
                            x_origin + dot_x * DOT_PITCH,
                            y_origin + dot_y * DOT_PITCH,
                        ):
                            mask |= dot_bit(dot_y + dot_x * BRAILLE_ROWS)
                row.append(mask)
            rows.append(row)

        logger.debug("Transformed image into %dx%d characters", config.width, config.height)
        return rows

    @staticmethod
    def _rescale(image: Image | str | Path, config: TransformConfig) -> Image:
        if isinstance(image, (str, Path)):
            try:
                opened = PIL.Image.open(image)
            except OSError as e:
                raise TransformError(f"Unable to open image {image}") from e
            with opened:
                return ImageTransformer._rescale(opened, config)

        if image.width < 1 or image.height < 1:
            raise TransformError(f"Cannot transform an empty image ({image.width}x{image.height})")

        size = config.scaled_size
        logger.debug(
            "Rescaling %dx%d image to %dx%d using %s",
            image.width,
            image.height,
            *size,
            Resampling(config.resample).name,
        )
        try:
            scaled = image.convert("RGB").resize(size, resample=config.resample)
        except (ValueError, OSError) as e:
            raise TransformError(f"Unable to rescale image to {size[0]}x{size[1]}") from e

        if scaled.size != size:
            raise TransformError(f"Rescaled image is {scaled.size}, expected {size}")
        return scaled
