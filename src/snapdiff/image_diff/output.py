from __future__ import annotations

import enum

from .color import blend, rgb2y
from .types import Color, Options, PixelData

TRANSPARENT = Color(0, 0, 0, 0)


class PixelClass(enum.Enum):
    MATCH = "match"
    ANTIALIASED = "antialiased"
    DIFF = "diff"


def draw_pixel(output: bytearray | memoryview, pos: int, color: Color) -> None:
    output[pos] = color.r
    output[pos + 1] = color.g
    output[pos + 2] = color.b
    output[pos + 3] = color.a


def draw_gray_pixel(
    img: PixelData, pos: int, alpha: float, output: bytearray | memoryview
) -> None:
    """Draw the pixel of ``img`` as grayscale faded towards white by ``alpha``."""
    r = img[pos]
    g = img[pos + 1]
    b = img[pos + 2]
    val = int(blend(rgb2y(r, g, b), alpha * img[pos + 3] / 255))
    draw_pixel(output, pos, Color(val, val, val, 255))


def compose_pixel(
    output: bytearray | memoryview,
    pos: int,
    kind: PixelClass,
    img1: PixelData,
    delta: float,
    options: Options,
) -> None:
    """Render one pixel of the diff image.

    ``delta`` is the signed color distance for the pixel; it is negative when
    the pixel of ``img1`` is brighter than its counterpart.
    """
    if kind is PixelClass.DIFF:
        color = options.diff_color
        if delta < 0 and options.diff_color_alt is not None:
            color = options.diff_color_alt
        draw_pixel(output, pos, color._replace(a=255))
    elif options.diff_mask:
        # masks only show real differences
        draw_pixel(output, pos, TRANSPARENT)
    elif kind is PixelClass.ANTIALIASED:
        draw_pixel(output, pos, options.aa_color._replace(a=255))
    else:
        draw_gray_pixel(img1, pos, options.alpha, output)
