"""Antialiased pixel detection.

Based on "Anti-aliased Pixel and Intensity Slope Detector" by V. Vysniauskas,
2009. A differing pixel is treated as antialiasing when it sits on an
intensity slope between a darker and a brighter neighbour, and one of those
neighbours lies inside a flat region in both images.
"""

from __future__ import annotations

from .color import color_delta
from .types import PixelData


def is_antialiased(
    img: PixelData,
    x1: int,
    y1: int,
    width: int,
    height: int,
    stride: int,
    other: PixelData,
) -> bool:
    x0 = max(x1 - 1, 0)
    y0 = max(y1 - 1, 0)
    x2 = min(x1 + 1, width - 1)
    y2 = min(y1 + 1, height - 1)
    pos = (y1 * stride + x1) * 4
    # pixels on the border count as having one equal sibling
    zeroes = 1 if x1 == x0 or x1 == x2 or y1 == y0 or y1 == y2 else 0
    min_delta = 0.0
    max_delta = 0.0
    min_x = min_y = max_x = max_y = 0

    for x in range(x0, x2 + 1):
        for y in range(y0, y2 + 1):
            if x == x1 and y == y1:
                continue

            delta = color_delta(img, img, pos, (y * stride + x) * 4, y_only=True)

            if delta == 0:
                zeroes += 1
                # more than 2 equal siblings: not antialiasing
                if zeroes > 2:
                    return False
            elif delta < min_delta:
                min_delta = delta
                min_x = x
                min_y = y
            elif delta > max_delta:
                max_delta = delta
                max_x = x
                max_y = y

    # needs both a darker and a brighter sibling
    if min_delta == 0 or max_delta == 0:
        return False

    return (
        has_many_siblings(img, min_x, min_y, width, height, stride)
        and has_many_siblings(other, min_x, min_y, width, height, stride)
    ) or (
        has_many_siblings(img, max_x, max_y, width, height, stride)
        and has_many_siblings(other, max_x, max_y, width, height, stride)
    )


def has_many_siblings(
    img: PixelData, x1: int, y1: int, width: int, height: int, stride: int
) -> bool:
    """Whether the pixel has 3 or more byte-identical neighbours."""
    x0 = max(x1 - 1, 0)
    y0 = max(y1 - 1, 0)
    x2 = min(x1 + 1, width - 1)
    y2 = min(y1 + 1, height - 1)
    pos = (y1 * stride + x1) * 4
    zeroes = 1 if x1 == x0 or x1 == x2 or y1 == y0 or y1 == y2 else 0
    pixel = img[pos : pos + 4]

    for x in range(x0, x2 + 1):
        for y in range(y0, y2 + 1):
            if x == x1 and y == y1:
                continue

            pos2 = (y * stride + x) * 4
            if img[pos2 : pos2 + 4] == pixel:
                zeroes += 1

            if zeroes > 2:
                return True

    return False
