"""YIQ color distance.

Based on "Measuring perceived color difference using YIQ NTSC transmission
color space in mobile applications" by Y. Kotsarenko and F. Ramos.
"""

from __future__ import annotations

from .types import PixelData

# Largest possible value of the YIQ distance below.
MAX_YIQ_DELTA = 35215


def rgb2y(r: float, g: float, b: float) -> float:
    return r * 0.29889531 + g * 0.58662247 + b * 0.11448223


def rgb2i(r: float, g: float, b: float) -> float:
    return r * 0.59597799 - g * 0.27417610 - b * 0.32180189


def rgb2q(r: float, g: float, b: float) -> float:
    return r * 0.21147017 - g * 0.52261711 + b * 0.31114694


def blend(c: float, a: float) -> float:
    """Composite channel ``c`` with opacity ``a`` (0..1) over white."""
    return 255 + (c - 255) * a


def color_delta(img1: PixelData, img2: PixelData, k: int, m: int, y_only: bool = False) -> float:
    """Squared YIQ distance between the pixel at byte offset ``k`` of ``img1``
    and the one at ``m`` of ``img2``.

    The result is negative when the ``img1`` pixel is the brighter one. With
    ``y_only`` only the signed brightness difference is returned.
    """
    r1 = img1[k]
    g1 = img1[k + 1]
    b1 = img1[k + 2]
    a1 = img1[k + 3]

    r2 = img2[m]
    g2 = img2[m + 1]
    b2 = img2[m + 2]
    a2 = img2[m + 3]

    if a1 == a2 and r1 == r2 and g1 == g2 and b1 == b2:
        return 0

    if a1 < 255:
        a1 /= 255
        r1 = blend(r1, a1)
        g1 = blend(g1, a1)
        b1 = blend(b1, a1)

    if a2 < 255:
        a2 /= 255
        r2 = blend(r2, a2)
        g2 = blend(g2, a2)
        b2 = blend(b2, a2)

    y1 = rgb2y(r1, g1, b1)
    y2 = rgb2y(r2, g2, b2)
    y = y1 - y2

    if y_only:
        return y

    i = rgb2i(r1, g1, b1) - rgb2i(r2, g2, b2)
    q = rgb2q(r1, g1, b1) - rgb2q(r2, g2, b2)

    delta = 0.5053 * y * y + 0.299 * i * i + 0.1957 * q * q

    return -delta if y1 > y2 else delta
