from __future__ import annotations

from .antialiasing import is_antialiased
from .color import MAX_YIQ_DELTA, color_delta
from .output import PixelClass, compose_pixel
from .types import ImageDataError, Options, PixelData


def _check_image_data(
    img1: PixelData,
    img2: PixelData,
    output: bytearray | memoryview | None,
    width: int,
    height: int,
    stride: int,
) -> None:
    if stride < width:
        raise ImageDataError("Stride must be at least the image width.")
    expected = stride * height * 4
    if len(img1) != expected or len(img2) != expected:
        raise ImageDataError("Image data size does not match width/height.")
    if output is not None and len(output) != expected:
        raise ImageDataError("Image sizes do not match.")


def pixelmatch(
    img1: PixelData,
    img2: PixelData,
    output: bytearray | memoryview | None,
    width: int,
    height: int,
    stride: int | None = None,
    options: Options | None = None,
) -> int:
    """Compare two RGBA8 images and return the number of mismatched pixels.

    ``img1`` and ``img2`` hold ``stride * height`` pixels, of which the
    ``width`` leftmost of each row are compared. When ``output`` is given it
    receives the diff image in the same layout; every compared pixel of it is
    overwritten. Pixels that differ only because of antialiasing are not
    counted unless ``options.include_aa`` is set.

    Raises :class:`ImageDataError` when the buffer sizes do not agree with
    each other or with ``width``, ``height`` and ``stride``.
    """
    if stride is None:
        stride = width
    if options is None:
        options = Options()

    _check_image_data(img1, img2, output, width, height, stride)

    # maximum acceptable square distance between two colors
    max_delta = MAX_YIQ_DELTA * options.threshold * options.threshold
    diff = 0

    for y in range(height):
        for x in range(width):
            pos = (y * stride + x) * 4

            delta = color_delta(img1, img2, pos, pos)

            if abs(delta) > max_delta:
                if not options.include_aa and (
                    is_antialiased(img1, x, y, width, height, stride, img2)
                    or is_antialiased(img2, x, y, width, height, stride, img1)
                ):
                    kind = PixelClass.ANTIALIASED
                else:
                    kind = PixelClass.DIFF
                    diff += 1
            else:
                kind = PixelClass.MATCH

            if output is not None:
                compose_pixel(output, pos, kind, img1, delta, options)

    return diff
