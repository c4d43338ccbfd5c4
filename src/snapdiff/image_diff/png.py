from __future__ import annotations

from pathlib import Path

from PIL import Image

from .types import ImageDataError, PixelData, RGBAImage


def read_rgba_png(path: str | Path) -> RGBAImage:
    """Decode an image file into tightly packed RGBA8 samples."""
    with Image.open(path) as img:
        rgba = img.convert("RGBA")
    try:
        width, height = rgba.size
        return RGBAImage(width=width, height=height, stride=width, data=rgba.tobytes())
    finally:
        rgba.close()


def _packed_rows(data: PixelData, width: int, height: int, stride: int) -> bytes:
    if stride == width:
        return bytes(data)
    row_bytes = width * 4
    return b"".join(
        bytes(data[y * stride * 4 : y * stride * 4 + row_bytes]) for y in range(height)
    )


def write_rgba_png(
    path: str | Path, data: PixelData, width: int, height: int, stride: int | None = None
) -> None:
    if stride is None:
        stride = width
    if stride < width or len(data) != stride * height * 4:
        raise ImageDataError("Image data size does not match width/height.")

    with Image.frombytes("RGBA", (width, height), _packed_rows(data, width, height, stride)) as img:
        img.save(path, format="PNG")


def images_equal(img1: PixelData, img2: PixelData, width: int, height: int, stride: int) -> bool:
    """Compare two images row by row, ignoring the padding past ``width``."""
    row_bytes = width * 4
    for y in range(height):
        start = y * stride * 4
        if img1[start : start + row_bytes] != img2[start : start + row_bytes]:
            return False
    return True
