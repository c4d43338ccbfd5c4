from __future__ import annotations

import base64
import io
import logging
from collections.abc import Sequence

from PIL import Image

from .engine import pixelmatch
from .types import DiffResult, Options

logger = logging.getLogger(__name__)

DIFF_THRESHOLD = 0.0

DEFAULT_OPTIONS = Options(threshold=DIFF_THRESHOLD, include_aa=False)


def _as_image(source: bytes | Image.Image) -> Image.Image:
    if isinstance(source, bytes):
        img = Image.open(io.BytesIO(source))
        try:
            img.load()
        except Exception:
            img.close()
            raise
        return img
    return source


def _aligned_rgba(img: Image.Image, width: int, height: int) -> Image.Image:
    rgba = img.convert("RGBA")
    if rgba.size == (width, height):
        return rgba
    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    canvas.paste(rgba, (0, 0))
    rgba.close()
    return canvas


def _mask_from_diff_output(diff: bytearray, width: int, height: int) -> Image.Image:
    with Image.frombytes("RGBA", (width, height), bytes(diff)) as rgba:
        alpha = rgba.getchannel("A")
    try:
        return alpha.point(lambda px: 255 if px > 0 else 0)
    finally:
        alpha.close()


def _encode_mask_png_base64(mask: Image.Image) -> str:
    buf = io.BytesIO()
    mask.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


def compare_images(
    before: bytes | Image.Image,
    after: bytes | Image.Image,
    options: Options | None = None,
) -> DiffResult | None:
    return compare_images_batch([(before, after)], options=options)[0]


def compare_images_batch(
    pairs: Sequence[tuple[bytes | Image.Image, bytes | Image.Image]],
    options: Options | None = None,
) -> list[DiffResult | None]:
    if options is None:
        options = DEFAULT_OPTIONS
    return [
        _compare_single_pair(idx, before, after, options)
        for idx, (before, after) in enumerate(pairs)
    ]


def _compare_single_pair(
    idx: int,
    before: bytes | Image.Image,
    after: bytes | Image.Image,
    options: Options,
) -> DiffResult | None:
    before_img: Image.Image | None = None
    after_img: Image.Image | None = None
    before_rgba: Image.Image | None = None
    after_rgba: Image.Image | None = None
    diff_mask: Image.Image | None = None
    try:
        before_img = _as_image(before)
        after_img = _as_image(after)
        bw, bh = before_img.size
        aw, ah = after_img.size
        max_w = max(bw, aw)
        max_h = max(bh, ah)

        before_rgba = _aligned_rgba(before_img, max_w, max_h)
        after_rgba = _aligned_rgba(after_img, max_w, max_h)

        # the mask is taken from the diff alpha channel, so non-diff pixels
        # must come out transparent
        mask_options = options.model_copy(update={"diff_mask": True})
        diff = bytearray(max_w * max_h * 4)
        changed_pixels = pixelmatch(
            before_rgba.tobytes(),
            after_rgba.tobytes(),
            diff,
            max_w,
            max_h,
            options=mask_options,
        )

        total_pixels = max_w * max_h
        diff_score = changed_pixels / total_pixels if total_pixels else 0.0

        if changed_pixels == 0:
            diff_mask = Image.new("L", (max_w, max_h), 0)
        else:
            diff_mask = _mask_from_diff_output(diff, max_w, max_h)

        diff_mask_png = _encode_mask_png_base64(diff_mask)

        return DiffResult(
            diff_mask_png=diff_mask_png,
            diff_score=diff_score,
            changed_pixels=changed_pixels,
            total_pixels=total_pixels,
            aligned_height=max_h,
            width=max_w,
            before_width=bw,
            before_height=bh,
            after_width=aw,
            after_height=ah,
        )
    except Exception:
        logger.exception("Failed to compare image pair %d", idx)
        return None
    finally:
        for img in (before_rgba, after_rgba):
            if img is not None:
                img.close()
        if before_img is not None and isinstance(before, bytes):
            before_img.close()
        if after_img is not None and isinstance(after, bytes):
            after_img.close()
        if diff_mask is not None:
            diff_mask.close()
