from __future__ import annotations

import base64
import io

from PIL import Image, ImageDraw

from snapdiff.image_diff.compare import DEFAULT_OPTIONS, compare_images, compare_images_batch
from snapdiff.image_diff.types import Options


def _make_solid_image(width: int, height: int, color: tuple[int, int, int, int]) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


def _decode_mask(diff_mask_png: str) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(diff_mask_png)))


class TestCompareImages:
    def test_identical_images(self):
        img = _make_solid_image(100, 100, (128, 128, 128, 255))
        result = compare_images(img, img.copy())
        assert result is not None
        assert result.diff_score == 0.0
        assert result.changed_pixels == 0
        assert result.total_pixels == 100 * 100

    def test_different_sizes(self):
        small = _make_solid_image(30, 30, (100, 100, 100, 255))
        large = _make_solid_image(50, 50, (100, 100, 100, 255))
        result = compare_images(small, large)
        assert result is not None
        assert result.width == 50
        assert result.aligned_height == 50
        assert result.before_width == 30
        assert result.before_height == 30
        assert result.after_width == 50
        assert result.after_height == 50
        assert result.changed_pixels == 50 * 50 - 30 * 30

    def test_modified_block(self):
        before = _make_solid_image(100, 100, (100, 100, 100, 255))
        after = _make_solid_image(100, 100, (100, 100, 100, 255))
        draw = ImageDraw.Draw(after)
        draw.rectangle((10, 10, 29, 29), fill=(255, 0, 0, 255))
        result = compare_images(before, after)
        assert result is not None
        assert result.changed_pixels == 20 * 20
        assert result.diff_score == 400 / 10000

        with _decode_mask(result.diff_mask_png) as mask:
            assert mask.mode == "L"
            assert mask.size == (100, 100)
            assert mask.getpixel((15, 15)) == 255
            assert mask.getpixel((50, 50)) == 0
            assert mask.histogram()[255] == 400

    def test_threshold_option(self):
        before = _make_solid_image(20, 20, (100, 100, 100, 255))
        after = _make_solid_image(20, 20, (102, 102, 102, 255))
        strict = compare_images(before, after)
        tolerant = compare_images(before, after, options=Options(threshold=0.1))
        assert strict is not None and tolerant is not None
        assert strict.changed_pixels == 400
        assert tolerant.changed_pixels == 0

    def test_bytes_input(self):
        img = _make_solid_image(30, 30, (128, 128, 128, 255))
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        img_bytes = buf.getvalue()

        result = compare_images(img_bytes, img_bytes)
        assert result is not None
        assert result.diff_score == 0.0

    def test_invalid_bytes(self):
        assert compare_images(b"not an image", b"not an image") is None


class TestCompareImagesBatch:
    def test_batch_returns_correct_count(self):
        img1 = _make_solid_image(50, 50, (100, 100, 100, 255))
        img2 = _make_solid_image(50, 50, (200, 200, 200, 255))

        results = compare_images_batch(
            [
                (img1, img1.copy()),
                (img1, img2),
            ]
        )

        assert len(results) == 2
        assert results[0] is not None
        assert results[1] is not None
        assert results[0].diff_score == 0.0
        assert results[1].diff_score > 0.0

    def test_batch_single_pair_matches_single(self):
        before = _make_solid_image(50, 50, (100, 100, 100, 255))
        after = _make_solid_image(50, 50, (200, 200, 200, 255))

        single = compare_images(before, after)
        batch = compare_images_batch([(before, after)])[0]

        assert single is not None
        assert batch is not None
        assert single.diff_score == batch.diff_score
        assert single.changed_pixels == batch.changed_pixels

    def test_failed_pair_does_not_fail_batch(self):
        img = _make_solid_image(10, 10, (100, 100, 100, 255))
        results = compare_images_batch([(b"garbage", img), (img, img.copy())])
        assert results[0] is None
        assert results[1] is not None
        assert results[1].changed_pixels == 0


class TestMaskOptions:
    def test_default_options_leave_mask_to_comparison(self):
        assert DEFAULT_OPTIONS.diff_mask is False

    def test_mask_without_diff_mask_option(self):
        before = _make_solid_image(10, 10, (100, 100, 100, 255))
        after = _make_solid_image(10, 10, (100, 100, 100, 255))
        after.putpixel((4, 4), (255, 0, 0, 255))
        result = compare_images(before, after, options=Options(threshold=0, diff_mask=False))
        assert result is not None
        assert result.changed_pixels == 1

        with _decode_mask(result.diff_mask_png) as mask:
            assert mask.histogram()[255] == 1
            assert mask.getpixel((4, 4)) == 255
