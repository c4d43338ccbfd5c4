from __future__ import annotations

import pytest

from snapdiff.image_diff.color import MAX_YIQ_DELTA, blend, color_delta, rgb2y

BLACK = bytes((0, 0, 0, 255))
WHITE = bytes((255, 255, 255, 255))


class TestColorDelta:
    def test_identical_pixels(self):
        px = bytes((12, 34, 56, 78))
        assert color_delta(px, px, 0, 0) == 0

    def test_black_against_white(self):
        delta = color_delta(BLACK, WHITE, 0, 0)
        assert delta == pytest.approx(0.5053 * 255 * 255, rel=1e-6)
        assert delta < MAX_YIQ_DELTA

    def test_sign_encodes_brighter_first_image(self):
        assert color_delta(WHITE, BLACK, 0, 0) < 0
        assert color_delta(BLACK, WHITE, 0, 0) > 0

    def test_magnitude_is_symmetric(self):
        a = bytes((200, 30, 90, 255))
        b = bytes((10, 180, 40, 128))
        assert abs(color_delta(a, b, 0, 0)) == pytest.approx(abs(color_delta(b, a, 0, 0)))

    def test_transparent_pixel_blends_over_white(self):
        transparent = bytes((0, 0, 0, 0))
        assert color_delta(transparent, WHITE, 0, 0) == 0

    def test_offsets(self):
        img1 = BLACK + WHITE
        img2 = WHITE + BLACK
        assert color_delta(img1, img2, 4, 0) == 0
        assert color_delta(img1, img2, 0, 4) == 0

    def test_y_only(self):
        assert color_delta(BLACK, WHITE, 0, 0, y_only=True) == pytest.approx(-255, rel=1e-6)


def test_blend():
    assert blend(0, 0) == 255
    assert blend(100, 1) == 100
    assert blend(55, 0.5) == 155


def test_rgb2y_weights_sum_to_one():
    assert rgb2y(255, 255, 255) == pytest.approx(255)
