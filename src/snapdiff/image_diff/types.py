from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


PixelData = bytes | bytearray | memoryview


class ImageDataError(ValueError):
    pass


class Color(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255


class Options(BaseModel):
    """Per-comparison settings for :func:`snapdiff.image_diff.engine.pixelmatch`.

    ``threshold`` is a fraction of the largest possible YIQ distance; 0 only
    accepts identical pixels. ``alpha`` is the opacity of image A in the faded
    diff output. ``diff_color_alt`` is used for diff pixels where image A is
    the brighter one and falls back to ``diff_color``.
    """

    model_config = ConfigDict(frozen=True)

    threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    include_aa: bool = False
    alpha: float = Field(default=0.1, ge=0.0, le=1.0)
    aa_color: Color = Color(255, 255, 0)
    diff_color: Color = Color(255, 0, 0)
    diff_color_alt: Color | None = None
    diff_mask: bool = False

    @field_validator("aa_color", "diff_color", "diff_color_alt")
    @classmethod
    def _check_channels(cls, value: Color | None) -> Color | None:
        if value is not None and any(not 0 <= channel <= 255 for channel in value):
            raise ValueError(f"color channels must be within 0..255, got {tuple(value)}")
        return value


class RGBAImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    stride: int = Field(ge=0)
    data: bytes


class DiffResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    diff_mask_png: str
    diff_score: float
    changed_pixels: int
    total_pixels: int
    width: int
    aligned_height: int
    before_width: int
    before_height: int
    after_width: int
    after_height: int
