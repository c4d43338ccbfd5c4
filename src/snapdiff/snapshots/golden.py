"""Golden diff images for visual regression tests.

Compares two renders, then checks the produced diff image against a stored
golden diff. Setting ``UPDATE_TEST_IMAGES`` in the environment rewrites the
golden files from the fresh diffs instead of checking them.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from snapdiff.image_diff.engine import pixelmatch
from snapdiff.image_diff.png import images_equal, read_rgba_png, write_rgba_png
from snapdiff.image_diff.types import ImageDataError, Options, RGBAImage

logger = logging.getLogger(__name__)

UPDATE_ENV_VAR = "UPDATE_TEST_IMAGES"


class GoldenMismatchError(AssertionError):
    pass


class GoldenResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    mismatch: int
    mismatch_without_diff: int
    updated: bool
    diff_matches_golden: bool | None = None
    actual_diff_path: Path | None = None


def should_update_golden() -> bool:
    return os.environ.get(UPDATE_ENV_VAR) is not None


def escape_filename(filename: str | Path) -> str:
    return str(filename).replace("\\", "_").replace("/", "_")


def _check_same_layout(img: RGBAImage, other: RGBAImage, name: str, other_name: str) -> None:
    if img.width != other.width or img.height != other.height:
        raise ImageDataError(f"Size mismatch between {name} and {other_name}")
    if img.stride != other.stride:
        raise ImageDataError(f"Stride mismatch between {name} and {other_name}")


def diff_against_golden(
    path_a: str | Path,
    path_b: str | Path,
    golden_path: str | Path,
    options: Options | None = None,
) -> GoldenResult:
    img1 = read_rgba_png(path_a)
    img2 = read_rgba_png(path_b)
    _check_same_layout(img1, img2, str(path_a), str(path_b))

    diff = bytearray(img1.stride * img1.height * 4)
    mismatch = pixelmatch(
        img1.data, img2.data, diff, img1.width, img1.height, img1.stride, options
    )
    mismatch_without_diff = pixelmatch(
        img1.data, img2.data, None, img1.width, img1.height, img1.stride, options
    )

    if should_update_golden():
        write_rgba_png(golden_path, diff, img1.width, img1.height, img1.stride)
        logger.info("Updated golden diff %s", golden_path, extra={"mismatch": mismatch})
        return GoldenResult(
            mismatch=mismatch,
            mismatch_without_diff=mismatch_without_diff,
            updated=True,
        )

    expected = read_rgba_png(golden_path)
    _check_same_layout(img1, expected, str(path_a), str(golden_path))

    matches = images_equal(diff, expected.data, expected.width, expected.height, expected.stride)
    actual_diff_path = None
    if not matches:
        actual_diff_path = Path(tempfile.gettempdir()) / escape_filename(golden_path)
        logger.warning("Saving actual diff to: %s", actual_diff_path)
        write_rgba_png(actual_diff_path, diff, img1.width, img1.height, img1.stride)

    return GoldenResult(
        mismatch=mismatch,
        mismatch_without_diff=mismatch_without_diff,
        updated=False,
        diff_matches_golden=matches,
        actual_diff_path=actual_diff_path,
    )


def assert_matches_golden(
    path_a: str | Path,
    path_b: str | Path,
    golden_path: str | Path,
    options: Options | None,
    expected_mismatch: int,
) -> GoldenResult:
    result = diff_against_golden(path_a, path_b, golden_path, options)

    if result.diff_matches_golden is False:
        raise GoldenMismatchError(
            f"Computed image diff and expected version in {golden_path} do not match"
        )
    if result.mismatch != expected_mismatch:
        raise GoldenMismatchError(
            f"Different number of mismatched pixels: expected {expected_mismatch}, "
            f"got {result.mismatch}"
        )
    if result.mismatch != result.mismatch_without_diff:
        raise GoldenMismatchError("Mismatched pixels differ when diff output is disabled")
    return result
