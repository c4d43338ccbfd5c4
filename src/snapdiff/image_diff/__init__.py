from .engine import pixelmatch
from .types import Color, DiffResult, ImageDataError, Options, RGBAImage

__all__ = ["Color", "DiffResult", "ImageDataError", "Options", "RGBAImage", "pixelmatch"]
