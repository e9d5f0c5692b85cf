"""
TrueFrame Image Buffer
Decoded RGBA pixel data shared read-only by every feature extractor.
"""

import io
import logging

import numpy as np
from PIL import Image

from .exceptions import ImageDecodeError

logger = logging.getLogger(__name__)


class ImageBuffer:
    """
    Flat RGBA buffer: width x height pixels, 4 uint8 samples each, in
    (R, G, B, A) order. The underlying array is marked read-only.
    """

    __slots__ = ('width', 'height', 'data')

    def __init__(self, width: int, height: int, data: np.ndarray):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid dimensions: {width}x{height}")

        data = np.ascontiguousarray(data, dtype=np.uint8).reshape(-1)
        if data.size != width * height * 4:
            raise ValueError(
                f"Buffer length {data.size} does not match {width}x{height}x4"
            )
        data.flags.writeable = False

        self.width = width
        self.height = height
        self.data = data

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'ImageBuffer':
        """Build a buffer from an (H, W, 4) or (H, W, 3) array; RGB gets opaque alpha."""
        array = np.asarray(array, dtype=np.uint8)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(f"Expected an (H, W, 3|4) array, got shape {array.shape}")

        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)

        height, width = array.shape[:2]
        return cls(width, height, array)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def red(self) -> np.ndarray:
        """Red channel as an (H, W) view."""
        return self.data[0::4].reshape(self.height, self.width)

    def __len__(self) -> int:
        return self.data.size

    def __repr__(self) -> str:
        return f"ImageBuffer({self.width}x{self.height})"


def decode_image(image_data: bytes) -> ImageBuffer:
    """
    Decode raw image bytes into an RGBA ImageBuffer.

    Raises:
        ImageDecodeError: if Pillow cannot read the data.
    """
    try:
        image = Image.open(io.BytesIO(image_data))
        image.load()
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return ImageBuffer(image.width, image.height, np.asarray(image))
    except Exception as e:
        logger.error(f"Image decode failed: {e}")
        raise ImageDecodeError(f"Could not decode image: {e}") from e
