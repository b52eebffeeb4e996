"""Image sink: turn a flat pixel buffer into an RGB image and save it."""

from collections.abc import Sequence
from pathlib import Path

import numpy as np
import structlog
from PIL import Image

from .exceptions import ImageWriteError

logger = structlog.get_logger()


def pixels_to_image(
    pixels: Sequence[tuple[int, int, int]],
    width: int,
    height: int,
) -> Image.Image:
    """Build an RGB image from row-major pixels.

    Pixel (x, y) is taken from index ``y * width + x``. Suitable as a
    ``Grid.extract`` sink.

    Args:
        pixels: ``width * height`` RGB triples.
        width: Image width.
        height: Image height.

    Returns:
        PIL image in mode RGB.

    Raises:
        ValueError: If the pixel count does not match the dimensions.
    """
    if len(pixels) != width * height:
        raise ValueError(
            f"Expected {width * height} pixels for {width}x{height}, got {len(pixels)}"
        )
    array = np.asarray(pixels, dtype=np.uint8).reshape(height, width, 3)
    return Image.fromarray(array)


def save_image(image: Image.Image, path: Path) -> None:
    """Write an image to disk, creating parent directories.

    The format is chosen from the file extension.

    Raises:
        ImageWriteError: If the image cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(path)
    except (OSError, ValueError) as e:
        raise ImageWriteError(f"failed to save image to {path}: {e}") from e

    logger.info("image_saved", path=str(path), width=image.width, height=image.height)
