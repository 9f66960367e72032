"""Plain-text PPM (P3) encoder.

The format is a header ``P3``, ``width height`` and the maximum channel
value ``255``, followed by one ``R G B`` line per pixel. Pixels are written
top row first, left to right within a row, which is exactly the row order
of the arrays produced by :func:`glint.core.integrator.get_image_numpy`.

Example:
    >>> import sys
    >>> import numpy as np
    >>> from glint.output.ppm import write_ppm
    >>> write_ppm(np.zeros((2, 2, 3), dtype=np.uint8), sys.stdout)
    P3
    2 2
    255
    0 0 0
    0 0 0
    0 0 0
    0 0 0
"""

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt

MAX_CHANNEL_VALUE = 255


def _check_image(image: npt.NDArray[np.uint8]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected an 8-bit image, got dtype {image.dtype}")


def write_ppm(image: npt.NDArray[np.uint8], stream: TextIO) -> None:
    """Write an 8-bit RGB image to a text stream as P3 PPM.

    Args:
        image: Array of shape (height, width, 3) with dtype uint8, top row
            first.
        stream: Writable text stream.

    Raises:
        ValueError: If the array does not hold 8-bit RGB pixels.
    """
    _check_image(image)
    height, width = image.shape[:2]

    stream.write(f"P3\n{width} {height}\n{MAX_CHANNEL_VALUE}\n")
    for row in image:
        for r, g, b in row:
            stream.write(f"{r} {g} {b}\n")


def gradient_image(width: int, height: int) -> npt.NDArray[np.uint8]:
    """A test pattern for checking an image viewer or encoder.

    Red grows left to right, green grows bottom to top and blue is a
    constant 0.25, quantized like rendered pixels.

    Returns:
        Array of shape (height, width, 3) with dtype uint8, top row first.

    Raises:
        ValueError: If a dimension is below 2.
    """
    if width < 2 or height < 2:
        raise ValueError(f"Image dimensions ({width}x{height}) must be at least 2x2")

    r = np.arange(width) / (width - 1)
    g = np.arange(height)[::-1] / (height - 1)

    image = np.empty((height, width, 3), dtype=np.float64)
    image[:, :, 0] = r[np.newaxis, :]
    image[:, :, 1] = g[:, np.newaxis]
    image[:, :, 2] = 0.25
    return (255.999 * image).astype(np.uint8)


def save_ppm(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image as a P3 PPM file.

    Args:
        image: Array of shape (height, width, 3) with dtype uint8.
        filepath: Output file path (should end in .ppm).
    """
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(image, f)
