"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3, see :mod:`glint.output.ppm`)
    - PNG (8-bit RGB via Pillow)

The format is chosen from the file extension by :func:`save_image`.

Example:
    >>> from glint.core.integrator import get_image_numpy, to_rgb8
    >>> from glint.output.export import save_image
    >>>
    >>> save_image(to_rgb8(get_image_numpy()), "output.png")
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from glint.output.ppm import save_ppm

SUPPORTED_EXTENSIONS = (".ppm", ".png")


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image as a PNG file.

    Args:
        image: Array of shape (height, width, 3) with dtype uint8, top row
            first.
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(np.ascontiguousarray(image, dtype=np.uint8))
    pil_image.save(filepath)


def save_image(image: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit RGB image, picking the format from the extension.

    Args:
        image: Array of shape (height, width, 3) with dtype uint8.
        filepath: Output path ending in .ppm or .png.

    Returns:
        The output path.

    Raises:
        ValueError: If the extension is not supported.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()

    if suffix == ".ppm":
        save_ppm(image, path)
    elif suffix == ".png":
        save_png(image, path)
    else:
        raise ValueError(
            f"Unsupported output format '{suffix}'. "
            f"Choose from: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    return path
