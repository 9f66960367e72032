"""Output module for encoding rendered images.

Components:
    ppm: Plain-text P3 PPM encoder
    export: PNG export and extension-based format dispatch

Both encoders take the 8-bit arrays produced by
:func:`glint.core.integrator.to_rgb8`, top row first.
"""

from glint.output.export import SUPPORTED_EXTENSIONS, save_image, save_png
from glint.output.ppm import gradient_image, save_ppm, write_ppm

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "gradient_image",
    "save_image",
    "save_png",
    "save_ppm",
    "write_ppm",
]
