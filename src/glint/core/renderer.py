"""Batch renderer with progress reporting.

This module wraps the integrator kernels in a small stateful object that:
- owns the render target dimensions
- accumulates samples in batches, reporting progress after each one
- converts and saves the result

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=7)
    >>> from glint.core.renderer import Renderer
    >>> from glint.scene.presets import create_single_sphere_scene
    >>> from glint.camera.camera import setup_camera
    >>>
    >>> scene, camera = create_single_sphere_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(400, 225, max_depth=50)
    >>> renderer.render(100, batch_size=10)
    >>> renderer.save_image("sphere.ppm")
"""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from glint.config import MAX_DEPTH, RenderConfig
from glint.core.integrator import (
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
    to_rgb8,
)
from glint.output.export import save_image

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Accumulates samples for the current scene and camera.

    The renderer delegates to the global integrator buffers (Taichi fields),
    so only one Renderer should be active at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Bounce budget per primary ray.
        gamma: Output gamma used when converting to 8 bits, or None.
    """

    def __init__(
        self,
        width: int,
        height: int,
        max_depth: int = MAX_DEPTH,
        gamma: float | None = None,
    ) -> None:
        """Initialize the renderer and its render target.

        Args:
            width: Image width in pixels (2 to 2048).
            height: Image height in pixels (2 to 2048).
            max_depth: Bounce budget per primary ray.
            gamma: Output gamma, or None for linear output.

        Raises:
            ValueError: If dimensions are out of range or max_depth is
                negative.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth = {max_depth} must be non-negative")

        self._width = width
        self._height = height
        self.max_depth = max_depth
        self.gamma = gamma
        setup_render_target(width, height)
        logger.debug("Render target set up at %dx%d", width, height)

    @classmethod
    def from_config(cls, config: RenderConfig) -> "Renderer":
        """Create a renderer sized and configured from a RenderConfig.

        Only the image size, max_depth and gamma are used. ``config.seed``
        must be passed to ``ti.init`` before any field is allocated.
        """
        config.validate()
        return cls(
            config.image_width,
            config.image_height,
            max_depth=config.max_depth,
            gamma=config.gamma,
        )

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard the accumulated samples, keeping the dimensions."""
        clear_render_target()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset the accumulator.

        Raises:
            ValueError: If dimensions are out of range.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add samples to every pixel, in batches.

        Can be called multiple times to continue refining the image.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Number of samples per kernel launch. Progress is
                reported after each batch.
            callback: Optional callback function called after each batch.
                Receives (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Add samples in batches, yielding progress after each batch.

        Args:
            num_samples: Total number of samples per pixel to add.
            batch_size: Number of samples per kernel launch.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size = {batch_size} must be positive")
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples
        logger.info(
            "Rendering %dx%d at %d spp (max depth %d)",
            self.width,
            self.height,
            num_samples,
            self.max_depth,
        )

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch, self.max_depth)
            remaining -= batch
            logger.debug("Accumulated %d/%d samples", self.sample_count, target_samples)
            yield (self.sample_count, target_samples)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear image, shape (height, width, 3), top row first."""
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the image as 8-bit channels, applying the renderer's gamma."""
        return to_rgb8(self.get_image_numpy(), gamma=self.gamma)

    def save_image(self, filepath: str | Path) -> Path:
        """Save the rendered image as PPM or PNG, chosen by extension.

        Args:
            filepath: Output path ending in .ppm or .png.

        Returns:
            The output path.

        Raises:
            ValueError: If the extension is not supported.
        """
        path = save_image(self.get_image_uint8(), filepath)
        logger.info("Saved %dx%d image to %s", self.width, self.height, path)
        return path

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count}, max_depth={self.max_depth})"
        )
