"""Monte Carlo integrator: traces camera rays through the world.

This module implements the rendering kernels. A path starts at the camera,
bounces off surfaces according to their materials and ends in one of three
ways:

    - it escapes the world and picks up the sky gradient,
    - a material absorbs it (contributes black),
    - the bounce budget runs out (contributes black).

The light carried back along the path is the product of the attenuations of
every scatter event times the sky color it finally reaches. ``ray_color``
evaluates that product with a loop rather than recursion so high depth
limits do not need a deep call stack.

Pixels are sampled ``samples_per_pixel`` times with random sub-pixel jitter
and averaged. Conversion to 8-bit channels truncates ``255.999 * channel``;
no gamma is applied unless asked for.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=0)
    >>> from glint.core.integrator import (
    ...     get_image_numpy, render_image, setup_render_target, to_rgb8
    ... )
    >>> from glint.scene.presets import create_three_spheres_scene
    >>> from glint.camera.camera import setup_camera
    >>>
    >>> scene, camera = create_three_spheres_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
    >>> render_image(samples_per_pixel=100, max_depth=50)
    >>> pixels = to_rgb8(get_image_numpy())
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from glint.camera.camera import get_ray
from glint.config import MAX_DEPTH, MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from glint.core.ray import Ray, make_ray
from glint.core.vec3 import Color, unit_vector, vec3
from glint.materials.material import scatter
from glint.scene.world import hit_world

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound of accepted hits; keeps bounce rays off their own surface
T_MIN = 0.001
T_MAX = tm.inf

# Sky gradient endpoints
SKY_WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Buffers are preallocated at MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT to avoid
# kernel recompilation on resize
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Sum of all samples per pixel, indexed (i, j) with j = 0 at the bottom row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Samples accumulated per pixel (identical for every pixel)
_sample_count = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the buffers.

    Args:
        width: Image width in pixels, in [2, MAX_IMAGE_WIDTH].
        height: Image height in pixels, in [2, MAX_IMAGE_HEIGHT].

    Raises:
        ValueError: If a dimension is below 2 (pixel coordinates are
            normalized by ``dimension - 1``) or exceeds the maximum.
    """
    if width < 2 or height < 2:
        raise ValueError(f"Image dimensions ({width}x{height}) must be at least 2x2")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the accumulated samples."""
    _color_buffer.fill(0.0)
    _sample_count[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel."""
    _check_render_target_initialized()
    return int(_sample_count[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def background(direction: vec3) -> Color:
    """Sky gradient: white at the horizon blending to blue overhead.

    ``a = 0.5 * (unit(direction).y + 1)`` selects between white (a = 0)
    and sky blue (a = 1).
    """
    a = 0.5 * (unit_vector(direction).y + 1.0)
    return (1.0 - a) * SKY_WHITE + a * SKY_BLUE


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> Color:
    """Estimate the light arriving along a ray.

    Follows the path for at most ``max_depth`` intersection queries,
    multiplying the attenuation of each scatter event into a running
    throughput. With ``max_depth == 0`` the result is black.

    Args:
        ray: The ray to trace.
        max_depth: The bounce budget.

    Returns:
        Throughput times the sky color if the path escapes; black if it is
        absorbed or runs out of bounces.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray

    # Active flag for path continuation
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = hit_world(current, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * background(current.direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = scatter(current, rec)
                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    current = make_ray(rec.p, scattered_direction)

    return color


@ti.func
def sample_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    jitter: ti.i32,
) -> Color:
    """Trace one sample through a pixel.

    The normalized coordinates are ``(i + xi) / (width - 1)`` and
    ``(j + xi') / (height - 1)`` with xi, xi' uniform in [0, 1) when jitter
    is on and 0 otherwise.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: The bounce budget.
        jitter: 1 for random sub-pixel offsets, 0 for the pixel corner.

    Returns:
        The color estimate of this sample.
    """
    jitter_s = 0.0
    jitter_t = 0.0
    if jitter == 1:
        jitter_s = ti.random(ti.f32)
        jitter_t = ti.random(ti.f32)

    s = (ti.cast(pixel_i, ti.f32) + jitter_s) / ti.cast(width - 1, ti.f32)
    t = (ti.cast(pixel_j, ti.f32) + jitter_t) / ti.cast(height - 1, ti.f32)

    return ray_color(get_ray(s, t), max_depth)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _accumulate_samples(
    width: ti.i32,
    height: ti.i32,
    num_samples: ti.i32,
    max_depth: ti.i32,
    jitter: ti.i32,
):
    """Add ``num_samples`` samples to every pixel of the color buffer."""
    for i, j in ti.ndrange(width, height):
        total = vec3(0.0, 0.0, 0.0)
        for _ in range(num_samples):
            total += sample_pixel(i, j, width, height, max_depth, jitter)
        _color_buffer[i, j] += total


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    num_samples: ti.i32,
    max_depth: ti.i32,
    jitter: ti.i32,
) -> vec3:
    total = vec3(0.0, 0.0, 0.0)
    for _ in range(num_samples):
        total += sample_pixel(pixel_i, pixel_j, width, height, max_depth, jitter)
    return total / ti.cast(num_samples, ti.f32)


# =============================================================================
# Public Rendering API
# =============================================================================


def _validate_sampling(samples_per_pixel: int, max_depth: int) -> None:
    if samples_per_pixel <= 0:
        raise ValueError(f"samples_per_pixel = {samples_per_pixel} must be positive")
    if max_depth < 0:
        raise ValueError(f"max_depth = {max_depth} must be non-negative")


def render_image(
    samples_per_pixel: int = 1,
    max_depth: int = MAX_DEPTH,
    *,
    jitter: bool = True,
) -> None:
    """Accumulate samples for every pixel of the render target.

    Can be called repeatedly; samples keep accumulating until
    clear_render_target() or setup_render_target() is called.

    Args:
        samples_per_pixel: Number of samples to add per pixel.
        max_depth: The bounce budget per primary ray.
        jitter: Randomize the sub-pixel position of each sample.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If samples_per_pixel is not positive or max_depth is
            negative.
    """
    _check_render_target_initialized()
    _validate_sampling(samples_per_pixel, max_depth)

    width, height = get_image_dimensions()
    _accumulate_samples(width, height, samples_per_pixel, max_depth, int(jitter))
    _sample_count[None] += samples_per_pixel


def render_pixel(
    pixel_i: int,
    pixel_j: int,
    samples_per_pixel: int = 1,
    max_depth: int = MAX_DEPTH,
    *,
    jitter: bool = True,
) -> tuple[float, float, float]:
    """Render the averaged color of a single pixel.

    Does not touch the color buffer. Useful for testing and debugging
    individual pixels.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        samples_per_pixel: Number of samples to average.
        max_depth: The bounce budget per primary ray.
        jitter: Randomize the sub-pixel position of each sample.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    _validate_sampling(samples_per_pixel, max_depth)

    width, height = get_image_dimensions()
    color = _render_single_pixel(
        pixel_i, pixel_j, width, height, samples_per_pixel, max_depth, int(jitter)
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the averaged image as a NumPy array.

    The array shape is (height, width, 3), row 0 is the top of the image.
    Before any sample has been rendered the image is black.

    Returns:
        NumPy float32 array of linear colors.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    samples = max(get_total_samples(), 1)

    image = _color_buffer.to_numpy()[:width, :height, :] / samples

    # (width, height, 3) -> (height, width, 3), then top row first
    image = np.flipud(np.transpose(image, (1, 0, 2)))
    return np.ascontiguousarray(image, dtype=np.float32)


def to_rgb8(
    image: npt.NDArray[np.floating],
    gamma: float | None = None,
) -> npt.NDArray[np.uint8]:
    """Quantize linear colors to 8-bit channels.

    Each channel is clamped to [0, 1] and truncated as
    ``int(255.999 * channel)``. By default no gamma is applied; pass
    ``gamma=2.0`` for the common square-root encoding.

    Args:
        image: Array of colors with a trailing channel axis.
        gamma: Optional gamma exponent applied as ``channel ** (1 / gamma)``.

    Returns:
        Array of the same shape with dtype uint8.

    Raises:
        ValueError: If gamma is not positive.
    """
    colors = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    if gamma is not None:
        if gamma <= 0.0:
            raise ValueError(f"gamma = {gamma} must be positive")
        colors = np.power(colors, 1.0 / gamma)
    return (255.999 * colors).astype(np.uint8)
