"""Thin-lens camera model for primary ray generation.

The camera supports:
- Look-at positioning (look_from, look_at, view_up)
- Vertical field of view
- Arbitrary aspect ratios
- Depth of field through a finite aperture focused at a given distance

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward look_from (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits on the focus plane, ``focus_distance`` along ``-w``. Each
ray starts at a random point of the lens disk (radius ``aperture / 2``) and
passes through the viewport point, so only objects on the focus plane are
sharp. With ``aperture = 0`` every ray starts at ``look_from`` (pinhole).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.camera.camera import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(
    ...     look_from=(13.0, 2.0, 3.0),
    ...     look_at=(0.0, 0.0, 0.0),
    ...     view_up=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=3.0 / 2.0,
    ...     aperture=0.1,
    ...     focus_distance=10.0,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from glint.core.ray import Ray, make_ray
from glint.core.vec3 import random_in_unit_disk, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a thin-lens camera.

    Attributes:
        look_from: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at in world space (x, y, z).
        view_up: Up direction for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 disables depth of field.
        focus_distance: Distance from look_from to the plane in focus.
    """

    look_from: tuple[float, float, float] = (0.0, 0.0, 0.0)
    look_at: tuple[float, float, float] = (0.0, 0.0, -1.0)
    view_up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 90.0
    aspect_ratio: float = 16.0 / 9.0
    aperture: float = 0.0
    focus_distance: float = 1.0

    def validate(self) -> None:
        """Reject parameter sets that would produce NaN rays.

        Raises:
            ValueError: If the view direction is zero, view_up is parallel to
                it, or vfov, aspect_ratio, aperture or focus_distance is out
                of range.
        """
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov = {self.vfov} must be in (0, 180) degrees")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio = {self.aspect_ratio} must be positive")
        if self.aperture < 0.0:
            raise ValueError(f"aperture = {self.aperture} must be non-negative")
        if self.focus_distance <= 0.0:
            raise ValueError(f"focus_distance = {self.focus_distance} must be positive")

        view = np.subtract(self.look_from, self.look_at)
        if np.linalg.norm(view) == 0.0:
            raise ValueError("look_from and look_at coincide; the view direction is undefined")
        if np.linalg.norm(np.cross(self.view_up, view)) == 0.0:
            raise ValueError("view_up is zero or parallel to the view direction")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# Camera origin (position)
_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Viewport vectors for ray computation, scaled onto the focus plane
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())

_lens_radius = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Derive the camera state from its configuration.

    Computes the orthonormal basis, the viewport on the focus plane and the
    lens radius, and stores them in Taichi fields. Must be called before
    rendering; the state is read-only afterwards.

    Args:
        camera: Camera configuration with position, orientation, FOV and lens.

    Raises:
        ValueError: If the configuration is degenerate (see Camera.validate).
    """
    camera.validate()

    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h
    viewport_width = camera.aspect_ratio * viewport_height

    # Build orthonormal basis using NumPy (Python-side computation)
    look_from = np.array(camera.look_from, dtype=np.float64)
    look_at = np.array(camera.look_at, dtype=np.float64)
    view_up = np.array(camera.view_up, dtype=np.float64)

    w = look_from - look_at
    w = w / np.linalg.norm(w)
    u = np.cross(view_up, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    horizontal = camera.focus_distance * viewport_width * u
    vertical = camera.focus_distance * viewport_height * v
    lower_left = look_from - horizontal / 2.0 - vertical / 2.0 - camera.focus_distance * w

    _camera_origin[None] = look_from.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _lens_radius[None] = camera.aperture / 2.0


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate a primary ray through normalized image coordinates (s, t).

    - s = 0: left edge, s = 1: right edge
    - t = 0: bottom edge, t = 1: top edge

    The origin is jittered over the lens disk; the direction is not
    normalized.

    Args:
        s: Horizontal fraction of the image.
        t: Vertical fraction of the image.

    Returns:
        A Ray from the lens sample toward the point (s, t) on the focus plane.
    """
    rd = _lens_radius[None] * random_in_unit_disk()
    offset = _camera_u[None] * rd.x + _camera_v[None] * rd.y

    origin = _camera_origin[None] + offset
    target = _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]
    return make_ray(origin, target - origin)


# =============================================================================
# Utility Functions
# =============================================================================


def _to_tuple(value: vec3) -> tuple[float, float, float]:
    return (float(value[0]), float(value[1]), float(value[2]))


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get the current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left
        and lens_radius.
    """
    return {
        "origin": _to_tuple(_camera_origin[None]),
        "u": _to_tuple(_camera_u[None]),
        "v": _to_tuple(_camera_v[None]),
        "w": _to_tuple(_camera_w[None]),
        "horizontal": _to_tuple(_viewport_horizontal[None]),
        "vertical": _to_tuple(_viewport_vertical[None]),
        "lower_left": _to_tuple(_lower_left_corner[None]),
        "lens_radius": float(_lens_radius[None]),
    }
