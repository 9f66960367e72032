"""Camera module for primary ray generation.

Components:
    camera: Thin-lens camera with look-at positioning and depth of field

Ray generation uses normalized image coordinates:
    s in [0, 1]: left to right across the image
    t in [0, 1]: bottom to top across the image
"""

from .camera import (
    Camera,
    get_camera_info,
    get_ray,
    setup_camera,
)

__all__ = [
    "Camera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
