"""Scene module: the sphere world, scene building and preset scenes.

Components:
    world: Sphere storage and the nearest-hit resolver
    manager: Scene manager coordinating spheres and materials, JSON scenes
    presets: Built-in demo scenes
"""

from .manager import (
    MaterialEntry,
    SceneConfig,
    SceneManager,
    SphereEntry,
    load_scene,
    save_scene,
)
from .presets import (
    PRESETS,
    create_preset_scene,
    create_random_spheres_scene,
    create_single_sphere_scene,
    create_three_spheres_scene,
)
from .world import MAX_SPHERES, add_sphere, clear_world, get_sphere_count, hit_world

__all__ = [
    # World
    "MAX_SPHERES",
    "add_sphere",
    "clear_world",
    "get_sphere_count",
    "hit_world",
    # Manager
    "SceneManager",
    "MaterialEntry",
    "SphereEntry",
    "SceneConfig",
    "load_scene",
    "save_scene",
    # Presets
    "PRESETS",
    "create_preset_scene",
    "create_single_sphere_scene",
    "create_three_spheres_scene",
    "create_random_spheres_scene",
]
