"""Built-in demo scenes.

Each factory clears the world, builds its spheres and materials through a
fresh :class:`SceneManager` and returns ``(scene, camera)``. The camera is
not set up; call :func:`glint.camera.camera.setup_camera` before rendering.

Available presets:
    single_sphere: A diffuse sphere resting on a large ground sphere.
    three_spheres: Diffuse centre, hollow glass left and metal right.
    random_spheres: The classic cover scene with a field of small spheres.
"""

import logging
from collections.abc import Callable

import numpy as np

from glint.camera.camera import Camera
from glint.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# Aspect ratio of the default output
DEFAULT_ASPECT_RATIO = 16.0 / 9.0


def create_single_sphere_scene(
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
) -> tuple[SceneManager, Camera]:
    """A single diffuse sphere on a diffuse ground, seen from the origin."""
    scene = SceneManager()
    scene.add_lambertian_sphere((0.0, -100.5, -1.0), 100.0, albedo=(0.5, 0.5, 0.5))
    scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, albedo=(0.5, 0.5, 0.5))

    camera = Camera(
        look_from=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        view_up=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
    )
    return scene, camera


def create_three_spheres_scene(
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
) -> tuple[SceneManager, Camera]:
    """Ground, diffuse centre, hollow glass left and polished metal right.

    The left sphere is a glass shell: an outer sphere and an inner sphere of
    the same material with a negative radius, whose normals point inward.
    """
    scene = SceneManager()

    ground = scene.add_lambertian_material((0.8, 0.8, 0.0))
    center = scene.add_lambertian_material((0.1, 0.2, 0.5))
    glass = scene.add_dielectric_material(1.5)
    gold = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=0.0)

    scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
    scene.add_sphere((0.0, 0.0, -1.0), 0.5, center)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, glass)
    scene.add_sphere((-1.0, 0.0, -1.0), -0.45, glass)
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, gold)

    camera = Camera(
        look_from=(-2.0, 2.0, 1.0),
        look_at=(0.0, 0.0, -1.0),
        view_up=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_distance=float(np.linalg.norm(np.subtract((-2.0, 2.0, 1.0), (0.0, 0.0, -1.0)))),
    )
    return scene, camera


def create_random_spheres_scene(
    seed: int = 0,
    aspect_ratio: float = 3.0 / 2.0,
) -> tuple[SceneManager, Camera]:
    """The cover scene: three large spheres amid a grid of small random ones.

    Small spheres are placed on a jittered 22 x 22 grid; 80% are diffuse,
    15% metal and 5% glass. Spheres too close to the large metal sphere are
    skipped.

    Args:
        seed: Seed for the scene layout (independent of the render seed).
        aspect_ratio: Camera aspect ratio.
    """
    rng = np.random.default_rng(seed)
    scene = SceneManager()

    scene.add_lambertian_sphere((0.0, -1000.0, 0.0), 1000.0, albedo=(0.5, 0.5, 0.5))

    keep_clear = np.array([4.0, 0.2, 0.0])
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = np.array([a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random()])

            if np.linalg.norm(center - keep_clear) <= 0.9:
                continue

            position = (float(center[0]), float(center[1]), float(center[2]))
            if choose_mat < 0.8:
                albedo = rng.random(3) * rng.random(3)
                scene.add_lambertian_sphere(position, 0.2, albedo=tuple(albedo.tolist()))
            elif choose_mat < 0.95:
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzz = float(rng.uniform(0.0, 0.5))
                scene.add_metal_sphere(position, 0.2, albedo=tuple(albedo.tolist()), fuzz=fuzz)
            else:
                scene.add_dielectric_sphere(position, 0.2, refractive_index=1.5)

    scene.add_dielectric_sphere((0.0, 1.0, 0.0), 1.0, refractive_index=1.5)
    scene.add_lambertian_sphere((-4.0, 1.0, 0.0), 1.0, albedo=(0.4, 0.2, 0.1))
    scene.add_metal_sphere((4.0, 1.0, 0.0), 1.0, albedo=(0.7, 0.6, 0.5), fuzz=0.0)

    logger.debug("Random spheres scene (seed %d): %d spheres", seed, scene.get_sphere_count())

    camera = Camera(
        look_from=(13.0, 2.0, 3.0),
        look_at=(0.0, 0.0, 0.0),
        view_up=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_distance=10.0,
    )
    return scene, camera


PRESETS: dict[str, Callable[..., tuple[SceneManager, Camera]]] = {
    "single_sphere": create_single_sphere_scene,
    "three_spheres": create_three_spheres_scene,
    "random_spheres": create_random_spheres_scene,
}


def create_preset_scene(
    name: str,
    aspect_ratio: float | None = None,
    seed: int = 0,
) -> tuple[SceneManager, Camera]:
    """Build a preset scene by name.

    Args:
        name: One of the keys of PRESETS.
        aspect_ratio: Camera aspect ratio, or None for the preset's default.
        seed: Layout seed, used by the random_spheres preset only.

    Raises:
        ValueError: If the preset name is unknown.
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown scene preset '{name}'. Choose from: {', '.join(PRESETS)}")

    kwargs: dict[str, float | int] = {}
    if aspect_ratio is not None:
        kwargs["aspect_ratio"] = aspect_ratio
    if name == "random_spheres":
        kwargs["seed"] = seed
    return PRESETS[name](**kwargs)
