"""Scene building and JSON scene files.

:class:`SceneManager` is the host-side front end of the Taichi registries:
it registers materials in the variant registries and the unified table,
appends spheres to the world and remembers what it added, so a scene can be
inspected and written back out.

Scene files are JSON objects::

    {
        "materials": [
            {"type": "lambertian", "albedo": [0.8, 0.8, 0.0]},
            {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.0},
            {"type": "dielectric", "refractive_index": 1.5}
        ],
        "spheres": [
            {"center": [0.0, -100.5, -1.0], "radius": 100.0, "material_id": 0}
        ],
        "camera": {"look_from": [0, 0, 0], "look_at": [0, 0, -1], "vfov": 90}
    }

A sphere's ``material_id`` is the position of its material in
``materials``. ``camera`` is optional and holds keyword arguments of
:class:`glint.camera.camera.Camera`.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_lambertian_material(albedo=(0.7, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=red)
    0
"""

import json
import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from glint.camera.camera import Camera
from glint.materials.dielectric import add_dielectric_material
from glint.materials.lambertian import add_lambertian_material
from glint.materials.material import (
    MAX_MATERIALS,
    MaterialType,
    clear_materials,
    get_material_count,
    register_material,
)
from glint.materials.metal import add_metal_material
from glint.scene.world import MAX_SPHERES, add_sphere, clear_world, get_sphere_count

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]


@dataclass
class MaterialEntry:
    """A material as registered: its unified ID, tag, registry slot and parameters."""

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereEntry:
    """A sphere as added to the world."""

    sphere_index: int
    center: Vec3Tuple
    radius: float
    material_id: int


@dataclass
class SceneConfig:
    """JSON-ready scene content: one dict per material and per sphere."""

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


def _to_vec3_tuple(values: Any, name: str) -> Vec3Tuple:
    if len(values) != 3:
        raise ValueError(f"'{name}' must have 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


def _json_ready(params: dict[str, Any]) -> dict[str, Any]:
    return {key: list(value) if isinstance(value, tuple) else value for key, value in params.items()}


class SceneManager:
    """Builds the single live scene.

    Creating a manager clears the world and every material registry.

    Attributes:
        materials: Entries for the registered materials, indexed by ID.
        spheres: Entries for the spheres, in the order they were added.

    Example:
        >>> scene = SceneManager()
        >>> ground = scene.add_lambertian_material(albedo=(0.8, 0.8, 0.0))
        >>> gold = scene.add_metal_material(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
        >>> glass = scene.add_dielectric_material(refractive_index=1.5)
        >>> scene.add_sphere((0, -100.5, -1), 100, ground)
        >>> scene.add_sphere((1, 0, -1), 0.5, gold)
        >>> scene.add_sphere((-1, 0, -1), 0.5, glass)
    """

    def __init__(self) -> None:
        self.materials: list[MaterialEntry] = []
        self.spheres: list[SphereEntry] = []
        self.clear()

    def clear(self) -> None:
        """Empty the world, the material registries and the entry lists."""
        clear_world()
        clear_materials()
        self.materials.clear()
        self.spheres.clear()

    # =========================================================================
    # Materials
    # =========================================================================

    def _register(self, material_type: MaterialType, type_index: int, **params: Any) -> int:
        material_id = register_material(material_type, type_index)
        self.materials.append(MaterialEntry(material_id, material_type, type_index, params))
        logger.debug("Registered %s material %d: %s", material_type.name, material_id, params)
        return material_id

    def add_lambertian_material(self, albedo: Vec3Tuple) -> int:
        """Register a diffuse material and return its material ID.

        Raises:
            RuntimeError: If a registry is full.
            ValueError: If the albedo has a channel outside [0, 1].
        """
        type_index = add_lambertian_material(albedo)
        return self._register(MaterialType.LAMBERTIAN, type_index, albedo=tuple(albedo))

    def add_metal_material(self, albedo: Vec3Tuple, fuzz: float = 0.0) -> int:
        """Register a metal and return its material ID.

        ``fuzz`` is the radius of the random offset added to the mirror
        direction; values above 1 are stored as 1.

        Raises:
            RuntimeError: If a registry is full.
            ValueError: If the albedo is out of range or fuzz is negative.
        """
        type_index = add_metal_material(albedo, fuzz)
        return self._register(MaterialType.METAL, type_index, albedo=tuple(albedo), fuzz=min(fuzz, 1.0))

    def add_dielectric_material(self, refractive_index: float = 1.5) -> int:
        """Register a clear refracting material and return its material ID.

        Raises:
            RuntimeError: If a registry is full.
            ValueError: If the index of refraction is not positive.
        """
        type_index = add_dielectric_material(refractive_index)
        return self._register(MaterialType.DIELECTRIC, type_index, refractive_index=refractive_index)

    def get_material_count(self) -> int:
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialEntry | None:
        """The entry for ``material_id``, or None if no such material exists."""
        if material_id in range(len(self.materials)):
            return self.materials[material_id]
        return None

    def get_material_type_python(self, material_id: int) -> MaterialType | None:
        """Host-side tag lookup; kernels use ``glint.materials.material.get_material_type``."""
        entry = self.get_material_info(material_id)
        return None if entry is None else entry.material_type

    # =========================================================================
    # Spheres
    # =========================================================================

    def add_sphere(self, center: Vec3Tuple, radius: float, material_id: int) -> int:
        """Append a sphere that uses an already registered material.

        A negative radius turns the sphere inside out; nested in a positive
        sphere of the same dielectric it forms a hollow shell.

        Returns:
            The sphere's index in the world.

        Raises:
            RuntimeError: If the world is full.
            ValueError: If material_id is not registered or the sphere is
                degenerate.
        """
        if material_id not in range(get_material_count()):
            raise ValueError(f"Invalid material_id: {material_id}")

        center = _to_vec3_tuple(center, "center")
        sphere_index = add_sphere(center, radius, material_id)
        self.spheres.append(SphereEntry(sphere_index, center, radius, material_id))
        return sphere_index

    def add_lambertian_sphere(
        self, center: Vec3Tuple, radius: float, albedo: Vec3Tuple
    ) -> tuple[int, int]:
        """Register a diffuse material and add a sphere using it.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_lambertian_material(albedo)
        return self.add_sphere(center, radius, material_id), material_id

    def add_metal_sphere(
        self, center: Vec3Tuple, radius: float, albedo: Vec3Tuple, fuzz: float = 0.0
    ) -> tuple[int, int]:
        """Register a metal and add a sphere using it; returns (sphere_index, material_id)."""
        material_id = self.add_metal_material(albedo, fuzz)
        return self.add_sphere(center, radius, material_id), material_id

    def add_dielectric_sphere(
        self, center: Vec3Tuple, radius: float, refractive_index: float = 1.5
    ) -> tuple[int, int]:
        """Register a dielectric and add a sphere using it; returns (sphere_index, material_id)."""
        material_id = self.add_dielectric_material(refractive_index)
        return self.add_sphere(center, radius, material_id), material_id

    def get_sphere_count(self) -> int:
        return get_sphere_count()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Describe the scene with JSON-compatible values."""
        materials = [
            {"type": entry.material_type.name.lower(), **_json_ready(entry.params)}
            for entry in self.materials
        ]
        spheres = [
            {"center": list(entry.center), "radius": entry.radius, "material_id": entry.material_id}
            for entry in self.spheres
        ]
        return SceneConfig(materials=materials, spheres=spheres)

    def _load_material(self, description: dict[str, Any]) -> int:
        type_name = str(description.get("type", "")).lower()
        loader = _MATERIAL_LOADERS.get(type_name)
        if loader is None:
            raise ValueError(f"Unknown material type: {type_name!r}")
        return loader(self, description)

    def from_config(self, config: SceneConfig) -> None:
        """Replace the current scene with the one described by ``config``.

        Materials get IDs in list order, which is what the spheres' material
        IDs refer to. Missing parameters take the ``add_*`` defaults.

        Raises:
            ValueError: For an unknown material type, an invalid material ID
                or invalid parameters.
        """
        self.clear()

        for description in config.materials:
            self._load_material(description)

        for description in config.spheres:
            self.add_sphere(
                _to_vec3_tuple(description.get("center", (0.0, 0.0, 0.0)), "center"),
                float(description.get("radius", 1.0)),
                int(description.get("material_id", 0)),
            )

        logger.info("Loaded scene with %d materials and %d spheres", len(self.materials), len(self.spheres))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self.to_config())

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load the ``materials`` and ``spheres`` lists of a scene description."""
        self.from_config(SceneConfig(materials=data.get("materials", []), spheres=data.get("spheres", [])))

    @staticmethod
    def get_max_spheres() -> int:
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        return MAX_MATERIALS


_MATERIAL_LOADERS: dict[str, Callable[[SceneManager, dict[str, Any]], int]] = {
    "lambertian": lambda scene, d: scene.add_lambertian_material(
        _to_vec3_tuple(d.get("albedo", (0.5, 0.5, 0.5)), "albedo")
    ),
    "metal": lambda scene, d: scene.add_metal_material(
        _to_vec3_tuple(d.get("albedo", (0.8, 0.8, 0.8)), "albedo"),
        float(d.get("fuzz", 0.0)),
    ),
    "dielectric": lambda scene, d: scene.add_dielectric_material(
        float(d.get("refractive_index", 1.5))
    ),
}


# =============================================================================
# Scene Files
# =============================================================================


def _camera_from_dict(data: dict[str, Any]) -> Camera:
    kwargs = dict(data)
    for key in ("look_from", "look_at", "view_up"):
        if key in kwargs:
            kwargs[key] = _to_vec3_tuple(kwargs[key], key)
    try:
        camera = Camera(**kwargs)
    except TypeError as e:
        raise ValueError(f"Invalid camera description: {e}") from e
    camera.validate()
    return camera


def load_scene(filepath: str | Path) -> tuple[SceneManager, Camera]:
    """Build a scene from a JSON scene file.

    Args:
        filepath: Path of the JSON scene description.

    Returns:
        Tuple of (scene, camera). The camera comes from the optional
        ``camera`` entry and defaults to ``Camera()``.

    Raises:
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    path = Path(filepath)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Scene file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")

    camera = _camera_from_dict(data.get("camera", {}))
    scene = SceneManager()
    scene.from_dict(data)
    logger.info("Loaded scene file %s", path)
    return scene, camera


def save_scene(scene: SceneManager, filepath: str | Path, camera: Camera | None = None) -> Path:
    """Write a scene (and optionally its camera) to a JSON scene file.

    Returns:
        The output path.
    """
    data = scene.to_dict()
    if camera is not None:
        data["camera"] = _json_ready(asdict(camera))

    path = Path(filepath)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info("Saved scene file %s", path)
    return path
