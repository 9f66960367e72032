"""Tests for the SceneManager class and JSON scene files."""

import json

import pytest


class TestSceneManagerMaterials:
    def test_material_ids_are_sequential_across_types(self):
        from glint.materials.material import MaterialType
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        lam = scene.add_lambertian_material((0.5, 0.5, 0.5))
        metal = scene.add_metal_material((0.8, 0.8, 0.8), fuzz=0.1)
        glass = scene.add_dielectric_material(1.5)

        assert (lam, metal, glass) == (0, 1, 2)
        assert scene.get_material_count() == 3
        assert scene.get_material_type_python(lam) == MaterialType.LAMBERTIAN
        assert scene.get_material_type_python(metal) == MaterialType.METAL
        assert scene.get_material_type_python(glass) == MaterialType.DIELECTRIC
        assert scene.get_material_type_python(3) is None

    def test_material_info_records_parameters(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        mat_id = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=2.0)

        info = scene.get_material_info(mat_id)
        assert info is not None
        assert info.params == {"albedo": (0.8, 0.6, 0.2), "fuzz": 1.0}
        assert scene.get_material_info(-1) is None

    def test_invalid_material_parameters_propagate(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.add_lambertian_material((1.2, 0.0, 0.0))
        with pytest.raises(ValueError):
            scene.add_dielectric_material(0.0)
        assert scene.get_material_count() == 0


class TestSceneManagerSpheres:
    def test_add_sphere_with_existing_material(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        mat_id = scene.add_lambertian_material((0.5, 0.5, 0.5))
        assert scene.add_sphere((0, 0, -1), 0.5, mat_id) == 0
        assert scene.add_sphere((1, 0, -1), 0.5, mat_id) == 1
        assert scene.get_sphere_count() == 2
        assert scene.spheres[1].center == (1.0, 0.0, -1.0)

    @pytest.mark.parametrize("material_id", [-1, 1, 99])
    def test_invalid_material_id(self, material_id):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_material((0.5, 0.5, 0.5))
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0, 0, -1), 0.5, material_id)

    def test_convenience_methods(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.add_lambertian_sphere((0, -100.5, -1), 100, (0.8, 0.8, 0.0)) == (0, 0)
        assert scene.add_metal_sphere((1, 0, -1), 0.5, (0.8, 0.6, 0.2), fuzz=0.3) == (1, 1)
        assert scene.add_dielectric_sphere((-1, 0, -1), 0.5, 1.5) == (2, 2)
        assert scene.get_sphere_count() == 3

    def test_new_manager_clears_previous_scene(self):
        from glint.scene.manager import SceneManager

        first = SceneManager()
        first.add_lambertian_sphere((0, 0, -1), 0.5, (0.5, 0.5, 0.5))

        second = SceneManager()
        assert second.get_sphere_count() == 0
        assert second.get_material_count() == 0

    def test_capacity_information(self):
        from glint.materials.material import MAX_MATERIALS
        from glint.scene.manager import SceneManager
        from glint.scene.world import MAX_SPHERES

        assert SceneManager.get_max_spheres() == MAX_SPHERES
        assert SceneManager.get_max_materials() == MAX_MATERIALS


class TestSceneSerialization:
    def _build(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        ground = scene.add_lambertian_material((0.8, 0.8, 0.0))
        glass = scene.add_dielectric_material(1.5)
        gold = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=0.3)
        scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
        scene.add_sphere((-1.0, 0.0, -1.0), 0.5, glass)
        scene.add_sphere((-1.0, 0.0, -1.0), -0.45, glass)
        scene.add_sphere((1.0, 0.0, -1.0), 0.5, gold)
        return scene

    def test_to_dict_is_json_ready(self):
        scene = self._build()
        data = scene.to_dict()

        assert data["materials"][0] == {"type": "lambertian", "albedo": [0.8, 0.8, 0.0]}
        assert data["materials"][1] == {"type": "dielectric", "refractive_index": 1.5}
        assert data["materials"][2]["type"] == "metal"
        assert data["spheres"][2] == {"center": [-1.0, 0.0, -1.0], "radius": -0.45, "material_id": 1}
        json.dumps(data)

    def test_from_dict_rebuilds_scene(self):
        from glint.scene.manager import SceneManager

        data = self._build().to_dict()
        restored = SceneManager()
        restored.from_dict(data)

        assert restored.get_sphere_count() == 4
        assert restored.get_material_count() == 3
        assert restored.to_dict() == data

    def test_from_dict_uses_defaults(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        scene.from_dict({"materials": [{"type": "Dielectric"}], "spheres": [{"radius": 2.0}]})

        assert scene.get_material_info(0).params == {"refractive_index": 1.5}
        assert scene.spheres[0].center == (0.0, 0.0, 0.0)
        assert scene.spheres[0].material_id == 0

    def test_unknown_material_type(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Unknown material type"):
            scene.from_dict({"materials": [{"type": "emissive"}]})

    def test_bad_vector_length(self):
        from glint.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="3 components"):
            scene.from_dict({"materials": [{"type": "lambertian", "albedo": [0.5, 0.5]}]})


class TestSceneFiles:
    def test_save_and_load_with_camera(self, tmp_path):
        from glint.camera.camera import Camera
        from glint.scene.manager import SceneManager, load_scene, save_scene

        scene = SceneManager()
        scene.add_lambertian_sphere((0, 0, -1), 0.5, (0.1, 0.2, 0.5))
        camera = Camera(look_from=(13.0, 2.0, 3.0), look_at=(0.0, 0.0, 0.0), vfov=20.0, aperture=0.1, focus_distance=10.0)

        path = save_scene(scene, tmp_path / "scene.json", camera=camera)
        loaded_scene, loaded_camera = load_scene(path)

        assert loaded_scene.get_sphere_count() == 1
        assert loaded_camera == camera

    def test_camera_defaults_when_missing(self, tmp_path):
        from glint.camera.camera import Camera
        from glint.scene.manager import load_scene

        path = tmp_path / "scene.json"
        path.write_text(json.dumps({"materials": [], "spheres": []}))

        scene, camera = load_scene(path)
        assert scene.get_sphere_count() == 0
        assert camera == Camera()

    def test_invalid_json(self, tmp_path):
        from glint.scene.manager import load_scene

        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_scene(path)

    def test_top_level_must_be_object(self, tmp_path):
        from glint.scene.manager import load_scene

        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ValueError, match="JSON object"):
            load_scene(path)

    @pytest.mark.parametrize(
        "camera",
        [{"zoom": 2.0}, {"vfov": 0.0}, {"look_from": [0.0, 0.0]}],
    )
    def test_invalid_camera(self, tmp_path, camera):
        from glint.scene.manager import load_scene

        path = tmp_path / "scene.json"
        path.write_text(json.dumps({"camera": camera}))
        with pytest.raises(ValueError):
            load_scene(path)
