"""Unit tests for the Dielectric material module.

Tests cover:
- Refraction ratio for entering and leaving rays
- Total internal reflection detection
- Refraction at normal incidence and Snell's law
- Fresnel (Schlick) reflection probability
- Attenuation is always white and the path is never absorbed
- Material registry operations and validation
"""

import math

import pytest
import taichi as ti


class TestRefractionRatio:
    def test_front_face_inverts_index(self):
        from glint.materials.dielectric import refraction_ratio

        results = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            results[0] = refraction_ratio(1.5, 1)
            results[1] = refraction_ratio(1.5, 0)

        test_kernel()
        assert abs(results[0] - 1.0 / 1.5) < 1e-6
        assert abs(results[1] - 1.5) < 1e-6


class TestTotalInternalReflection:
    def test_tir_beyond_critical_angle(self):
        """Leaving glass at 60 degrees exceeds the ~41.8 degree critical angle."""
        from glint.materials.dielectric import cannot_refract

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            angle = 60.0 * math.pi / 180.0
            incident = ti.math.vec3(ti.sin(angle), -ti.cos(angle), 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            result[None] = cannot_refract(1.5, incident, normal, 0)

        test_kernel()
        assert result[None] == 1

    def test_no_tir_below_critical_angle(self):
        from glint.materials.dielectric import cannot_refract

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            angle = 30.0 * math.pi / 180.0
            incident = ti.math.vec3(ti.sin(angle), -ti.cos(angle), 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            result[None] = cannot_refract(1.5, incident, normal, 0)

        test_kernel()
        assert result[None] == 0

    def test_no_tir_entering_denser_medium(self):
        from glint.materials.dielectric import cannot_refract

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            angle = 85.0 * math.pi / 180.0
            incident = ti.math.vec3(ti.sin(angle), -ti.cos(angle), 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            result[None] = cannot_refract(1.5, incident, normal, 1)

        test_kernel()
        assert result[None] == 0

    def test_tir_scatter_always_reflects(self):
        from glint.materials.dielectric import scatter_dielectric

        n = 100
        result_dirs = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                angle = 60.0 * math.pi / 180.0
                incident = ti.math.vec3(ti.sin(angle), -ti.cos(angle), 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_dielectric(1.5, incident, normal, 0)
                result_dirs[i] = direction

        test_kernel()
        dirs = result_dirs.to_numpy()
        assert (dirs[:, 1] > 0.0).all()
        assert abs(dirs[:, 0] - math.sin(math.radians(60.0))).max() < 1e-5

    @pytest.mark.parametrize("degrees, always_reflects", [(40.0, False), (43.0, True)])
    def test_scatter_switches_at_critical_angle(self, degrees, always_reflects):
        """Leaving glass, rays refract just inside ~41.8 degrees and all reflect past it."""
        from glint.materials.dielectric import cannot_refract, scatter_dielectric

        n = 200
        result_dirs = ti.Vector.field(3, dtype=ti.f32, shape=n)
        tir = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(angle: ti.f32):
            incident = ti.math.vec3(ti.sin(angle), -ti.cos(angle), 0.0)
            normal = ti.math.vec3(0.0, 1.0, 0.0)
            tir[None] = cannot_refract(1.5, incident, normal, 0)
            for i in range(n):
                direction, _, _ = scatter_dielectric(1.5, incident, normal, 0)
                result_dirs[i] = direction

        test_kernel(math.radians(degrees))
        reflected = result_dirs.to_numpy()[:, 1] > 0.0

        assert tir[None] == int(always_reflects)
        if always_reflects:
            assert reflected.all()
        else:
            # Schlick reflectance is about 4% here
            assert reflected.mean() < 0.5


class TestRefraction:
    def test_unit_index_passes_straight_through(self):
        """With ior = 1 the ray is never bent or reflected."""
        from glint.materials.dielectric import scatter_dielectric

        n = 200
        result_dirs = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                incident = ti.math.vec3(0.0, 0.0, -2.0)
                normal = ti.math.vec3(0.0, 0.0, 1.0)
                direction, _, _ = scatter_dielectric(1.0, incident, normal, i % 2)
                result_dirs[i] = direction

        test_kernel()
        dirs = result_dirs.to_numpy()
        assert abs(dirs[:, 0]).max() < 1e-6
        assert abs(dirs[:, 1]).max() < 1e-6
        assert abs(dirs[:, 2] + 1.0).max() < 1e-6

    def test_unit_index_oblique_is_unbent(self):
        """ior = 1 at an oblique angle: transmitted rays keep their direction.

        Schlick still reflects a tiny fraction ((1 - cos)^5 ~ 0.2%) at 45
        degrees, so only the transmitted rays are checked.
        """
        from glint.materials.dielectric import scatter_dielectric

        n = 200
        result_dirs = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                incident = ti.math.vec3(1.0, -1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_dielectric(1.0, incident, normal, 1)
                result_dirs[i] = direction

        test_kernel()
        dirs = result_dirs.to_numpy()
        transmitted = dirs[dirs[:, 1] < 0.0]
        assert len(transmitted) > n // 2
        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        assert abs(transmitted[:, 0] - inv_sqrt2).max() < 1e-5
        assert abs(transmitted[:, 1] + inv_sqrt2).max() < 1e-5

    def test_refracted_rays_obey_snell(self):
        """Every transmitted ray satisfies sin(theta_t) = sin(theta_i) / 1.5."""
        from glint.materials.dielectric import scatter_dielectric

        n = 500
        result_dirs = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                angle = 45.0 * math.pi / 180.0
                incident = ti.math.vec3(ti.sin(angle), -ti.cos(angle), 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_dielectric(1.5, incident, normal, 1)
                result_dirs[i] = direction

        test_kernel()
        dirs = result_dirs.to_numpy()
        transmitted = dirs[dirs[:, 1] < 0.0]
        assert len(transmitted) > 0
        expected_sin = math.sin(math.radians(45.0)) / 1.5
        sin_t = transmitted[:, 0] / (transmitted**2).sum(axis=1) ** 0.5
        assert abs(sin_t - expected_sin).max() < 1e-4

    def test_reflection_probability_matches_schlick(self):
        """The fraction of reflected rays approaches the Schlick reflectance."""
        from glint.materials.dielectric import scatter_dielectric

        n = 20000
        result_reflected = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                incident = ti.math.vec3(0.0, -1.0, 0.0)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_dielectric(1.5, incident, normal, 1)
                result_reflected[i] = 1 if direction.y > 0.0 else 0

        test_kernel()
        fraction = result_reflected.to_numpy().mean()
        r0 = ((1.0 - 1.5) / (1.0 + 1.5)) ** 2
        assert abs(fraction - r0) < 0.01

    def test_attenuation_white_and_always_scatters(self):
        from glint.materials.dielectric import scatter_dielectric

        n = 200
        result_atten = ti.Vector.field(3, dtype=ti.f32, shape=n)
        result_scatter = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                incident = ti.math.vec3(0.3, -0.7, 0.2)
                normal = ti.math.vec3(0.0, 1.0, 0.0)
                _, attenuation, did_scatter = scatter_dielectric(1.5, incident, normal, i % 2)
                result_atten[i] = attenuation
                result_scatter[i] = did_scatter

        test_kernel()
        assert (result_atten.to_numpy() == 1.0).all()
        assert (result_scatter.to_numpy() == 1).all()


class TestMaterialRegistry:
    def test_add_and_get_material(self):
        from glint.materials.dielectric import add_dielectric_material, get_dielectric_index

        idx = add_dielectric_material(2.4)
        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            result[None] = get_dielectric_index(mat_idx)

        test_kernel(idx)
        assert abs(result[None] - 2.4) < 1e-6

    def test_default_index_is_glass(self):
        from glint.materials.dielectric import add_dielectric_material, get_dielectric_index

        idx = add_dielectric_material()
        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            result[None] = get_dielectric_index(mat_idx)

        test_kernel(idx)
        assert abs(result[None] - 1.5) < 1e-6

    def test_material_count(self):
        from glint.materials.dielectric import (
            add_dielectric_material,
            get_dielectric_material_count,
        )

        assert get_dielectric_material_count() == 0
        add_dielectric_material(1.33)
        add_dielectric_material(1.5)
        assert get_dielectric_material_count() == 2

    def test_index_below_one_accepted(self):
        """Air bubbles in water use an index below one."""
        from glint.materials.dielectric import add_dielectric_material

        assert add_dielectric_material(1.0 / 1.33) == 0

    @pytest.mark.parametrize("refractive_index", [0.0, -1.5])
    def test_non_positive_index_rejected(self, refractive_index):
        from glint.materials.dielectric import add_dielectric_material

        with pytest.raises(ValueError, match="not positive"):
            add_dielectric_material(refractive_index)
