"""Unit tests for vector algebra and the random sampling helpers."""

import math

import taichi as ti


class TestGeometricOperators:
    """Tests for the deterministic vector operators."""

    def test_length_and_dot_and_cross(self):
        from glint.core.vec3 import cross, dot, length, length_squared, vec3

        results = ti.field(dtype=ti.f32, shape=3)
        cross_result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 12.0)
            results[0] = length(v)
            results[1] = length_squared(v)
            results[2] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            cross_result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(results[0] - 13.0) < 1e-5
        assert abs(results[1] - 169.0) < 1e-4
        assert abs(results[2] - 12.0) < 1e-5
        c = cross_result[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_unit_vector(self):
        from glint.core.vec3 import length, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_length = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            u = unit_vector(vec3(0.0, 3.0, 4.0))
            result[None] = u
            result_length[None] = length(u)

        test_kernel()
        u = result[None]
        assert abs(u[1] - 0.6) < 1e-6
        assert abs(u[2] - 0.8) < 1e-6
        assert abs(result_length[None] - 1.0) < 1e-6

    def test_near_zero(self):
        from glint.core.vec3 import near_zero, vec3

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            results[0] = near_zero(vec3(0.0, 0.0, 0.0))
            results[1] = near_zero(vec3(1e-9, -1e-9, 0.0))
            results[2] = near_zero(vec3(0.0, 1e-3, 0.0))

        test_kernel()
        assert results[0] == 1
        assert results[1] == 1
        assert results[2] == 0

    def test_reflect(self):
        """v - 2 (v . n) n about the +y normal."""
        from glint.core.vec3 import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.5), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2] - 0.5) < 1e-6

    def test_refract_with_unit_ratio_is_identity(self):
        from glint.core.vec3 import refract, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            uv = unit_vector(vec3(1.0, -2.0, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0)

        test_kernel()
        r = result[None]
        norm = math.sqrt(5.0)
        assert abs(r[0] - 1.0 / norm) < 1e-5
        assert abs(r[1] + 2.0 / norm) < 1e-5
        assert abs(r[2]) < 1e-6

    def test_refract_obeys_snell(self):
        """n1 sin(theta1) = n2 sin(theta2) for a ray entering glass."""
        from glint.core.vec3 import refract, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            uv = unit_vector(vec3(1.0, -1.0, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        sin_in = math.sqrt(0.5)
        sin_out = abs(r[0]) / math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert abs(sin_in - 1.5 * sin_out) < 1e-5
        assert r[1] < 0.0

    def test_reflectance_schlick(self):
        from glint.core.vec3 import reflectance

        results = ti.field(dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            results[0] = reflectance(1.0, 1.5)
            results[1] = reflectance(1.0, 1.0 / 1.5)
            results[2] = reflectance(0.0, 1.5)

        test_kernel()
        r0 = ((1.0 - 1.5) / (1.0 + 1.5)) ** 2
        assert abs(results[0] - r0) < 1e-6
        # r0 is the same for the inverse ratio
        assert abs(results[1] - r0) < 1e-6
        # Grazing incidence reflects everything
        assert abs(results[2] - 1.0) < 1e-6


class TestRandomHelpers:
    """Tests for the Monte Carlo sampling helpers."""

    def test_random_in_unit_sphere_stays_inside(self):
        from glint.core.vec3 import length_squared, random_in_unit_sphere

        n = 2000
        results = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                results[i] = length_squared(random_in_unit_sphere())

        test_kernel()
        values = results.to_numpy()
        assert (values < 1.0).all()
        # Not collapsed to the origin
        assert values.max() > 0.5

    def test_random_unit_vector_has_unit_length(self):
        from glint.core.vec3 import length, random_unit_vector

        n = 1000
        results = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                results[i] = length(random_unit_vector())

        test_kernel()
        assert abs(results.to_numpy() - 1.0).max() < 1e-4

    def test_random_in_unit_disk_is_planar(self):
        from glint.core.vec3 import random_in_unit_disk

        n = 1000
        results = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                results[i] = random_in_unit_disk()

        test_kernel()
        points = results.to_numpy()
        assert (points[:, 2] == 0.0).all()
        assert ((points[:, 0] ** 2 + points[:, 1] ** 2) < 1.0).all()

    def test_random_range_bounds(self):
        from glint.core.vec3 import random_range

        n = 1000
        results = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                results[i] = random_range(-2.0, 3.0)

        test_kernel()
        values = results.to_numpy()
        assert values.min() >= -2.0
        assert values.max() < 3.0
