"""Vector algebra and random sampling helpers for the tracer.

Points, directions and colors all share the Taichi ``vec3`` type; the
``Point3`` and ``Color`` aliases only document intent at call sites. Component-wise
arithmetic (add, subtract, negate, scalar and per-component multiply/divide)
comes from the Taichi vector type itself, so this module only adds the
geometric operators and the Monte Carlo sampling helpers.

The random helpers draw from Taichi's per-thread generator, which is seeded
once through ``ti.init(random_seed=...)``. They are used by the materials
and the camera lens only; the intersection code is fully deterministic.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=7)
    >>> from glint.core.vec3 import vec3, reflect
    >>> @ti.kernel
    ... def mirror() -> vec3:
    ...     return reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

# Type aliases for 3D vectors using Taichi's math module
vec3 = tm.vec3
Point3 = tm.vec3
Color = tm.vec3

# Machine epsilon of f32, the threshold used by near_zero()
F32_EPSILON = 1.1920929e-07

# Upper bound on rejection-sampling draws; acceptance is >50% per draw
MAX_REJECTION_DRAWS = 100


# =============================================================================
# Geometric Operators
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Squared Euclidean length of ``v``."""
    return v.x * v.x + v.y * v.y + v.z * v.z


@ti.func
def length(v: vec3) -> ti.f32:
    """Euclidean length of ``v``."""
    return ti.sqrt(length_squared(v))


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale ``v`` to unit length.

    There is no zero-length guard: a zero vector yields NaN components.
    Callers that can produce degenerate vectors validate on the host side.

    Args:
        v: The input vector.

    Returns:
        ``v / length(v)``.
    """
    return v / length(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check whether every component of ``v`` is below f32 machine epsilon.

    Args:
        v: The vector to check.

    Returns:
        1 if all components are near zero, 0 otherwise.
    """
    return ti.abs(v.x) < F32_EPSILON and ti.abs(v.y) < F32_EPSILON and ti.abs(v.z) < F32_EPSILON


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror ``v`` about the normal ``n``.

    Computes ``v - 2 * dot(v, n) * n``. For a unit ``n`` the normal
    component of the result is the negated normal component of ``v``.

    Args:
        v: The incoming direction (pointing toward the surface).
        n: The surface normal (should be unit length).

    Returns:
        The reflected direction.
    """
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: ti.f32) -> vec3:
    """Refract a unit direction through a surface using Snell's law.

    The refracted ray is split into the components perpendicular and
    parallel to the normal:

        r_perp     = etai_over_etat * (uv + cos_theta * n)
        r_parallel = -sqrt(|1 - |r_perp|^2|) * n

    with ``cos_theta = min(dot(-uv, n), 1)``. Total internal reflection is
    the caller's responsibility (see the dielectric material).

    Args:
        uv: The incoming direction (unit length).
        n: The surface normal facing the incoming ray (unit length).
        etai_over_etat: Ratio of refractive indices, incident over transmitted.

    Returns:
        The refracted direction.
    """
    cos_theta = tm.min(dot(-uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def reflectance(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Schlick's approximation of the Fresnel reflectance.

    ``r0 = ((1 - ref_idx) / (1 + ref_idx))^2``; the result is
    ``r0 + (1 - r0) * (1 - cosine)^5``. Passing the refraction ratio
    ``1 / ior`` gives the same ``r0`` as passing ``ior``.

    Args:
        cosine: Cosine of the incident angle.
        ref_idx: Refractive index (or ratio of indices).

    Returns:
        The reflection probability in [0, 1].
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_range(min_val: ti.f32, max_val: ti.f32) -> ti.f32:
    """Uniform random float in [min_val, max_val)."""
    return min_val + (max_val - min_val) * ti.random(ti.f32)


@ti.func
def random_vec3(min_val: ti.f32, max_val: ti.f32) -> vec3:
    """Vector with each component uniform in [min_val, max_val)."""
    return vec3(
        random_range(min_val, max_val),
        random_range(min_val, max_val),
        random_range(min_val, max_val),
    )


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point inside the unit ball.

    Draws cube-uniform points until one lands strictly inside the ball.

    Returns:
        A random point with length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_DRAWS):
        if found == 0:
            p = random_vec3(-1.0, 1.0)
            if length_squared(p) < 1.0:
                found = 1
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Random direction, uniformly distributed on the unit sphere."""
    return unit_vector(random_in_unit_sphere())


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for thin-lens sampling in the camera.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_DRAWS):
        if found == 0:
            p = vec3(random_range(-1.0, 1.0), random_range(-1.0, 1.0), 0.0)
            if length_squared(p) < 1.0:
                found = 1
    return p
