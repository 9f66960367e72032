"""glint: a Taichi-accelerated Monte Carlo path tracer for sphere scenes.

Rays are traced through a flat list of spheres with diffuse, metal and
glass materials under a sky gradient, seen through a thin-lens camera.

Subpackages:
    core: Vector and ray algebra, the integrator and the batch renderer
    geometry: Hit records and sphere intersection
    materials: Lambertian, metal and dielectric scattering plus dispatch
    scene: The sphere world, scene manager and preset scenes
    camera: Thin-lens camera with ray generation
    output: PPM and PNG encoders

Modules that allocate Taichi fields (materials, scene, camera, the
integrator) must be imported after ``ti.init()``.
"""

__version__ = "0.1.0"
