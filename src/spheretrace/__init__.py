"""Taichi-based Monte Carlo path tracer for scenes of spheres.

This package renders spheres under Lambertian, metal and dielectric materials,
lit by a procedural sky, and writes the result as PPM or PNG.

Subpackages:
    core: Vector and ray algebra, random streams, the integrator and renderers
    geometry: Sphere primitive and ray-sphere intersection
    materials: Material variants and scatter dispatch
    scene: Scene builder, nearest-hit queries and preset scenes
    camera: Pinhole camera with ray generation
    preview: Tone mapping and image export

Modules that declare Taichi fields must be imported after ti.init().
"""

__version__ = "0.1.0"
