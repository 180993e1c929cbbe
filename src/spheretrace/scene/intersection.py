"""Scene-level nearest-hit resolution.

Spheres are stored in a structure-of-arrays arena in Taichi fields. A query
scans every sphere linearly, shrinking the accepted t range to the closest hit
found so far, and returns that hit together with the sphere's material handle.
There is no acceleration structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.scene.intersection import upload_spheres, hit_objects
    >>> upload_spheres([(0.0, 0.0, -1.0)], [0.5], [0])
    >>> # Use hit_objects within a Taichi kernel
"""

from collections.abc import Sequence

import numpy as np
import taichi as ti
import taichi.math as tm

from spheretrace.geometry.sphere import HitRecord, Sphere, hit_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Minimum accepted hit distance; keeps scattered rays off their own surface
T_MIN = 0.001

# Upper bound used in place of +infinity (fast-math kernels do not honour inf)
T_MAX = 1.0e30


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: 1 if any sphere was hit, 0 on a miss.
        t: Parametric distance of the closest hit.
        point: World-space hit point.
        normal: Unit normal facing the ray origin.
        front_face: 1 if the outer surface was hit, 0 if hit from inside.
        material_id: Material handle of the hit sphere, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_spheres() -> None:
    """Remove every sphere from the device arena."""
    num_spheres[None] = 0


def upload_spheres(
    centers: Sequence[tuple[float, float, float]],
    radii: Sequence[float],
    material_ids: Sequence[int],
) -> None:
    """Replace the device arena contents with the given spheres.

    Raises:
        RuntimeError: If more than MAX_SPHERES spheres are given.
        ValueError: If the three sequences differ in length, a radius is zero
            or non-finite, or a center is non-finite.
    """
    count = len(centers)
    if len(radii) != count or len(material_ids) != count:
        raise ValueError("centers, radii and material_ids must have the same length")
    if count > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    center_array = np.zeros((MAX_SPHERES, 3), dtype=np.float32)
    radius_array = np.ones(MAX_SPHERES, dtype=np.float32)
    material_array = np.zeros(MAX_SPHERES, dtype=np.int32)
    if count:
        center_array[:count] = np.asarray(centers, dtype=np.float32)
        radius_array[:count] = np.asarray(radii, dtype=np.float32)
        material_array[:count] = np.asarray(material_ids, dtype=np.int32)
        if not np.all(np.isfinite(center_array[:count])):
            raise ValueError("Sphere centers must be finite")
        radii_in = radius_array[:count]
        if not np.all(np.isfinite(radii_in)) or np.any(radii_in == 0.0):
            raise ValueError("Sphere radii must be finite and non-zero")

    sphere_centers.from_numpy(center_array)
    sphere_radii.from_numpy(radius_array)
    sphere_material_ids.from_numpy(material_array)
    num_spheres[None] = count


def get_sphere_count() -> int:
    """Get the number of spheres in the device arena."""
    return int(num_spheres[None])


@ti.func
def _to_scene_hit_record(rec: HitRecord, material_id: ti.i32) -> SceneHitRecord:
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        material_id=material_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def hit_objects(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the closest intersection of a ray with every sphere in the scene.

    Each sphere is tested against the current closest distance rather than
    t_max, so a later sphere only replaces the result when it is strictly
    nearer. Equal distances keep the sphere found first.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A SceneHitRecord for the closest hit, or a miss record.
    """
    closest_so_far = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_so_far)
        if rec.hit == 1 and (result.hit == 0 or rec.t < closest_so_far):
            closest_so_far = rec.t
            result = _to_scene_hit_record(rec, sphere_material_ids[i])

    return result
