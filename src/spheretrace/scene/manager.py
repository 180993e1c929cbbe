"""Scene builder coordinating spheres and materials.

A Scene keeps the authoritative host-side lists of materials and spheres and
mirrors them into the Taichi arenas on upload(). Because the host lists are
the source of truth, several Scene objects can coexist; whichever one is
uploaded last is the one kernels see.

Material handles are indices into the scene's material list. Handle 0 is
always the default grey Lambertian, so a sphere added without an explicit
material still resolves.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.scene.manager import Scene
    >>> scene = Scene()
    >>> glass = scene.add_dielectric_material(ior=1.5)
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=glass)
    >>> hit = scene.hit((0, 0, 0), (0, 0, -1))
    >>> hit.t
    0.5
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from spheretrace.materials.dielectric import Dielectric
from spheretrace.materials.lambertian import Lambertian
from spheretrace.materials.material import (
    DEFAULT_MATERIAL,
    DEFAULT_MATERIAL_ID,
    MAX_MATERIALS,
    Material,
    material_type_of,
    upload_materials,
)
from spheretrace.materials.metal import Metal
from spheretrace.scene.intersection import (
    MAX_SPHERES,
    T_MAX,
    T_MIN,
    hit_objects,
    upload_spheres,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere arena.
        center: The center of the sphere.
        radius: The radius of the sphere. Negative radii turn the sphere
            inside out.
        material_id: The material handle assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass(frozen=True)
class HitInfo:
    """Host-side result of a nearest-hit query.

    Attributes:
        t: Parametric distance along the ray.
        point: World-space hit point.
        normal: Unit normal facing the ray origin.
        front_face: True if the outer surface was hit.
        material_id: Material handle of the hit sphere.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    front_face: bool
    material_id: int


# Single-slot result storage for host-side hit queries
_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_front_face = ti.field(dtype=ti.i32, shape=())
_query_material_id = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _query_nearest_hit(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    t_min: ti.f32,
    t_max: ti.f32,
):
    rec = hit_objects(vec3(ox, oy, oz), vec3(dx, dy, dz), t_min, t_max)
    _query_hit[None] = rec.hit
    _query_t[None] = rec.t
    _query_point[None] = rec.point
    _query_normal[None] = rec.normal
    _query_front_face[None] = rec.front_face
    _query_material_id[None] = rec.material_id


def _as_point(value, name: str) -> tuple[float, float, float]:
    if len(value) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(value)}")
    point = (float(value[0]), float(value[1]), float(value[2]))
    if not all(math.isfinite(c) for c in point):
        raise ValueError(f"{name} = {point} must be finite")
    return point


class Scene:
    """Builder for a scene of spheres with per-sphere materials.

    Attributes:
        materials: Registered materials; the list index is the handle.
        spheres: SphereInfo for every sphere, in insertion order.

    Example:
        >>> scene = Scene()
        >>> red = scene.add_lambertian_material(albedo=(0.8, 0.1, 0.1))
        >>> gold = scene.add_metal_material(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
        >>> scene.add_sphere((0, 0, -1), 0.5, red)
        >>> scene.add_sphere((1, 0, -1), 0.5, gold)
        >>> scene.add_dielectric_sphere((-1, 0, -1), 0.5, ior=1.5)
    """

    def __init__(self) -> None:
        """Initialize a scene containing only the default material."""
        self.materials: list[Material] = [DEFAULT_MATERIAL]
        self.spheres: list[SphereInfo] = []

    def clear(self) -> None:
        """Remove every sphere and every material except the default."""
        self.materials = [DEFAULT_MATERIAL]
        self.spheres = []

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(self, material: Material) -> int:
        """Register a material and return its handle.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            TypeError: If material is not a Lambertian, Metal or Dielectric.
        """
        material_type_of(material)
        if len(self.materials) >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        self.materials.append(material)
        return len(self.materials) - 1

    def add_lambertian_material(self, albedo: tuple[float, float, float]) -> int:
        """Add a Lambertian (diffuse) material to the scene.

        Args:
            albedo: The diffuse reflectance color as (R, G, B) tuple.
                Each component must be in [0, 1].

        Returns:
            The handle for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1].
        """
        return self.add_material(Lambertian(albedo=albedo))

    def add_metal_material(
        self,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> int:
        """Add a metal (specular reflective) material to the scene.

        Args:
            albedo: The reflective color as (R, G, B) tuple.
            fuzz: Reflection blur. Default is 0 (perfect mirror). Values
                above 1 are clamped.

        Returns:
            The handle for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1] or fuzz
                is negative.
        """
        return self.add_material(Metal(albedo=albedo, fuzz=fuzz))

    def add_dielectric_material(self, ior: float = 1.5) -> int:
        """Add a dielectric (glass/water) material to the scene.

        Args:
            ior: Index of refraction. Default is 1.5 (typical glass).

        Returns:
            The handle for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If ior is not a positive finite number.
        """
        return self.add_material(Dielectric(ior=ior))

    def get_material(self, material_id: int) -> Material:
        """Look up a material by handle.

        Raises:
            ValueError: If material_id does not resolve.
        """
        self._check_material_id(material_id)
        return self.materials[material_id]

    def get_material_count(self) -> int:
        """Get the number of materials, including the default."""
        return len(self.materials)

    def _check_material_id(self, material_id: int) -> None:
        if not 0 <= material_id < len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Sphere Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int = DEFAULT_MATERIAL_ID,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere. Must be non-zero; a negative
                radius yields inward-facing normals.
            material_id: The material handle. Defaults to the grey
                Lambertian at handle 0.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius is zero or non-finite, the center is
                non-finite, or material_id does not resolve.
        """
        center = _as_point(center, "center")
        radius = float(radius)
        if not math.isfinite(radius) or radius == 0.0:
            raise ValueError(f"Sphere radius = {radius} must be finite and non-zero")
        self._check_material_id(material_id)
        if len(self.spheres) >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        sphere_index = len(self.spheres)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_lambertian_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> tuple[int, int]:
        """Add a sphere with a new Lambertian material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_lambertian_material(albedo)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> tuple[int, int]:
        """Add a sphere with a new metal material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_metal_material(albedo, fuzz)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def add_dielectric_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        ior: float = 1.5,
    ) -> tuple[int, int]:
        """Add a sphere with a new dielectric material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_dielectric_material(ior)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    # =========================================================================
    # Device Mirror and Queries
    # =========================================================================

    def upload(self) -> None:
        """Copy the materials and spheres into the Taichi arenas."""
        upload_materials(self.materials)
        upload_spheres(
            [s.center for s in self.spheres],
            [s.radius for s in self.spheres],
            [s.material_id for s in self.spheres],
        )

    def hit(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
        t_min: float = T_MIN,
        t_max: float = T_MAX,
    ) -> HitInfo | None:
        """Find the nearest sphere hit along a ray.

        Uploads the scene and runs the same nearest-hit scan the renderer
        uses.

        Args:
            origin: Ray origin.
            direction: Ray direction (any non-zero length).
            t_min: Minimum accepted t (inclusive).
            t_max: Maximum accepted t (inclusive).

        Returns:
            HitInfo for the closest sphere, or None if the ray misses.

        Raises:
            ValueError: If origin or direction is non-finite, or direction
                is the zero vector.
        """
        ox, oy, oz = _as_point(origin, "origin")
        dx, dy, dz = _as_point(direction, "direction")
        if dx == 0.0 and dy == 0.0 and dz == 0.0:
            raise ValueError("direction must be non-zero")
        self.upload()
        _query_nearest_hit(ox, oy, oz, dx, dy, dz, t_min, t_max)

        if _query_hit[None] == 0:
            return None
        point = _query_point[None]
        normal = _query_normal[None]
        return HitInfo(
            t=float(_query_t[None]),
            point=(float(point[0]), float(point[1]), float(point[2])),
            normal=(float(normal[0]), float(normal[1]), float(normal[2])),
            front_face=bool(_query_front_face[None]),
            material_id=int(_query_material_id[None]),
        )
