"""Ready-made scenes.

Two scenes are provided:

- A single diffuse sphere in front of the default camera, optionally resting
  on a large ground sphere. This is the smallest scene that exercises the
  whole pipeline: the center of the image sees the sphere and the corners
  see the sky.
- A material showcase with a matte ground, a diffuse sphere in the center, a
  hollow glass sphere on the left and a metal sphere on the right. The hollow
  glass is built from two spheres, the inner one with a negative radius so
  its normals point inward.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.scene.presets import create_material_showcase_scene
    >>>
    >>> scene, camera = create_material_showcase_scene()
    >>> scene.get_sphere_count()
    5
"""

from dataclasses import dataclass

from spheretrace.camera.pinhole import Camera
from spheretrace.scene.manager import Scene

# =============================================================================
# Showcase Parameters
# =============================================================================


@dataclass
class ShowcaseParams:
    """Parameters for configuring the material showcase scene.

    Attributes:
        aspect_ratio: Width divided by height of the target image.
        vfov: Vertical field of view in degrees.
        ground_color: Albedo of the ground sphere.
        center_color: Albedo of the diffuse center sphere.
        metal_color: Albedo of the metal sphere.
        metal_fuzz: Fuzz of the metal sphere.
        glass_ior: Index of refraction of the glass sphere.
        glass_thickness: Wall thickness of the hollow glass sphere. Zero
            makes it solid.

    Example:
        >>> params = ShowcaseParams(metal_fuzz=0.0, glass_ior=1.33)
        >>> scene, camera = create_material_showcase_scene(params)
    """

    aspect_ratio: float = 16.0 / 9.0
    vfov: float = 90.0
    ground_color: tuple[float, float, float] = (0.8, 0.8, 0.0)
    center_color: tuple[float, float, float] = (0.1, 0.2, 0.5)
    metal_color: tuple[float, float, float] = (0.8, 0.6, 0.2)
    metal_fuzz: float = 0.0
    glass_ior: float = 1.5
    glass_thickness: float = 0.1


# =============================================================================
# Scene Constants
# =============================================================================

SPHERE_RADIUS = 0.5
SPHERE_CENTER = (0.0, 0.0, -1.0)

# A very large sphere reads as a flat ground plane near the origin
GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0

SINGLE_SPHERE_ALBEDO = (0.5, 0.5, 0.5)


# =============================================================================
# Scene Factories
# =============================================================================


def create_single_sphere_scene(
    aspect_ratio: float = 16.0 / 9.0,
    with_ground: bool = False,
) -> tuple[Scene, Camera]:
    """Create a single diffuse sphere at (0, 0, -1) with radius 0.5.

    The camera sits at the origin looking down -Z with a 90 degree field of
    view.

    Args:
        aspect_ratio: Width divided by height of the target image.
        with_ground: Add a large ground sphere below the sphere.

    Returns:
        A tuple of (Scene, Camera).
    """
    scene = Scene()
    scene.add_lambertian_sphere(SPHERE_CENTER, SPHERE_RADIUS, SINGLE_SPHERE_ALBEDO)
    if with_ground:
        scene.add_sphere(GROUND_CENTER, GROUND_RADIUS)

    camera = Camera(aspect_ratio=aspect_ratio)
    return scene, camera


def create_material_showcase_scene(
    params: ShowcaseParams | None = None,
) -> tuple[Scene, Camera]:
    """Create the material showcase scene.

    Layout (camera at the origin looking down -Z):
    - Ground: large matte sphere below everything
    - Center (0, 0, -1): diffuse sphere
    - Left (-1, 0, -1): hollow glass sphere
    - Right (1, 0, -1): metal sphere

    Args:
        params: Optional ShowcaseParams. If None, uses defaults.

    Returns:
        A tuple of (Scene, Camera).

    Raises:
        ValueError: If glass_thickness is negative or not smaller than the
            sphere radius.
    """
    if params is None:
        params = ShowcaseParams()
    if not 0.0 <= params.glass_thickness < SPHERE_RADIUS:
        raise ValueError(
            f"glass_thickness = {params.glass_thickness} must be in [0, {SPHERE_RADIUS})"
        )

    scene = Scene()

    # =========================================================================
    # Materials
    # =========================================================================

    ground_mat = scene.add_lambertian_material(albedo=params.ground_color)
    center_mat = scene.add_lambertian_material(albedo=params.center_color)
    glass_mat = scene.add_dielectric_material(ior=params.glass_ior)
    metal_mat = scene.add_metal_material(albedo=params.metal_color, fuzz=params.metal_fuzz)

    # =========================================================================
    # Spheres
    # =========================================================================

    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground_mat)
    scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, center_mat)

    left_center = (-1.0, 0.0, -1.0)
    scene.add_sphere(left_center, SPHERE_RADIUS, glass_mat)
    if params.glass_thickness > 0.0:
        # Negative radius flips the normals, making the inner surface a bubble
        scene.add_sphere(left_center, -(SPHERE_RADIUS - params.glass_thickness), glass_mat)

    scene.add_sphere((1.0, 0.0, -1.0), SPHERE_RADIUS, metal_mat)

    # =========================================================================
    # Camera Setup
    # =========================================================================

    camera = Camera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=params.vfov,
        aspect_ratio=params.aspect_ratio,
    )

    return scene, camera
