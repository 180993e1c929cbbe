"""Scene module for scene management and hit records.

Components:
    intersection: Sphere arena and the nearest-hit scan
    manager: Scene builder with host-side hit queries
    presets: Ready-made scenes

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for sphere data
    - Integer material handles into the material arena
"""

from .intersection import (
    MAX_SPHERES,
    T_MAX,
    T_MIN,
    SceneHitRecord,
    clear_spheres,
    get_sphere_count,
    hit_objects,
    upload_spheres,
)
from .manager import HitInfo, Scene, SphereInfo
from .presets import (
    ShowcaseParams,
    create_material_showcase_scene,
    create_single_sphere_scene,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "hit_objects",
    "upload_spheres",
    "clear_spheres",
    "get_sphere_count",
    "MAX_SPHERES",
    "T_MIN",
    "T_MAX",
    # Manager module
    "Scene",
    "SphereInfo",
    "HitInfo",
    # Presets
    "ShowcaseParams",
    "create_single_sphere_scene",
    "create_material_showcase_scene",
]
