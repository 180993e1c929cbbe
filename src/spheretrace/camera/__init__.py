"""Camera module for view and ray generation.

Components:
    pinhole: Pinhole (perspective) camera model

Ray generation uses viewport coordinates:
    s in [0, 1]: left to right across image
    t in [0, 1]: bottom to top across image
"""

from .pinhole import Camera, CameraBasis, get_camera_info, get_ray, setup_camera

__all__ = [
    "Camera",
    "CameraBasis",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
