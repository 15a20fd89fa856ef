"""Core rendering module.

Components:
    vector: Host-side Vector and Angle value types with rotations
    color: 8-bit Color with saturating arithmetic and the default palette
    ray: Kernel-side Ray dataclass and vec3 helpers
    integrator: Direct-light shading and the frame kernel
    renderer: Frame driver that uploads a Scene and returns its pixels

Only the host-side value types are imported here. The ray, integrator and
renderer modules declare Taichi objects and must be imported directly after
Taichi is initialised:

    from src.sunray.core.renderer import Renderer
"""

from .color import BACKGROUND_COLOR, BLACK, SHADOW_COLOR, WHITE, Color
from .vector import Angle, DegenerateVectorError, Vector

__all__ = [
    "Vector",
    "Angle",
    "DegenerateVectorError",
    "Color",
    "BLACK",
    "WHITE",
    "SHADOW_COLOR",
    "BACKGROUND_COLOR",
]
