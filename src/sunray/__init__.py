"""Taichi-based triangle-mesh ray tracer with a single directional light.

This package renders triangle meshes with direct Lambertian shading and hard
shadows cast by one infinitely distant "sun". Every pixel casts one camera ray
and, on a hit, one shadow ray. There are no bounces, no anti-aliasing and no
acceleration structure: each ray is tested against every triangle.

Subpackages:
    core: Vector/Angle/Color value types, kernel vector helpers, shading and
        the frame driver
    geometry: Triangles, their plane equations and containment tests
    camera: Camera and view-plane model with per-pixel ray generation
    scene: Immutable scene container, kernel-side triangle storage and
        intersection searches, built-in demo scene
    io: Mesh ingestion and image output

Taichi must be initialised with 64-bit floats before importing any module that
declares Taichi fields; use init_taichi() for that.
"""

__version__ = "0.1.0"


def init_taichi(arch=None, **kwargs) -> None:
    """Initialise the Taichi runtime with 64-bit floating point.

    Args:
        arch: Taichi backend (e.g. ``ti.cpu``). It must support f64; Metal
            and many Vulkan devices do not. When None, CUDA is tried first
            and the CPU is used if that fails.
        **kwargs: Extra keyword arguments forwarded to ``ti.init``.
    """
    import taichi as ti

    if arch is not None:
        ti.init(arch=arch, default_fp=ti.f64, **kwargs)
        return

    try:
        ti.init(arch=ti.cuda, default_fp=ti.f64, **kwargs)
    except Exception:
        ti.init(arch=ti.cpu, default_fp=ti.f64, **kwargs)
