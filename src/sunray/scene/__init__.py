"""Scene module for scene representation and ray-scene queries.

Components:
    scene: Immutable Scene (camera, triangles, planes, sunlight) and Sunlight
    intersection: Kernel-side triangle storage, closest-hit and any-hit
        searches, and host-side single-ray queries
    presets: Built-in ground-and-pyramid demo scene

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for vertices and planes
    - Planes index-aligned with triangles

All three modules depend on Taichi fields (directly or through the camera) and
must be imported after Taichi is initialised, e.g.:

    from src.sunray.scene.scene import Scene, Sunlight
"""
