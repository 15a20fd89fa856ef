"""Camera module for view-plane ray generation.

Components:
    viewplane: Camera position/orientation and the pixel grid it looks through

Each pixel (i, j) of the view plane maps to exactly one ray leaving the camera
position. get_ray() builds that ray inside Taichi kernels from state uploaded
by setup_camera(). Camera.ray_direction() computes the same direction on the
host.

setup_camera, get_ray and get_camera_info live next to Taichi fields; import
them from src.sunray.camera.viewplane after Taichi is initialised.
"""
