"""Image export utilities for rendered frames.

Supported formats:
    - Plain PPM (P3): the renderer's native text raster
    - PNG (8-bit RGB via Pillow)

A plain PPM file is a header of three lines (``P3``, ``<width> <height>``,
``255``) followed by one ``r g b`` line per pixel in row-major order: rows top
to bottom, columns left to right.

Example:
    >>> from src.sunray.io.export import save_ppm, convert_ppm_to_png
    >>> image = renderer.render()
    >>> save_ppm(image, "frame.ppm")
    >>> convert_ppm_to_png("frame.ppm", "frame.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

MAX_CHANNEL_VALUE = 255


def _check_image(image: npt.NDArray[np.uint8]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def format_ppm(image: npt.NDArray[np.uint8]) -> str:
    """Serialize an image as plain PPM text.

    Args:
        image: Array of shape (height, width, 3); element [j, i] is pixel (i, j).

    Returns:
        The complete file contents, ending with a newline.

    Raises:
        ValueError: If image is not of shape (H, W, 3).
    """
    _check_image(image)
    height, width, _ = image.shape
    lines = ["P3", f"{width} {height}", str(MAX_CHANNEL_VALUE)]
    lines.extend(f"{r} {g} {b}" for r, g, b in image.reshape(-1, 3).tolist())
    return "\n".join(lines) + "\n"


def save_ppm(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Write an image as a plain PPM file."""
    Path(filepath).write_text(format_ppm(image), encoding="ascii")


def read_ppm(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a plain PPM (P3) file.

    Comments (``#`` to end of line) are allowed anywhere, as in the format.

    Returns:
        Array of shape (height, width, 3) with dtype uint8.

    Raises:
        ValueError: If the file is not a well-formed 8-bit P3 image.
    """
    text = Path(filepath).read_text(encoding="ascii")
    tokens = [
        token for line in text.splitlines() for token in line.split("#", 1)[0].split()
    ]
    if len(tokens) < 4 or tokens[0] != "P3":
        raise ValueError(f"{filepath} is not a plain PPM (P3) file")

    try:
        width, height, max_value = (int(token) for token in tokens[1:4])
        values = np.array([int(token) for token in tokens[4:]], dtype=np.int64)
    except ValueError as e:
        raise ValueError(f"{filepath} contains a non-integer value") from e

    if max_value != MAX_CHANNEL_VALUE:
        raise ValueError(f"Unsupported PPM max value {max_value}, expected {MAX_CHANNEL_VALUE}")
    if values.size != width * height * 3:
        raise ValueError(
            f"Expected {width * height * 3} channel values for {width}x{height}, "
            f"got {values.size}"
        )
    if values.size and (values.min() < 0 or values.max() > max_value):
        raise ValueError(f"Channel value outside [0, {max_value}]")

    return values.astype(np.uint8).reshape(height, width, 3)


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an image as an 8-bit RGB PNG.

    Args:
        image: Array of shape (height, width, 3) with dtype uint8.
        filepath: Output file path (should end in .png).
    """
    _check_image(image)
    pil_image = PILImage.fromarray(np.ascontiguousarray(image, dtype=np.uint8), mode="RGB")
    pil_image.save(filepath)


def convert_ppm_to_png(ppm_path: str | Path, png_path: str | Path) -> None:
    """Convert a plain PPM file written by save_ppm into a PNG."""
    save_png(read_ppm(ppm_path), png_path)
