"""Image export utilities for rendered images.

This module converts linear float images to 8-bit pixels and writes them to
disk.

Quantization saturates without gamma correction: each channel becomes
``floor(min(1, c) * 255)``. Values below zero and NaN map to 0.

Supported formats:
    - PPM (binary P6, the default output)
    - PNG (8-bit via Pillow)

Example:
    >>> import numpy as np
    >>> from whitted.preview.export import save_ppm
    >>> image = np.zeros((480, 640, 3))
    >>> save_ppm(image, "out.ppm")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def _check_image_shape(image: npt.NDArray[np.generic]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (height, width, 3), got {image.shape}")


def image_to_uint8(image: npt.NDArray[np.floating[npt.NBitBase]]) -> npt.NDArray[np.uint8]:
    """Quantize a linear float image to 8 bits per channel.

    Args:
        image: Linear image array of shape (H, W, 3). Values above 1 saturate.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    _check_image_shape(image)
    clamped = np.clip(np.nan_to_num(image.astype(np.float64), nan=0.0), 0.0, 1.0)
    return np.floor(clamped * 255.0).astype(np.uint8)


def ppm_header(width: int, height: int) -> bytes:
    """Return the P6 header for an image of the given size."""
    return f"P6\n{width} {height}\n255\n".encode("ascii")


def encode_ppm(image: npt.NDArray[np.generic]) -> bytes:
    """Encode an image as binary PPM (P6).

    Args:
        image: Either a linear float image or an already quantized uint8
            image, of shape (H, W, 3), top row first.

    Returns:
        The header followed by 3 bytes per pixel in row-major order.

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    _check_image_shape(image)
    pixels = image if image.dtype == np.uint8 else image_to_uint8(image)
    height, width, _ = pixels.shape
    return ppm_header(width, height) + np.ascontiguousarray(pixels).tobytes()


def save_ppm(image: npt.NDArray[np.generic], filepath: str | Path) -> None:
    """Save an image as a binary PPM file.

    Args:
        image: Linear float or uint8 image of shape (H, W, 3).
        filepath: Output file path.

    Raises:
        OSError: If the file cannot be written.
    """
    Path(filepath).write_bytes(encode_ppm(image))


def save_png(image: npt.NDArray[np.generic], filepath: str | Path) -> None:
    """Save an image as an 8-bit PNG file.

    Uses the same quantization as the PPM output (no gamma correction).

    Args:
        image: Linear float or uint8 image of shape (H, W, 3).
        filepath: Output file path (should end in .png).

    Raises:
        OSError: If the file cannot be written.
    """
    _check_image_shape(image)
    pixels = image if image.dtype == np.uint8 else image_to_uint8(image)
    PILImage.fromarray(np.ascontiguousarray(pixels)).save(filepath, format="PNG")


def save_image(image: npt.NDArray[np.generic], filepath: str | Path) -> None:
    """Save an image, choosing the format from the file extension.

    ``.png`` files are written with Pillow, anything else as PPM.
    """
    if Path(filepath).suffix.lower() == ".png":
        save_png(image, filepath)
    else:
        save_ppm(image, filepath)


def compute_rmse(
    rendered: npt.NDArray[np.floating[npt.NBitBase]],
    reference: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Root mean squared per-channel difference between two renders.

    Used to compare the Taichi kernel output with the reference tracer.

    Raises:
        ValueError: If the two arrays differ in shape.
    """
    if rendered.shape != reference.shape:
        raise ValueError(f"Cannot compare renders of shape {rendered.shape} and {reference.shape}")

    error = np.subtract(rendered, reference, dtype=np.float64)
    return float(np.sqrt(np.square(error).mean()))
