"""Preview module for image output.

Components:
    export: Quantization, PPM (P6) and PNG export
"""

from whitted.preview.export import (
    compute_rmse,
    encode_ppm,
    image_to_uint8,
    ppm_header,
    save_image,
    save_png,
    save_ppm,
)

__all__ = [
    "image_to_uint8",
    "ppm_header",
    "encode_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "compute_rmse",
]
