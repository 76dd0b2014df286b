from mazevo.imaging.io import load_image, save_image
from mazevo.imaging.metrics import (
    Color,
    Palette,
    Rect,
    build_palette,
    random_int,
    region_deviation,
    sample_color,
)

__all__ = [
    "Color",
    "Palette",
    "Rect",
    "build_palette",
    "load_image",
    "random_int",
    "region_deviation",
    "sample_color",
    "save_image",
]
