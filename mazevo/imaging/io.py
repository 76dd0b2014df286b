from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from mazevo.exceptions import ImageIOError

__all__ = ["load_image", "save_image"]

JPEG_QUALITY = 95


def load_image(path: str | Path) -> np.ndarray:
    """Decode *path* into an ``(H, W, 3)`` uint8 RGB array."""
    path = Path(path)
    try:
        with Image.open(path) as img:
            return np.asarray(img.convert("RGB"), dtype=np.uint8).copy()
    except (FileNotFoundError, UnidentifiedImageError, OSError) as exc:
        raise ImageIOError(f"Cannot read image {path}: {exc}") from exc


def save_image(image: np.ndarray, path: str | Path) -> Path:
    """Encode *image* to *path*; the format follows the file extension."""
    path = Path(path)
    kwargs = {}
    if path.suffix.lower() in (".jpg", ".jpeg"):
        kwargs["quality"] = JPEG_QUALITY
    try:
        Image.fromarray(np.ascontiguousarray(image[..., :3], dtype=np.uint8)).save(
            path, **kwargs
        )
    except (OSError, ValueError, KeyError) as exc:
        raise ImageIOError(f"Cannot write image {path}: {exc}") from exc
    return path
