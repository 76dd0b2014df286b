"""
Pixel-level comparison and color sampling primitives.

Images are ``(height, width, 3)`` uint8 RGB arrays. Every randomized helper
takes an explicit ``numpy.random.Generator`` so runs can be replayed.
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

import numpy as np

from mazevo.exceptions import DimensionMismatchError

__all__ = [
    "Color",
    "Palette",
    "Rect",
    "build_palette",
    "random_int",
    "region_deviation",
    "sample_color",
]

Color = tuple[int, int, int]
Palette = tuple[Color, ...]


class Rect(NamedTuple):
    """Half-open pixel rectangle ``[y0, y1) x [x0, x1)``."""

    y0: int
    x0: int
    y1: int
    x1: int

    @classmethod
    def of(cls, image: np.ndarray) -> "Rect":
        return cls(0, 0, image.shape[0], image.shape[1])

    def within(self, image: np.ndarray) -> bool:
        return (
            0 <= self.y0 < self.y1 <= image.shape[0]
            and 0 <= self.x0 < self.x1 <= image.shape[1]
        )


def _check_rgb(image: np.ndarray, name: str) -> None:
    if image.ndim != 3 or image.shape[2] < 3:
        raise DimensionMismatchError(
            f"{name} must be an (H, W, 3) RGB array, got shape {image.shape}"
        )


def region_deviation(
    first: np.ndarray, second: np.ndarray, rect: Optional[Rect] = None
) -> float:
    """Root-mean-square RGB difference between two images over *rect*.

    Per pixel, the squared differences of the red, green and blue channels
    are summed; the sums are averaged over the pixels of the region and the
    square root of that mean is returned. Defaults to the whole image.

    Raises:
        DimensionMismatchError: images differ in shape, are not RGB, or
            *rect* is empty or lies outside the images.
    """
    _check_rgb(first, "first image")
    _check_rgb(second, "second image")
    if first.shape[:2] != second.shape[:2]:
        raise DimensionMismatchError(
            f"Image sizes differ: {first.shape[:2]} vs {second.shape[:2]}"
        )
    if rect is None:
        rect = Rect.of(first)
    elif not rect.within(first):
        raise DimensionMismatchError(
            f"Region {tuple(rect)} outside image of size {first.shape[:2]}"
        )

    a = first[rect.y0 : rect.y1, rect.x0 : rect.x1, :3].astype(np.int64)
    b = second[rect.y0 : rect.y1, rect.x0 : rect.x1, :3].astype(np.int64)
    diff = a - b
    per_pixel = (diff * diff).sum(axis=2)
    return float(np.sqrt(per_pixel.mean()))


def build_palette(image: np.ndarray) -> Palette:
    """Distinct RGB colors present in *image*, in ascending packed-RGB order."""
    _check_rgb(image, "image")
    rgb = image[..., :3].reshape(-1, 3).astype(np.uint32)
    packed = np.unique((rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2])
    return tuple(
        (int(v >> 16) & 0xFF, int(v >> 8) & 0xFF, int(v) & 0xFF) for v in packed
    )


def random_int(rng: np.random.Generator, low: int, high: int) -> int:
    """Uniform integer from ``[low, high)``."""
    return int(rng.integers(low, high))


def sample_color(
    rng: np.random.Generator, palette: Optional[Sequence[Color]] = None
) -> Color:
    """Pick a palette color uniformly, or a uniform RGB triple without one."""
    if palette is not None and len(palette):
        r, g, b = palette[random_int(rng, 0, len(palette))]
        return int(r), int(g), int(b)
    r, g, b = rng.integers(0, 256, size=3)
    return int(r), int(g), int(b)
