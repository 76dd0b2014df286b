"""
Chromosomes: full candidate images.

A chromosome is a ``blocks_y x blocks_x`` grid of genes. Rendered, each grid
cell becomes a ``stride_y x stride_x`` square of pixels; the stride is
derived from the target image size and must divide it exactly.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

import numpy as np

from mazevo.exceptions import DimensionMismatchError
from mazevo.genome.cell import Cell
from mazevo.genome.gene import Gene
from mazevo.imaging.metrics import Color, Rect, random_int

__all__ = ["Chromosome", "pixel_stride"]


def pixel_stride(
    height: int, width: int, cells_y: int, cells_x: int
) -> tuple[int, int]:
    """Pixels per grid cell along each axis for a *height* x *width* image."""
    if cells_y <= 0 or cells_x <= 0:
        raise DimensionMismatchError(f"Empty grid: {cells_y}x{cells_x} cells")
    if height % cells_y or width % cells_x or height < cells_y or width < cells_x:
        raise DimensionMismatchError(
            f"Image {height}x{width} is not evenly divisible by a "
            f"{cells_y}x{cells_x} cell grid"
        )
    return height // cells_y, width // cells_x


def _marker_span(stride: int) -> tuple[int, int]:
    """Inclusive pixel offsets of a cell marker inside its stride square."""
    margin = stride // 4
    return margin, stride - 1 - margin


class Chromosome:
    """Grid of genes plus the cached render and fitness of the whole image.

    The image and ``rmsd`` are only filled in on demand by :meth:`render`
    and the evolution engine; replacing a gene drops both.
    """

    def __init__(
        self,
        blocks_y: int,
        blocks_x: int,
        block_size_y: int,
        block_size_x: int,
        genes: list[list[Gene]],
    ):
        if len(genes) != blocks_y or any(len(row) != blocks_x for row in genes):
            raise DimensionMismatchError(
                f"Gene grid does not match {blocks_y}x{blocks_x} blocks"
            )
        self.blocks_y = blocks_y
        self.blocks_x = blocks_x
        self.block_size_y = block_size_y
        self.block_size_x = block_size_x
        self.genes = genes
        self.image: Optional[np.ndarray] = None
        self.rmsd: Optional[float] = None

    @classmethod
    def random(
        cls,
        blocks_y: int,
        blocks_x: int,
        block_size_y: int,
        block_size_x: int,
        rng: np.random.Generator,
        palette: Optional[Sequence[Color]] = None,
    ) -> "Chromosome":
        genes = [
            [
                Gene.generate(block_size_y, block_size_x, rng, palette)
                for _ in range(blocks_x)
            ]
            for _ in range(blocks_y)
        ]
        return cls(blocks_y, blocks_x, block_size_y, block_size_x, genes)

    @property
    def cells_y(self) -> int:
        return self.blocks_y * self.block_size_y

    @property
    def cells_x(self) -> int:
        return self.blocks_x * self.block_size_x

    def gene_at(self, y: int, x: int) -> Gene:
        return self.genes[y][x]

    def set_gene(self, y: int, x: int, gene: Gene) -> None:
        if (gene.block_size_y, gene.block_size_x) != (
            self.block_size_y,
            self.block_size_x,
        ):
            raise DimensionMismatchError(
                f"Gene of size {gene.block_size_y}x{gene.block_size_x} does not fit "
                f"a {self.block_size_y}x{self.block_size_x} block"
            )
        self.genes[y][x] = gene
        self.image = None
        self.rmsd = None

    def positions(self) -> Iterator[tuple[int, int]]:
        """Block positions in row-major order."""
        for y in range(self.blocks_y):
            for x in range(self.blocks_x):
                yield y, x

    def copy(self) -> "Chromosome":
        clone = Chromosome(
            self.blocks_y,
            self.blocks_x,
            self.block_size_y,
            self.block_size_x,
            [[gene.copy() for gene in row] for row in self.genes],
        )
        # The render is read-only, sharing it is safe.
        clone.image = self.image
        clone.rmsd = self.rmsd
        return clone

    def block_rect(self, y: int, x: int, height: int, width: int) -> Rect:
        """Pixel region occupied by block ``(y, x)`` in a *height* x *width* render."""
        sy, sx = pixel_stride(height, width, self.cells_y, self.cells_x)
        by, bx = self.block_size_y * sy, self.block_size_x * sx
        return Rect(y * by, x * bx, (y + 1) * by, (x + 1) * bx)

    def mutate(
        self,
        rng: np.random.Generator,
        siblings: int,
        palette: Optional[Sequence[Color]] = None,
    ) -> list["Chromosome"]:
        """Copies of this chromosome sharing one freshly generated block.

        One block position is drawn at random and a new maze is grown for it.
        Each sibling gets that same maze with its own coloring; every other
        block is an untouched copy of ``self``.
        """
        block_y = random_int(rng, 0, self.blocks_y)
        block_x = random_int(rng, 0, self.blocks_x)
        fresh = Gene(self.block_size_y, self.block_size_x)
        fresh.fill_maze(rng)

        children = []
        for _ in range(siblings):
            gene = fresh.copy()
            gene.color_maze(rng, palette)
            child = self.copy()
            child.set_gene(block_y, block_x, gene)
            children.append(child)
        return children

    def render(self, height: int, width: int) -> np.ndarray:
        """Draw the chromosome and cache the result as :attr:`image`."""
        self.image = self.draw(height, width)
        return self.image

    def draw(self, height: int, width: int) -> np.ndarray:
        """Draw every path onto a black *height* x *width* RGB canvas.

        Consecutive cells of a path are joined by the rectangle spanning both
        cell markers; the final cell also gets its own marker so single-cell
        paths stay visible.
        """
        sy, sx = pixel_stride(height, width, self.cells_y, self.cells_x)
        lo_y, hi_y = _marker_span(sy)
        lo_x, hi_x = _marker_span(sx)
        canvas = np.zeros((height, width, 3), dtype=np.uint8)

        def paint(a: Cell, b: Cell, color: Color) -> None:
            y0 = min(a.y, b.y) * sy + lo_y
            y1 = max(a.y, b.y) * sy + hi_y
            x0 = min(a.x, b.x) * sx + lo_x
            x1 = max(a.x, b.x) * sx + hi_x
            if y0 < 0 or x0 < 0 or y1 >= height or x1 >= width:
                raise DimensionMismatchError(
                    f"Segment {a}->{b} falls outside a {height}x{width} image"
                )
            canvas[y0 : y1 + 1, x0 : x1 + 1] = color

        for by, bx in self.positions():
            gene = self.genes[by][bx]
            for path in gene.paths:
                if path.color is None:
                    raise ValueError(f"Uncolored path in block ({by}, {bx})")
                placed = path.translated(by * self.block_size_y, bx * self.block_size_x)
                for a, b in zip(placed.cells, placed.cells[1:]):
                    paint(a, b, path.color)
                paint(placed.head, placed.head, path.color)

        canvas.flags.writeable = False
        return canvas

    def __repr__(self) -> str:
        return (
            f"Chromosome({self.blocks_y}x{self.blocks_x} blocks of "
            f"{self.block_size_y}x{self.block_size_x}, rmsd={self.rmsd})"
        )
