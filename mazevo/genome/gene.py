"""
Maze blocks.

A gene covers a ``block_size_y x block_size_x`` grid of cells and splits it
into disjoint paths. Paths are grown by a greedy self-avoiding walk: start at
a random unvisited cell and keep stepping to a random unvisited neighbor
until the walk is stuck, then start over from another unvisited cell. Walks
that dead-end early produce short (even single-cell) paths; that is the
intended texture of the maze, not something to smooth out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

import numpy as np

from mazevo.genome.cell import Cell
from mazevo.genome.path import Path
from mazevo.imaging.metrics import Color, random_int, sample_color


@dataclass
class Gene:
    block_size_y: int
    block_size_x: int
    paths: list[Path] = field(default_factory=list)
    rmsd: Optional[float] = field(default=None, compare=False)

    @classmethod
    def generate(
        cls,
        block_size_y: int,
        block_size_x: int,
        rng: np.random.Generator,
        palette: Optional[Sequence[Color]] = None,
    ) -> "Gene":
        """Fresh maze, filled and colored."""
        gene = cls(block_size_y, block_size_x)
        gene.fill_maze(rng)
        gene.color_maze(rng, palette)
        return gene

    def fill_maze(self, rng: np.random.Generator) -> None:
        """Partition the block into self-avoiding walks (replaces any paths)."""
        unvisited = [
            Cell(y, x)
            for y in range(self.block_size_y)
            for x in range(self.block_size_x)
        ]
        visited: set[Cell] = set()
        self.paths = []
        self.rmsd = None

        while unvisited:
            start = unvisited[random_int(rng, 0, len(unvisited))]
            self.paths.append(self._walk(start, visited, unvisited, rng))

    def color_maze(
        self, rng: np.random.Generator, palette: Optional[Sequence[Color]] = None
    ) -> None:
        """Give every path an independently sampled color."""
        for path in self.paths:
            path.color = sample_color(rng, palette)
        self.rmsd = None

    def cells(self) -> Iterator[Cell]:
        for path in self.paths:
            yield from path

    def copy(self) -> "Gene":
        return Gene(
            self.block_size_y,
            self.block_size_x,
            [p.copy() for p in self.paths],
            self.rmsd,
        )

    def _walk(
        self,
        start: Cell,
        visited: set[Cell],
        unvisited: list[Cell],
        rng: np.random.Generator,
    ) -> Path:
        path = Path.starting_at(start)
        visited.add(start)
        unvisited.remove(start)

        while True:
            moves = [c for c in path.head.neighbors() if self._is_open(c, visited)]
            if not moves:
                return path
            step = moves[random_int(rng, 0, len(moves))]
            visited.add(step)
            unvisited.remove(step)
            path.append(step)

    def _is_open(self, cell: Cell, visited: set[Cell]) -> bool:
        if not (0 <= cell.y < self.block_size_y and 0 <= cell.x < self.block_size_x):
            return False
        return cell not in visited
