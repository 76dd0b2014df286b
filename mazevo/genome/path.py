from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from mazevo.genome.cell import Cell
from mazevo.imaging.metrics import Color


@dataclass
class Path:
    """
    One stroke of a maze: an ordered walk over 4-adjacent cells.

    Every cell of the path is drawn in the same color. The color is assigned
    after the walk is built and may be replaced without touching the cells.
    """

    cells: list[Cell] = field(default_factory=list)
    color: Optional[Color] = None

    @classmethod
    def starting_at(cls, start: Cell) -> "Path":
        return cls(cells=[start])

    def append(self, cell: Cell) -> None:
        self.cells.append(cell)

    @property
    def head(self) -> Cell:
        return self.cells[-1]

    def translated(self, dy: int, dx: int) -> "Path":
        return Path([c.shifted(dy, dx) for c in self.cells], self.color)

    def is_simple_walk(self) -> bool:
        """Consecutive cells are adjacent and no cell repeats."""
        if len(set(self.cells)) != len(self.cells):
            return False
        return all(a.is_adjacent(b) for a, b in zip(self.cells, self.cells[1:]))

    def copy(self) -> "Path":
        # Cells are immutable tuples; a new list is enough.
        return Path(list(self.cells), self.color)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)
