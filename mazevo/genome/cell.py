from __future__ import annotations

from typing import NamedTuple


class Cell(NamedTuple):
    """A (row, column) coordinate on a maze grid."""

    y: int
    x: int

    def neighbors(self) -> tuple["Cell", "Cell", "Cell", "Cell"]:
        """4-adjacent cells in down, up, right, left order."""
        y, x = self
        return Cell(y + 1, x), Cell(y - 1, x), Cell(y, x + 1), Cell(y, x - 1)

    def shifted(self, dy: int, dx: int) -> "Cell":
        return Cell(self.y + dy, self.x + dx)

    def is_adjacent(self, other: "Cell") -> bool:
        return abs(self.y - other.y) + abs(self.x - other.x) == 1

    def __str__(self) -> str:
        return f"[{self.y}, {self.x}]"
