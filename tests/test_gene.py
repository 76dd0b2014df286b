from itertools import product

import numpy as np
import pytest

from mazevo.genome.cell import Cell
from mazevo.genome.gene import Gene
from mazevo.genome.path import Path


@pytest.mark.parametrize("size", [(1, 1), (1, 7), (8, 8), (5, 3)])
def test_fill_maze_partitions_the_block(rng, size):
    height, width = size
    gene = Gene(height, width)
    gene.fill_maze(rng)

    cells = list(gene.cells())
    assert len(cells) == len(set(cells)) == height * width
    assert set(cells) == {Cell(y, x) for y, x in product(range(height), range(width))}


def test_paths_are_simple_walks(rng):
    for _ in range(20):
        gene = Gene(8, 8)
        gene.fill_maze(rng)
        for path in gene.paths:
            assert len(path) >= 1
            assert path.is_simple_walk()
            for a, b in zip(path.cells, path.cells[1:]):
                assert abs(a.y - b.y) + abs(a.x - b.x) == 1


def test_fill_maze_is_reproducible():
    first = Gene(6, 6)
    first.fill_maze(np.random.default_rng(5))
    second = Gene(6, 6)
    second.fill_maze(np.random.default_rng(5))
    assert first == second


def test_color_maze_keeps_geometry(rng):
    gene = Gene.generate(4, 4, rng)
    geometry = [list(p.cells) for p in gene.paths]
    gene.color_maze(rng, [(9, 9, 9)])
    assert [list(p.cells) for p in gene.paths] == geometry
    assert all(p.color == (9, 9, 9) for p in gene.paths)


def test_generate_colors_every_path(rng):
    gene = Gene.generate(5, 5, rng)
    assert all(p.color is not None for p in gene.paths)


def test_copy_is_deep(rng):
    gene = Gene.generate(3, 3, rng)
    clone = gene.copy()
    assert clone == gene

    clone.paths[0].color = (1, 1, 1) if gene.paths[0].color != (1, 1, 1) else (2, 2, 2)
    clone.paths[0].append(Cell(99, 99))
    assert clone != gene
    assert Cell(99, 99) not in gene.paths[0].cells


def test_fitness_is_not_part_of_equality(rng):
    gene = Gene.generate(3, 3, rng)
    clone = gene.copy()
    clone.rmsd = 12.5
    assert clone == gene


def test_path_helpers():
    path = Path.starting_at(Cell(0, 0))
    path.append(Cell(0, 1))
    path.append(Cell(1, 1))
    assert path.head == Cell(1, 1)
    assert path.is_simple_walk()
    assert path.translated(2, 3).cells == [Cell(2, 3), Cell(2, 4), Cell(3, 4)]

    path.append(Cell(3, 3))
    assert not path.is_simple_walk()
    assert not Path([Cell(0, 0), Cell(0, 1), Cell(0, 0)]).is_simple_walk()


def test_cell_neighbors_order():
    assert Cell(2, 2).neighbors() == (Cell(3, 2), Cell(1, 2), Cell(2, 3), Cell(2, 1))
