import math

import numpy as np
import pytest

from mazevo.exceptions import DimensionMismatchError
from mazevo.genome.cell import Cell
from mazevo.genome.chromosome import Chromosome, pixel_stride
from mazevo.genome.gene import Gene
from mazevo.genome.path import Path
from mazevo.imaging.metrics import Rect, region_deviation

RED, GREEN, BLUE = (255, 0, 0), (0, 255, 0), (0, 0, 255)


def _hand_made_gene() -> Gene:
    return Gene(
        2,
        2,
        [
            Path([Cell(0, 0), Cell(0, 1)], RED),
            Path([Cell(1, 0)], GREEN),
            Path([Cell(1, 1)], BLUE),
        ],
    )


def _single_block(gene: Gene) -> Chromosome:
    return Chromosome(1, 1, gene.block_size_y, gene.block_size_x, [[gene]])


def test_pixel_stride():
    assert pixel_stride(512, 512, 128, 128) == (4, 4)
    assert pixel_stride(16, 32, 16, 8) == (1, 4)
    with pytest.raises(DimensionMismatchError):
        pixel_stride(15, 16, 16, 16)
    with pytest.raises(DimensionMismatchError):
        pixel_stride(8, 8, 16, 16)


def test_render_draws_segments_and_markers():
    image = _single_block(_hand_made_gene()).render(8, 8)

    assert image.shape == (8, 8, 3)
    assert image.dtype == np.uint8
    # Segment (0,0)->(0,1) spans both markers, connector pixels included.
    assert (image[1:3, 1:7] == RED).all()
    assert (image[0, :] == 0).all()
    assert (image[3, :] == 0).all()
    # Single-cell paths only get their marker.
    assert (image[5:7, 1:3] == GREEN).all()
    assert (image[5:7, 5:7] == BLUE).all()
    assert (image[5:7, 3:5] == 0).all()
    assert (image[:, 0] == 0).all()


def test_render_vertical_and_backward_moves():
    gene = Gene(2, 2, [Path([Cell(1, 1), Cell(0, 1), Cell(0, 0), Cell(1, 0)], RED)])
    image = _single_block(gene).render(8, 8)
    assert (image[1:7, 5:7] == RED).all()
    assert (image[1:3, 1:7] == RED).all()
    assert (image[1:7, 1:3] == RED).all()
    # The open side of the U stays black.
    assert (image[4:7, 3:5] == 0).all()


def test_render_offsets_blocks():
    genes = [[_hand_made_gene().copy() for _ in range(2)] for _ in range(2)]
    chromosome = Chromosome(2, 2, 2, 2, genes)
    image = chromosome.render(16, 16)
    # Block (1, 1) starts at pixel (8, 8).
    assert (image[9:11, 9:15] == RED).all()
    assert (image[13:15, 13:15] == BLUE).all()


def test_render_with_unit_stride_covers_every_pixel(rng):
    chromosome = Chromosome.random(2, 2, 8, 8, rng, palette=[(10, 20, 30)])
    image = chromosome.render(16, 16)
    assert (image == (10, 20, 30)).all()
    black = np.zeros((16, 16, 3), dtype=np.uint8)
    assert region_deviation(black, image) == pytest.approx(math.sqrt(1400))


def test_render_is_read_only_and_cached(rng):
    chromosome = Chromosome.random(2, 2, 2, 2, rng)
    image = chromosome.render(16, 16)
    assert chromosome.image is image
    assert not image.flags.writeable


def test_render_rejects_indivisible_sizes(rng):
    chromosome = Chromosome.random(2, 2, 2, 2, rng)
    with pytest.raises(DimensionMismatchError):
        chromosome.render(15, 16)


def test_block_rect():
    chromosome = Chromosome(2, 3, 2, 2, [[_hand_made_gene() for _ in range(3)] for _ in range(2)])
    assert chromosome.block_rect(1, 2, 16, 24) == Rect(8, 16, 16, 24)


def test_copy_has_no_aliasing(rng):
    base = Chromosome.random(2, 2, 3, 3, rng)
    clone = base.copy()
    clone.gene_at(0, 0).paths[0].color = (1, 2, 3)
    clone.gene_at(0, 0).paths[0].append(Cell(50, 50))
    assert clone.gene_at(0, 0) != base.gene_at(0, 0)
    assert base.gene_at(1, 1) == clone.gene_at(1, 1)


def test_set_gene_invalidates_cache(rng):
    chromosome = Chromosome.random(2, 2, 2, 2, rng)
    chromosome.render(16, 16)
    chromosome.rmsd = 3.0
    chromosome.set_gene(0, 1, Gene.generate(2, 2, rng))
    assert chromosome.image is None
    assert chromosome.rmsd is None


def test_set_gene_rejects_wrong_size(rng):
    chromosome = Chromosome.random(2, 2, 2, 2, rng)
    with pytest.raises(DimensionMismatchError):
        chromosome.set_gene(0, 0, Gene.generate(3, 3, rng))


def test_mutated_siblings_differ_in_at_most_one_block(rng):
    base = Chromosome.random(3, 3, 4, 4, rng)
    siblings = base.mutate(rng, 5)
    assert len(siblings) == 5

    changed_positions = set()
    for sibling in siblings:
        diff = [p for p in base.positions() if sibling.gene_at(*p) != base.gene_at(*p)]
        assert len(diff) <= 1
        changed_positions.update(diff)
    assert len(changed_positions) <= 1

    # Every sibling carries the same maze geometry at the mutated block.
    (position,) = changed_positions or {(0, 0)}
    geometries = [
        [list(p.cells) for p in sibling.gene_at(*position).paths] for sibling in siblings
    ]
    assert all(g == geometries[0] for g in geometries)


def test_mutate_leaves_base_untouched(rng):
    base = Chromosome.random(2, 2, 3, 3, rng)
    snapshot = base.copy()
    base.mutate(rng, 3)
    assert all(base.gene_at(*p) == snapshot.gene_at(*p) for p in base.positions())
