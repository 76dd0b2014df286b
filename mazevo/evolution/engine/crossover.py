"""Per-block recombination of survivors into one child chromosome."""

from __future__ import annotations

import numpy as np

from mazevo.evolution.worker_pool import WorkerPool
from mazevo.exceptions import EvolutionError
from mazevo.genome.chromosome import Chromosome
from mazevo.imaging.metrics import random_int, region_deviation

__all__ = ["best_block_crossover", "random_block_crossover"]


def _check_survivors(survivors: list[Chromosome]) -> None:
    if not survivors:
        raise EvolutionError("Crossover needs at least one survivor")


async def best_block_crossover(
    survivors: list[Chromosome], reference: np.ndarray, pool: WorkerPool
) -> tuple[Chromosome, int]:
    """Assemble a child from the best-matching block of any survivor.

    For every block position, each survivor's rendered image is compared with
    the reference over that block's pixels only; the gene of the survivor
    with the lowest deviation is copied into the child (first survivor wins
    ties). Positions are scored concurrently and merged in row-major order.

    Returns:
        The child (unrendered) and how many blocks came from a survivor other
        than the first one.
    """
    _check_survivors(survivors)
    if any(s.image is None for s in survivors):
        raise EvolutionError("Crossover requires rendered survivors")

    child = survivors[0].copy()
    height, width = reference.shape[:2]
    positions = list(child.positions())

    def best_parent(position: tuple[int, int]) -> tuple[int, float]:
        rect = child.block_rect(*position, height, width)
        scores = [region_deviation(reference, s.image, rect) for s in survivors]
        index = int(np.argmin(scores))
        return index, scores[index]

    choices = await pool.map(best_parent, positions)

    replaced = 0
    for (y, x), (index, rmsd) in zip(positions, choices):
        gene = survivors[index].gene_at(y, x).copy()
        gene.rmsd = rmsd
        child.set_gene(y, x, gene)
        replaced += index != 0
    return child, replaced


def random_block_crossover(
    survivors: list[Chromosome], rng: np.random.Generator
) -> tuple[Chromosome, int]:
    """Assemble a child taking each block from a uniformly random survivor."""
    _check_survivors(survivors)
    child = survivors[0].copy()
    replaced = 0
    for y, x in list(child.positions()):
        index = random_int(rng, 0, len(survivors))
        child.set_gene(y, x, survivors[index].gene_at(y, x).copy())
        replaced += index != 0
    return child, replaced
