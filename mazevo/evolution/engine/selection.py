from __future__ import annotations

import numpy as np

from mazevo.evolution.worker_pool import WorkerPool
from mazevo.exceptions import ConfigurationError, EvolutionError
from mazevo.genome.chromosome import Chromosome
from mazevo.imaging.metrics import region_deviation


def score(chromosome: Chromosome, reference: np.ndarray) -> tuple[np.ndarray, float]:
    """Render *chromosome* at the reference size and measure its deviation."""
    height, width = reference.shape[:2]
    image = chromosome.draw(height, width)
    return image, region_deviation(reference, image)


def evaluate(chromosome: Chromosome, reference: np.ndarray) -> float:
    """Render and score *chromosome* in place; returns the new fitness."""
    chromosome.image, chromosome.rmsd = score(chromosome, reference)
    return chromosome.rmsd


async def evaluate_population(
    population: list[Chromosome], reference: np.ndarray, pool: WorkerPool
) -> None:
    """Render and score every member concurrently.

    Workers only read their own chromosome and the reference; images and
    scores are written back afterwards, indexed by position.
    """
    results = await pool.map(lambda c: score(c, reference), population)
    for chromosome, (image, rmsd) in zip(population, results):
        chromosome.image, chromosome.rmsd = image, rmsd


def select_survivors(population: list[Chromosome], count: int) -> list[Chromosome]:
    """The *count* lowest-deviation chromosomes, ties kept in population order."""
    if count <= 0 or count > len(population):
        raise ConfigurationError(
            f"Cannot keep {count} survivors from a population of {len(population)}"
        )
    if any(c.rmsd is None for c in population):
        raise EvolutionError("Selection requires every chromosome to be evaluated")
    ranked = sorted(population, key=lambda c: c.rmsd)
    return ranked[:count]
