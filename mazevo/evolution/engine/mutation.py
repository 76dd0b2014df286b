from __future__ import annotations

from typing import Optional, Sequence

from loguru import logger
import numpy as np

from mazevo.genome.chromosome import Chromosome
from mazevo.imaging.metrics import Color


def generate_population(
    base: Chromosome,
    *,
    rng: np.random.Generator,
    population_size: int,
    siblings: int,
    palette: Optional[Sequence[Color]] = None,
) -> list[Chromosome]:
    """Build the next population around *base*.

    The population starts with an unmutated copy of *base*, followed by
    *population_size* groups of *siblings* chromosomes. Each group shares one
    freshly grown block at a random position (see :meth:`Chromosome.mutate`).

    Runs sequentially: every random draw comes from *rng* in a fixed order so
    a seeded run replays exactly.

    Returns:
        ``1 + population_size * siblings`` chromosomes.
    """
    population = [base.copy()]
    for _ in range(population_size):
        population.extend(base.mutate(rng, siblings, palette))

    logger.debug(
        "[mutation] Population of {} ({} mutations x {} siblings + parent)",
        len(population),
        population_size,
        siblings,
    )
    return population
