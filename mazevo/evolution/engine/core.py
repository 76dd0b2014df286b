from __future__ import annotations

import asyncio
from dataclasses import dataclass
import time
from typing import Callable, Optional, Sequence

from loguru import logger
import numpy as np

from mazevo.evolution.engine.config import EngineConfig
from mazevo.evolution.engine.crossover import (
    best_block_crossover,
    random_block_crossover,
)
from mazevo.evolution.engine.metrics import EngineMetrics
from mazevo.evolution.engine.mutation import generate_population
from mazevo.evolution.engine.selection import (
    evaluate,
    evaluate_population,
    select_survivors,
)
from mazevo.evolution.worker_pool import WorkerPool
from mazevo.exceptions import DimensionMismatchError, EvolutionError, MazEvoError
from mazevo.genome.chromosome import Chromosome, pixel_stride
from mazevo.imaging.metrics import Color, build_palette

__all__ = ["EvolutionEngine", "GenerationResult"]


@dataclass(frozen=True)
class GenerationResult:
    """What the engine hands out after each generation."""

    generation: int
    rmsd: float
    elapsed_ns: int
    image: np.ndarray
    chromosome: Chromosome


class EvolutionEngine:
    """
    One-chromosome generational loop:
    populate (mutate) -> evaluate -> truncate -> per-block crossover -> score.

    All random draws go through ``rng``; rendering and scoring are spread over
    ``pool`` and merged by index, so the outcome does not depend on thread
    scheduling.
    """

    def __init__(
        self,
        reference: np.ndarray,
        config: EngineConfig,
        rng: Optional[np.random.Generator] = None,
        palette: Optional[Sequence[Color]] = None,
        pool: Optional[WorkerPool] = None,
    ):
        if reference.ndim != 3 or reference.shape[2] < 3:
            raise DimensionMismatchError(
                f"Reference must be an (H, W, 3) RGB array, got {reference.shape}"
            )
        height, width = reference.shape[:2]
        self.stride = pixel_stride(
            height, width, config.grid.cells_y, config.grid.cells_x
        )

        self.reference = reference
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        if palette is None and config.use_palette:
            palette = build_palette(reference)
        if palette is not None and len(palette):
            self.palette = tuple(tuple(int(c) for c in color) for color in palette)
        else:
            self.palette = None
        self.pool = pool or WorkerPool(config.max_workers)

        self._running = False
        self.metrics = EngineMetrics()

        logger.info(
            "[EvolutionEngine] Init | image={}x{}, grid={}x{} blocks of {}x{}, "
            "stride={}, population={}, survivors={}, palette={}",
            height,
            width,
            config.grid.blocks_y,
            config.grid.blocks_x,
            config.grid.block_size_y,
            config.grid.block_size_x,
            self.stride,
            config.population_total,
            config.survivors,
            len(self.palette) if self.palette else "uniform",
        )

    def initial_chromosome(self) -> Chromosome:
        """A random chromosome, rendered and scored."""
        grid = self.config.grid
        chromosome = Chromosome.random(
            grid.blocks_y,
            grid.blocks_x,
            grid.block_size_y,
            grid.block_size_x,
            self.rng,
            self.palette,
        )
        evaluate(chromosome, self.reference)
        return chromosome

    async def run(
        self,
        chromosome: Optional[Chromosome] = None,
        on_generation: Optional[Callable[[GenerationResult], None]] = None,
    ) -> Chromosome:
        """Evolve until ``max_generations`` or :meth:`stop`; returns the last chromosome."""
        logger.info("[EvolutionEngine] Start")
        self._running = True
        started = time.perf_counter_ns()
        if chromosome is None:
            chromosome = self.initial_chromosome()

        try:
            while self._running and not self._reached_generation_cap():
                chromosome = await self.evolve_step(chromosome)
                result = GenerationResult(
                    generation=self.metrics.total_generations,
                    rmsd=chromosome.rmsd,
                    elapsed_ns=time.perf_counter_ns() - started,
                    image=chromosome.image,
                    chromosome=chromosome,
                )
                if self._every(result.generation, self.config.log_interval):
                    self._log_metrics()
                if on_generation is not None:
                    on_generation(result)
                await asyncio.sleep(0)
        finally:
            self._running = False
            logger.info("[EvolutionEngine] Stopped")
        return chromosome

    async def evolve_step(self, chromosome: Chromosome) -> Chromosome:
        try:
            return await self._step(chromosome)
        except MazEvoError:
            raise
        except Exception as exc:
            raise EvolutionError(f"Evolution step failed: {exc}") from exc

    async def _step(self, chromosome: Chromosome) -> Chromosome:
        cfg = self.config

        # Stage 1: Populate
        population = generate_population(
            chromosome,
            rng=self.rng,
            population_size=cfg.population_size,
            siblings=cfg.siblings,
            palette=self.palette,
        )

        # Stage 2: Evaluate
        await evaluate_population(population, self.reference, self.pool)
        self.metrics.record_population_metrics(
            mutations_created=len(population) - 1, evaluated=len(population)
        )

        # Stage 3: Select
        survivors = select_survivors(population, cfg.survivors)
        logger.debug(
            "[EvolutionEngine] Survivors: {} | best={:.4f}, worst={:.4f}",
            len(survivors),
            survivors[0].rmsd,
            survivors[-1].rmsd,
        )

        # Stage 4: Crossover
        if cfg.crossover_mode == "best":
            child, replaced = await best_block_crossover(
                survivors, self.reference, self.pool
            )
        else:
            child, replaced = random_block_crossover(survivors, self.rng)

        # Stage 5: Finalize
        evaluate(child, self.reference)
        self.metrics.record_generation(child.rmsd, replaced)
        return child

    def _reached_generation_cap(self) -> bool:
        cap = self.config.max_generations
        return cap is not None and self.metrics.total_generations >= cap

    @staticmethod
    def _every(i: int, n: int) -> bool:
        return n > 0 and i % n == 0

    def _log_metrics(self) -> None:
        m = self.metrics.to_dict()
        metrics_str = " | ".join(
            f"{k}={v:.4f}" if isinstance(v, float) else f"{k}={v}" for k, v in m.items()
        )
        logger.info(f"[EvolutionEngine] | {metrics_str}")

    def stop(self) -> None:
        """Request the main loop to exit after the current generation."""
        self._running = False

    def is_running(self) -> bool:
        return self._running
