from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import Iterable, Optional

from loguru import logger

from mazevo.evolution.engine import EvolutionEngine, GenerationResult
from mazevo.genome.chromosome import Chromosome
from mazevo.imaging.io import save_image
from mazevo.runner.layout import OutputLayout
from mazevo.utils.trackers.base import LogWriter
from mazevo.utils.trackers.statistics import format_statistics


class EvolutionRunner:
    """Drives an engine and persists every generation it produces."""

    def __init__(
        self,
        engine: EvolutionEngine,
        layout: OutputLayout,
        writers: Iterable[LogWriter] = (),
    ) -> None:
        self._engine = engine
        self._layout = layout
        self._writers = list(writers)
        self._task: asyncio.Task | None = None

    def start(self, chromosome: Optional[Chromosome] = None) -> None:
        if self._task and not self._task.done():
            return
        self._layout.ensure()
        self._task = asyncio.create_task(
            self._engine.run(chromosome, on_generation=self._persist),
            name="evolution-engine",
        )
        logger.info("[Runner] Evolution engine started")

    async def stop(self) -> None:
        self._engine.stop()
        if self._task:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            logger.info("[Runner] Evolution engine stopped")

    async def run(self, chromosome: Optional[Chromosome] = None) -> Chromosome:
        """Run to completion (or SIGINT/SIGTERM) and return the last chromosome."""
        self.start(chromosome)
        assert self._task is not None
        loop = asyncio.get_running_loop()
        handled = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, self._on_signal, sig)
                handled.append(sig)
        try:
            return await self._task
        finally:
            for sig in handled:
                loop.remove_signal_handler(sig)
            self.close()

    def close(self) -> None:
        for writer in self._writers:
            writer.close()
        self._writers = []
        self._engine.pool.shutdown()

    def _on_signal(self, sig: signal.Signals) -> None:
        logger.warning(
            "[Runner] {} received, stopping after the current generation", sig.name
        )
        self._engine.stop()

    def _persist(self, result: GenerationResult) -> None:
        save_image(result.image, self._layout.image_path(result.generation))
        for writer in self._writers:
            writer.record(result)
        logger.info(format_statistics(result))

    @property
    def task(self) -> asyncio.Task | None:
        return self._task
