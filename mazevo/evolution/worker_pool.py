"""Shared thread pool for the CPU-bound parts of a generation.

Rendering and scoring are plain synchronous functions; :class:`WorkerPool`
fans them out over a thread pool from inside the event loop and hands the
results back in submission order.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
import os
from typing import Callable, Iterable, Optional, TypeVar

from loguru import logger

__all__ = ["WorkerPool"]

T = TypeVar("T")
R = TypeVar("R")


class WorkerPool:
    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max_workers or max(4, os.cpu_count() or 4)
        self._executor: ThreadPoolExecutor | None = None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="mazevo-worker",
            )
            logger.debug(
                f"[WorkerPool] Created ThreadPoolExecutor with {self.max_workers} workers"
            )
        return self._executor

    async def map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        """Run ``fn`` on every item concurrently; results keep the input order."""
        loop = asyncio.get_running_loop()
        executor = self._get_executor()
        futures = [loop.run_in_executor(executor, fn, item) for item in items]
        return list(await asyncio.gather(*futures))

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
