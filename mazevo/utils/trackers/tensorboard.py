from __future__ import annotations

from pathlib import Path
from typing import Optional

from tensorboardX import SummaryWriter

from mazevo.evolution.engine.core import GenerationResult
from mazevo.utils.trackers.base import LogWriter
from mazevo.utils.trackers.configs import TBConfig


class TBWriter(LogWriter):
    """Deviation and wall-clock curves for TensorBoard."""

    def __init__(self, cfg: TBConfig):
        self.cfg = cfg
        logdir = Path(cfg.logdir).resolve()
        logdir.mkdir(parents=True, exist_ok=True)
        self._writer: Optional[SummaryWriter] = SummaryWriter(
            str(logdir), **cfg.summary_writer_kwargs
        )

    def record(self, result: GenerationResult) -> None:
        if self._writer is None:
            return
        step = result.generation
        self._writer.add_scalar("fitness/rmsd", result.rmsd, global_step=step)
        self._writer.add_scalar(
            "time/elapsed_s", result.elapsed_ns / 1e9, global_step=step
        )

    def close(self) -> None:
        if self._writer is None:
            return
        try:
            self._writer.flush()
        finally:
            self._writer.close()
            self._writer = None
