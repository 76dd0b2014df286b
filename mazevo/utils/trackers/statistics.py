from __future__ import annotations

from pathlib import Path
from typing import TextIO

from mazevo.evolution.engine.core import GenerationResult
from mazevo.utils.trackers.base import LogWriter


def format_statistics(result: GenerationResult) -> str:
    """One statistics line: generation, deviation and elapsed nanoseconds."""
    return (
        f"Generation: {result.generation}; "
        f"Difference: {result.rmsd}; "
        f"Time: {result.elapsed_ns};"
    )


class StatisticsFileWriter(LogWriter):
    """Writes one line per generation to a text file, flushed immediately.

    The file is created on the first :meth:`record`, so a writer that is
    built but never used leaves nothing open.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._fh: TextIO | None = None
        self._closed = False

    def _open(self) -> TextIO:
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("w", encoding="utf-8")
        return self._fh

    def record(self, result: GenerationResult) -> None:
        if self._closed:
            return
        fh = self._open()
        fh.write(format_statistics(result) + "\n")
        fh.flush()

    def close(self) -> None:
        self._closed = True
        if self._fh is None:
            return
        self._fh.close()
        self._fh = None
