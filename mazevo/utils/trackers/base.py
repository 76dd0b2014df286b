from abc import ABC, abstractmethod

from mazevo.evolution.engine.core import GenerationResult


class LogWriter(ABC):
    """Sink for per-generation statistics."""

    @abstractmethod
    def record(self, result: GenerationResult) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass
