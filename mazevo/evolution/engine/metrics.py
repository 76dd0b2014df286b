from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class EngineMetrics(BaseModel):
    """Running counters for an evolution run."""

    total_generations: int = Field(
        default=0, description="Total number of generations run"
    )
    chromosomes_evaluated: int = Field(
        default=0, description="Total number of chromosomes rendered and scored"
    )
    mutations_created: int = Field(
        default=0, description="Total number of mutated chromosomes created"
    )
    blocks_replaced: int = Field(
        default=0,
        description="Crossover blocks taken from a survivor other than the best",
    )
    best_rmsd: Optional[float] = Field(
        default=None, description="Lowest deviation seen so far"
    )
    last_rmsd: Optional[float] = Field(
        default=None, description="Deviation of the latest generation"
    )

    def record_population_metrics(self, mutations_created: int, evaluated: int) -> None:
        """Record metrics from population construction and evaluation."""
        self.mutations_created += mutations_created
        self.chromosomes_evaluated += evaluated

    def record_generation(self, rmsd: float, blocks_replaced: int) -> None:
        """Record the outcome of a finished generation."""
        self.total_generations += 1
        self.blocks_replaced += blocks_replaced
        self.chromosomes_evaluated += 1
        self.last_rmsd = rmsd
        if self.best_rmsd is None or rmsd < self.best_rmsd:
            self.best_rmsd = rmsd

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()
