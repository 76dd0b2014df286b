from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from mazevo.exceptions import ConfigurationError


class GridConfig(BaseModel):
    """Block layout of every chromosome."""

    blocks_y: int = Field(default=16, gt=0)
    blocks_x: int = Field(default=16, gt=0)
    block_size_y: int = Field(default=8, gt=0)
    block_size_x: int = Field(default=8, gt=0)

    @property
    def cells_y(self) -> int:
        return self.blocks_y * self.block_size_y

    @property
    def cells_x(self) -> int:
        return self.blocks_x * self.block_size_x

    model_config = ConfigDict(frozen=True)


class EngineConfig(BaseModel):
    """Configuration options controlling EvolutionEngine behaviour."""

    grid: GridConfig = Field(default_factory=GridConfig)
    population_size: int = Field(
        default=250, gt=0, description="Mutations (fresh blocks) per generation"
    )
    siblings: int = Field(
        default=4, gt=0, description="Recolorings of each fresh block"
    )
    survivors: int = Field(
        default=100, gt=0, description="Chromosomes kept for crossover"
    )
    max_generations: Optional[int] = Field(
        default=None,
        gt=0,
        description="Maximum number of generations to run (None = unlimited)",
    )
    crossover_mode: Literal["best", "random"] = Field(
        default="best",
        description="Pick each block from the best-scoring survivor or a random one",
    )
    use_palette: bool = Field(
        default=True, description="Sample colors from the reference image palette"
    )
    max_workers: Optional[int] = Field(default=None, gt=0)
    log_interval: int = Field(default=1, gt=0)

    @property
    def population_total(self) -> int:
        """Chromosomes evaluated per generation, the unmutated parent included."""
        return 1 + self.population_size * self.siblings

    @model_validator(mode="after")
    def _survivors_fit_population(self) -> "EngineConfig":
        if self.survivors > self.population_total:
            raise ValueError(
                f"survivors={self.survivors} exceeds population of "
                f"{self.population_total} (1 + {self.population_size} x {self.siblings})"
            )
        return self

    @classmethod
    def create(cls, **params: Any) -> "EngineConfig":
        """Validate *params*, reporting failures as :class:`ConfigurationError`."""
        try:
            return cls(**params)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid engine configuration: {exc}") from exc

    model_config = ConfigDict(frozen=True)
