from __future__ import annotations

from mazevo.evolution.engine.config import EngineConfig, GridConfig
from mazevo.evolution.engine.core import EvolutionEngine, GenerationResult
from mazevo.evolution.engine.metrics import EngineMetrics
