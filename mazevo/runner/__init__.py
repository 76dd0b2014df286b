from mazevo.runner.evolution_runner import EvolutionRunner
from mazevo.runner.layout import OutputLayout

__all__ = ["EvolutionRunner", "OutputLayout"]
