class MazEvoError(Exception):
    """Base for all MazEvo exceptions."""

    pass


# High-level families
class ConfigurationError(MazEvoError):
    """Invalid run parameters (counts, grid dimensions)."""

    pass


class DimensionMismatchError(MazEvoError):
    """Image and grid geometry do not line up."""

    pass


class ImageIOError(MazEvoError):
    """Image decode/encode failures."""

    pass


class EvolutionError(MazEvoError):
    """Evolution process failures."""

    pass
