import numpy as np
import pytest

from mazevo.evolution.engine import EngineConfig
from mazevo.evolution.worker_pool import WorkerPool


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def pool():
    pool = WorkerPool(max_workers=2)
    yield pool
    pool.shutdown()


@pytest.fixture
def noise_image():
    """16x16 RGB noise, independent of the ``rng`` fixture."""
    return np.random.default_rng(99).integers(0, 256, size=(16, 16, 3), dtype=np.uint8)


@pytest.fixture
def small_config():
    """2x2 blocks of 2x2 cells: a 16x16 image gives 4 pixels per cell."""
    return EngineConfig.create(
        grid={"blocks_y": 2, "blocks_x": 2, "block_size_y": 2, "block_size_x": 2},
        population_size=3,
        siblings=2,
        survivors=3,
        max_generations=2,
        use_palette=False,
        max_workers=2,
    )
