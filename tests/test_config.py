import asyncio
from pathlib import Path

from hydra import compose, initialize_config_dir
from hydra.errors import InstantiationException
from hydra.utils import instantiate
import pytest

from mazevo.config import register_resolvers
from mazevo.evolution.engine import EngineConfig, EvolutionEngine
from mazevo.exceptions import ConfigurationError, ImageIOError
from mazevo.imaging.io import save_image
from mazevo.runner import EvolutionRunner, OutputLayout
from mazevo.utils.trackers import StatisticsFileWriter

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

SMALL_RUN = [
    "engine_config.grid.blocks_y=2",
    "engine_config.grid.blocks_x=2",
    "engine_config.grid.block_size_y=2",
    "engine_config.grid.block_size_x=2",
    "engine_config.population_size=2",
    "engine_config.siblings=2",
    "engine_config.survivors=3",
    "engine_config.max_generations=1",
    "engine_config.max_workers=2",
    "seed=3",
]


def _compose(*overrides):
    register_resolvers()
    with initialize_config_dir(config_dir=str(CONFIG_DIR), version_base=None):
        return compose(config_name="config", overrides=list(overrides))


def _causes(exc):
    while exc is not None:
        yield exc
        exc = exc.__cause__ or exc.__context__


@pytest.fixture
def picture(monkeypatch, tmp_path, noise_image):
    path = save_image(noise_image, tmp_path / "noise.png")
    monkeypatch.setenv("MAZEVO_IMAGE", str(path))
    monkeypatch.setenv("MAZEVO_OUTPUT_ROOT", str(tmp_path / "out"))
    monkeypatch.chdir(tmp_path)
    return path


def test_default_engine_config(monkeypatch):
    monkeypatch.setenv("MAZEVO_IMAGE", "pictures/mona_lisa.jpg")
    cfg = _compose()
    engine_config = instantiate(cfg.engine_config)

    assert isinstance(engine_config, EngineConfig)
    assert engine_config.grid.cells_y == 128
    assert engine_config.population_total == 1 + 250 * 4
    assert engine_config.survivors == 100
    assert engine_config.max_generations == 500
    assert cfg.image.name == "mona_lisa"


@pytest.mark.parametrize(
    "override",
    ["engine_config.survivors=5000", "engine_config.grid.blocks_y=0"],
)
def test_invalid_overrides_are_reported(override):
    cfg = _compose(override)
    with pytest.raises(InstantiationException) as excinfo:
        instantiate(cfg.engine_config)
    assert any(isinstance(e, ConfigurationError) for e in _causes(excinfo.value))


def test_failed_build_leaves_nothing_behind(monkeypatch, tmp_path):
    monkeypatch.setenv("MAZEVO_IMAGE", str(tmp_path / "missing.png"))
    monkeypatch.setenv("MAZEVO_OUTPUT_ROOT", str(tmp_path / "out"))
    cfg = _compose(*SMALL_RUN)

    with pytest.raises(Exception) as excinfo:
        instantiate(cfg)

    assert any(isinstance(e, ImageIOError) for e in _causes(excinfo.value))
    assert not (tmp_path / "out").exists()


def test_config_builds_a_runnable_experiment(picture, tmp_path):
    built = instantiate(_compose(*SMALL_RUN))

    layout = built.layout
    assert isinstance(layout, OutputLayout)
    assert layout.name == "noise"
    assert layout.image_path(1) == tmp_path / "out" / "output" / "noise" / "generation_1.jpg"

    assert isinstance(built.evolution_engine, EvolutionEngine)
    assert built.evolution_engine.config.population_total == 5
    (writer,) = built.writers
    assert isinstance(writer, StatisticsFileWriter)
    assert writer.path == layout.statistics_path

    runner = built.runner
    assert isinstance(runner, EvolutionRunner)
    final = asyncio.run(runner.run())

    # The runner drives the same engine and writers the config exposes.
    assert built.evolution_engine.metrics.total_generations == 1
    assert layout.image_path(1).is_file()
    lines = layout.statistics_path.read_text().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith(f"Generation: 1; Difference: {final.rmsd}; ")


def test_tensorboard_tracking_adds_a_writer(picture, tmp_path):
    from mazevo.utils.trackers.tensorboard import TBWriter

    built = instantiate(_compose(*SMALL_RUN, "tracking=tensorboard"))
    statistics, tensorboard = built.writers
    assert isinstance(statistics, StatisticsFileWriter)
    assert isinstance(tensorboard, TBWriter)
    assert Path(tensorboard.cfg.logdir) == tmp_path / "runs"

    for writer in built.writers:
        writer.close()
    built.evolution_engine.pool.shutdown()
