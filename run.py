import asyncio
from datetime import datetime, timezone
import time

from dotenv import load_dotenv
import hydra
from hydra.utils import instantiate
from loguru import logger
from omegaconf import DictConfig

from mazevo.config import register_resolvers
from mazevo.evolution.engine import EvolutionEngine
from mazevo.runner import EvolutionRunner, OutputLayout
from mazevo.utils.logger_setup import setup_logger
from mazevo.utils.trackers import LogWriter


async def run_experiment(cfg: DictConfig) -> None:
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("MazEvo Evolution Experiment")
    logger.info("=" * 80)
    logger.info(f"Image: {cfg.image.path}")
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")
    logger.info("")

    evolution_engine: EvolutionEngine | None = None
    writers: list[LogWriter] = []
    try:
        logger.info("Step 1/2: Initializing components...")
        config_with_instances = instantiate(cfg)
        evolution_engine = config_with_instances.evolution_engine
        writers = list(config_with_instances.writers)
        layout: OutputLayout = config_with_instances.layout
        runner: EvolutionRunner = config_with_instances.runner
        logger.info("Step 1/2: Complete")
        logger.info("")

        logger.info("Step 2/2: Starting evolution...")
        engine_config = evolution_engine.config
        max_gens = engine_config.max_generations
        logger.info(f"  Max generations: {max_gens if max_gens else 'unlimited'}")
        logger.info(f"  Population size: {engine_config.population_total} chromosomes")
        logger.info(f"  Output: {layout.images_dir}")
        final = await runner.run()
        logger.info(f"Final deviation: {final.rmsd:.4f}")

    except KeyboardInterrupt:
        logger.info("Evolution experiment interrupted by user")
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Evolution experiment failed: {e}")
        raise
    finally:
        logger.info("")
        logger.info("Starting cleanup...")
        for writer in writers:
            writer.close()
        if evolution_engine is not None:
            evolution_engine.pool.shutdown()
        duration = time.time() - start_time
        logger.info(
            f"Total experiment duration: {duration:.2f} seconds ({duration / 3600:.2f} hours)"
        )
        logger.info(f"End time: {datetime.now(timezone.utc).isoformat()}")
        logger.info("=" * 80)


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    log_file_path = setup_logger(
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
    )
    logger.info(
        "Experiment working directory: {}.",
        hydra.core.hydra_config.HydraConfig.get().runtime.output_dir,
    )
    logger.info(f"Log file: {log_file_path}")
    asyncio.run(run_experiment(cfg))


if __name__ == "__main__":
    load_dotenv()
    register_resolvers()
    main()
