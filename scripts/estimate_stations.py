"""
Prints wait-time estimates for a list of stations.

Usage:
    python scripts/estimate_stations.py 'station_ids=[st-1,st-2]'
    python scripts/estimate_stations.py 'station_ids=[st-1]' estimation.batch.max_concurrency=2
"""
import json
import os
import sys
import hydra
from omegaconf import DictConfig

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wattzup.common.config import ConfigManager
from wattzup.common.logging import setup_logger
from wattzup.estimation.application.builder import EstimationApplicationBuilder

logger = setup_logger("wattzup.estimate")

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    station_ids = list(cfg.get('station_ids') or [])
    if not station_ids:
        logger.warning("No station_ids given, nothing to estimate")
        return

    builder = EstimationApplicationBuilder(ConfigManager.build(cfg.estimation))
    batch = builder.build_batch_estimator()

    estimates = batch.estimate_batch_sync(station_ids)
    print(json.dumps(
        {station_id: estimate.model_dump(mode="json") for station_id, estimate in estimates.items()},
        indent=2
    ))
    logger.info(f"Metrics: {builder.metrics_collector.get_metrics().to_dict()}")

if __name__ == "__main__":
    main()
