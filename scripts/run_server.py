import os
import sys
import hydra
import uvicorn
from omegaconf import DictConfig

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wattzup.common.config import ConfigManager
from wattzup.common.logging import setup_logger
from wattzup.estimation.application.builder import EstimationApplicationBuilder
from wattzup.estimation.presentation import api

logger = setup_logger("wattzup.server")

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    estimation_cfg = ConfigManager.build(cfg.estimation)
    logger.info("Configuration loaded.")

    builder = EstimationApplicationBuilder(estimation_cfg)
    builder.build_repositories()
    builder.build_batch_estimator()
    app = api.configure(builder)

    server_cfg = estimation_cfg.api
    logger.info(f"Starting server at http://{server_cfg.host}:{server_cfg.port}")
    uvicorn.run(app, host=server_cfg.host, port=server_cfg.port)

if __name__ == "__main__":
    main()
