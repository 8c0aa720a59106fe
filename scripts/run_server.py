import os
import sys
import hydra
import uvicorn
from omegaconf import DictConfig, OmegaConf

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from transitops.common.config import ConfigManager, TransitConfig
from transitops.common.logging import setup_logger
from transitops.presentation.api import app, configure

logger = setup_logger("run_server")

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    transit_cfg = OmegaConf.merge(OmegaConf.structured(TransitConfig), cfg.transit)
    ConfigManager.validate(transit_cfg)
    logger.info("Configuration loaded.")

    refresher = configure(transit_cfg)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting channel refresh...")
        await refresher.start_all()

    @app.on_event("shutdown")
    async def shutdown_event():
        await refresher.stop_all()

    server_cfg = transit_cfg.server
    logger.info(f"Starting server at http://{server_cfg.host}:{server_cfg.port}")
    uvicorn.run(app, host=server_cfg.host, port=server_cfg.port)

if __name__ == "__main__":
    main()
