"""
API package.
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from omegaconf import DictConfig, OmegaConf

from .routes import forecast, network, recommendations, streaming
from ...application import RealtimeBroadcaster, SnapshotRefresher, TransitApplicationBuilder
from ...common.config import TransitConfig
from ...common.exceptions import DataSourceUnavailable
from ...common.logging import setup_logger

logger = setup_logger(__name__)

# Initialize main app
app = FastAPI(title="TransitOps API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(network.app.router, tags=["network"])
app.include_router(forecast.app.router, tags=["forecast"])
app.include_router(recommendations.app.router, tags=["recommendations"])
app.include_router(streaming.app.router, tags=["streaming"])

@app.exception_handler(DataSourceUnavailable)
async def data_source_unavailable_handler(request: Request, exc: DataSourceUnavailable):
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "source": exc.source, "retryable": exc.retryable},
    )

def configure(cfg: Optional[DictConfig] = None) -> SnapshotRefresher:
    """
    Builds the shared components from a transit config and registers them
    with the routers. Returns the (not yet started) refresher.
    """
    cfg = cfg if cfg is not None else OmegaConf.structured(TransitConfig)
    service = TransitApplicationBuilder(cfg).build_data_service()
    broadcaster = RealtimeBroadcaster()

    refresh = cfg.refresh
    refresher = SnapshotRefresher(service, broadcaster, intervals={
        "vehicles": refresh.vehicles_seconds,
        "traffic": refresh.traffic_seconds,
        "routes": refresh.routes_seconds,
        "recommendations": refresh.recommendations_seconds,
    })

    network.init_service(service)
    streaming.init_broadcaster(broadcaster)
    streaming.init_refresher(refresher)
    logger.info(f"API configured with {len(service.topology.routes)} routes")
    return refresher

# Initialize shared components with defaults
configure()
