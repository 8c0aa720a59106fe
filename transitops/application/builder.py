from pathlib import Path
from typing import Optional

import numpy as np
from omegaconf import DictConfig

from .data_service import DashboardDataService
from ..common.config import ConfigManager, thresholds_from_config
from ..common.logging import setup_logger
from ..optimization import QLearningTable, RouteOptimizer, SmartTransitOptimizer
from ..prediction import CongestionPredictionModel, DemandPredictionModel, TrafficTrendPredictor
from ..simulation import (
    EnvironmentGenerator, NetworkTopology, ProviderConfig, ProviderRegistry,
    create_default_registry, default_topology
)

logger = setup_logger(__name__)


class TransitApplicationBuilder:
    """
    Builder for the transit backend.
    Centralizes component instantiation and wiring from a TransitConfig.
    """

    def __init__(self, config: DictConfig, config_dir: Path = Path("conf")):
        self.config = config
        self.config_dir = Path(config_dir)
        self.thresholds = thresholds_from_config(config)

        sim_cfg = config.simulation
        self.rng = np.random.default_rng(sim_cfg.seed)

        self.topology: Optional[NetworkTopology] = None
        self.generator: Optional[EnvironmentGenerator] = None
        self.registry: Optional[ProviderRegistry] = None
        self.demand_model: Optional[DemandPredictionModel] = None
        self.congestion_model: Optional[CongestionPredictionModel] = None
        self.trend_predictor: Optional[TrafficTrendPredictor] = None
        self.route_optimizer: Optional[RouteOptimizer] = None
        self.smart_optimizer: Optional[SmartTransitOptimizer] = None
        self.service: Optional[DashboardDataService] = None

    def build_topology(self) -> 'TransitApplicationBuilder':
        topology_file = self.config.simulation.topology_file
        if topology_file:
            logger.info(f"Loading topology: {topology_file}")
            self.topology = ConfigManager(self.config_dir).load_topology(topology_file)
        else:
            self.topology = default_topology()
        return self

    def build_generator(self) -> 'TransitApplicationBuilder':
        if self.topology is None:
            self.build_topology()
        sim_cfg = self.config.simulation
        self.generator = EnvironmentGenerator(
            topology=self.topology,
            rng=self.rng,
            thresholds=self.thresholds,
            min_vehicles_per_route=sim_cfg.min_vehicles_per_route,
            max_vehicles_per_route=sim_cfg.max_vehicles_per_route,
        )
        return self

    def build_providers(self) -> 'TransitApplicationBuilder':
        if self.topology is None:
            self.build_topology()
        sim_cfg = self.config.simulation
        provider_config = ProviderConfig(
            latency_min_seconds=sim_cfg.latency_min_seconds,
            latency_max_seconds=sim_cfg.latency_max_seconds,
            timeout_seconds=sim_cfg.provider_timeout_seconds,
            failure_rate=sim_cfg.provider_failure_rate,
        )
        self.registry = create_default_registry(
            config=provider_config,
            rng=self.rng,
            center=self.topology.city_center,
            thresholds=self.thresholds,
        )
        return self

    def build_models(self) -> 'TransitApplicationBuilder':
        if self.topology is None:
            self.build_topology()
        fc = self.config.forecast
        self.demand_model = DemandPredictionModel(fc.history_cap, fc.window_size, fc.horizon_hours)
        self.congestion_model = CongestionPredictionModel(fc.history_cap, fc.window_size, fc.horizon_hours)
        self.trend_predictor = TrafficTrendPredictor(self.topology, fc.display_horizon_hours)
        return self

    def build_optimizers(self) -> 'TransitApplicationBuilder':
        if self.demand_model is None:
            self.build_models()
        rl = self.config.reinforcement
        fc = self.config.forecast
        self.route_optimizer = RouteOptimizer(self.topology, self.thresholds)
        self.smart_optimizer = SmartTransitOptimizer(
            q_table=QLearningTable(rl.learning_rate, rl.discount_factor, rl.exploration_rate, rng=self.rng),
            demand_model=self.demand_model,
            congestion_model=self.congestion_model,
            hotspot_threshold=fc.hotspot_threshold,
            hotspot_lookahead_hours=fc.hotspot_lookahead_hours,
        )
        return self

    def build_data_service(self) -> DashboardDataService:
        if self.generator is None:
            self.build_generator()
        if self.registry is None:
            self.build_providers()
        if self.route_optimizer is None:
            self.build_optimizers()

        sim_cfg = self.config.simulation
        self.service = DashboardDataService(
            generator=self.generator,
            optimizer=self.route_optimizer,
            demand_model=self.demand_model,
            congestion_model=self.congestion_model,
            trend_predictor=self.trend_predictor,
            registry=self.registry,
            latency_range=(sim_cfg.latency_min_seconds, sim_cfg.latency_max_seconds),
            default_horizon_hours=self.config.forecast.horizon_hours,
            rng=self.rng,
        )
        return self.service
