"""
Async fetch operations backing the dashboard.

Every fetch awaits a simulated latency and returns a freshly generated,
independent result. Overlapping calls share no mutable state apart from the
forecast models' history, which only `ingest_feeds` writes to.
"""
import asyncio
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from pydantic import BaseModel

from ..common.logging import setup_logger
from ..common.schemas import (
    EnvironmentSnapshot, EventRecord, OptimizationResult, PassengerData, Route,
    TrafficSegment, Vehicle, WeatherSnapshot
)
from ..optimization import RouteOptimizer
from ..prediction import (
    CongestionPredictionModel, DemandPredictionModel, TrafficTrendPredictor, generate_forecast
)
from ..prediction.ingestion import FeedIngestor, normalize_weather
from ..simulation import EnvironmentGenerator, ProviderRegistry, events_by_location

logger = setup_logger(__name__)

FORECAST_MODELS = ("demand", "congestion", "trend")


class DashboardDataService:
    def __init__(
        self,
        generator: EnvironmentGenerator,
        optimizer: RouteOptimizer,
        demand_model: DemandPredictionModel,
        congestion_model: CongestionPredictionModel,
        trend_predictor: TrafficTrendPredictor,
        registry: Optional[ProviderRegistry] = None,
        latency_range: Tuple[float, float] = (0.2, 0.8),
        default_horizon_hours: int = 24,
        rng: Optional[np.random.Generator] = None,
    ):
        self.generator = generator
        self.optimizer = optimizer
        self.demand_model = demand_model
        self.congestion_model = congestion_model
        self.trend_predictor = trend_predictor
        self.registry = registry
        self.ingestor = FeedIngestor(demand_model, congestion_model)
        self.latency_range = latency_range
        self.default_horizon_hours = default_horizon_hours
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def topology(self):
        return self.generator.topology

    async def _simulate_latency(self):
        low, high = self.latency_range
        delay = low + float(self.rng.random()) * max(0.0, high - low)
        if delay > 0:
            await asyncio.sleep(delay)

    async def fetch_vehicle_locations(self) -> List[Vehicle]:
        await self._simulate_latency()
        return self.generator.generate_vehicles()

    async def fetch_traffic_data(self) -> List[TrafficSegment]:
        await self._simulate_latency()
        return self.generator.generate_traffic_segments()

    async def fetch_route_data(self) -> List[Route]:
        await self._simulate_latency()
        return self.generator.generate_routes()

    async def fetch_passenger_data(self) -> PassengerData:
        await self._simulate_latency()
        return self.generator.generate_passenger_data()

    async def fetch_weather_data(self) -> WeatherSnapshot:
        await self._simulate_latency()
        return self.generator.generate_weather()

    async def fetch_events_data(self) -> List[EventRecord]:
        await self._simulate_latency()
        return self.generator.generate_events()

    async def fetch_snapshot(self) -> EnvironmentSnapshot:
        await self._simulate_latency()
        return self.generator.generate_environment_snapshot()

    async def generate_optimization_recommendations(self, hour: Optional[int] = None) -> List[OptimizationResult]:
        """
        Recommendations computed over a single consistent snapshot.
        """
        snapshot = await self.fetch_snapshot()
        return self.optimizer.generate_recommendations(snapshot.traffic_segments, snapshot.routes, hour)

    async def fetch_fleet_advice(self, hour: Optional[int] = None) -> List[str]:
        snapshot = await self.fetch_snapshot()
        return self.optimizer.generate_actionable_recommendations(snapshot.vehicles, snapshot.routes, hour)

    def feed_keys(self) -> Dict[str, List[str]]:
        """Keys each provider is queried with, derived from the topology."""
        topology = self.topology
        stations = list(dict.fromkeys(s for r in topology.routes for s in r.stations))
        locations = [landmark.name for landmark in topology.landmarks]
        return {
            "gps": [
                f"{r.route_id}-{i + 1}"
                for r in topology.routes
                for i in range(self.generator.max_vehicles_per_route)
            ],
            "traffic": [
                f"{r.route_id}-segment-{i}"
                for r in topology.routes
                for i in range(max(0, len(r.path) - 1))
            ],
            "passenger": stations,
            "weather": locations,
            "events": locations,
        }

    async def fetch_feeds(self) -> Dict[str, List[BaseModel]]:
        """
        Queries all external feeds at once. Unavailable feeds come back empty.
        """
        if self.registry is None:
            return {}
        return await self.registry.fetch_all(self.feed_keys())

    async def ingest_feeds(self) -> Dict[str, int]:
        """Fetches all feeds and appends their readings to the forecast models."""
        feeds = await self.fetch_feeds()
        return self.ingestor.ingest(feeds)

    def forecast(
        self,
        model_name: str,
        keys: Sequence[str],
        start_time: Optional[datetime] = None,
        horizon_hours: Optional[int] = None,
        weather_by_key: Optional[Mapping[str, str]] = None,
        events_by_key: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> Dict[str, List[float]]:
        """
        Runs one of the forecast models. Weather and events default to a
        freshly generated sample applied to every key.
        """
        models = {
            "demand": self.demand_model,
            "congestion": self.congestion_model,
            "trend": self.trend_predictor,
        }
        if model_name not in models:
            raise ValueError(f"Unknown forecast model '{model_name}'. Expected one of {FORECAST_MODELS}")

        start_time = start_time or self.generator.clock()
        horizon = horizon_hours if horizon_hours is not None else self.default_horizon_hours
        if weather_by_key is None:
            condition = normalize_weather(self.generator.generate_weather().condition)
            weather_by_key = {key: condition for key in keys}
        if events_by_key is None:
            events_by_key = events_by_location(self.generator.generate_events(start_time))

        return generate_forecast(models[model_name], keys, start_time, weather_by_key, events_by_key, horizon)
