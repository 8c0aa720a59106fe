"""
Simulated external data providers (GPS, traffic, ridership, weather, events).

Each provider awaits a simulated latency and validates its payload. Timeouts,
injected outages and malformed payloads all surface as DataSourceUnavailable.
"""
import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field, ValidationError

from ..common.congestion import CongestionThresholds, DEFAULT_THRESHOLDS
from ..common.exceptions import DataSourceUnavailable
from ..common.logging import setup_logger
from ..common.schemas import (
    EventReading, GPSReading, IncidentReport, PassengerReading, TrafficReading,
    WeatherReading
)

logger = setup_logger(__name__)

class ProviderConfig(BaseModel):
    """Validated configuration for a simulated provider"""
    api_key: str = Field("demo", description="Credential passed to the provider")
    latency_min_seconds: float = Field(0.2, ge=0.0)
    latency_max_seconds: float = Field(0.8, ge=0.0)
    timeout_seconds: float = Field(2.0, gt=0.0)
    failure_rate: float = Field(0.0, ge=0.0, le=1.0, description="Probability of a simulated outage")

class DataProvider(ABC):
    """
    Base class for simulated providers.
    Subclasses build raw payload dicts; this class validates them.
    """
    name: str = "provider"
    reading_model: type = BaseModel

    def __init__(self, config: Optional[ProviderConfig] = None, rng: Optional[np.random.Generator] = None):
        self.config = config or ProviderConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    async def fetch(self, keys: Sequence[str]) -> List[BaseModel]:
        try:
            return await asyncio.wait_for(self._fetch(list(keys)), timeout=self.config.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise DataSourceUnavailable(self.name, f"timed out after {self.config.timeout_seconds}s") from e

    async def _fetch(self, keys: List[str]) -> List[BaseModel]:
        low, high = self.config.latency_min_seconds, self.config.latency_max_seconds
        delay = low + float(self.rng.random()) * max(0.0, high - low)
        if delay > 0:
            await asyncio.sleep(delay)

        if self.config.failure_rate and float(self.rng.random()) < self.config.failure_rate:
            raise DataSourceUnavailable(self.name, "simulated provider outage")

        raw = self.build_payload(keys, datetime.now())
        try:
            return [self.reading_model.model_validate(item) for item in raw]
        except ValidationError as e:
            raise DataSourceUnavailable(self.name, f"malformed response: {e.error_count()} errors") from e

    @abstractmethod
    def build_payload(self, keys: List[str], now: datetime) -> List[Dict[str, Any]]:
        pass

class GPSProvider(DataProvider):
    name = "gps"
    reading_model = GPSReading

    def __init__(self, center=(19.0289, 73.1095), **kwargs):
        super().__init__(**kwargs)
        self.center = center

    def build_payload(self, keys: List[str], now: datetime) -> List[Dict[str, Any]]:
        lat, lng = self.center
        return [
            {
                "vehicle_id": vehicle_id,
                "timestamp": now,
                "latitude": lat + (float(self.rng.random()) - 0.5) * 0.1,
                "longitude": lng + (float(self.rng.random()) - 0.5) * 0.1,
                "speed": 15 + float(self.rng.random()) * 30,
                "heading": int(self.rng.integers(0, 360)),
                "in_service": float(self.rng.random()) > 0.1,
            }
            for vehicle_id in keys
        ]

class TrafficFeedProvider(DataProvider):
    name = "traffic"
    reading_model = TrafficReading

    def __init__(self, center=(19.0289, 73.1095), thresholds: CongestionThresholds = DEFAULT_THRESHOLDS, **kwargs):
        super().__init__(**kwargs)
        self.center = center
        self.thresholds = thresholds

    def build_payload(self, keys: List[str], now: datetime) -> List[Dict[str, Any]]:
        lat, lng = self.center
        payload = []
        for segment in keys:
            congestion = float(self.rng.random())
            incidents = []
            if congestion > self.thresholds.high:
                incidents.append(IncidentReport(
                    type="accident",
                    severity="moderate",
                    latitude=lat + (float(self.rng.random()) - 0.5) * 0.1,
                    longitude=lng + (float(self.rng.random()) - 0.5) * 0.1,
                ).model_dump())
            payload.append({
                "road_segment": segment,
                "timestamp": now,
                "congestion_level": congestion,
                "status": self.thresholds.classify(congestion),
                "average_speed": max(5.0, 60.0 - congestion * 55.0),
                "incidents": incidents,
            })
        return payload

def base_station_passengers(hour: int) -> int:
    if 7 <= hour <= 9:
        return 200
    if 16 <= hour <= 18:
        return 180
    if hour >= 22 or hour <= 5:
        return 20
    return 50

class PassengerFeedProvider(DataProvider):
    name = "passenger"
    reading_model = PassengerReading

    def build_payload(self, keys: List[str], now: datetime) -> List[Dict[str, Any]]:
        base = base_station_passengers(now.hour)
        payload = []
        for station in keys:
            count = int(base + (float(self.rng.random()) - 0.5) * base * 0.5)
            payload.append({
                "station": station,
                "timestamp": now,
                "passenger_count": count,
                "waiting_time": 5 + count // 20,
                "boarding_rate": 20 + int(self.rng.integers(0, 10)),
            })
        return payload

FEED_WEATHER = {
    # condition: (base temperature, spread, base precipitation, precipitation spread)
    "sunny": (75, 15, 0.0, 0.0),
    "cloudy": (65, 10, 0.0, 0.1),
    "rainy": (55, 10, 0.1, 0.5),
    "snowy": (25, 10, 0.1, 0.3),
    "foggy": (45, 15, 0.0, 0.2),
}

class WeatherFeedProvider(DataProvider):
    name = "weather"
    reading_model = WeatherReading

    def build_payload(self, keys: List[str], now: datetime) -> List[Dict[str, Any]]:
        conditions = list(FEED_WEATHER)
        payload = []
        for location in keys:
            condition = conditions[int(self.rng.integers(0, len(conditions)))]
            temp, temp_spread, precip, precip_spread = FEED_WEATHER[condition]
            payload.append({
                "location": location,
                "timestamp": now,
                "condition": condition,
                "temperature": round(temp + float(self.rng.random()) * temp_spread, 1),
                "precipitation": precip + float(self.rng.random()) * precip_spread,
                "wind_speed": int(self.rng.integers(0, 20)),
                "humidity": 40 + int(self.rng.integers(0, 40)),
            })
        return payload

FEED_EVENT_TYPES = (
    "concert", "sports game", "conference", "festival",
    "parade", "exhibition", "marathon", "protest",
)

class EventsFeedProvider(DataProvider):
    name = "events"
    reading_model = EventReading

    def build_payload(self, keys: List[str], now: datetime) -> List[Dict[str, Any]]:
        payload = []
        for location in keys:
            # Roughly 30% of locations host something
            if float(self.rng.random()) <= 0.7:
                continue
            event_type = FEED_EVENT_TYPES[int(self.rng.integers(0, len(FEED_EVENT_TYPES)))]
            start = now + timedelta(hours=int(self.rng.integers(0, 12)))
            end = start + timedelta(hours=2 + int(self.rng.integers(0, 4)))
            attendees = 100 + int(self.rng.integers(0, 9900))
            payload.append({
                "id": f"event-{int(self.rng.integers(0, 1000))}",
                "name": f"{location} {event_type}",
                "type": event_type,
                "location": location,
                "start_time": start,
                "end_time": end,
                "estimated_attendees": attendees,
                "impact": "high" if attendees > 5000 else "medium" if attendees > 1000 else "low",
            })
        return payload

class ProviderRegistry:
    """
    Centralized registry for provider feeds.
    """

    def __init__(self):
        self._providers: Dict[str, DataProvider] = {}

    def register(self, provider: DataProvider):
        self._providers[provider.name] = provider

    def get(self, name: str) -> Optional[DataProvider]:
        return self._providers.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._providers)

    async def fetch_all(self, keys_by_provider: Dict[str, Sequence[str]]) -> Dict[str, List[BaseModel]]:
        """
        Fetches every requested feed concurrently. A feed that is
        unavailable is returned as an empty list; other errors propagate.
        """
        names = [name for name in keys_by_provider if name in self._providers]
        results = await asyncio.gather(
            *(self._providers[name].fetch(keys_by_provider[name]) for name in names),
            return_exceptions=True,
        )

        data: Dict[str, List[BaseModel]] = {}
        for name, result in zip(names, results):
            if isinstance(result, DataSourceUnavailable):
                logger.warning(f"Treating feed '{name}' as empty: {result.reason}")
                data[name] = []
            elif isinstance(result, BaseException):
                raise result
            else:
                data[name] = result
        return data


def create_default_registry(
    config: Optional[ProviderConfig] = None,
    rng: Optional[np.random.Generator] = None,
    center=(19.0289, 73.1095),
    thresholds: CongestionThresholds = DEFAULT_THRESHOLDS,
) -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(GPSProvider(center=center, config=config, rng=rng))
    registry.register(TrafficFeedProvider(center=center, thresholds=thresholds, config=config, rng=rng))
    registry.register(PassengerFeedProvider(config=config, rng=rng))
    registry.register(WeatherFeedProvider(config=config, rng=rng))
    registry.register(EventsFeedProvider(config=config, rng=rng))
    return registry
