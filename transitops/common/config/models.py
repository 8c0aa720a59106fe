from dataclasses import dataclass, field
from typing import Optional

@dataclass
class ThresholdsConfig:
    medium: float = 0.4
    high: float = 0.7

@dataclass
class ForecastConfig:
    history_cap: int = 10000
    window_size: int = 4
    horizon_hours: int = 24
    display_horizon_hours: int = 6
    hotspot_threshold: float = 0.7
    hotspot_lookahead_hours: int = 6

@dataclass
class ReinforcementConfig:
    learning_rate: float = 0.1
    discount_factor: float = 0.9
    exploration_rate: float = 0.1

@dataclass
class SimulationConfig:
    latency_min_seconds: float = 0.2
    latency_max_seconds: float = 0.8
    min_vehicles_per_route: int = 3
    max_vehicles_per_route: int = 5
    provider_timeout_seconds: float = 2.0
    provider_failure_rate: float = 0.0
    seed: Optional[int] = None  # None = fresh samples on every call
    topology_file: Optional[str] = None

@dataclass
class RefreshConfig:
    vehicles_seconds: float = 10.0
    traffic_seconds: float = 30.0
    routes_seconds: float = 30.0
    recommendations_seconds: float = 30.0

@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000

@dataclass
class TransitConfig:
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    reinforcement: ReinforcementConfig = field(default_factory=ReinforcementConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
