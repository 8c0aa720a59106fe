"""
Domain entities for the forecasting module.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

@dataclass(frozen=True)
class DemandRecord:
    """
    Observed passenger count at a location.
    """
    timestamp: datetime
    location: str
    passenger_count: float
    weather_condition: str = "normal"
    events: Tuple[str, ...] = ()

@dataclass(frozen=True)
class TrafficRecord:
    """
    Observed congestion on a road segment.
    """
    timestamp: datetime
    road_segment: str
    congestion_level: float  # 0.0 to 1.0
    average_speed: float
    weather_condition: str = "normal"

@dataclass(frozen=True)
class CongestionPrediction:
    congestion_level: float
    average_speed: float

class ForecastModel(Protocol):
    """
    Anything that can produce an hour-indexed series per key.
    """
    def forecast_series(
        self,
        keys: Sequence[str],
        start_time: datetime,
        weather_by_key: Optional[Mapping[str, str]] = None,
        events_by_key: Optional[Mapping[str, Sequence[str]]] = None,
        horizon_hours: Optional[int] = None,
    ) -> Dict[str, List[float]]:
        ...
