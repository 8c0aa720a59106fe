"""
Passenger demand forecasting over a bounded observation history.
"""
import math
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence

from .domain import DemandRecord
from .history import BoundedHistory
from ..common.logging import setup_logger

logger = setup_logger(__name__)

MAJOR_EVENT_KEYWORDS = ("concert", "game")
MEDIUM_EVENT_KEYWORDS = ("conference", "exhibition")


def weather_multiplier(weather: str) -> float:
    if weather in ("rain", "snow"):
        return 1.2
    if weather == "sunny":
        return 0.9
    return 1.0


def event_boost(event: str) -> int:
    if any(keyword in event for keyword in MAJOR_EVENT_KEYWORDS):
        return 100
    if any(keyword in event for keyword in MEDIUM_EVENT_KEYWORDS):
        return 50
    return 20


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class DemandPredictionModel:
    """
    Predicts passengers per location and hour from the trailing average
    of matching observations (same location, weekday and hour).
    """

    def __init__(self, history_cap: int = 10000, window_size: int = 4, forecast_horizon: int = 24):
        self.history: BoundedHistory[DemandRecord] = BoundedHistory(history_cap)
        self.window_size = window_size
        self.forecast_horizon = forecast_horizon

    def add_data_point(
        self,
        timestamp: datetime,
        location: str,
        passenger_count: float,
        weather_condition: str = "normal",
        events: Sequence[str] = (),
    ):
        self.history.append(DemandRecord(
            timestamp=timestamp,
            location=location,
            passenger_count=passenger_count,
            weather_condition=weather_condition,
            events=tuple(events),
        ))

    def calculate_moving_average(
        self,
        location: str,
        day_of_week: int,
        hour_of_day: int,
        window_size: Optional[int] = None,
    ) -> float:
        """
        Average of the last `window_size` matching records; 0 without history.
        Day of week follows datetime.weekday() (Monday = 0).
        """
        window = window_size or self.window_size
        relevant = self.history.filter(
            lambda r: r.location == location
            and r.timestamp.weekday() == day_of_week
            and r.timestamp.hour == hour_of_day
        )
        if not relevant:
            return 0.0

        recent = relevant[-window:]
        return sum(r.passenger_count for r in recent) / len(recent)

    def predict_demand(
        self,
        location: str,
        target_time: datetime,
        weather_forecast: str = "normal",
        upcoming_events: Sequence[str] = (),
    ) -> int:
        baseline = self.calculate_moving_average(location, target_time.weekday(), target_time.hour)
        boost = sum(event_boost(event) for event in upcoming_events)
        return round_half_up(baseline * weather_multiplier(weather_forecast) + boost)

    def generate_forecast(
        self,
        locations: Sequence[str],
        start_time: datetime,
        weather_forecast: Optional[Mapping[str, str]] = None,
        events: Optional[Mapping[str, Sequence[str]]] = None,
        horizon_hours: Optional[int] = None,
    ) -> Dict[str, List[int]]:
        weather_forecast = weather_forecast or {}
        events = events or {}
        horizon = horizon_hours if horizon_hours is not None else self.forecast_horizon

        forecasts: Dict[str, List[int]] = {}
        for location in locations:
            weather = weather_forecast.get(location, "normal")
            location_events = list(events.get(location, []))
            forecasts[location] = [
                self.predict_demand(location, start_time + timedelta(hours=hour), weather, location_events)
                for hour in range(horizon)
            ]
        logger.debug(f"Demand forecast for {len(forecasts)} locations over {horizon}h")
        return forecasts

    def forecast_series(self, keys, start_time, weather_by_key=None, events_by_key=None, horizon_hours=None):
        return {
            key: [float(v) for v in values]
            for key, values in self.generate_forecast(
                keys, start_time, weather_by_key, events_by_key, horizon_hours
            ).items()
        }
