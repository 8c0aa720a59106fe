"""
Road segment congestion forecasting and hotspot detection.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence

from .domain import CongestionPrediction, TrafficRecord
from .history import BoundedHistory
from ..common.logging import setup_logger

logger = setup_logger(__name__)

DEFAULT_PREDICTION = CongestionPrediction(congestion_level=0.5, average_speed=30.0)

# weather: (congestion multiplier, speed multiplier)
WEATHER_ADJUSTMENTS = {
    "rain": (1.3, 0.8),
    "snow": (1.3, 0.8),
    "fog": (1.2, 0.85),
}


class CongestionPredictionModel:
    """
    Predicts congestion per road segment and hour from the trailing
    average of matching observations.
    """

    def __init__(self, history_cap: int = 10000, window_size: int = 4, prediction_horizon: int = 24):
        self.history: BoundedHistory[TrafficRecord] = BoundedHistory(history_cap)
        self.window_size = window_size
        self.prediction_horizon = prediction_horizon

    def add_traffic_data_point(
        self,
        timestamp: datetime,
        road_segment: str,
        congestion_level: float,
        average_speed: float,
        weather_condition: str = "normal",
    ):
        self.history.append(TrafficRecord(
            timestamp=timestamp,
            road_segment=road_segment,
            congestion_level=min(1.0, max(0.0, congestion_level)),
            average_speed=average_speed,
            weather_condition=weather_condition,
        ))

    def predict_congestion(
        self,
        road_segment: str,
        target_time: datetime,
        weather_forecast: str = "normal",
    ) -> CongestionPrediction:
        """
        Without matching history the fixed defaults are returned as-is;
        weather only adjusts history-based predictions.
        """
        relevant = self.history.filter(
            lambda r: r.road_segment == road_segment
            and r.timestamp.weekday() == target_time.weekday()
            and r.timestamp.hour == target_time.hour
        )
        if not relevant:
            return DEFAULT_PREDICTION

        recent = relevant[-self.window_size:]
        congestion = sum(r.congestion_level for r in recent) / len(recent)
        speed = sum(r.average_speed for r in recent) / len(recent)

        if weather_forecast in WEATHER_ADJUSTMENTS:
            congestion_factor, speed_factor = WEATHER_ADJUSTMENTS[weather_forecast]
            congestion = min(1.0, congestion * congestion_factor)
            speed = speed * speed_factor

        return CongestionPrediction(congestion_level=congestion, average_speed=speed)

    def generate_congestion_forecast(
        self,
        road_segments: Sequence[str],
        start_time: datetime,
        weather_forecast: Optional[Mapping[str, str]] = None,
        horizon_hours: Optional[int] = None,
    ) -> Dict[str, List[CongestionPrediction]]:
        weather_forecast = weather_forecast or {}
        horizon = horizon_hours if horizon_hours is not None else self.prediction_horizon

        forecasts: Dict[str, List[CongestionPrediction]] = {}
        for segment in road_segments:
            weather = weather_forecast.get(segment, "normal")
            forecasts[segment] = [
                self.predict_congestion(segment, start_time + timedelta(hours=hour), weather)
                for hour in range(horizon)
            ]
        return forecasts

    def identify_congestion_hotspots(
        self,
        forecasts: Mapping[str, Sequence[CongestionPrediction]],
        threshold: float = 0.7,
        lookahead_hours: int = 6,
    ) -> List[str]:
        """
        Segments whose next `lookahead_hours` predictions reach `threshold`.
        """
        hotspots = []
        for segment, predictions in forecasts.items():
            near_term = predictions[:lookahead_hours]
            if any(p.congestion_level >= threshold for p in near_term):
                hotspots.append(segment)
        if hotspots:
            logger.info(f"Congestion hotspots: {', '.join(hotspots)}")
        return hotspots

    def forecast_series(self, keys, start_time, weather_by_key=None, events_by_key=None, horizon_hours=None):
        return {
            key: [p.congestion_level for p in predictions]
            for key, predictions in self.generate_congestion_forecast(
                keys, start_time, weather_by_key, horizon_hours
            ).items()
        }
