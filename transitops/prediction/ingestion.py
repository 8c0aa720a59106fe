"""
Feeds provider readings and replayed CSV history into the forecast models.
The ingestor is the only writer of the models' history buffers.
"""
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd
from pydantic import BaseModel

from .congestion import CongestionPredictionModel
from .demand import DemandPredictionModel
from ..common.logging import setup_logger
from ..common.schemas import EventReading, PassengerReading, TrafficReading, WeatherReading

logger = setup_logger(__name__)

# Feed vocabulary -> forecast model vocabulary
WEATHER_ALIASES = {
    "rainy": "rain",
    "snowy": "snow",
    "foggy": "fog",
    "sunny": "sunny",
    "cloudy": "cloudy",
    "heavy_rain": "rain",
    "clear": "normal",
}


def normalize_weather(condition: Optional[str]) -> str:
    if not condition:
        return "normal"
    return WEATHER_ALIASES.get(condition, condition)


class FeedIngestor:
    def __init__(self, demand_model: DemandPredictionModel, congestion_model: CongestionPredictionModel):
        self.demand_model = demand_model
        self.congestion_model = congestion_model

    def ingest(self, feeds: Dict[str, List[BaseModel]]) -> Dict[str, int]:
        """
        Appends passenger and traffic readings. Weather and events readings
        annotate the records of the matching location.
        """
        weather = {
            r.location: normalize_weather(r.condition)
            for r in feeds.get("weather", []) if isinstance(r, WeatherReading)
        }
        events: Dict[str, List[str]] = {}
        for r in feeds.get("events", []):
            if isinstance(r, EventReading):
                events.setdefault(r.location, []).append(r.name)

        passengers = 0
        for r in feeds.get("passenger", []):
            if isinstance(r, PassengerReading):
                self.demand_model.add_data_point(
                    r.timestamp, r.station, r.passenger_count,
                    weather.get(r.station, "normal"), events.get(r.station, []),
                )
                passengers += 1

        traffic = 0
        for r in feeds.get("traffic", []):
            if isinstance(r, TrafficReading):
                self.congestion_model.add_traffic_data_point(
                    r.timestamp, r.road_segment, r.congestion_level, r.average_speed,
                    weather.get(r.road_segment, "normal"),
                )
                traffic += 1

        logger.debug(f"Ingested {passengers} passenger and {traffic} traffic readings")
        return {"passenger": passengers, "traffic": traffic}


def load_history_csv(
    path: Union[str, Path],
    demand_model: Optional[DemandPredictionModel] = None,
    congestion_model: Optional[CongestionPredictionModel] = None,
) -> Dict[str, int]:
    """
    Replays a history CSV (see scripts/generate_history.py).
    Rows with kind == 'demand' go to the demand model, 'traffic' rows to
    the congestion model. Rows are applied in timestamp order.
    """
    df = pd.read_csv(path)
    required = {"kind", "timestamp", "key"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"History file {path} is missing columns: {sorted(missing)}")

    df["timestamp"] = pd.to_datetime(df["timestamp"])
    df = df.sort_values(by="timestamp")
    if "weather" not in df.columns:
        df["weather"] = "normal"
    df["weather"] = df["weather"].fillna("normal")

    counts = {"demand": 0, "traffic": 0}
    for row in df.itertuples(index=False):
        ts = row.timestamp.to_pydatetime()
        weather = normalize_weather(row.weather)
        if row.kind == "demand" and demand_model is not None:
            demand_model.add_data_point(ts, str(row.key), float(row.passenger_count), weather)
            counts["demand"] += 1
        elif row.kind == "traffic" and congestion_model is not None:
            congestion_model.add_traffic_data_point(
                ts, str(row.key), float(row.congestion_level), float(row.average_speed), weather
            )
            counts["traffic"] += 1

    logger.info(f"Loaded history from {path}: {counts['demand']} demand, {counts['traffic']} traffic rows")
    return counts
