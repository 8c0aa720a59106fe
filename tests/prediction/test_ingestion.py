import pytest
import pandas as pd
from datetime import datetime
from transitops.common.schemas import EventReading, PassengerReading, TrafficReading, WeatherReading
from transitops.prediction import CongestionPredictionModel, DemandPredictionModel
from transitops.prediction.ingestion import FeedIngestor, load_history_csv, normalize_weather

NOW = datetime(2024, 3, 4, 8, 15)

def test_normalize_weather():
    assert normalize_weather("rainy") == "rain"
    assert normalize_weather("heavy_rain") == "rain"
    assert normalize_weather("clear") == "normal"
    assert normalize_weather(None) == "normal"
    assert normalize_weather("hail") == "hail"

def test_ingest_feeds():
    demand, congestion = DemandPredictionModel(), CongestionPredictionModel()
    feeds = {
        "passenger": [PassengerReading(station="Kamothe", timestamp=NOW, passenger_count=120,
                                       waiting_time=11, boarding_rate=25)],
        "traffic": [TrafficReading(road_segment="15-segment-0", timestamp=NOW, congestion_level=0.8,
                                   status="high", average_speed=16.0)],
        "weather": [WeatherReading(location="Kamothe", timestamp=NOW, condition="rainy", temperature=60,
                                   precipitation=0.3, wind_speed=5, humidity=70)],
        "events": [EventReading(id="event-1", name="Kamothe concert", type="concert", location="Kamothe",
                                start_time=NOW, end_time=NOW, estimated_attendees=3000, impact="medium")],
        "gps": [],
    }
    counts = FeedIngestor(demand, congestion).ingest(feeds)
    assert counts == {"passenger": 1, "traffic": 1}

    record = demand.history.snapshot()[0]
    assert record.weather_condition == "rain"
    assert record.events == ("Kamothe concert",)
    assert congestion.predict_congestion("15-segment-0", NOW).congestion_level == pytest.approx(0.8)

def test_ingest_empty_feeds():
    counts = FeedIngestor(DemandPredictionModel(), CongestionPredictionModel()).ingest({})
    assert counts == {"passenger": 0, "traffic": 0}

def test_load_history_csv(tmp_path):
    path = tmp_path / "history.csv"
    pd.DataFrame([
        {"kind": "traffic", "timestamp": "2024-02-26 08:00:00", "key": "42-segment-0",
         "weather": "rainy", "congestion_level": 0.6, "average_speed": 27.0},
        {"kind": "demand", "timestamp": "2024-02-26 08:00:00", "key": "Kamothe",
         "weather": None, "passenger_count": 80},
        {"kind": "demand", "timestamp": "2024-02-19 08:00:00", "key": "Kamothe",
         "weather": "sunny", "passenger_count": 40},
    ]).to_csv(path, index=False)

    demand, congestion = DemandPredictionModel(), CongestionPredictionModel()
    counts = load_history_csv(path, demand, congestion)
    assert counts == {"demand": 2, "traffic": 1}

    records = demand.history.snapshot()
    assert [r.passenger_count for r in records] == [40, 80]
    assert records[1].weather_condition == "normal"
    assert congestion.history.snapshot()[0].weather_condition == "rain"
    assert demand.predict_demand("Kamothe", datetime(2024, 3, 4, 8)) == 60

def test_load_history_csv_missing_columns(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame([{"timestamp": "2024-01-01", "value": 1}]).to_csv(path, index=False)
    with pytest.raises(ValueError):
        load_history_csv(path, DemandPredictionModel())
