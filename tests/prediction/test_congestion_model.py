import pytest
from datetime import datetime, timedelta
from transitops.prediction import CongestionPredictionModel, CongestionPrediction

MONDAY_8AM = datetime(2024, 3, 4, 8, 0)

@pytest.fixture
def model():
    model = CongestionPredictionModel()
    for week in range(1, 5):
        model.add_traffic_data_point(MONDAY_8AM - timedelta(weeks=week), "15-segment-0", 0.6, 40.0)
    return model

def test_no_history_returns_defaults_without_weather():
    model = CongestionPredictionModel()
    prediction = model.predict_congestion("15-segment-0", MONDAY_8AM, "rain")
    assert prediction.congestion_level == 0.5
    assert prediction.average_speed == 30.0

def test_history_average(model):
    prediction = model.predict_congestion("15-segment-0", MONDAY_8AM)
    assert prediction.congestion_level == pytest.approx(0.6)
    assert prediction.average_speed == pytest.approx(40.0)

def test_weather_adjustments(model):
    rain = model.predict_congestion("15-segment-0", MONDAY_8AM, "rain")
    assert rain.congestion_level == pytest.approx(0.78)
    assert rain.average_speed == pytest.approx(32.0)
    fog = model.predict_congestion("15-segment-0", MONDAY_8AM, "fog")
    assert fog.congestion_level == pytest.approx(0.72)
    assert fog.average_speed == pytest.approx(34.0)

def test_weather_adjustment_is_capped():
    model = CongestionPredictionModel()
    model.add_traffic_data_point(MONDAY_8AM - timedelta(weeks=1), "s", 0.9, 20.0)
    assert model.predict_congestion("s", MONDAY_8AM, "snow").congestion_level == 1.0

def test_levels_are_clamped():
    model = CongestionPredictionModel()
    model.add_traffic_data_point(MONDAY_8AM, "s", 1.5, 10.0)
    model.add_traffic_data_point(MONDAY_8AM, "t", -0.2, 10.0)
    assert model.history.snapshot()[0].congestion_level == 1.0
    assert model.history.snapshot()[1].congestion_level == 0.0

def test_forecast_length(model):
    forecast = model.generate_congestion_forecast(["15-segment-0", "7-segment-1"], MONDAY_8AM)
    assert all(len(values) == 24 for values in forecast.values())
    assert forecast["15-segment-0"][0].congestion_level == pytest.approx(0.6)
    assert forecast["7-segment-1"][0].congestion_level == 0.5

def test_hotspots_within_lookahead():
    model = CongestionPredictionModel()
    low = CongestionPrediction(0.3, 40.0)
    high = CongestionPrediction(0.7, 15.0)
    forecasts = {
        "a": [low, low, high] + [low] * 21,
        "b": [low] * 7 + [high] + [low] * 16,
        "c": [low] * 24,
    }
    assert model.identify_congestion_hotspots(forecasts) == ["a"]
    assert model.identify_congestion_hotspots(forecasts, lookahead_hours=8) == ["a", "b"]
    assert model.identify_congestion_hotspots(forecasts, threshold=0.8) == []

def test_forecast_series_returns_levels(model):
    series = model.forecast_series(["15-segment-0"], MONDAY_8AM, horizon_hours=3)
    assert series["15-segment-0"][0] == pytest.approx(0.6)
    assert len(series["15-segment-0"]) == 3
