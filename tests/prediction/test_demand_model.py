import pytest
from datetime import datetime, timedelta
from transitops.prediction import DemandPredictionModel
from transitops.prediction.demand import event_boost, round_half_up, weather_multiplier

MONDAY_8AM = datetime(2024, 3, 4, 8, 0)

@pytest.fixture
def model():
    model = DemandPredictionModel()
    # Six Mondays at 08:00
    for week, count in enumerate([10, 20, 30, 40, 50, 60]):
        model.add_data_point(MONDAY_8AM - timedelta(weeks=6 - week), "Kamothe", count)
    return model

def test_empty_history_predicts_zero():
    model = DemandPredictionModel()
    assert model.calculate_moving_average("Kamothe", 0, 8) == 0.0
    assert model.predict_demand("Kamothe", MONDAY_8AM) == 0

def test_empty_history_forecast_is_all_zero():
    model = DemandPredictionModel()
    forecast = model.generate_forecast(["Kamothe", "Kharghar"], MONDAY_8AM)
    assert set(forecast) == {"Kamothe", "Kharghar"}
    for values in forecast.values():
        assert values == [0] * 24

def test_moving_average_uses_trailing_window(model):
    assert model.calculate_moving_average("Kamothe", 0, 8) == pytest.approx(45.0)
    assert model.calculate_moving_average("Kamothe", 0, 8, window_size=2) == pytest.approx(55.0)

def test_other_weekday_has_no_history(model):
    assert model.predict_demand("Kamothe", MONDAY_8AM + timedelta(days=1)) == 0

def test_weather_adjustment(model):
    assert model.predict_demand("Kamothe", MONDAY_8AM, "rain") == 54
    assert model.predict_demand("Kamothe", MONDAY_8AM, "snow") == 54
    # 45 * 0.9 = 40.5 rounds half up
    assert model.predict_demand("Kamothe", MONDAY_8AM, "sunny") == 41
    assert model.predict_demand("Kamothe", MONDAY_8AM, "cloudy") == 45

def test_event_boosts(model):
    events = ["rock concert", "tech conference", "farmers market"]
    assert model.predict_demand("Kamothe", MONDAY_8AM, "normal", events) == 45 + 100 + 50 + 20

def test_event_boost_keywords():
    assert event_boost("cricket game") == 100
    assert event_boost("art exhibition") == 50
    assert event_boost("parade") == 20

def test_helpers():
    assert weather_multiplier("rain") == 1.2
    assert weather_multiplier("sunny") == 0.9
    assert weather_multiplier("fog") == 1.0
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2

def test_forecast_length_and_hours(model):
    forecast = model.generate_forecast(["Kamothe"], MONDAY_8AM, horizon_hours=6)
    assert len(forecast["Kamothe"]) == 6
    assert forecast["Kamothe"][0] == 45
    assert forecast["Kamothe"][1] == 0

def test_forecast_uses_per_location_inputs(model):
    forecast = model.generate_forecast(
        ["Kamothe"], MONDAY_8AM,
        weather_forecast={"Kamothe": "rain"},
        events={"Kamothe": ["evening concert"]},
        horizon_hours=1,
    )
    assert forecast["Kamothe"] == [54 + 100]
