import pytest
from datetime import datetime, timedelta
from pydantic import ValidationError
from transitops.common.schemas import (
    EventRecord, Impact, OptimizationResult, TrafficSegment, Vehicle, WeatherSnapshot
)

def make_vehicle(**overrides):
    data = dict(
        id="42-1", route_id="42", route="Panvel Station Express",
        latitude=19.0, longitude=73.1, speed=30.0, heading=90.0,
        status="on-time", passenger_count=20, capacity=50,
        fuel_level=80, eta=5, current_stop="Sector 10", next_stop="City Center",
    )
    data.update(overrides)
    return Vehicle(**data)

# --- Vehicle Tests ---
def test_vehicle_valid():
    vehicle = make_vehicle()
    assert vehicle.diverted is False

def test_vehicle_over_capacity():
    with pytest.raises(ValidationError):
        make_vehicle(passenger_count=60, capacity=50)

def test_vehicle_invalid_heading():
    with pytest.raises(ValidationError):
        make_vehicle(heading=360.0)

def test_vehicle_invalid_status():
    with pytest.raises(ValidationError):
        make_vehicle(status="lost")

# --- Traffic Tests ---
def test_segment_congestion_range():
    with pytest.raises(ValidationError):
        TrafficSegment(
            id="42-segment-0", name="S1", congestion_level=1.2, average_speed=10,
            coordinates=((0, 0), (1, 1)), route_id="42",
        )

# --- Environment Tests ---
def test_event_window():
    now = datetime(2024, 1, 1, 12)
    with pytest.raises(ValidationError):
        EventRecord(
            id="event-1", name="Concert", type="concert", location="Kamothe",
            coordinates=(19.0, 73.1), traffic_impact=0.5,
            start_time=now, end_time=now - timedelta(hours=1), attendees=100,
        )

def test_weather_condition_vocabulary():
    with pytest.raises(ValidationError):
        WeatherSnapshot(condition="snow", temperature=10, visibility=0.5,
                        wind_speed=3, humidity=50, precipitation_chance=0.2)

# --- Optimization Tests ---
def test_optimization_confidence_bounds():
    data = dict(
        route_id="42", route="Express", priority="high",
        original_route="A → B", optimized_route="A → C → B", reason="test",
        impact=Impact(), type="diversion",
    )
    assert OptimizationResult(confidence=99, **data).confidence == 99
    with pytest.raises(ValidationError):
        OptimizationResult(confidence=100, **data)

def test_impact_non_negative():
    with pytest.raises(ValidationError):
        Impact(fuel_savings=-1)
