import pytest
import numpy as np
from datetime import datetime
from transitops.common.schemas import Route, TrafficSegment
from transitops.simulation import default_topology

FIXED_NOW = datetime(2024, 3, 4, 8, 30)  # Monday, morning peak

@pytest.fixture
def topology():
    return default_topology()

@pytest.fixture
def rng():
    return np.random.default_rng(1234)

@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW

def make_segment(route_id, index, congestion):
    return TrafficSegment(
        id=f"{route_id}-segment-{index}",
        name=f"Route {route_id} Segment {index + 1}",
        congestion_level=congestion,
        average_speed=max(5.0, 60.0 - congestion * 55.0),
        coordinates=((19.0, 73.0), (19.01, 73.01)),
        route_id=route_id,
    )

def make_route(route_id, name=None, average_congestion=0.5, frequency=15):
    level = "high" if average_congestion > 0.7 else "medium" if average_congestion > 0.4 else "low"
    return Route(
        id=route_id,
        name=name or f"Route {route_id}",
        color="#3b82f6",
        frequency=frequency,
        congestion_level=level,
        average_congestion=average_congestion,
        current_passengers=250,
        average_passengers=300,
    )

@pytest.fixture
def segment_factory():
    return make_segment

@pytest.fixture
def route_factory():
    return make_route
