"""
Synthetic environment generation.

Every call samples a fresh, independent snapshot. Nothing generated here is
kept between calls.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np

from .topology import NetworkTopology, default_topology
from ..common.congestion import (
    CongestionThresholds, DEFAULT_THRESHOLDS, average_congestion
)
from ..common.logging import setup_logger, log_execution_time
from ..common.pseudo_random import weighted_choice
from ..common.schemas import (
    EnvironmentSnapshot, EventRecord, HourlyPassengers, PassengerData, Route,
    RoutePassengers, TrafficSegment, Vehicle, WeatherSnapshot
)

logger = setup_logger(__name__)

VEHICLE_STATUSES = ("on-time", "delayed")
WEATHER_CONDITIONS = ("clear", "cloudy", "rain", "heavy_rain")
WEATHER_WEIGHTS = (0.5, 0.3, 0.15, 0.05)
VISIBILITY_RANGES = {
    "clear": (0.9, 0.1),
    "cloudy": (0.7, 0.2),
    "rain": (0.5, 0.2),
    "heavy_rain": (0.3, 0.2),
}
EVENT_TYPES = (
    ("concert", 0.7),
    ("sports", 0.6),
    ("festival", 0.5),
    ("construction", 0.4),
    ("roadwork", 0.3),
)


def segment_speed(congestion_level: float) -> float:
    """Average speed in km/h; monotonically decreasing with congestion."""
    return max(5.0, 60.0 - congestion_level * 55.0)


def rush_hour_multiplier(hour: int) -> float:
    if 7 <= hour <= 9:
        return 3.0
    if 16 <= hour <= 19:
        return 2.5
    if hour >= 22 or hour <= 5:
        return 0.2
    return 1.0


STATUS_WEIGHTS = {
    "low": [0.9, 0.1],
    "medium": [0.6, 0.4],
    "high": [0.3, 0.7],
}


def status_weights(avg_congestion: float, thresholds: CongestionThresholds = DEFAULT_THRESHOLDS) -> List[float]:
    """[on-time, delayed] weights for the route's congestion class."""
    return list(STATUS_WEIGHTS[thresholds.classify(avg_congestion)])


def segments_for_route(route_id: str, segments: List[TrafficSegment]) -> List[TrafficSegment]:
    return [s for s in segments if s.route_id == route_id]


class EnvironmentGenerator:
    """
    Produces vehicles, traffic, routes, ridership, weather and events
    from an injected topology plus randomness.
    """

    def __init__(
        self,
        topology: Optional[NetworkTopology] = None,
        rng: Optional[np.random.Generator] = None,
        thresholds: CongestionThresholds = DEFAULT_THRESHOLDS,
        min_vehicles_per_route: int = 3,
        max_vehicles_per_route: int = 5,
        clock=datetime.now,
    ):
        self.topology = topology or default_topology()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.thresholds = thresholds
        self.min_vehicles_per_route = min_vehicles_per_route
        self.max_vehicles_per_route = max_vehicles_per_route
        self.clock = clock

    def generate_traffic_segments(self) -> List[TrafficSegment]:
        segments: List[TrafficSegment] = []
        for route in self.topology.routes:
            path = route.path
            for i in range(len(path) - 1):
                congestion = float(self.rng.random())
                segments.append(TrafficSegment(
                    id=f"{route.route_id}-segment-{i}",
                    name=f"{route.name} Segment {i + 1}",
                    congestion_level=congestion,
                    average_speed=segment_speed(congestion),
                    coordinates=(path[i], path[i + 1]),
                    route_id=route.route_id,
                ))
        return segments

    def should_divert_route(self, route_id: str, segments: List[TrafficSegment]) -> bool:
        """
        A route diverts only if it has a diverted path and one of its
        segments is above the high congestion threshold.
        """
        if not self.topology.is_diversion_capable(route_id):
            return False
        return any(
            s.congestion_level > self.thresholds.high
            for s in segments_for_route(route_id, segments)
        )

    def generate_vehicles(self, segments: Optional[List[TrafficSegment]] = None) -> List[Vehicle]:
        if segments is None:
            segments = self.generate_traffic_segments()

        vehicles: List[Vehicle] = []
        for route in self.topology.routes:
            path = route.path
            if len(path) < 2:
                continue

            diverted = self.should_divert_route(route.route_id, segments)
            avg = average_congestion(s.congestion_level for s in segments_for_route(route.route_id, segments))
            weights = status_weights(avg, self.thresholds)
            stations = list(route.stations)
            count = int(self.rng.integers(self.min_vehicles_per_route, self.max_vehicles_per_route + 1))

            for i in range(count):
                edge = int(self.rng.integers(0, len(path) - 1))
                (start_lat, start_lng), (end_lat, end_lng) = path[edge], path[edge + 1]
                progress = float(self.rng.random())

                capacity = 40 + int(self.rng.integers(0, 20))
                current_index = int(self.rng.integers(0, max(1, len(stations) - 1)))
                next_index = (current_index + 1) % len(stations) if stations else 0

                vehicles.append(Vehicle(
                    id=f"{route.route_id}-{i + 1}",
                    route_id=route.route_id,
                    route=route.name,
                    latitude=start_lat + (end_lat - start_lat) * progress,
                    longitude=start_lng + (end_lng - start_lng) * progress,
                    speed=max(5.0, 60.0 - avg * 50.0),
                    heading=float(self.rng.random() * 360.0),
                    status=weighted_choice(VEHICLE_STATUSES, weights, float(self.rng.random())),
                    passenger_count=int(self.rng.integers(0, capacity)),
                    capacity=capacity,
                    fuel_level=10 + int(self.rng.integers(0, 90)),
                    eta=3 + int(self.rng.integers(0, 28)),
                    current_stop=stations[current_index] if stations else "Unknown",
                    next_stop=stations[next_index] if stations else "Unknown",
                    diverted=diverted,
                ))
        return vehicles

    def generate_routes(self, segments: Optional[List[TrafficSegment]] = None) -> List[Route]:
        if segments is None:
            segments = self.generate_traffic_segments()

        routes: List[Route] = []
        for route in self.topology.routes:
            avg = average_congestion(s.congestion_level for s in segments_for_route(route.route_id, segments))
            diverted = self.should_divert_route(route.route_id, segments)
            average_passengers = 200 + int(self.rng.integers(0, 300))
            swing = 1 + float(self.rng.random()) * 0.5 - 0.25

            routes.append(Route(
                id=route.route_id,
                name=route.name,
                color=route.color,
                stations=list(route.stations),
                path=list(route.path),
                diverted_path=list(route.diverted_path) if diverted else [],
                frequency=10 + int(self.rng.integers(0, 20)),
                congestion_level=self.thresholds.classify(avg),
                average_congestion=avg,
                current_passengers=int(average_passengers * swing),
                average_passengers=average_passengers,
                diverted=diverted,
                diversion_reason="High traffic congestion" if diverted else None,
            ))
        return routes

    @log_execution_time(logger)
    def generate_environment_snapshot(self) -> EnvironmentSnapshot:
        """
        Samples traffic once and derives routes and vehicles from it.
        """
        segments = self.generate_traffic_segments()
        snapshot = EnvironmentSnapshot(
            generated_at=self.clock(),
            routes=self.generate_routes(segments),
            vehicles=self.generate_vehicles(segments),
            traffic_segments=segments,
        )
        logger.debug(
            f"Snapshot: {len(snapshot.routes)} routes, {len(snapshot.vehicles)} vehicles, "
            f"{len(snapshot.traffic_segments)} segments"
        )
        return snapshot

    def generate_passenger_data(self) -> PassengerData:
        by_hour = []
        for hour in range(24):
            multiplier = rush_hour_multiplier(hour)
            by_hour.append(HourlyPassengers(
                hour=hour,
                passenger_count=int(100 * multiplier + float(self.rng.random()) * 50 * multiplier),
            ))

        return PassengerData(
            total_passengers=2500 + int(self.rng.integers(0, 1500)),
            passengers_by_route=[
                RoutePassengers(
                    route_id=route.route_id,
                    route_name=route.name,
                    passenger_count=300 + int(self.rng.integers(0, 500)),
                )
                for route in self.topology.routes
            ],
            passengers_by_hour=by_hour,
            average_ride_distance=3 + float(self.rng.random()) * 5,
            average_ride_time=15 + float(self.rng.random()) * 20,
        )

    def generate_weather(self) -> WeatherSnapshot:
        condition = weighted_choice(WEATHER_CONDITIONS, WEATHER_WEIGHTS, float(self.rng.random()))
        base, spread = VISIBILITY_RANGES[condition]
        if condition == "clear":
            precipitation_chance = 0.0
        elif condition == "cloudy":
            precipitation_chance = 0.2
        else:
            precipitation_chance = 0.8

        return WeatherSnapshot(
            condition=condition,
            temperature=20 + float(self.rng.random()) * 10,
            visibility=min(1.0, base + float(self.rng.random()) * spread),
            wind_speed=float(self.rng.random()) * 30,
            humidity=40 + float(self.rng.random()) * 50,
            precipitation_chance=precipitation_chance,
        )

    def generate_events(self, now: Optional[datetime] = None) -> List[EventRecord]:
        now = now or self.clock()
        landmarks = self.topology.landmarks
        if not landmarks:
            return []

        events: List[EventRecord] = []
        for i in range(1 + int(self.rng.integers(0, 3))):
            landmark = landmarks[int(self.rng.integers(0, len(landmarks)))]
            event_type, impact = EVENT_TYPES[int(self.rng.integers(0, len(EVENT_TYPES)))]
            start = now + timedelta(hours=float(self.rng.random()) * 24)
            end = start + timedelta(hours=float(self.rng.random()) * 48)

            events.append(EventRecord(
                id=f"event-{i + 1}",
                name=f"{landmark.name} {event_type.capitalize()}",
                type=event_type,
                location=landmark.name,
                coordinates=landmark.coordinates,
                traffic_impact=min(1.0, max(0.0, impact + float(self.rng.random()) * 0.2 - 0.1)),
                start_time=start,
                end_time=end,
                attendees=100 + int(self.rng.integers(0, 9900)),
            ))
        return events


def events_by_location(events: List[EventRecord]) -> Dict[str, List[str]]:
    """
    Groups event names per location, heaviest first (traffic impact
    weighted by attendance), in the shape the demand model consumes.
    """
    ranked = sorted(events, key=lambda e: e.traffic_impact * e.attendees, reverse=True)
    grouped: Dict[str, List[str]] = {}
    for event in ranked:
        grouped.setdefault(event.location, []).append(event.name.lower())
    return grouped
