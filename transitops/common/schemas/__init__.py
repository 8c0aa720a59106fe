from .network import Coordinate, TrafficSegment, Vehicle, Route, EnvironmentSnapshot
from .environment import WeatherSnapshot, EventRecord, PassengerData, RoutePassengers, HourlyPassengers
from .optimization import Impact, OptimizationResult
from .feeds import GPSReading, IncidentReport, TrafficReading, PassengerReading, WeatherReading, EventReading

__all__ = [
    "Coordinate",
    "TrafficSegment",
    "Vehicle",
    "Route",
    "EnvironmentSnapshot",
    "WeatherSnapshot",
    "EventRecord",
    "PassengerData",
    "RoutePassengers",
    "HourlyPassengers",
    "Impact",
    "OptimizationResult",
    "GPSReading",
    "IncidentReport",
    "TrafficReading",
    "PassengerReading",
    "WeatherReading",
    "EventReading",
]
