"""
Static network tables: routes, stations, paths and diversion options.

A topology is an immutable value handed to each generator, so tests can run
several instances over different networks side by side.
"""
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

Point = Tuple[float, float]

class AlternativeRoute(BaseModel):
    """Textual description of a route and its diversion."""
    original: str
    diverted: str

    model_config = ConfigDict(frozen=True)

class RouteDefinition(BaseModel):
    route_id: str
    name: str
    color: str = "#64748b"
    stations: Tuple[str, ...] = ()
    path: Tuple[Point, ...] = ()
    diverted_path: Tuple[Point, ...] = Field((), description="Geometry used when the route is diverted")
    alternative: Optional[AlternativeRoute] = Field(None, description="Diversion described for operators")
    demand_pattern: str = Field("balanced", description="Name of the hourly demand pattern")

    model_config = ConfigDict(frozen=True)

    @property
    def diversion_capable(self) -> bool:
        return len(self.diverted_path) > 0

class Landmark(BaseModel):
    name: str
    coordinates: Point

    model_config = ConfigDict(frozen=True)

class NetworkTopology(BaseModel):
    """
    Immutable description of the transit network.
    Lookups for unknown ids return empty values instead of raising.
    """
    city_center: Point
    routes: Tuple[RouteDefinition, ...]
    landmarks: Tuple[Landmark, ...] = ()
    demand_patterns: Dict[str, Tuple[float, ...]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("demand_patterns")
    @classmethod
    def validate_patterns(cls, v: Dict[str, Tuple[float, ...]]) -> Dict[str, Tuple[float, ...]]:
        for name, pattern in v.items():
            if len(pattern) != 24:
                raise ValueError(f"demand pattern '{name}' must have 24 hourly values")
        return v

    @property
    def route_ids(self) -> List[str]:
        return [r.route_id for r in self.routes]

    def get_route(self, route_id: str) -> Optional[RouteDefinition]:
        for route in self.routes:
            if route.route_id == route_id:
                return route
        return None

    def stations_for(self, route_id: str) -> List[str]:
        route = self.get_route(route_id)
        return list(route.stations) if route else []

    def path_for(self, route_id: str) -> List[Point]:
        route = self.get_route(route_id)
        return list(route.path) if route else []

    def diverted_path_for(self, route_id: str) -> List[Point]:
        route = self.get_route(route_id)
        return list(route.diverted_path) if route else []

    def alternative_for(self, route_id: str) -> Optional[AlternativeRoute]:
        route = self.get_route(route_id)
        return route.alternative if route else None

    def is_diversion_capable(self, route_id: str) -> bool:
        route = self.get_route(route_id)
        return bool(route and route.diversion_capable)


MORNING_PEAK = (0.1, 0.1, 0.1, 0.2, 0.3, 0.5, 0.8, 0.9, 0.8, 0.6, 0.5, 0.4,
                0.5, 0.5, 0.5, 0.6, 0.7, 0.8, 0.6, 0.4, 0.3, 0.2, 0.1, 0.1)
EVENING_PEAK = (0.1, 0.1, 0.1, 0.2, 0.3, 0.5, 0.6, 0.7, 0.6, 0.5, 0.5, 0.5,
                0.6, 0.7, 0.7, 0.8, 0.9, 0.9, 0.8, 0.6, 0.4, 0.3, 0.2, 0.1)
BALANCED = (0.1, 0.1, 0.1, 0.2, 0.3, 0.4, 0.6, 0.7, 0.7, 0.6, 0.6, 0.6,
            0.7, 0.7, 0.7, 0.7, 0.8, 0.8, 0.7, 0.5, 0.4, 0.3, 0.2, 0.1)


def default_topology() -> NetworkTopology:
    """
    Panvel (Navi Mumbai) network with six radial routes.
    """
    lat, lng = 19.0289, 73.1095

    def at(dlat: float, dlng: float) -> Point:
        return (round(lat + dlat, 6), round(lng + dlng, 6))

    routes = (
        RouteDefinition(
            route_id="42", name="Panvel Station Express", color="#3b82f6",
            stations=("Panvel Station", "Sector 10", "City Center", "Palm Beach", "CBD Belapur"),
            path=(at(0.05, 0), at(0.03, 0.01), at(0, 0), at(-0.03, -0.01), at(-0.05, 0)),
            diverted_path=(at(0.03, 0.01), at(0.02, 0.015), at(0.01, 0.02),
                           at(0, 0.01), at(-0.01, 0), at(-0.03, -0.01)),
            alternative=AlternativeRoute(
                original="Panvel Station → Panvel-Uran Rd → CBD → Main Rd → Sector 15",
                diverted="Panvel Station → Old Panvel Rd → Kalamboli Circle → Sector 15",
            ),
            demand_pattern="morning_peak",
        ),
        RouteDefinition(
            route_id="15", name="Kamothe Line", color="#ef4444",
            stations=("Panvel Station", "Kharghar Hills", "Kharghar Station", "Utsav Chowk", "Kamothe"),
            path=(at(0, 0), at(0.02, 0.02), at(0.04, 0.04), at(0.06, 0.06)),
            diverted_path=(at(0.02, 0.02), at(0.025, 0.03), at(0.03, 0.035),
                           at(0.035, 0.04), at(0.04, 0.04)),
            alternative=AlternativeRoute(
                original="Kamothe → Sion-Panvel Hwy → Kharghar → CBD Belapur",
                diverted="Kamothe → Palm Beach Rd → Nerul → CBD Belapur",
            ),
            demand_pattern="evening_peak",
        ),
        RouteDefinition(
            route_id="7", name="Kharghar Circuit", color="#22c55e",
            stations=("Panvel Station", "Orion Mall", "CIDCO Exhibition", "D-Mart Circle", "Kharghar"),
            path=(at(0, 0), at(0.02, 0.03), at(0, 0.05), at(-0.02, 0.03), at(-0.03, 0),
                  at(-0.02, -0.03), at(0, -0.05), at(0.02, -0.03), at(0, 0)),
            alternative=AlternativeRoute(
                original="Kharghar Station → Hiranandani → Central Park → Sector 10",
                diverted="Kharghar Station → Sector 12 → Roadpali → Sector 10",
            ),
            demand_pattern="balanced",
        ),
        RouteDefinition(
            route_id="33", name="New Panvel Shuttle", color="#f59e0b",
            stations=("New Panvel", "Kalamboli Circle", "Central Park", "Panvel Station"),
            path=(at(0, 0), at(-0.01, 0.03), at(-0.02, 0.06), at(-0.03, 0.09)),
            alternative=AlternativeRoute(
                original="New Panvel → Kalamboli → Kamothe → Kharghar",
                diverted="New Panvel → Palaspa → Panvel Bypass → Kharghar",
            ),
            demand_pattern="evening_peak",
        ),
        RouteDefinition(
            route_id="21", name="Kalamboli Connector", color="#8b5cf6",
            stations=("Kalamboli", "Taloja MIDC", "Panvel Station", "Kamothe", "JNPT Road"),
            path=(at(0, -0.08), at(0, -0.04), at(0, 0), at(0, 0.04), at(0, 0.08)),
            alternative=AlternativeRoute(
                original="Kalamboli → Panvel Station → New Panvel → JNPT Road",
                diverted="Kalamboli → Kamothe → Kalamboli Circle → JNPT Road",
            ),
            demand_pattern="morning_peak",
        ),
        RouteDefinition(
            route_id="9", name="Taloja Industrial Express", color="#ec4899",
            stations=("Panvel Station", "Taloja", "Taloja MIDC", "Navi Mumbai SEZ"),
            path=(at(0, 0), at(-0.02, 0.02), at(-0.04, 0.04), at(-0.06, 0.06)),
            alternative=AlternativeRoute(
                original="Taloja MIDC → Taloja Central → Panvel Station → Kalamboli",
                diverted="Taloja MIDC → NH 4 → Palaspa → Kalamboli",
            ),
            demand_pattern="balanced",
        ),
    )

    landmarks = (
        Landmark(name="Panvel Station", coordinates=at(0, 0)),
        Landmark(name="Kamothe", coordinates=at(0.04, 0.04)),
        Landmark(name="Kharghar", coordinates=at(0.06, 0.06)),
        Landmark(name="CBD Belapur", coordinates=at(-0.05, 0)),
        Landmark(name="New Panvel", coordinates=at(-0.02, 0.06)),
    )

    return NetworkTopology(
        city_center=(lat, lng),
        routes=routes,
        landmarks=landmarks,
        demand_patterns={
            "morning_peak": MORNING_PEAK,
            "evening_peak": EVENING_PEAK,
            "balanced": BALANCED,
        },
    )
