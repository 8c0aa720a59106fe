"""
Hour-of-day congestion trend per route, and event impact estimates.
"""
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from ..common.pseudo_random import pseudo_random, route_seed
from ..simulation.topology import NetworkTopology, default_topology


def hour_band(hour: int) -> Tuple[float, float]:
    """(base, spread) of congestion for the hour of day."""
    if 7 <= hour <= 9:
        return 0.7, 0.3
    if 17 <= hour <= 19:
        return 0.6, 0.4
    if 10 <= hour <= 16:
        return 0.3, 0.4
    return 0.1, 0.2


class TrafficTrendPredictor:
    """
    Seeded per-route congestion trend for the dashboard's short horizon.
    Values are stable for a given route, start hour and offset.
    """

    def __init__(self, topology: Optional[NetworkTopology] = None, horizon_hours: int = 6, clock=datetime.now):
        self.topology = topology or default_topology()
        self.horizon_hours = horizon_hours
        self.clock = clock

    def predict_route(self, route_id: str, start_hour: int, horizon_hours: Optional[int] = None) -> List[float]:
        horizon = horizon_hours if horizon_hours is not None else self.horizon_hours
        seed_base = route_seed(route_id)
        route_factor = (seed_base % 50) / 50

        trend = []
        for i in range(horizon):
            hour = (start_hour + i) % 24
            base, spread = hour_band(hour)
            congestion = base + pseudo_random(seed_base * 1000 + hour + i) * spread
            trend.append(min(1.0, max(0.0, congestion + route_factor)))
        return trend

    def get_predictions(self, route_id: Optional[str] = None, start_time: Optional[datetime] = None) -> Dict[str, List[float]]:
        """
        Trend for one route or all routes. Unknown routes map to [].
        """
        start_hour = (start_time or self.clock()).hour
        if route_id is not None:
            if self.topology.get_route(route_id) is None:
                return {route_id: []}
            return {route_id: self.predict_route(route_id, start_hour)}
        return {rid: self.predict_route(rid, start_hour) for rid in self.topology.route_ids}

    def predict_event_impact(
        self,
        location: Tuple[float, float],
        size: int,
        start_time: datetime,
        end_time: datetime,
    ) -> Dict[str, float]:
        """
        Impact score in [0, 1] per route for an event of `size` attendees.
        The time window is accepted for callers but does not change scores.
        """
        lat, lng = location
        location_seed = int(round(lat * 1000 + lng * 100))
        size_impact = min(1.0, max(0, size) / 10000)

        impacts = {}
        for rid in self.topology.route_ids:
            base_impact = pseudo_random(location_seed + route_seed(rid)) * 0.5
            impacts[rid] = min(1.0, base_impact + size_impact * 0.5)
        return impacts

    def forecast_series(self, keys: Sequence[str], start_time: datetime, weather_by_key=None,
                        events_by_key=None, horizon_hours=None) -> Dict[str, List[float]]:
        return {key: self.predict_route(key, start_time.hour, horizon_hours) for key in keys}
