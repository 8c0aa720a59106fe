"""
Rule-based route optimizer.

Combines current traffic, a per-route hourly demand table and static
alternative routes into frequency and diversion recommendations. All
impact and confidence figures are bound to seeds derived from the route
id, so the same route and category always produce the same numbers.
"""
import math
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from ..common.congestion import (
    CongestionThresholds, DEFAULT_THRESHOLDS, average_congestion
)
from ..common.logging import setup_logger, log_execution_time
from ..common.pseudo_random import digits_seed, pseudo_random, route_seed
from ..common.schemas import Impact, OptimizationResult, Route, TrafficSegment, Vehicle
from ..simulation.topology import NetworkTopology, default_topology

logger = setup_logger(__name__)

DEFAULT_DEMAND = 0.5
HIGH_DEMAND = 0.7
LOW_DEMAND = 0.3
MAX_CONFIDENCE = 99
VEHICLE_CAPACITY = 50


def frequency_bucket(demand_level: float) -> str:
    if demand_level > 0.8:
        return "5-8 minutes"
    if demand_level > 0.6:
        return "10-12 minutes"
    if demand_level > 0.4:
        return "15 minutes"
    return "20-30 minutes"


def clamp_confidence(value: float) -> int:
    return int(min(MAX_CONFIDENCE, max(0, value)))


def seeded_int(seed: int, base: int, spread: int) -> int:
    """base + floor(pseudo_random(seed) * spread)"""
    return base + int(math.floor(pseudo_random(seed) * spread))


class RouteOptimizer:
    """
    Emits recommendations per route in the order routes are given.
    A route may contribute no, one or two results per call.
    """

    def __init__(
        self,
        topology: Optional[NetworkTopology] = None,
        thresholds: CongestionThresholds = DEFAULT_THRESHOLDS,
        demand_table: Optional[Mapping[str, Sequence[float]]] = None,
        clock=datetime.now,
    ):
        self.topology = topology or default_topology()
        self.thresholds = thresholds
        self.clock = clock
        if demand_table is not None:
            for route_id, pattern in demand_table.items():
                if len(pattern) != 24:
                    raise ValueError(f"demand table for route '{route_id}' must have 24 hourly values")
            self.demand_patterns: Dict[str, List[float]] = {k: list(v) for k, v in demand_table.items()}
        else:
            self.demand_patterns = self._build_demand_patterns()

    def _build_demand_patterns(self) -> Dict[str, List[float]]:
        """
        Perturbs each route's named hourly pattern once with a seeded
        variation in [-0.2, 0.2].
        """
        patterns = {}
        for route in self.topology.routes:
            base = self.topology.demand_patterns.get(route.demand_pattern)
            if base is None:
                logger.warning(f"Route {route.route_id} references unknown pattern '{route.demand_pattern}'")
                continue
            seed = route_seed(route.route_id)
            patterns[route.route_id] = [
                min(0.9, 0.3 + value * (0.7 + (pseudo_random(seed * 1000 + hour) * 0.4 - 0.2)))
                for hour, value in enumerate(base)
            ]
        return patterns

    def _current_hour(self, hour: Optional[int]) -> int:
        return self.clock().hour if hour is None else hour % 24

    def demand_level(self, route_id: str, hour: Optional[int] = None) -> float:
        pattern = self.demand_patterns.get(route_id)
        if not pattern:
            return DEFAULT_DEMAND
        return pattern[self._current_hour(hour)]

    def corridor(self, route_id: str) -> str:
        stations = self.topology.stations_for(route_id)
        first = stations[0] if stations else "Start"
        last = stations[-1] if stations else "End"
        return f"{first} → {last}"

    @log_execution_time(logger)
    def generate_recommendations(
        self,
        current_traffic: Sequence[TrafficSegment],
        current_routes: Sequence[Route],
        hour: Optional[int] = None,
    ) -> List[OptimizationResult]:
        hour = self._current_hour(hour)
        recommendations: List[OptimizationResult] = []

        for route in current_routes:
            segments = [s for s in current_traffic if s.route_id == route.id]
            congestion = average_congestion(s.congestion_level for s in segments)
            priority = self.thresholds.classify(congestion)
            demand = self.demand_level(route.id, hour)

            frequency = self._frequency_recommendation(route, demand, priority)
            if frequency:
                recommendations.append(frequency)

            diversion = self._diversion_recommendation(route, segments, priority)
            if diversion:
                recommendations.append(diversion)

        logger.info(f"Generated {len(recommendations)} recommendations for {len(current_routes)} routes at {hour:02d}h")
        return recommendations

    def _frequency_recommendation(self, route: Route, demand: float, priority: str) -> Optional[OptimizationResult]:
        seed = route_seed(route.id)
        corridor = self.corridor(route.id)
        original = f"{corridor}: {route.frequency}-minute frequency"

        if demand > HIGH_DEMAND:
            s = seed * 100
            return OptimizationResult(
                route_id=route.id,
                route=route.name,
                priority=priority,
                original_route=original,
                optimized_route=f"{corridor}: {frequency_bucket(demand)} frequency",
                reason="High passenger demand during this time period",
                confidence=clamp_confidence(seeded_int(s + 3, 85, 10)),
                impact=Impact(
                    travel_time_reduction=2,
                    wait_time_reduction=seeded_int(s + 1, 8, 7),
                    fuel_savings=seeded_int(s + 2, 50, 100),
                ),
                type="frequency",
            )

        if demand < LOW_DEMAND:
            s = seed * 200
            return OptimizationResult(
                route_id=route.id,
                route=route.name,
                priority=priority,
                original_route=original,
                optimized_route=f"{corridor}: Reduce to 20-30 minute frequency",
                reason="Low passenger demand during this time period",
                confidence=clamp_confidence(seeded_int(s + 2, 80, 15)),
                impact=Impact(
                    travel_time_reduction=0,
                    wait_time_reduction=0,
                    fuel_savings=seeded_int(s + 1, 200, 300),
                ),
                type="frequency",
            )

        return None

    def _diversion_recommendation(
        self, route: Route, segments: Sequence[TrafficSegment], priority: str
    ) -> Optional[OptimizationResult]:
        if not any(s.congestion_level > self.thresholds.high for s in segments):
            return None
        alternative = self.topology.alternative_for(route.id)
        if alternative is None:
            return None

        s = route_seed(route.id) * 300
        seed1, seed2, seed3 = s + 1, s + 2, s + 3
        return OptimizationResult(
            route_id=route.id,
            route=route.name,
            priority=priority,
            original_route=alternative.original,
            optimized_route=alternative.diverted,
            reason="Heavy traffic congestion on the usual route",
            confidence=clamp_confidence(seeded_int(seed1 + seed2, 75, 20)),
            impact=Impact(
                travel_time_reduction=seeded_int(seed1, 10, 15),
                wait_time_reduction=seeded_int(seed2, 5, 10),
                fuel_savings=seeded_int(seed3, 100, 200),
            ),
            type="diversion",
        )

    def enhance_vehicle_data(self, vehicles: Sequence[Vehicle]) -> List[Vehicle]:
        """
        Adds stable ETA, next stop and fuel level keyed by the vehicle id.
        """
        enhanced = []
        for vehicle in vehicles:
            seed1 = digits_seed(vehicle.id) * 100
            seed2, seed3 = seed1 + 1, seed1 + 2

            if vehicle.status == "delayed":
                eta = seeded_int(seed1, 10, 15)
            else:
                eta = seeded_int(seed1, 5, 10)

            stations = self.topology.stations_for(vehicle.route_id)
            if stations:
                next_stop = stations[int(pseudo_random(seed2) * len(stations))]
            else:
                next_stop = f"Stop {seeded_int(seed2, 1, 5)}"

            enhanced.append(vehicle.model_copy(update={
                "eta": eta,
                "next_stop": next_stop,
                "fuel_level": seeded_int(seed3, 30, 70),
            }))
        return enhanced

    def generate_actionable_recommendations(
        self,
        vehicles: Sequence[Vehicle],
        routes: Sequence[Route],
        hour: Optional[int] = None,
    ) -> List[str]:
        """
        Fleet-level advice for transit authorities.
        """
        recommendations: List[str] = []
        total = len(vehicles)

        delayed = sum(1 for v in vehicles if v.status == "delayed")
        out_of_service = sum(1 for v in vehicles if v.status == "out-of-service")
        if total and delayed > total * 0.2:
            recommendations.append(
                "Increase fleet size by 15% to accommodate for frequent delays and maintain service levels."
            )
        if total and out_of_service > total * 0.1:
            recommendations.append(
                "Implement proactive maintenance schedule to reduce the number of out-of-service vehicles."
            )

        congested = [r.name for r in routes if r.congestion_level == "high"]
        if congested:
            recommendations.append(
                f"Consider adding express services for {', '.join(congested)} during peak hours "
                "to bypass congested segments."
            )

        active: Dict[str, int] = {}
        for v in vehicles:
            if v.status != "out-of-service":
                active[v.route_id] = active.get(v.route_id, 0) + 1
        busy = [
            r.name for r in routes
            if active.get(r.id) and r.current_passengers / (active[r.id] * VEHICLE_CAPACITY) > 0.8
        ]
        if busy:
            recommendations.append(
                f"Increase vehicle capacity or frequency on {', '.join(busy)} to address high passenger demand."
            )

        hour = self._current_hour(hour)
        if 8 <= hour <= 10:
            recommendations.append(
                "Deploy 20% more vehicles during morning rush hour (8AM-10AM) to reduce wait times."
            )
        elif 17 <= hour <= 19:
            recommendations.append(
                "Deploy 15% more vehicles during evening rush hour (5PM-7PM) to reduce wait times."
            )
        elif hour >= 22 or hour <= 5:
            recommendations.append(
                "Reduce night services (10PM-5AM) by 40% and implement on-demand service to optimize resources."
            )

        return recommendations
