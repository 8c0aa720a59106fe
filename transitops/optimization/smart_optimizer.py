"""
Combines the forecast models with the Q-table into explained recommendations.
"""
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .q_learning import (
    Action, FrequencyChange, FrequencyDirection, NetworkState, QLearningTable,
    Reroute, action_key
)
from ..common.logging import setup_logger
from ..common.pseudo_random import pseudo_random, route_seed
from ..common.schemas import Impact
from ..prediction import CongestionPredictionModel, DemandPredictionModel

logger = setup_logger(__name__)

BASE_CONFIDENCE = 70
HIGH_DEMAND_PASSENGERS = 200
LOW_DEMAND_PASSENGERS = 100


@dataclass
class SmartRecommendation:
    action: Action
    explanation: str
    impact: Impact
    confidence: int


@dataclass
class ForecastContext:
    """Forecasts the current state was derived from."""
    state: NetworkState
    demand: Dict[str, List[int]]
    hotspots: List[str]


def dominant_weather(weather_forecast: Mapping[str, str]) -> str:
    if not weather_forecast:
        return "normal"
    return Counter(weather_forecast.values()).most_common(1)[0][0]


class SmartTransitOptimizer:
    def __init__(
        self,
        q_table: Optional[QLearningTable] = None,
        demand_model: Optional[DemandPredictionModel] = None,
        congestion_model: Optional[CongestionPredictionModel] = None,
        hotspot_threshold: float = 0.7,
        hotspot_lookahead_hours: int = 6,
    ):
        self.q_table = q_table or QLearningTable()
        self.demand_model = demand_model or DemandPredictionModel()
        self.congestion_model = congestion_model or CongestionPredictionModel()
        self.hotspot_threshold = hotspot_threshold
        self.hotspot_lookahead_hours = hotspot_lookahead_hours

    def initialize(self, states: Iterable[NetworkState], actions: Sequence[Action]):
        self.q_table.initialize_spaces(states, actions)

    def build_context(
        self,
        current_time: datetime,
        locations: Sequence[str],
        road_segments: Sequence[str],
        weather_forecast: Optional[Mapping[str, str]] = None,
        events: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> ForecastContext:
        weather_forecast = weather_forecast or {}
        demand = self.demand_model.generate_forecast(locations, current_time, weather_forecast, events)
        congestion = self.congestion_model.generate_congestion_forecast(road_segments, current_time, weather_forecast)
        hotspots = self.congestion_model.identify_congestion_hotspots(
            congestion, self.hotspot_threshold, self.hotspot_lookahead_hours
        )

        state = NetworkState(
            hour=current_time.hour,
            day_of_week=current_time.weekday(),
            hotspots=frozenset(hotspots),
            weather=dominant_weather(weather_forecast),
        )
        return ForecastContext(state=state, demand=demand, hotspots=hotspots)

    def generate_optimization_recommendations(
        self,
        current_time: datetime,
        locations: Sequence[str],
        road_segments: Sequence[str],
        weather_forecast: Optional[Mapping[str, str]] = None,
        events: Optional[Mapping[str, Sequence[str]]] = None,
        top_k: int = 3,
    ) -> List[SmartRecommendation]:
        """
        Top actions from the Q-table for the forecast state, each with an
        explanation, an impact estimate and a confidence score. A state the
        table has never seen yields no recommendations.
        """
        context = self.build_context(current_time, locations, road_segments, weather_forecast, events)
        actions = self.q_table.recommend(context.state, top_k)
        if not actions:
            logger.info(f"No learned actions for state {context.state}")
            return []

        recommendations = []
        for action in actions:
            impact = self.estimate_impact(action, context)
            recommendations.append(SmartRecommendation(
                action=action,
                explanation=self.explain(action),
                impact=impact,
                confidence=self.confidence(action, impact),
            ))
        return recommendations

    def estimate_impact(self, action: Action, context: ForecastContext) -> Impact:
        seed = route_seed(action_key(action))
        travel = wait = fuel = 0

        if isinstance(action, Reroute):
            if action.segments & set(context.hotspots):
                travel = 10 + int(pseudo_random(seed + 1) * 10)
                fuel = 5 + int(pseudo_random(seed + 2) * 15)
        elif isinstance(action, FrequencyChange):
            forecast = context.demand.get(action.location, [])
            if action.direction is FrequencyDirection.INCREASE:
                if any(d > HIGH_DEMAND_PASSENGERS for d in forecast):
                    wait = 5 + int(pseudo_random(seed + 3) * 10)
            elif forecast and all(d < LOW_DEMAND_PASSENGERS for d in forecast):
                fuel = 100 + int(pseudo_random(seed + 4) * 400)

        return Impact(travel_time_reduction=travel, wait_time_reduction=wait, fuel_savings=fuel)

    @staticmethod
    def explain(action: Action) -> str:
        if isinstance(action, Reroute):
            return ("Rerouting suggested due to high congestion levels on the original route "
                    "and predicted lower traffic on the alternative route.")
        if action.direction is FrequencyDirection.INCREASE:
            return "Increased frequency recommended due to higher predicted passenger demand in the next few hours."
        return "Decreased frequency recommended due to historically low ridership during this time period."

    @staticmethod
    def confidence(action: Action, impact: Impact) -> int:
        score = BASE_CONFIDENCE
        if impact.travel_time_reduction > 15 or impact.wait_time_reduction > 10 or impact.fuel_savings > 300:
            score += 20
        elif impact.travel_time_reduction > 5 or impact.wait_time_reduction > 3 or impact.fuel_savings > 100:
            score += 10
        score += int(pseudo_random(route_seed(action_key(action)) + 5) * 10)
        return min(99, score)
