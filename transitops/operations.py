"""
In-process operations consumed by presentation code.

Each function accepts an optional component; when omitted a process-wide
default built over the default topology is used.
"""
from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from .common.schemas import EnvironmentSnapshot, OptimizationResult, Route, TrafficSegment
from .optimization import RouteOptimizer
from .prediction import TrafficTrendPredictor, generate_forecast
from .simulation import EnvironmentGenerator

__all__ = [
    "generate_environment_snapshot",
    "generate_forecast",
    "generate_recommendations",
    "predict_event_impact",
]


@lru_cache(maxsize=None)
def default_generator() -> EnvironmentGenerator:
    return EnvironmentGenerator()


@lru_cache(maxsize=None)
def default_optimizer() -> RouteOptimizer:
    return RouteOptimizer()


@lru_cache(maxsize=None)
def default_trend_predictor() -> TrafficTrendPredictor:
    return TrafficTrendPredictor()


def generate_environment_snapshot(generator: Optional[EnvironmentGenerator] = None) -> EnvironmentSnapshot:
    return (generator or default_generator()).generate_environment_snapshot()


def generate_recommendations(
    current_traffic: Sequence[TrafficSegment],
    current_routes: Sequence[Route],
    optimizer: Optional[RouteOptimizer] = None,
) -> List[OptimizationResult]:
    return (optimizer or default_optimizer()).generate_recommendations(current_traffic, current_routes)


def predict_event_impact(
    location: Tuple[float, float],
    size: int,
    start_time: datetime,
    end_time: datetime,
    predictor: Optional[TrafficTrendPredictor] = None,
) -> Dict[str, float]:
    return (predictor or default_trend_predictor()).predict_event_impact(location, size, start_time, end_time)
