"""
Optimization module: rule-based route recommendations and the Q-learning scaffold.
"""
from .route_optimizer import RouteOptimizer, frequency_bucket
from .q_learning import (
    Action, FrequencyChange, FrequencyDirection, NetworkState, QLearningTable,
    Reroute, TrainingSample, action_key
)
from .smart_optimizer import SmartRecommendation, SmartTransitOptimizer
