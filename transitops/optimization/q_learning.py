"""
Tabular Q-learning over transit network states.

A standalone learner: it is seeded with a state and action space, can be
trained from explicit (state, action, reward, next_state) batches and
ranks actions for a known state. Nothing in the service feeds it live
transitions.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Union

import numpy as np

from ..common.logging import setup_logger

logger = setup_logger(__name__)


class FrequencyDirection(Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


@dataclass(frozen=True)
class Reroute:
    """Send service around the given road segments."""
    segments: FrozenSet[str]

    @property
    def kind(self) -> str:
        return "reroute"


@dataclass(frozen=True)
class FrequencyChange:
    """Raise or lower service frequency at a location."""
    location: str
    direction: FrequencyDirection

    @property
    def kind(self) -> str:
        return "frequency"


Action = Union[Reroute, FrequencyChange]


def action_key(action: Action) -> str:
    """Stable text key for an action, independent of set ordering."""
    if isinstance(action, Reroute):
        return "reroute:" + ",".join(sorted(action.segments))
    return f"frequency:{action.location}:{action.direction.value}"


@dataclass(frozen=True)
class NetworkState:
    """
    Discretized network conditions used as the Q-table key.
    """
    hour: int
    day_of_week: int
    hotspots: FrozenSet[str] = frozenset()
    weather: str = "normal"


@dataclass(frozen=True)
class TrainingSample:
    state: NetworkState
    action: Action
    reward: float
    next_state: NetworkState


class QLearningTable:
    def __init__(
        self,
        learning_rate: float = 0.1,
        discount_factor: float = 0.9,
        exploration_rate: float = 0.1,
        rng: Optional[np.random.Generator] = None,
    ):
        if not 0.0 <= exploration_rate <= 1.0:
            raise ValueError("exploration_rate must be within [0, 1]")
        self.learning_rate = learning_rate
        self.discount_factor = discount_factor
        self.exploration_rate = exploration_rate
        self.rng = rng if rng is not None else np.random.default_rng()
        self.actions: List[Action] = []
        self.q_table: Dict[NetworkState, Dict[Action, float]] = {}

    def initialize_spaces(self, states: Iterable[NetworkState], actions: Sequence[Action]):
        """
        Resets the table with every (state, action) value at zero.
        Action order is kept and decides ties during selection.
        """
        self.actions = list(dict.fromkeys(actions))
        self.q_table = {state: dict.fromkeys(self.actions, 0.0) for state in states}
        logger.info(f"Q-table initialized: {len(self.q_table)} states x {len(self.actions)} actions")

    def knows(self, state: NetworkState) -> bool:
        return state in self.q_table

    def q_value(self, state: NetworkState, action: Action) -> float:
        return self.q_table.get(state, {}).get(action, 0.0)

    def choose_action(self, state: NetworkState) -> Optional[Action]:
        """
        Epsilon-greedy selection. Unknown states yield None.
        """
        values = self.q_table.get(state)
        if not values:
            return None

        if float(self.rng.random()) < self.exploration_rate:
            return self.actions[int(self.rng.integers(0, len(self.actions)))]

        # max() keeps the first of equal values, i.e. insertion order
        return max(values.items(), key=lambda item: item[1])[0]

    def update_q_value(
        self,
        state: NetworkState,
        action: Action,
        reward: float,
        next_state: NetworkState,
    ) -> Optional[float]:
        """
        Q(s,a) += lr * (reward + gamma * max Q(s',.) - Q(s,a))

        Returns the new value, or None when the state, next state or
        action is not part of the table.
        """
        values = self.q_table.get(state)
        next_values = self.q_table.get(next_state)
        if values is None or not next_values or action not in values:
            return None

        current = values[action]
        best_next = max(next_values.values())
        updated = current + self.learning_rate * (reward + self.discount_factor * best_next - current)
        values[action] = updated
        return updated

    def train(self, samples: Sequence[TrainingSample], epochs: int = 1) -> int:
        """
        Replays the batch `epochs` times. Returns the number of applied updates.
        """
        if epochs < 0:
            raise ValueError("epochs must be non-negative")
        applied = 0
        for _ in range(epochs):
            for sample in samples:
                if self.update_q_value(sample.state, sample.action, sample.reward, sample.next_state) is not None:
                    applied += 1
        logger.debug(f"Training finished: {applied} updates over {epochs} epochs")
        return applied

    def recommend(self, state: NetworkState, top_k: int = 3) -> List[Action]:
        """Highest-valued actions for a known state, best first."""
        values = self.q_table.get(state)
        if not values or top_k <= 0:
            return []
        ranked = sorted(values.items(), key=lambda item: item[1], reverse=True)
        return [action for action, _ in ranked[:top_k]]
