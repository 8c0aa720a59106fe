import pytest
import numpy as np
from transitops.optimization import (
    FrequencyChange, FrequencyDirection, NetworkState, QLearningTable, Reroute, TrainingSample, action_key
)

MORNING = NetworkState(hour=8, day_of_week=0, hotspots=frozenset({"15-segment-0"}), weather="rain")
EVENING = NetworkState(hour=18, day_of_week=0)
INCREASE = FrequencyChange("Kamothe", FrequencyDirection.INCREASE)
DECREASE = FrequencyChange("Kamothe", FrequencyDirection.DECREASE)
REROUTE = Reroute(frozenset({"15-segment-0", "15-segment-1"}))

@pytest.fixture
def table():
    table = QLearningTable(exploration_rate=0.0, rng=np.random.default_rng(0))
    table.initialize_spaces([MORNING, EVENING], [INCREASE, DECREASE, REROUTE])
    return table

def test_initialized_with_zeros(table):
    assert table.q_value(MORNING, REROUTE) == 0.0
    assert len(table.q_table) == 2

def test_states_are_value_keys():
    same = NetworkState(hour=8, day_of_week=0, hotspots=frozenset(["15-segment-0"]), weather="rain")
    assert same == MORNING
    assert hash(same) == hash(MORNING)

def test_greedy_tie_uses_insertion_order(table):
    assert table.choose_action(MORNING) == INCREASE

def test_unknown_state_yields_none(table):
    assert table.choose_action(NetworkState(hour=3, day_of_week=6)) is None

def test_update_rule(table):
    assert table.update_q_value(MORNING, REROUTE, 10.0, EVENING) == pytest.approx(1.0)
    assert table.update_q_value(MORNING, REROUTE, 10.0, EVENING) == pytest.approx(1.9)
    assert table.choose_action(MORNING) == REROUTE

def test_update_uses_best_next_value(table):
    table.q_table[EVENING][DECREASE] = 5.0
    # 0 + 0.1 * (1 + 0.9 * 5 - 0)
    assert table.update_q_value(MORNING, INCREASE, 1.0, EVENING) == pytest.approx(0.55)

def test_update_unknown_is_noop(table):
    unknown = NetworkState(hour=1, day_of_week=1)
    assert table.update_q_value(unknown, INCREASE, 5.0, MORNING) is None
    assert table.update_q_value(MORNING, INCREASE, 5.0, unknown) is None
    assert table.update_q_value(MORNING, Reroute(frozenset({"x"})), 5.0, EVENING) is None
    assert table.q_value(MORNING, INCREASE) == 0.0

def test_train(table):
    samples = [
        TrainingSample(MORNING, INCREASE, 5.0, EVENING),
        TrainingSample(EVENING, DECREASE, 2.0, MORNING),
        TrainingSample(NetworkState(hour=0, day_of_week=0), INCREASE, 1.0, MORNING),
    ]
    assert table.train(samples, epochs=3) == 6
    assert table.q_value(MORNING, INCREASE) > 0
    assert table.q_value(EVENING, DECREASE) > 0

def test_train_negative_epochs(table):
    with pytest.raises(ValueError):
        table.train([], epochs=-1)

def test_recommend_orders_by_value(table):
    table.q_table[MORNING][REROUTE] = 3.0
    table.q_table[MORNING][DECREASE] = 1.0
    assert table.recommend(MORNING) == [REROUTE, DECREASE, INCREASE]
    assert table.recommend(MORNING, top_k=1) == [REROUTE]
    assert table.recommend(NetworkState(hour=2, day_of_week=2)) == []

def test_full_exploration_picks_known_actions():
    table = QLearningTable(exploration_rate=1.0, rng=np.random.default_rng(3))
    table.initialize_spaces([MORNING], [INCREASE, DECREASE, REROUTE])
    picks = {table.choose_action(MORNING) for _ in range(50)}
    assert picks <= {INCREASE, DECREASE, REROUTE}
    assert len(picks) > 1

def test_invalid_exploration_rate():
    with pytest.raises(ValueError):
        QLearningTable(exploration_rate=1.5)

def test_action_key():
    assert action_key(REROUTE) == "reroute:15-segment-0,15-segment-1"
    assert action_key(INCREASE) == "frequency:Kamothe:increase"
    assert REROUTE.kind == "reroute"
    assert INCREASE.kind == "frequency"
