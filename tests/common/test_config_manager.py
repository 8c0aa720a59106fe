import pytest
from transitops.common.config import ConfigManager, thresholds_from_config
from transitops.common.exceptions import ConfigurationError

@pytest.fixture
def manager(tmp_path):
    (tmp_path / "transit").mkdir()
    return ConfigManager(tmp_path)

def test_defaults_without_profile_file(manager):
    cfg = manager.load()
    assert cfg.thresholds.medium == 0.4
    assert cfg.thresholds.high == 0.7
    assert cfg.forecast.history_cap == 10000
    assert cfg.forecast.window_size == 4
    assert cfg.forecast.horizon_hours == 24
    assert cfg.forecast.display_horizon_hours == 6
    assert cfg.reinforcement.learning_rate == 0.1
    assert cfg.reinforcement.discount_factor == 0.9
    assert cfg.reinforcement.exploration_rate == 0.1

def test_profile_file_is_merged(manager, tmp_path):
    (tmp_path / "transit" / "fast.yaml").write_text(
        "simulation:\n  latency_min_seconds: 0.0\n  latency_max_seconds: 0.0\n  seed: 3\n"
    )
    cfg = manager.load("fast")
    assert cfg.simulation.latency_max_seconds == 0.0
    assert cfg.simulation.seed == 3
    assert cfg.refresh.vehicles_seconds == 10.0

def test_missing_profile(manager):
    with pytest.raises(FileNotFoundError):
        manager.load("does-not-exist")

def test_dotlist_overrides(manager):
    cfg = manager.load(overrides=["thresholds.high=0.8", "forecast.window_size=6"])
    assert cfg.thresholds.high == 0.8
    assert cfg.forecast.window_size == 6
    assert thresholds_from_config(cfg).classify(0.75) == "medium"

def test_unordered_thresholds_rejected(manager):
    with pytest.raises(ConfigurationError):
        manager.load(overrides=["thresholds.medium=0.9"])

def test_type_error_rejected(manager):
    with pytest.raises(ConfigurationError):
        manager.load(overrides=["forecast.window_size=wide"])

def test_invalid_latency_rejected(manager):
    with pytest.raises(ConfigurationError):
        manager.load(overrides=["simulation.latency_min_seconds=2.0", "simulation.latency_max_seconds=1.0"])

def test_invalid_rl_rate_rejected(manager):
    with pytest.raises(ConfigurationError):
        manager.load(overrides=["reinforcement.exploration_rate=1.5"])

def test_load_topology(manager, tmp_path):
    (tmp_path / "tiny.yaml").write_text(
        "city_center: [10.0, 20.0]\n"
        "routes:\n"
        "  - route_id: '1'\n"
        "    name: Test Line\n"
        "    stations: [North, South]\n"
        "    path: [[10.0, 20.0], [10.1, 20.1]]\n"
        "    diverted_path: [[10.0, 20.0], [10.05, 20.2], [10.1, 20.1]]\n"
    )
    topology = manager.load_topology("tiny.yaml")
    assert topology.route_ids == ["1"]
    assert topology.stations_for("1") == ["North", "South"]
    assert topology.is_diversion_capable("1")

def test_load_topology_invalid_pattern(manager, tmp_path):
    (tmp_path / "bad.yaml").write_text(
        "city_center: [10.0, 20.0]\n"
        "routes: []\n"
        "demand_patterns:\n"
        "  short: [0.1, 0.2]\n"
    )
    with pytest.raises(ConfigurationError):
        manager.load_topology("bad.yaml")

def test_load_topology_missing(manager):
    with pytest.raises(FileNotFoundError):
        manager.load_topology("missing.yaml")
