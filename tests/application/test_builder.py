import pytest
from omegaconf import OmegaConf
from transitops.application import TransitApplicationBuilder
from transitops.common.config import TransitConfig
from transitops.common.exceptions import ConfigurationError

def seeded_config(seed):
    cfg = OmegaConf.structured(TransitConfig)
    cfg.simulation.seed = seed
    return cfg

def test_builds_all_components():
    builder = TransitApplicationBuilder(seeded_config(1))
    service = builder.build_data_service()
    assert service is builder.service
    assert builder.route_optimizer.topology is builder.topology
    assert builder.smart_optimizer.demand_model is service.demand_model
    assert builder.demand_model.history.cap == 10000
    assert builder.trend_predictor.horizon_hours == 6
    assert builder.registry.names == ["gps", "traffic", "passenger", "weather", "events"]

def test_fluent_chain():
    builder = TransitApplicationBuilder(seeded_config(1))
    assert builder.build_topology().build_generator().build_models() is builder

def test_seed_makes_generation_reproducible():
    a = TransitApplicationBuilder(seeded_config(9)).build_generator().generator
    b = TransitApplicationBuilder(seeded_config(9)).build_generator().generator
    assert a.generate_traffic_segments() == b.generate_traffic_segments()

def test_thresholds_flow_into_components():
    cfg = seeded_config(1)
    cfg.thresholds.high = 0.9
    builder = TransitApplicationBuilder(cfg)
    builder.build_data_service()
    assert builder.generator.thresholds.high == 0.9
    assert builder.route_optimizer.thresholds.high == 0.9

def test_invalid_thresholds():
    cfg = seeded_config(1)
    cfg.thresholds.medium = 0.95
    with pytest.raises(ConfigurationError):
        TransitApplicationBuilder(cfg)

def test_topology_file(tmp_path):
    (tmp_path / "tiny.yaml").write_text(
        "city_center: [10.0, 20.0]\n"
        "routes:\n"
        "  - route_id: '1'\n"
        "    name: Test Line\n"
        "    stations: [North, South]\n"
        "    path: [[10.0, 20.0], [10.1, 20.1]]\n"
    )
    cfg = seeded_config(1)
    cfg.simulation.topology_file = "tiny.yaml"
    builder = TransitApplicationBuilder(cfg, config_dir=tmp_path).build_topology()
    assert builder.topology.route_ids == ["1"]
