from pathlib import Path
from typing import Optional, Union

from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from .models import TransitConfig
from ..congestion import CongestionThresholds
from ..exceptions import ConfigurationError

class ConfigManager:
    """Loads and validates the transit configuration"""

    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = Path(config_dir)

    def load(self, profile: str = "default", overrides: Optional[list] = None) -> DictConfig:
        """
        Merges conf/transit/<profile>.yaml and dotlist overrides on top of
        the structured defaults. A missing profile falls back to defaults.
        """
        base = OmegaConf.structured(TransitConfig)
        config_path = self.config_dir / "transit" / f"{profile}.yaml"

        layers = [base]
        if config_path.exists():
            layers.append(OmegaConf.load(config_path))
        elif profile != "default":
            raise FileNotFoundError(f"Config not found: {config_path}")
        if overrides:
            layers.append(OmegaConf.from_dotlist(list(overrides)))

        try:
            cfg = OmegaConf.merge(*layers)
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Invalid transit configuration: {e}") from e

        self.validate(cfg)
        return cfg

    @staticmethod
    def validate(cfg: Union[DictConfig, TransitConfig]) -> None:
        sim = cfg.simulation
        if sim.latency_min_seconds < 0 or sim.latency_max_seconds < sim.latency_min_seconds:
            raise ConfigurationError("simulation latency range is invalid")
        if sim.min_vehicles_per_route < 0 or sim.max_vehicles_per_route < sim.min_vehicles_per_route:
            raise ConfigurationError("vehicles per route range is invalid")
        if not 0.0 <= sim.provider_failure_rate <= 1.0:
            raise ConfigurationError("provider_failure_rate must be within [0, 1]")
        fc = cfg.forecast
        if fc.history_cap <= 0 or fc.window_size <= 0 or fc.horizon_hours <= 0:
            raise ConfigurationError("forecast sizes must be positive")
        rl = cfg.reinforcement
        for name in ("learning_rate", "discount_factor", "exploration_rate"):
            if not 0.0 <= getattr(rl, name) <= 1.0:
                raise ConfigurationError(f"reinforcement.{name} must be within [0, 1]")
        thresholds_from_config(cfg)

    def load_topology(self, path: Union[str, Path]):
        """Loads a NetworkTopology from a YAML file."""
        from ...simulation.topology import NetworkTopology

        topology_path = Path(path)
        if not topology_path.is_absolute():
            topology_path = self.config_dir / topology_path
        if not topology_path.exists():
            raise FileNotFoundError(f"Topology not found: {topology_path}")
        data = OmegaConf.to_container(OmegaConf.load(topology_path), resolve=True)
        try:
            return NetworkTopology.model_validate(data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid topology file {topology_path}: {e}") from e


def thresholds_from_config(cfg) -> CongestionThresholds:
    try:
        return CongestionThresholds(medium=cfg.thresholds.medium, high=cfg.thresholds.high)
    except ValueError as e:
        raise ConfigurationError(f"Invalid congestion thresholds: {e}") from e
