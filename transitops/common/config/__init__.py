from .models import (
    ThresholdsConfig, ForecastConfig, ReinforcementConfig, SimulationConfig,
    RefreshConfig, ServerConfig, TransitConfig
)
from .manager import ConfigManager, thresholds_from_config
