from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from .domain import ForecastModel
from ..common.logging import setup_logger, log_execution_time

logger = setup_logger(__name__)

@log_execution_time(logger)
def generate_forecast(
    model: ForecastModel,
    keys: Sequence[str],
    start_time: datetime,
    weather_by_key: Optional[Mapping[str, str]] = None,
    events_by_key: Optional[Mapping[str, Sequence[str]]] = None,
    horizon_hours: int = 24,
) -> Dict[str, List[float]]:
    """
    Hour-indexed series of exactly `horizon_hours` values for every key.
    """
    if horizon_hours < 0:
        raise ValueError("horizon_hours must be non-negative")
    return model.forecast_series(
        list(keys),
        start_time,
        weather_by_key or {},
        events_by_key or {},
        horizon_hours,
    )
