"""
Congestion bucketing shared by every component that labels congestion.
"""
from typing import Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

CongestionClass = Literal["low", "medium", "high"]

DEFAULT_CONGESTION = 0.5


class CongestionThresholds(BaseModel):
    """
    Fixed thresholds: above `high` is high, above `medium` is medium.
    """
    medium: float = Field(0.4, ge=0.0, le=1.0)
    high: float = Field(0.7, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_order(self):
        if self.medium > self.high:
            raise ValueError("medium threshold must not exceed high threshold")
        return self

    def classify(self, level: float) -> CongestionClass:
        if level > self.high:
            return "high"
        if level > self.medium:
            return "medium"
        return "low"


DEFAULT_THRESHOLDS = CongestionThresholds()


def classify_congestion(level: float, thresholds: CongestionThresholds = DEFAULT_THRESHOLDS) -> CongestionClass:
    return thresholds.classify(level)


def average_congestion(levels: Iterable[float], default: float = DEFAULT_CONGESTION) -> float:
    """Mean of the given levels, or `default` when there are none."""
    values = list(levels)
    if not values:
        return default
    return sum(values) / len(values)
