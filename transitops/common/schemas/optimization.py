from typing import Literal
from pydantic import BaseModel, Field

class Impact(BaseModel):
    travel_time_reduction: int = Field(0, ge=0, description="Minutes")
    wait_time_reduction: int = Field(0, ge=0, description="Minutes")
    fuel_savings: int = Field(0, ge=0, description="Currency units")

class OptimizationResult(BaseModel):
    """
    A single frequency or diversion recommendation for a route.
    """
    route_id: str
    route: str = Field(..., description="Route display name")
    priority: Literal["low", "medium", "high"]
    original_route: str
    optimized_route: str
    reason: str
    confidence: int = Field(..., ge=0, le=99, description="Synthetic certainty score")
    impact: Impact
    type: Literal["diversion", "frequency"]
