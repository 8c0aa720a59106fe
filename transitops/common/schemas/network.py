from datetime import datetime
from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator

Coordinate = Tuple[float, float]  # (lat, lng)

class TrafficSegment(BaseModel):
    """
    Congestion sample for one edge of a route path.
    """
    id: str = Field(..., description="Segment id, '{route_id}-segment-{index}'")
    name: str = Field(..., description="Readable segment name")
    congestion_level: float = Field(..., ge=0.0, le=1.0, description="0 = free flow, 1 = fully congested")
    average_speed: float = Field(..., ge=0.0, description="Average speed in km/h")
    coordinates: Tuple[Coordinate, Coordinate] = Field(..., description="Start and end point of the segment")
    route_id: str = Field(..., description="Owning route id")

class Vehicle(BaseModel):
    """
    A bus position sample. Recreated on every generation call.
    """
    id: str = Field(..., description="'{route_id}-{ordinal}'")
    route_id: str
    route: str = Field(..., description="Route display name")
    latitude: float
    longitude: float
    speed: float = Field(..., ge=0.0, description="km/h")
    heading: float = Field(..., ge=0.0, lt=360.0, description="Heading in degrees")
    status: Literal["on-time", "delayed", "out-of-service"]
    passenger_count: int = Field(..., ge=0)
    capacity: int = Field(..., gt=0)
    fuel_level: int = Field(..., ge=0, le=100, description="Percent")
    eta: int = Field(..., ge=0, description="Minutes to next stop")
    current_stop: str
    next_stop: str
    diverted: bool = False

    @model_validator(mode="after")
    def check_occupancy(self):
        if self.passenger_count > self.capacity:
            raise ValueError("passenger_count cannot exceed capacity")
        return self

class Route(BaseModel):
    """
    Route snapshot as shown on the dashboard.
    """
    id: str
    name: str
    color: str
    stations: List[str] = Field(default_factory=list)
    path: List[Coordinate] = Field(default_factory=list)
    diverted_path: List[Coordinate] = Field(default_factory=list)
    frequency: int = Field(..., gt=0, description="Minutes between buses")
    congestion_level: Literal["low", "medium", "high"]
    average_congestion: float = Field(..., ge=0.0, le=1.0)
    current_passengers: int = Field(0, ge=0)
    average_passengers: int = Field(0, ge=0)
    diverted: bool = False
    diversion_reason: Optional[str] = None

class EnvironmentSnapshot(BaseModel):
    """
    Routes, vehicles and traffic derived from a single traffic sample.
    """
    generated_at: datetime
    routes: List[Route]
    vehicles: List[Vehicle]
    traffic_segments: List[TrafficSegment]
