"""
Payloads returned by the simulated external providers.
"""
from datetime import datetime
from typing import List, Literal
from pydantic import BaseModel, Field

class GPSReading(BaseModel):
    vehicle_id: str
    timestamp: datetime
    latitude: float
    longitude: float
    speed: float = Field(..., ge=0.0)
    heading: int = Field(..., ge=0, lt=360)
    in_service: bool

class IncidentReport(BaseModel):
    type: str
    severity: str
    latitude: float
    longitude: float

class TrafficReading(BaseModel):
    road_segment: str
    timestamp: datetime
    congestion_level: float = Field(..., ge=0.0, le=1.0)
    status: Literal["low", "medium", "high"]
    average_speed: float = Field(..., ge=0.0)
    incidents: List[IncidentReport] = Field(default_factory=list)

class PassengerReading(BaseModel):
    station: str
    timestamp: datetime
    passenger_count: int = Field(..., ge=0)
    waiting_time: int = Field(..., ge=0)
    boarding_rate: int = Field(..., ge=0)

class WeatherReading(BaseModel):
    location: str
    timestamp: datetime
    condition: Literal["sunny", "cloudy", "rainy", "snowy", "foggy"]
    temperature: float = Field(..., description="Fahrenheit")
    precipitation: float = Field(..., ge=0.0)
    wind_speed: int = Field(..., ge=0)
    humidity: int = Field(..., ge=0, le=100)

class EventReading(BaseModel):
    id: str
    name: str
    type: str
    location: str
    start_time: datetime
    end_time: datetime
    estimated_attendees: int = Field(..., ge=0)
    impact: Literal["low", "medium", "high"]
