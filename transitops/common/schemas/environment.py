from datetime import datetime
from typing import List, Literal, Tuple
from pydantic import BaseModel, Field, model_validator

class WeatherSnapshot(BaseModel):
    """
    City-wide weather sample.
    """
    condition: Literal["clear", "cloudy", "rain", "heavy_rain"]
    temperature: float = Field(..., description="Celsius")
    visibility: float = Field(..., ge=0.0, le=1.0)
    wind_speed: float = Field(..., ge=0.0, description="km/h")
    humidity: float = Field(..., ge=0.0, le=100.0)
    precipitation_chance: float = Field(..., ge=0.0, le=1.0)

class EventRecord(BaseModel):
    """
    A city event with its expected effect on traffic.
    """
    id: str
    name: str
    type: str
    location: str
    coordinates: Tuple[float, float]
    traffic_impact: float = Field(..., ge=0.0, le=1.0)
    start_time: datetime
    end_time: datetime
    attendees: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_window(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must not precede start_time")
        return self

class RoutePassengers(BaseModel):
    route_id: str
    route_name: str
    passenger_count: int = Field(..., ge=0)

class HourlyPassengers(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    passenger_count: int = Field(..., ge=0)

class PassengerData(BaseModel):
    """
    Ridership summary for the analytics view.
    """
    total_passengers: int = Field(..., ge=0)
    passengers_by_route: List[RoutePassengers]
    passengers_by_hour: List[HourlyPassengers]
    average_ride_distance: float = Field(..., description="km")
    average_ride_time: float = Field(..., description="minutes")
