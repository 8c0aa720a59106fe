"""
Endpoints for demand, congestion and traffic trend forecasts.
"""
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field, model_validator

from .network import get_service

app = FastAPI()

class ForecastResponse(BaseModel):
    model: str
    start_time: datetime
    horizon_hours: int
    forecasts: Dict[str, List[float]]

class EventImpactRequest(BaseModel):
    latitude: float
    longitude: float
    size: int = Field(..., ge=0, description="Expected attendees")
    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def check_window(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self

@app.get("/forecast/{model_name}", response_model=ForecastResponse)
async def get_forecast(
    model_name: str,
    keys: List[str] = Query(..., description="Locations, road segments or route ids"),
    horizon_hours: Optional[int] = Query(None, ge=0, le=168),
    start_time: Optional[datetime] = None,
):
    """
    Hour-indexed forecast per key from the 'demand', 'congestion' or
    'trend' model.
    """
    service = get_service()
    start = start_time or datetime.now()
    horizon = horizon_hours if horizon_hours is not None else service.default_horizon_hours
    try:
        forecasts = service.forecast(model_name, keys, start, horizon)
    except ValueError as e:
        raise HTTPException(404, str(e))
    return ForecastResponse(model=model_name, start_time=start, horizon_hours=horizon, forecasts=forecasts)

@app.get("/predictions/traffic")
async def get_traffic_predictions(route_id: Optional[str] = None):
    """Short-horizon congestion trend for one route or all of them."""
    return get_service().trend_predictor.get_predictions(route_id)

@app.post("/predictions/event-impact")
async def post_event_impact(request: EventImpactRequest) -> Dict[str, float]:
    return get_service().trend_predictor.predict_event_impact(
        (request.latitude, request.longitude), request.size, request.start_time, request.end_time
    )
