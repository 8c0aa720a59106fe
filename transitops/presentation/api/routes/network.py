"""
Endpoints for the simulated network state and external feeds.
"""
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException

from ....application import DashboardDataService
from ....common.schemas import (
    EnvironmentSnapshot, EventRecord, PassengerData, Route, TrafficSegment, Vehicle, WeatherSnapshot
)

app = FastAPI()

# Singleton
_service: Optional[DashboardDataService] = None

def init_service(service: DashboardDataService):
    global _service
    _service = service

def get_service() -> DashboardDataService:
    if _service is None:
        raise HTTPException(500, "Data service not initialized")
    return _service

@app.get("/snapshot", response_model=EnvironmentSnapshot)
async def get_snapshot():
    """Routes, vehicles and traffic derived from one traffic sample."""
    return await get_service().fetch_snapshot()

@app.get("/vehicles", response_model=List[Vehicle])
async def get_vehicles():
    return await get_service().fetch_vehicle_locations()

@app.get("/traffic", response_model=List[TrafficSegment])
async def get_traffic():
    return await get_service().fetch_traffic_data()

@app.get("/routes", response_model=List[Route])
async def get_routes():
    return await get_service().fetch_route_data()

@app.get("/passengers", response_model=PassengerData)
async def get_passengers():
    return await get_service().fetch_passenger_data()

@app.get("/weather", response_model=WeatherSnapshot)
async def get_weather():
    return await get_service().fetch_weather_data()

@app.get("/events", response_model=List[EventRecord])
async def get_events():
    return await get_service().fetch_events_data()

@app.get("/feeds")
async def get_feeds() -> Dict[str, list]:
    """
    Latest readings from every simulated provider.
    A provider that is down is reported as an empty list.
    """
    feeds = await get_service().fetch_feeds()
    return {
        name: [reading.model_dump(mode="json") for reading in readings]
        for name, readings in feeds.items()
    }

@app.post("/feeds/ingest")
async def ingest_feeds():
    """Fetches all feeds and appends their readings to the forecast history."""
    counts = await get_service().ingest_feeds()
    return {"status": "ingested", "counts": counts}
