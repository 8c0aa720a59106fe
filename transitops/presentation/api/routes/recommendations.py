"""
Endpoints for route optimization recommendations.
"""
from typing import List, Optional

from fastapi import FastAPI, Query
from pydantic import BaseModel

from .network import get_service
from ....common.schemas import OptimizationResult, Route, TrafficSegment, Vehicle

app = FastAPI()

class RecommendationRequest(BaseModel):
    traffic_segments: List[TrafficSegment]
    routes: List[Route]
    hour: Optional[int] = None

@app.get("/recommendations", response_model=List[OptimizationResult])
async def get_recommendations(hour: Optional[int] = Query(None, ge=0, le=23)):
    """Recommendations for a freshly sampled network."""
    return await get_service().generate_optimization_recommendations(hour)

@app.post("/recommendations", response_model=List[OptimizationResult])
async def post_recommendations(request: RecommendationRequest):
    """Recommendations for caller-supplied traffic and routes."""
    return get_service().optimizer.generate_recommendations(
        request.traffic_segments, request.routes, request.hour
    )

@app.get("/recommendations/fleet")
async def get_fleet_advice(hour: Optional[int] = Query(None, ge=0, le=23)):
    advice = await get_service().fetch_fleet_advice(hour)
    return {"recommendations": advice}

@app.get("/recommendations/vehicles", response_model=List[Vehicle])
async def get_enhanced_vehicles():
    """Vehicles with stable ETA, next stop and fuel estimates."""
    service = get_service()
    vehicles = await service.fetch_vehicle_locations()
    return service.optimizer.enhance_vehicle_data(vehicles)
