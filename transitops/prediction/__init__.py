"""
Forecasting module: demand, congestion and traffic trend models.
"""
from .domain import DemandRecord, TrafficRecord, CongestionPrediction, ForecastModel
from .history import BoundedHistory
from .demand import DemandPredictionModel
from .congestion import CongestionPredictionModel
from .traffic_trend import TrafficTrendPredictor
from .forecast import generate_forecast
