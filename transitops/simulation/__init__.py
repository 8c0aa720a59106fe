"""
Simulation module: network topology, synthetic environment and simulated feeds.
"""
from .topology import (
    AlternativeRoute, RouteDefinition, Landmark, NetworkTopology, default_topology
)
from .generators import EnvironmentGenerator, events_by_location
from .providers import (
    ProviderConfig, DataProvider, GPSProvider, TrafficFeedProvider, PassengerFeedProvider,
    WeatherFeedProvider, EventsFeedProvider, ProviderRegistry, create_default_registry
)
