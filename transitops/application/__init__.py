from .broadcaster import RealtimeBroadcaster
from .data_service import DashboardDataService
from .refresher import SnapshotRefresher
from .builder import TransitApplicationBuilder
