"""
Periodic refresh of dashboard channels.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional

from .broadcaster import RealtimeBroadcaster
from .data_service import DashboardDataService
from ..common.exceptions import DataSourceUnavailable
from ..common.logging import setup_logger

logger = setup_logger(__name__)


@dataclass
class ChannelState:
    channel: str
    interval_seconds: float
    fetch: Callable[[], Awaitable]
    is_running: bool = False
    last_refresh: Optional[datetime] = None
    refresh_count: int = 0
    last_error: Optional[str] = None


class SnapshotRefresher:
    """
    Re-invokes fetch operations on fixed intervals and broadcasts the results.
    Each channel runs as its own asyncio task. Stopping cancels the task and
    drops whatever fetch was in flight.
    """

    def __init__(
        self,
        service: DashboardDataService,
        broadcaster: RealtimeBroadcaster,
        intervals: Optional[Dict[str, float]] = None,
    ):
        self.service = service
        self.broadcaster = broadcaster
        intervals = intervals or {"vehicles": 10.0, "traffic": 30.0, "routes": 30.0}
        fetchers = self.fetchers()

        self.channels: Dict[str, ChannelState] = {}
        for channel, interval in intervals.items():
            if channel not in fetchers:
                raise ValueError(f"Unknown channel '{channel}'")
            if interval <= 0:
                raise ValueError(f"Interval for '{channel}' must be positive")
            self.channels[channel] = ChannelState(channel, float(interval), fetchers[channel])
        self._tasks: Dict[str, asyncio.Task] = {}

    def fetchers(self) -> Dict[str, Callable[[], Awaitable]]:
        return {
            "vehicles": self.service.fetch_vehicle_locations,
            "traffic": self.service.fetch_traffic_data,
            "routes": self.service.fetch_route_data,
            "recommendations": self.service.generate_optimization_recommendations,
            "passengers": self.service.fetch_passenger_data,
            "weather": self.service.fetch_weather_data,
            "events": self.service.fetch_events_data,
        }

    async def refresh(self, channel: str) -> dict:
        """Runs one fetch for a channel and broadcasts it."""
        state = self.channels[channel]
        result = await state.fetch()
        payload = self.broadcaster.serialize(channel, result)
        await self.broadcaster.broadcast(channel, payload)
        state.last_refresh = datetime.now()
        state.refresh_count += 1
        state.last_error = None
        return payload

    async def _run_channel(self, state: ChannelState):
        while state.is_running:
            try:
                await self.refresh(state.channel)
            except DataSourceUnavailable as e:
                # Keep the previous payload; retry on the next tick
                state.last_error = str(e)
                logger.warning(f"Refresh of '{state.channel}' skipped: {e}")
            except Exception as e:
                state.last_error = f"{type(e).__name__}: {e}"
                logger.exception(f"Refresh of '{state.channel}' failed")
            await asyncio.sleep(state.interval_seconds)

    async def start_channel(self, channel: str):
        if channel not in self.channels:
            raise ValueError(f"Channel {channel} not found")

        state = self.channels[channel]
        task = self._tasks.get(channel)
        if state.is_running and task is not None and not task.done():
            logger.info(f"Channel {channel} already running")
            return

        state.is_running = True
        self._tasks[channel] = asyncio.create_task(self._run_channel(state))
        logger.info(f"Started refreshing '{channel}' every {state.interval_seconds}s")

    async def stop_channel(self, channel: str):
        if channel not in self.channels:
            return

        self.channels[channel].is_running = False
        task = self._tasks.pop(channel, None)
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.warning(f"Channel '{channel}' task ended with error: {e}")
        logger.info(f"Stopped refreshing '{channel}'")

    async def start_all(self):
        await asyncio.gather(*(self.start_channel(c) for c in self.channels))

    async def stop_all(self):
        await asyncio.gather(*(self.stop_channel(c) for c in list(self.channels)))

    @property
    def running_channels(self) -> List[str]:
        return [c for c, state in self.channels.items() if state.is_running]

    def get_status(self) -> Dict:
        return {
            channel: {
                "running": state.is_running,
                "interval_seconds": state.interval_seconds,
                "last_refresh": state.last_refresh.isoformat() if state.last_refresh else None,
                "refresh_count": state.refresh_count,
                "last_error": state.last_error,
            }
            for channel, state in self.channels.items()
        }
