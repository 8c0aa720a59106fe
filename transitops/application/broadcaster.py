import asyncio
from datetime import datetime
from typing import Dict, Optional, Sequence, Set, Union

from pydantic import BaseModel

from ..common.logging import setup_logger

logger = setup_logger(__name__)


class RealtimeBroadcaster:
    """
    Pub/sub for refreshed dashboard data, one topic per channel
    ("vehicles", "traffic", "routes", "recommendations").
    """

    def __init__(self):
        self._subscribers: Dict[str, Set[asyncio.Queue]] = {}
        self._lock = asyncio.Lock()

        # Latest payload per channel, replayed to new subscribers
        self._latest_state: Dict[str, dict] = {}

    async def subscribe(self, channel: str, queue_size: int = 50) -> asyncio.Queue:
        queue = asyncio.Queue(maxsize=queue_size)

        async with self._lock:
            self._subscribers.setdefault(channel, set()).add(queue)

        if channel in self._latest_state:
            try:
                queue.put_nowait(self._latest_state[channel])
            except asyncio.QueueFull:
                pass

        return queue

    async def unsubscribe(self, channel: str, queue: asyncio.Queue):
        async with self._lock:
            if channel in self._subscribers:
                self._subscribers[channel].discard(queue)
                if not self._subscribers[channel]:
                    del self._subscribers[channel]

    async def broadcast(self, channel: str, payload: dict):
        """
        Sends a payload to every subscriber of a channel.
        Slow clients with a full queue miss this update.
        """
        self._latest_state[channel] = payload

        async with self._lock:
            subscribers = self._subscribers.get(channel, set()).copy()

        for queue in subscribers:
            try:
                queue.put_nowait(payload)
            except asyncio.QueueFull:
                logger.warning(f"Skipping slow client on '{channel}'")

    def latest(self, channel: str) -> Optional[dict]:
        return self._latest_state.get(channel)

    @property
    def channels(self) -> list:
        return sorted(set(self._subscribers) | set(self._latest_state))

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))

    @staticmethod
    def serialize(channel: str, items: Union[BaseModel, Sequence[BaseModel]]) -> dict:
        """
        Wraps models into a JSON-ready payload.
        """
        if isinstance(items, BaseModel):
            data = items.model_dump(mode="json")
            count = 1
        else:
            data = [item.model_dump(mode="json") for item in items]
            count = len(data)
        return {
            "channel": channel,
            "timestamp": datetime.now().isoformat(),
            "count": count,
            "data": data,
        }
