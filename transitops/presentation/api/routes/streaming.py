"""
Endpoints for realtime streaming of refreshed channels.
"""
import asyncio
import json
from typing import Optional

from fastapi import FastAPI, HTTPException
from sse_starlette.sse import EventSourceResponse

from ....application import RealtimeBroadcaster, SnapshotRefresher

app = FastAPI()

_broadcaster = RealtimeBroadcaster()
_refresher: Optional[SnapshotRefresher] = None

def init_broadcaster(broadcaster: RealtimeBroadcaster):
    global _broadcaster
    _broadcaster = broadcaster

def get_broadcaster() -> RealtimeBroadcaster:
    return _broadcaster

def init_refresher(refresher: SnapshotRefresher):
    global _refresher
    _refresher = refresher

def get_refresher() -> SnapshotRefresher:
    if _refresher is None:
        raise HTTPException(500, "Refresher not initialized")
    return _refresher

@app.get("/stream/{channel}")
async def stream_channel(channel: str):
    """
    Server-Sent Events endpoint for a refreshed channel.

    Frontend usage:
    ```javascript
    const eventSource = new EventSource('/stream/vehicles');
    eventSource.addEventListener('update', (event) => {
        const payload = JSON.parse(event.data);
        console.log('Vehicles:', payload.count);
    });
    ```
    """
    refresher = get_refresher()
    if channel not in refresher.channels:
        raise HTTPException(404, f"Channel {channel} not found")

    broadcaster = get_broadcaster()
    queue = await broadcaster.subscribe(channel)

    async def event_generator():
        try:
            while True:
                payload = await queue.get()
                yield {
                    "event": "update",
                    "data": json.dumps(payload)
                }
        except asyncio.CancelledError:
            await broadcaster.unsubscribe(channel, queue)
            raise

    return EventSourceResponse(event_generator())

@app.get("/channels")
async def list_channels():
    """Refresh status of every channel."""
    return get_refresher().get_status()

@app.get("/channels/{channel}/latest")
async def get_latest(channel: str):
    """Latest broadcast payload of a channel (polling fallback)."""
    payload = get_broadcaster().latest(channel)
    if payload is None:
        raise HTTPException(404, "No data for channel yet")
    return payload

@app.post("/channels/{channel}/refresh")
async def refresh_channel(channel: str):
    """Refreshes a channel immediately and broadcasts the result."""
    refresher = get_refresher()
    if channel not in refresher.channels:
        raise HTTPException(404, f"Channel {channel} not found")
    return await refresher.refresh(channel)
