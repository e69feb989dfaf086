# disaster_response/routes/stream.py
# ------------------------------------------------------------
# Server-Sent Events (SSE) stream
#
# The store writes updates into Redis list K_UPDATES
# (alert_raised, alert_resolved, report_created, ...).
# This endpoint replays new items to connected clients:
# - event: <type>
# - data: <json>
# ------------------------------------------------------------

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
import asyncio
import json
import time
from typing import AsyncGenerator
import redis

from ..redis_client import get_redis
from ..store import K_UPDATES

router = APIRouter(tags=["stream"])

HEARTBEAT_EVERY_SEC = 10
POLL_EVERY_SEC = 0.5


def sse(event: str, data_obj) -> str:
    """
    Build an SSE message.

    Format:
        event: name
        data: json
    """
    return f"event: {event}\ndata: {json.dumps(data_obj)}\n\n"


@router.get("/api/stream")
def stream(r: redis.Redis = Depends(get_redis)):
    """
    Live updates stream.

    Starts from "now" (no history replay) and sends a heartbeat
    periodically to keep the connection alive. The list is trimmed
    from the head, so the cursor is clamped when it shrinks.
    """
    last_idx = r.llen(K_UPDATES)  # start from "now"

    async def gen() -> AsyncGenerator[str, None]:
        nonlocal last_idx

        # initial hello + retry hint (client reconnect delay)
        yield "retry: 2000\n\n"
        yield sse("hello", {"ok": True, "ts": time.time()})

        last_heartbeat = time.time()

        while True:
            length = r.llen(K_UPDATES)
            if length < last_idx:
                last_idx = length

            if length > last_idx:
                items = r.lrange(K_UPDATES, last_idx, length - 1)
                last_idx = length

                for raw in items:
                    payload = json.loads(raw)
                    yield sse(payload.get("type", "update"), payload.get("data", {}))

            now = time.time()
            if now - last_heartbeat >= HEARTBEAT_EVERY_SEC:
                yield sse("heartbeat", {"t": now})
                last_heartbeat = now

            await asyncio.sleep(POLL_EVERY_SEC)

    headers = {
        # SSE must not be cached
        "Cache-Control": "no-cache",
        # keep TCP connection open
        "Connection": "keep-alive",
        # if behind nginx, prevents response buffering
        "X-Accel-Buffering": "no",
    }

    return StreamingResponse(gen(), media_type="text/event-stream", headers=headers)
