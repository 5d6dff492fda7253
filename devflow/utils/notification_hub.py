import asyncio
import threading
from collections import defaultdict
from typing import Dict, List

from fastapi import WebSocket

from devflow.constants import USER_CHANNEL_PREFIX
from devflow.utils.logger import get_logger

logger = get_logger(__name__)


class NotificationHub:
    """
    In-process registry of live WebSocket connections, grouped per user.

    publish() is fire-and-forget: it schedules the send on the server event
    loop and returns immediately, so it is safe to call from the threadpool
    that runs sync endpoints. There is no ack, retry or ordering guarantee;
    clients treat a push as a signal to re-fetch their notifications.
    """

    def __init__(self):
        self._channels: Dict[str, List[WebSocket]] = defaultdict(list)
        self._lock = threading.Lock()
        self._loop = None

    @staticmethod
    def channel_for(user_id: int) -> str:
        return f"{USER_CHANNEL_PREFIX}{user_id}"

    async def connect(self, user_id: int, websocket: WebSocket):
        # Sends fail on a socket that is still handshaking
        await websocket.accept()
        self._loop = asyncio.get_running_loop()
        with self._lock:
            self._channels[self.channel_for(user_id)].append(websocket)
        logger.info(f"Client connected on {self.channel_for(user_id)}")

    def disconnect(self, user_id: int, websocket: WebSocket):
        channel = self.channel_for(user_id)
        with self._lock:
            connections = self._channels.get(channel, [])
            if websocket in connections:
                connections.remove(websocket)
            if not connections:
                self._channels.pop(channel, None)
        logger.info(f"Client disconnected from {channel}")

    def connection_count(self, user_id: int) -> int:
        with self._lock:
            return len(self._channels.get(self.channel_for(user_id), []))

    def publish(self, user_id: int, payload: dict) -> bool:
        """
        Schedules delivery to every connection of the user.
        Returns False when nothing was scheduled.
        """
        with self._lock:
            connections = list(self._channels.get(self.channel_for(user_id), []))
        loop = self._loop
        if not connections or loop is None or loop.is_closed():
            return False
        future = asyncio.run_coroutine_threadsafe(self._broadcast(user_id, connections, payload), loop)
        future.add_done_callback(self._log_broadcast_failure)
        return True

    @staticmethod
    def _log_broadcast_failure(future):
        if future.cancelled():
            logger.warning("Notification broadcast was cancelled")
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Notification broadcast failed: {error!r}")

    async def _broadcast(self, user_id: int, connections: List[WebSocket], payload: dict):
        for websocket in connections:
            try:
                await websocket.send_json(payload)
            except Exception as e:
                logger.warning(f"Push to {self.channel_for(user_id)} failed, dropping connection: {e}")
                self.disconnect(user_id, websocket)


notification_hub = NotificationHub()
