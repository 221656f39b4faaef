"""
Per-session live event feed.

Registry of session id -> subscriber channel backing the Server-Sent Events
stream. Delivery is best-effort and in-memory: events published while no
observer is connected are discarded.

Dependencies: asyncio, json (stdlib)
System role: Real-time observation of proxied session traffic
"""

import asyncio
import json
import logging
from typing import Any, AsyncIterator

logger = logging.getLogger(__name__)

CONTROL_EVENT = "control"

_END_OF_STREAM = None


def format_frame(event_name: str | None, payload: Any) -> str:
    """
    Serialize one event-stream frame.

    Args:
        event_name: Optional named event type
        payload: JSON-serializable value

    Returns:
        str: ``event:`` line (when named), ``data:`` line and blank terminator
    """
    data = json.dumps(payload, separators=(",", ":"))
    frame = f"event: {event_name}\n" if event_name else ""
    return f"{frame}data: {data}\n\n"


class Channel:
    """
    Writable stream owned by a single observer connection.

    Frames written after close are dropped.
    """

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, frame: str) -> None:
        if self._closed:
            return
        self._queue.put_nowait(frame)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_END_OF_STREAM)

    def pending(self) -> int:
        """Number of frames written but not yet read."""
        return self._queue.qsize()

    def __aiter__(self) -> AsyncIterator[str]:
        return self._frames()

    async def _frames(self) -> AsyncIterator[str]:
        while True:
            frame = await self._queue.get()
            if frame is _END_OF_STREAM:
                return
            yield frame


class EventHub:
    """
    Registry of live subscriber channels keyed by session id.

    At most one channel exists per session id. Subscribing again replaces the
    registered channel and closes the previous one so its stream ends. All
    access happens on the event loop thread, so no locking is required.
    """

    def __init__(self) -> None:
        self._channels: dict[str, Channel] = {}

    def subscribe(self, session_id: Any) -> Channel:
        """
        Register a fresh channel for a session and announce it.

        Args:
            session_id: Session identifier

        Returns:
            Channel: The newly registered channel
        """
        key = str(session_id)
        previous = self._channels.get(key)
        channel = Channel(key)
        self._channels[key] = channel

        if previous is not None:
            logger.info(
                "Replacing event stream subscriber",
                extra={"session_id": key},
            )
            previous.close()

        self.publish(key, CONTROL_EVENT, {"kind": "initialize"})
        return channel

    def publish(self, session_id: Any, event_name: str | None, payload: Any) -> bool:
        """
        Write an event to the session's channel, if one is registered.

        Args:
            session_id: Session identifier
            event_name: Optional event name (``event:`` line)
            payload: JSON-serializable event data

        Returns:
            bool: True if a subscriber received the frame
        """
        channel = self._channels.get(str(session_id))
        if channel is None:
            return False

        channel.write(format_frame(event_name, payload))
        return True

    def unsubscribe(self, session_id: Any, channel: Channel | None = None) -> None:
        """
        Remove a session's channel and signal end-of-stream.

        Args:
            session_id: Session identifier
            channel: When given, only remove the entry if it is still this channel
        """
        key = str(session_id)
        current = self._channels.get(key)
        if current is None:
            if channel is not None:
                channel.close()
            return

        if channel is not None and current is not channel:
            channel.close()
            return

        del self._channels[key]
        current.close()

    def has_subscriber(self, session_id: Any) -> bool:
        return str(session_id) in self._channels

    async def stream(self, session_id: Any) -> AsyncIterator[str]:
        """
        Subscribe and yield frames until the channel ends or the transport closes.

        Closing the generator (observer disconnect) publishes a ``control``
        ``end`` event and removes the channel, unless a newer subscriber has
        already replaced it.

        Args:
            session_id: Session identifier

        Yields:
            str: Serialized event-stream frames
        """
        key = str(session_id)
        channel = self.subscribe(key)
        logger.info("Event stream opened", extra={"session_id": key})

        try:
            async for frame in channel:
                yield frame
        finally:
            if self._channels.get(key) is channel:
                self.publish(key, CONTROL_EVENT, {"kind": "end"})
            self.unsubscribe(key, channel)
            logger.info("Event stream closed", extra={"session_id": key})

    def close_all(self) -> None:
        """Close every registered channel. Called at server shutdown."""
        for key in list(self._channels):
            self.unsubscribe(key)
