import asyncio
import logging

import config
from utils import ReadWriteLock

logger = logging.getLogger(__name__)


# Placed on a subscriber's queue when it is closed, to wake a pending reader.
_CLOSED = object()


class Subscriber:
    """An open event stream: the session it listens to and its outbound queue.

    Usage:
        subscriber = broadcaster.subscribe(session_id)
        message = await subscriber.get()   # None once closed
        broadcaster.unsubscribe(subscriber)
    """

    def __init__(self, session_id: str, maxsize: int = config.SUBSCRIBER_QUEUE_SIZE):
        self.session_id = session_id
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, message: str) -> bool:
        """Enqueue without waiting. Returns False if the message was dropped."""
        if self._closed:
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Make room for the marker if the reader has fallen behind.
        while True:
            try:
                self._queue.put_nowait(_CLOSED)
                return
            except asyncio.QueueFull:
                self._queue.get_nowait()

    async def get(self) -> str | None:
        """Wait for the next message. Returns None once the subscriber is closed."""
        item = await self._queue.get()
        if item is _CLOSED:
            return None
        return item

    def get_nowait(self) -> str | None:
        """Return the next queued message, or None if there is none.

        Raises:
            asyncio.QueueEmpty: If nothing is queued.
        """
        item = self._queue.get_nowait()
        if item is _CLOSED:
            return None
        return item

    def qsize(self) -> int:
        return self._queue.qsize()


class Broadcaster:
    """Per-session publish/subscribe fan-out.

    Publishing never waits on a subscriber: a full queue drops the message
    for that subscriber only. Membership changes take the lock exclusively;
    publishing shares it, so a subscriber removed by `unsubscribe` receives
    nothing once that call returns.
    """

    def __init__(self, queue_size: int = config.SUBSCRIBER_QUEUE_SIZE):
        self.queue_size = queue_size
        self._lock = ReadWriteLock()
        self._subscribers: set[Subscriber] = set()

    def subscribe(self, session_id: str) -> Subscriber:
        subscriber = Subscriber(session_id, self.queue_size)
        with self._lock.exclusive():
            self._subscribers.add(subscriber)
        logger.debug(f"Subscriber registered on session {session_id}")
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Remove `subscriber` and close its queue. Safe to call more than once."""
        with self._lock.exclusive():
            if subscriber not in self._subscribers:
                return
            self._subscribers.discard(subscriber)
            subscriber.close()
        logger.debug(f"Subscriber unregistered from session {subscriber.session_id}")

    def publish(self, session_id: str, message: str) -> int:
        """Offer `message` to every subscriber of `session_id`.

        Returns the number of subscribers that accepted it.
        """
        delivered = 0
        with self._lock.shared():
            for subscriber in self._subscribers:
                if subscriber.session_id != session_id:
                    continue
                if subscriber.offer(message):
                    delivered += 1
        return delivered

    def subscriber_count(self, session_id: str) -> int:
        with self._lock.shared():
            return sum(1 for s in self._subscribers if s.session_id == session_id)
