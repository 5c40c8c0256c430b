import logging
import threading
import uuid
from typing import Callable

logger = logging.getLogger(__name__)

SnapshotHandler = Callable[[list[dict]], None]


class ChangeFeed:
    """
    Listener registry for collection snapshots.

    One feed exists per application process. The document store publishes a
    full snapshot of each collection it wrote after a commit; every handler
    registered for that collection receives it. Delivery is at-least-once and
    carries no ordering guarantee relative to writes made by other processes.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._handlers: dict[str, tuple[str, SnapshotHandler]] = {}

    def on_change(self, collection: str, handler: SnapshotHandler) -> str:
        token = str(uuid.uuid4())
        with self._lock:
            self._handlers[token] = (collection, handler)
        logger.debug("Subscribed %s to %s", token, collection)
        return token

    def unsubscribe(self, token: str) -> bool:
        with self._lock:
            removed = self._handlers.pop(token, None)
        return removed is not None

    def has_listeners(self, collection: str) -> bool:
        with self._lock:
            return any(c == collection for c, _ in self._handlers.values())

    def publish(self, collection: str, snapshot: list[dict]) -> int:
        """Deliver to every handler of the collection; returns how many were called."""
        with self._lock:
            targets = [(t, h) for t, (c, h) in self._handlers.items() if c == collection]

        delivered = 0
        for token, handler in targets:
            try:
                handler(snapshot)
                delivered += 1
            except Exception:
                # handler errors are logged; delivery continues
                logger.exception("Change handler %s failed for %s", token, collection)
        return delivered
