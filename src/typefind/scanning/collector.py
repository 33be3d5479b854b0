import logging
import queue
import threading
from typing import List

from ..models import Match

logger = logging.getLogger(__name__)

_CLOSED = object()


class MatchCollector:
    """
    Fan-in point for every plane scanner of every package.

    Producers call `put` from any thread; a single consumer thread drains the
    unbounded queue into `matches` in arrival order (no dedup, no filtering).

    **Lifecycle**:
    1.  `start()` launches the consumer.
    2.  Scanners `put()` concurrently.
    3.  Once every scanner has finished, the caller `close()`s the stream...
    4.  ...and `wait()`s for the consumer to drain what is left.
    """

    def __init__(self):
        self._queue: "queue.SimpleQueue" = queue.SimpleQueue()
        self._matches: List[Match] = []
        self._consumer = threading.Thread(target=self._drain, name="typefind-collector", daemon=True)
        self._closed = False

    def start(self) -> "MatchCollector":
        self._consumer.start()
        return self

    def put(self, match: Match):
        if self._closed:
            raise RuntimeError("Collector is closed")
        self._queue.put(match)

    def close(self):
        self._closed = True
        self._queue.put(_CLOSED)

    def wait(self) -> List[Match]:
        self._consumer.join()
        logger.debug(f"Collector drained {len(self._matches)} matches")
        return self._matches

    def _drain(self):
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            self._matches.append(item)
