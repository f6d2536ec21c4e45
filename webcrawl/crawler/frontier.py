from collections import deque
from contextlib import contextmanager
from typing import Optional
import threading

from .errors import LockError
from .url import URL


class Frontier:
    """
    Queue of URLs still to crawl plus the set of every URL ever queued.

    Both structures sit behind one lock and are only changed together, so a
    queued URL is always in the visited set and never queued twice. If an
    operation fails half way the frontier is marked poisoned and every
    later call raises LockError.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._poisoned = False
        self._queue: deque[URL] = deque()
        self._visited: set[URL] = set()

    @contextmanager
    def _locked(self):
        with self._lock:
            if self._poisoned:
                raise LockError("Frontier state is poisoned by an earlier failure")
            try:
                yield
            except BaseException:
                self._poisoned = True
                raise

    def try_add(self, url: URL) -> bool:
        """Queue `url` unless it was seen before. Returns True if it was added."""
        with self._locked():
            if url in self._visited:
                return False
            self._visited.add(url)
            self._queue.append(url)
            return True

    def pop_front(self) -> Optional[URL]:
        with self._locked():
            return self._queue.popleft() if self._queue else None

    def drain_batch(self, max_n: int) -> list[URL]:
        """Pop up to `max_n` URLs in FIFO order."""
        with self._locked():
            batch = []
            while self._queue and len(batch) < max_n:
                batch.append(self._queue.popleft())
            return batch

    def is_empty(self) -> bool:
        with self._locked(): return not self._queue

    def visited(self) -> frozenset:
        with self._locked(): return frozenset(self._visited)

    def visited_count(self) -> int:
        with self._locked(): return len(self._visited)

    def __len__(self) -> int:
        with self._locked(): return len(self._queue)

    def __contains__(self, url: URL) -> bool:
        with self._locked(): return url in self._visited
