from bs4 import BeautifulSoup
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Callable, Any, Union
from pathlib import Path
import threading


def extract_attribute(document: Union[BeautifulSoup, str], attribute_name: str, parser: str = "lxml") -> list[str]:
    """Raw values of `attribute_name` on every element, in document order (duplicates kept)."""
    if isinstance(document, str):
        document = BeautifulSoup(document, parser)
    values = []
    for node in document.find_all(attrs={attribute_name: True}):
        value = node.get(attribute_name)
        # multi-valued attributes (class, rel, ...) come back as lists
        if isinstance(value, list): value = " ".join(value)
        values.append(value)
    return values


def uniquify(path: Union[str, Path]) -> Path:
    """First of `path`, `name (1).ext`, `name (2).ext`, ... that does not exist yet."""
    path = Path(path)
    candidate = path
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        counter += 1
    return candidate


class TrackingThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that counts the tasks currently running and the highest count seen."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._active = 0
        self._peak = 0
        self._lock = threading.Lock()

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Future:
        def wrapper(*args, **kwargs):
            with self._lock:
                self._active += 1
                self._peak = max(self._peak, self._active)
            try:
                return fn(*args, **kwargs)
            finally:
                with self._lock:
                    self._active -= 1

        return super().submit(wrapper, *args, **kwargs)

    @property
    def active_count(self) -> int:
        with self._lock: return self._active

    @property
    def peak_count(self) -> int:
        with self._lock: return self._peak
