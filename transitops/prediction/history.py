import threading
from collections import deque
from typing import Callable, Generic, Iterable, List, TypeVar

T = TypeVar("T")

class BoundedHistory(Generic[T]):
    """
    Append-only record buffer. Once `cap` is reached the oldest record
    is evicted for every new one.
    """

    def __init__(self, cap: int = 10000):
        if cap <= 0:
            raise ValueError("cap must be positive")
        self.cap = cap
        self._records = deque(maxlen=cap)
        self._lock = threading.Lock()

    def append(self, record: T):
        with self._lock:
            self._records.append(record)

    def extend(self, records: Iterable[T]):
        with self._lock:
            self._records.extend(records)

    def snapshot(self) -> List[T]:
        with self._lock:
            return list(self._records)

    def filter(self, predicate: Callable[[T], bool]) -> List[T]:
        """Matching records, oldest first."""
        with self._lock:
            return [r for r in self._records if predicate(r)]

    def clear(self):
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
