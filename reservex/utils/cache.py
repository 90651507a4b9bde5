import copy
import threading
import time


class TTLCache:
    """In-process cache for remote catalog reads, keyed by request signature."""

    def __init__(self, ttl_seconds: float = 300, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._data = {}
        self._lock = threading.Lock()

    def get(self, key: str):
        with self._lock:
            blob = self._data.get(key)
            if blob is None:
                return None
            if self._clock() - blob["_ts"] > self.ttl_seconds:
                del self._data[key]
                return None
            return copy.deepcopy(blob["data"])

    def put(self, key: str, data):
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            self._data[key] = {"_ts": self._clock(), "data": copy.deepcopy(data)}

    def clear(self):
        with self._lock:
            self._data.clear()
