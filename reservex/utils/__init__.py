import itertools
import threading
import time
from collections import defaultdict
from datetime import date, datetime, timezone

from ..domain import TIME_SLOTS
from ..errors import InvalidInput

# --- timestamps ---
def now_iso() -> str:
    # Same shape the remote service emits: 2024-02-10T00:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_timestamp(value: str | None) -> datetime:
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

# --- local ids ---
LOCAL_ID_PREFIX = "local-"
_counter = itertools.count(1)
_counter_lock = threading.Lock()

def mint_local_id(kind: str) -> str:
    """Id for a Tier 1 record; the prefix is never issued by the remote service or the seeds."""
    with _counter_lock:
        n = next(_counter)
    return f"{LOCAL_ID_PREFIX}{kind}-{int(time.time() * 1000)}-{n}"

def is_local_id(record_id: str) -> bool:
    return str(record_id).startswith(LOCAL_ID_PREFIX)

# --- parsing helpers ---
def parse_date(value) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value or "").strip()).isoformat()
    except ValueError:
        raise InvalidInput("Invalid date. Expected YYYY-MM-DD.", field="date")

def parse_time_slot(value) -> str:
    slot = str(value or "").strip()
    if slot not in TIME_SLOTS:
        raise InvalidInput(f"Invalid time slot: {slot!r}.", field="timeSlot")
    return slot

def parse_seats(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidInput("seats must be an integer.", field="seats")
    try:
        seats = int(value)
    except ValueError:
        raise InvalidInput("seats must be an integer.", field="seats")
    if seats < 1:
        raise InvalidInput("seats must be at least 1.", field="seats")
    return seats

def parse_rating(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidInput("Rating must be a whole number of stars.", field="rating")
    try:
        rating = int(value)
    except ValueError:
        raise InvalidInput("Rating must be a whole number of stars.", field="rating")
    if rating < 1 or rating > 5:
        raise InvalidInput("Rating must be between 1 and 5 stars.", field="rating")
    return rating

def parse_float(value, name: str) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a number.", field=name)

# --- locking ---
class KeyedLocks:
    """One lock per key, e.g. (restaurant, date, slot) or a restaurant id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = defaultdict(threading.Lock)

    def for_key(self, *key) -> threading.Lock:
        with self._guard:
            return self._locks[key]
