import threading

import pytest

from reservex import create_app
from reservex.domain import Contact, SeedSnapshot
from reservex.engine import build_engine
from reservex.errors import RemoteUnavailable
from reservex.overlay import MemoryOverlayStore
from reservex.providers.reservex_api import AuthSession
from reservex.seeds.seed_data import SeedDataset

SMALL_RESTAURANT = {
    "id": "r1", "name": "Ten Tables", "cuisine": "Bistro", "city": "Rajshahi",
    "totalSeats": 10, "priceRange": "৳৳", "rating": 0.0, "totalReviews": 0,
    "status": "active", "createdAt": "2024-01-01T00:00:00.000Z",
}
SLOT_DATE = "2026-03-01"
SLOT = "7:00 PM"


class FakeRemote:
    """Stands in for ReservexApi: each method answers from ``answers`` or is unreachable."""

    configured = True
    base_url = "http://remote.test"

    def __init__(self, **answers):
        self.auth = AuthSession()
        self.answers = answers
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)

        def call(*args, **kwargs):
            self.calls.append((name, args))
            answer = self.answers.get(name, RemoteUnavailable("connection refused"))
            if isinstance(answer, Exception):
                raise answer
            return answer(*args) if callable(answer) else answer

        return call

    def health(self):
        return "health" in self.answers


class PausingOverlay(MemoryOverlayStore):
    """Runs ``on_read`` once, the next time ``kind`` is read, while the store lock is held."""

    def __init__(self):
        super().__init__()
        self.on_read = None
        self.pause_kind = None

    def pause_on(self, kind, hook):
        self.pause_kind, self.on_read = kind, hook

    def _read(self, kind):
        if kind == self.pause_kind and self.on_read is not None:
            hook, self.on_read = self.on_read, None
            hook()
        return super()._read(kind)


def run_in_thread(fn, results, wait=0.2):
    """Start ``fn`` in a thread and give it ``wait`` seconds; returns the thread."""
    def target():
        try:
            results.append(fn())
        except Exception as e:  # surfaced through ``results``
            results.append(e)

    t = threading.Thread(target=target)
    t.start()
    t.join(wait)
    return t


def contact(name="Rakib Hassan"):
    return Contact(name=name, email="customer@demo.com", phone="+880 1711-999001")


@pytest.fixture
def small_seeds():
    return SeedDataset(SeedSnapshot(restaurants=[dict(SMALL_RESTAURANT)]))


@pytest.fixture
def overlay():
    return MemoryOverlayStore()


@pytest.fixture
def engine(overlay, small_seeds):
    """Offline engine over one 10-seat restaurant."""
    return build_engine(overlay, seeds=small_seeds)


@pytest.fixture
def demo_engine(overlay):
    """Offline engine over the bundled demo dataset."""
    return build_engine(overlay)


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "OVERLAY_BACKEND": "memory",
        "OVERLAY_DIR": str(tmp_path / "overlay"),
        "REMOTE_API_URL": "",
        "CATALOG_CACHE_TTL": 0,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def pausing_overlay():
    return PausingOverlay()
