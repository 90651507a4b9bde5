"""
Tier 1 local overlay: records created or changed while the remote service
was unreachable.

Each entity kind is one collection holding the full array of its records,
always replaced wholesale. Callers doing read-modify-write go through
``mutate()`` so interleaved writers cannot lose each other's updates.
"""
import copy
import json
import logging
import os
import threading
from contextlib import contextmanager

logger = logging.getLogger(__name__)

KINDS = ("bookings", "reviews", "favourites", "restaurants")


def _check_kind(kind: str) -> str:
    if kind not in KINDS:
        raise ValueError(f"Unknown overlay collection: {kind!r}")
    return kind


class OverlayStore:
    """Port implemented by every overlay backend."""

    def __init__(self):
        self._lock = threading.RLock()

    def _read(self, kind: str) -> list[dict]:
        raise NotImplementedError

    def _write(self, kind: str, records: list[dict]) -> None:
        raise NotImplementedError

    def _drop(self, kind: str) -> None:
        self._write(kind, [])

    def load(self, kind: str) -> list[dict]:
        _check_kind(kind)
        with self._lock:
            return copy.deepcopy(self._read(kind))

    def save(self, kind: str, records: list[dict]) -> None:
        _check_kind(kind)
        with self._lock:
            self._write(kind, copy.deepcopy(list(records)))
        logger.debug("overlay %s saved (%d records)", kind, len(records))

    @contextmanager
    def mutate(self, kind: str):
        """Yield the collection as a list; it is written back if the block exits cleanly."""
        _check_kind(kind)
        with self._lock:
            records = copy.deepcopy(self._read(kind))
            yield records
            self._write(kind, records)
            logger.debug("overlay %s rewritten (%d records)", kind, len(records))

    def clear(self, kind: str | None = None) -> None:
        with self._lock:
            for k in ([_check_kind(kind)] if kind else KINDS):
                self._drop(k)
        logger.info("overlay cleared: %s", kind or "all")


class MemoryOverlayStore(OverlayStore):
    def __init__(self):
        super().__init__()
        self._data = {k: [] for k in KINDS}

    def _read(self, kind):
        return self._data[kind]

    def _write(self, kind, records):
        self._data[kind] = records


class JsonFileOverlayStore(OverlayStore):
    """One ``<kind>.json`` file per collection under ``directory``."""

    def __init__(self, directory: str):
        super().__init__()
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, kind):
        return os.path.join(self.directory, f"{kind}.json")

    def _read(self, kind):
        p = self._path(kind)
        if not os.path.exists(p):
            return []
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.exception("Failed to parse overlay file %s; treating as empty", p)
            return []
        return data if isinstance(data, list) else []

    def _write(self, kind, records):
        p = self._path(kind)
        tmp = f"{p}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False)
        os.replace(tmp, p)


class SqlOverlayStore(OverlayStore):
    """Collections kept as JSON text in the ``overlay_collections`` table."""

    def __init__(self, db):
        super().__init__()
        self.db = db

    def _read(self, kind):
        from .models import OverlayCollection
        row = self.db.session.get(OverlayCollection, kind)
        if row is None:
            return []
        try:
            data = json.loads(row.payload or "[]")
        except ValueError:
            logger.exception("Corrupt overlay payload for %s; treating as empty", kind)
            return []
        return data if isinstance(data, list) else []

    def _write(self, kind, records):
        from .models import OverlayCollection
        row = self.db.session.get(OverlayCollection, kind)
        if row is None:
            row = OverlayCollection(kind=kind)
            self.db.session.add(row)
        row.payload = json.dumps(records, ensure_ascii=False)
        self.db.session.commit()


def build_overlay_store(backend: str, *, db=None, directory: str | None = None) -> OverlayStore:
    backend = (backend or "memory").strip().lower()
    if backend == "memory":
        return MemoryOverlayStore()
    if backend == "json":
        if not directory:
            raise ValueError("OVERLAY_DIR is required for the json overlay backend")
        return JsonFileOverlayStore(directory)
    if backend == "sql":
        if db is None:
            raise ValueError("A database handle is required for the sql overlay backend")
        return SqlOverlayStore(db)
    raise ValueError(f"Unknown OVERLAY_BACKEND: {backend!r}")
