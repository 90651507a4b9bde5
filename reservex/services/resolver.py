"""
Remote-first resolution shared by every engine operation.

``execute`` tries the remote call once; RemoteUnavailable is logged and
answered from the fallback tiers (bundled seeds + local overlay). Every other
error propagates unchanged, and a successful remote result is never merged
with local data.
"""
import logging

from reservex.errors import NotFound, RemoteUnavailable
from reservex.utils import mint_local_id, now_iso, parse_timestamp
from reservex.utils.cache import TTLCache

logger = logging.getLogger(__name__)


def is_tombstone(record: dict) -> bool:
    return bool(record.get("deleted"))


def merge_records(seed: list[dict], overlay: list[dict], newest_first: bool = True) -> list[dict]:
    """
    Union of Tier 2 and Tier 1 records, one per id.

    Tier 1 wins on id collision (it holds local edits of seed records);
    tombstones in Tier 1 hide the matching seed record and are dropped.
    """
    by_id = {}
    order = []
    for r in seed:
        rid = r.get("id")
        if rid not in by_id:
            order.append(rid)
        by_id[rid] = r
    for r in overlay:
        rid = r.get("id")
        if rid not in by_id:
            order.append(rid)
        by_id[rid] = r

    out = [by_id[rid] for rid in order if not is_tombstone(by_id[rid])]
    if newest_first:
        out.sort(key=lambda r: parse_timestamp(r.get("createdAt")), reverse=True)
    return out


class Resolver:
    def __init__(self, remote, seeds, overlay, cache: TTLCache | None = None):
        self.remote = remote
        self.seeds = seeds
        self.overlay = overlay
        self.cache = cache or TTLCache(ttl_seconds=0)

    def execute(self, operation: str, remote_fn, fallback_fn, cache_key: str | None = None):
        if cache_key:
            hit = self.cache.get(cache_key)
            if hit is not None:
                return hit
        try:
            result = remote_fn()
        except RemoteUnavailable as e:
            logger.warning("%s: remote unavailable (%s); using local data", operation, e)
            return fallback_fn()
        if cache_key and result is not None:
            self.cache.put(cache_key, result)
        return result

    # --- fallback tier helpers ---
    def local_records(self, kind: str, newest_first: bool = True) -> list[dict]:
        return merge_records(self.seeds.records(kind), self.overlay.load(kind), newest_first=newest_first)

    def local_find(self, kind: str, record_id: str) -> dict | None:
        for r in self.overlay.load(kind):
            if r.get("id") == record_id:
                return None if is_tombstone(r) else r
        return self.seeds.find(kind, record_id)

    def local_insert(self, kind: str, record: dict) -> dict:
        record = dict(record)
        record.setdefault("id", mint_local_id(kind.rstrip("s")))
        with self.overlay.mutate(kind) as records:
            records.append(record)
        logger.info("overlay %s: stored %s", kind, record["id"])
        return record

    def local_replace(self, kind: str, record: dict) -> dict:
        """Write a full copy of ``record`` into Tier 1, shadowing any seed copy."""
        with self.overlay.mutate(kind) as records:
            for i, r in enumerate(records):
                if r.get("id") == record["id"]:
                    records[i] = record
                    break
            else:
                records.append(record)
        logger.info("overlay %s: updated %s", kind, record["id"])
        return record

    def local_update(self, kind: str, record_id: str, change) -> dict:
        """
        Read, check and write one record as a single step under the overlay lock.

        ``change`` receives a copy of the current record (overlay copy first,
        then seed) and returns the new one; anything it raises aborts the write.
        """
        with self.overlay.mutate(kind) as records:
            index = next((i for i, r in enumerate(records) if r.get("id") == record_id), None)
            current = records[index] if index is not None else self.seeds.find(kind, record_id)
            if current is None or is_tombstone(current):
                raise NotFound(f"{kind.rstrip('s').capitalize()} {record_id} not found.")
            record = change(dict(current))
            if index is None:
                records.append(record)
            else:
                records[index] = record
        logger.info("overlay %s: updated %s", kind, record_id)
        return record

    def local_delete(self, kind: str, record_id: str) -> None:
        with self.overlay.mutate(kind) as records:
            records[:] = [r for r in records if r.get("id") != record_id]
            if self.seeds.find(kind, record_id) is not None:
                records.append({"id": record_id, "deleted": True, "deletedAt": now_iso()})
        logger.info("overlay %s: removed %s", kind, record_id)
