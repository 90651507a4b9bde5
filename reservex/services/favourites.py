import logging
import threading

from reservex.domain import Favourite, FavouriteState
from reservex.errors import InvalidInput, NotFound
from reservex.utils import now_iso

logger = logging.getLogger(__name__)


class FavouriteManager:
    """
    User <-> restaurant favourite pairs. At most one record per pair:
    ``toggle_favourite`` is the normal entry point; ``add_favourite`` refuses
    a duplicate and ``remove_favourite`` is a no-op when nothing is there.
    """

    def __init__(self, resolver):
        self.resolver = resolver
        # Local check-then-write on the pair must not interleave.
        self._lock = threading.RLock()

    def toggle_favourite(self, user_id: str, restaurant_id: str) -> FavouriteState:
        self._require(user_id, restaurant_id)

        def local():
            with self._lock:
                if self._local_pair(user_id, restaurant_id) is not None:
                    self._local_remove(user_id, restaurant_id)
                    return False
                self._local_add(user_id, restaurant_id)
                return True

        state = self.resolver.execute(
            "toggle_favourite",
            lambda: self.resolver.remote.toggle_favourite(restaurant_id),
            local,
        )
        logger.info("favourite %s/%s -> %s", user_id, restaurant_id, state)
        return FavouriteState(is_favourite=bool(state))

    def add_favourite(self, user_id: str, restaurant_id: str) -> Favourite:
        self._require(user_id, restaurant_id)

        def local():
            with self._lock:
                if self._local_pair(user_id, restaurant_id) is not None:
                    raise InvalidInput("Restaurant is already in your favourites.")
                return self._local_add(user_id, restaurant_id)

        record = self.resolver.execute(
            "add_favourite",
            lambda: self.resolver.remote.add_favourite(restaurant_id),
            local,
        )
        return Favourite.from_dict(record)

    def remove_favourite(self, user_id: str, restaurant_id: str) -> None:
        self._require(user_id, restaurant_id)

        def local():
            with self._lock:
                self._local_remove(user_id, restaurant_id)

        self.resolver.execute(
            "remove_favourite",
            lambda: self.resolver.remote.remove_favourite(restaurant_id),
            local,
        )

    def is_favourite(self, user_id: str, restaurant_id: str) -> bool:
        return self.resolver.execute(
            "is_favourite",
            lambda: self.resolver.remote.is_favourite(restaurant_id),
            lambda: self._local_pair(user_id, restaurant_id) is not None,
        )

    def get_user_favourites(self, user_id: str) -> list[Favourite]:
        records = self.resolver.execute(
            "get_user_favourites",
            lambda: self.resolver.remote.list_favourites({"userId": user_id}),
            lambda: [r for r in self.resolver.local_records("favourites") if r.get("userId") == user_id],
        )
        return [Favourite.from_dict(r) for r in records or []]

    # --- local tiers ---
    @staticmethod
    def _require(user_id, restaurant_id):
        if not user_id or not restaurant_id:
            raise InvalidInput("userId and restaurantId are required.")

    def _local_pair(self, user_id, restaurant_id) -> dict | None:
        for r in self.resolver.local_records("favourites", newest_first=False):
            if r.get("userId") == user_id and r.get("restaurantId") == restaurant_id:
                return r
        return None

    def _local_add(self, user_id, restaurant_id) -> dict:
        if self.resolver.local_find("restaurants", restaurant_id) is None:
            raise NotFound(f"Restaurant {restaurant_id} not found.")
        record = {"userId": user_id, "restaurantId": restaurant_id, "createdAt": now_iso()}
        return self.resolver.local_insert("favourites", record)

    def _local_remove(self, user_id, restaurant_id) -> None:
        existing = self._local_pair(user_id, restaurant_id)
        if existing is not None:
            self.resolver.local_delete("favourites", existing["id"])
