import logging

from reservex.domain import Review
from reservex.errors import InvalidInput, NotFound
from reservex.utils import now_iso, parse_rating

logger = logging.getLogger(__name__)


class ReviewManager:
    def __init__(self, resolver, ratings):
        self.resolver = resolver
        self.ratings = ratings

    def create_review(self, restaurant_id: str, user_id: str, rating, comment: str = "",
                      user_name: str | None = None) -> Review:
        if not restaurant_id or not user_id:
            raise InvalidInput("restaurantId and userId are required.")
        rating = parse_rating(rating)
        payload = {"restaurantId": restaurant_id, "rating": rating, "comment": comment or ""}

        def local():
            if self.resolver.local_find("restaurants", restaurant_id) is None:
                raise NotFound(f"Restaurant {restaurant_id} not found.")
            record = dict(
                payload,
                userId=user_id,
                userName=user_name or self._user_name(user_id),
                createdAt=now_iso(),
            )
            record = self.resolver.local_insert("reviews", record)
            self.ratings.on_review_created(record)
            return record

        record = self.resolver.execute(
            "create_review",
            lambda: self.resolver.remote.create_review(payload),
            local,
        )
        return Review.from_dict(record)

    def update_review(self, review_id: str, rating=None, comment: str | None = None) -> Review:
        changes = {}
        if rating is not None:
            changes["rating"] = parse_rating(rating)
        if comment is not None:
            changes["comment"] = comment
        if not changes:
            raise InvalidInput("Nothing to update.")

        def local():
            record = self.resolver.local_update("reviews", review_id, lambda r: dict(r, **changes))
            if "rating" in changes:
                self.ratings.on_review_updated(record)
            return record

        record = self.resolver.execute(
            "update_review",
            lambda: self.resolver.remote.update_review(review_id, changes),
            local,
        )
        return Review.from_dict(record)

    def delete_review(self, review_id: str) -> None:
        def local():
            record = self._local_get(review_id)
            self.resolver.local_delete("reviews", review_id)
            self.ratings.on_review_deleted(record)

        self.resolver.execute(
            "delete_review",
            lambda: self.resolver.remote.delete_review(review_id),
            local,
        )

    def get_restaurant_reviews(self, restaurant_id: str) -> list[Review]:
        records = self.resolver.execute(
            "get_restaurant_reviews",
            lambda: self.resolver.remote.list_restaurant_reviews(restaurant_id),
            lambda: self._local_filter(restaurantId=restaurant_id),
        )
        return [Review.from_dict(r) for r in records or []]

    def get_user_reviews(self, user_id: str) -> list[Review]:
        records = self.resolver.execute(
            "get_user_reviews",
            lambda: self.resolver.remote.list_reviews({"userId": user_id}),
            lambda: self._local_filter(userId=user_id),
        )
        return [Review.from_dict(r) for r in records or []]

    def can_review(self, user_id: str, restaurant_id: str) -> bool:
        # Locally: one review per user and restaurant.
        return self.resolver.execute(
            "can_review",
            lambda: self.resolver.remote.can_review(restaurant_id),
            lambda: bool(user_id) and not self._local_filter(userId=user_id, restaurantId=restaurant_id),
        )

    def _local_get(self, review_id: str) -> dict:
        record = self.resolver.local_find("reviews", review_id)
        if record is None:
            raise NotFound(f"Review {review_id} not found.")
        return record

    def _local_filter(self, **criteria) -> list[dict]:
        return [
            r for r in self.resolver.local_records("reviews")
            if all(r.get(k) == v for k, v in criteria.items())
        ]

    def _user_name(self, user_id: str) -> str:
        user = self.resolver.seeds.find("users", user_id)
        return (user or {}).get("name", "")
