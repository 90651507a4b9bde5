import logging
import math

from reservex.errors import NotFound
from reservex.utils import KeyedLocks

logger = logging.getLogger(__name__)


def compute_rating(ratings) -> tuple[float, int]:
    """(mean rounded half-up to one decimal, count); (0.0, 0) for no reviews."""
    ratings = [int(r) for r in ratings]
    if not ratings:
        return 0.0, 0
    mean = sum(ratings) / len(ratings)
    return math.floor(mean * 10 + 0.5) / 10, len(ratings)


class RatingAggregator:
    """
    Keeps a restaurant's ``rating`` and ``totalReviews`` in step with its
    reviews on the local tiers. Always recomputed from the full review set,
    never adjusted incrementally. Read and write for one restaurant run under
    its lock, so a recompute that started earlier cannot overwrite a newer one.
    """

    def __init__(self, resolver):
        self.resolver = resolver
        self.locks = KeyedLocks()

    def on_review_created(self, review: dict) -> dict:
        return self.recompute(review["restaurantId"])

    def on_review_deleted(self, review: dict) -> dict:
        return self.recompute(review["restaurantId"])

    def on_review_updated(self, review: dict) -> dict:
        return self.recompute(review["restaurantId"])

    def recompute(self, restaurant_id: str) -> dict:
        with self.locks.for_key(restaurant_id):
            restaurant = self.resolver.local_find("restaurants", restaurant_id)
            if restaurant is None:
                raise NotFound(f"Restaurant {restaurant_id} not found.")
            ratings = [
                r.get("rating", 0)
                for r in self.resolver.local_records("reviews", newest_first=False)
                if r.get("restaurantId") == restaurant_id
            ]
            rating, total = compute_rating(ratings)
            if restaurant.get("rating") == rating and restaurant.get("totalReviews") == total:
                return restaurant
            restaurant = dict(restaurant, rating=rating, totalReviews=total)
            self.resolver.local_replace("restaurants", restaurant)
        logger.info("restaurant %s rating recomputed: %.1f from %d reviews", restaurant_id, rating, total)
        return restaurant
