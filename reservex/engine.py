from dataclasses import dataclass

from reservex.overlay import OverlayStore
from reservex.providers.reservex_api import AuthSession, ReservexApi
from reservex.seeds.seed_data import SeedDataset
from reservex.services.auth import AuthService
from reservex.services.availability import AvailabilityCalculator
from reservex.services.bookings import BookingManager
from reservex.services.favourites import FavouriteManager
from reservex.services.ratings import RatingAggregator
from reservex.services.resolver import Resolver
from reservex.services.restaurants import RestaurantCatalog
from reservex.services.reviews import ReviewManager
from reservex.utils.cache import TTLCache


@dataclass
class Engine:
    resolver: Resolver
    restaurants: RestaurantCatalog
    availability: AvailabilityCalculator
    bookings: BookingManager
    ratings: RatingAggregator
    reviews: ReviewManager
    favourites: FavouriteManager
    auth: AuthService

    @property
    def remote(self):
        return self.resolver.remote

    def health(self) -> bool:
        return self.resolver.remote.health()


def build_engine(overlay: OverlayStore, remote=None, seeds: SeedDataset | None = None,
                 cache_ttl: float = 0) -> Engine:
    remote = remote or ReservexApi(None, AuthSession())
    resolver = Resolver(remote, seeds or SeedDataset(), overlay, TTLCache(ttl_seconds=cache_ttl))
    availability = AvailabilityCalculator(resolver)
    ratings = RatingAggregator(resolver)
    return Engine(
        resolver=resolver,
        restaurants=RestaurantCatalog(resolver),
        availability=availability,
        bookings=BookingManager(resolver, availability),
        ratings=ratings,
        reviews=ReviewManager(resolver, ratings),
        favourites=FavouriteManager(resolver),
        auth=AuthService(resolver, remote.auth),
    )
