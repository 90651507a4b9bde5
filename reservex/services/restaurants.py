from reservex.domain import MenuCategory, MenuItem, Restaurant, RestaurantFilters
from reservex.errors import InvalidInput, NotFound


def _matches(restaurant: dict, filters: RestaurantFilters) -> bool:
    if filters.search:
        needle = filters.search.lower()
        haystack = " ".join(str(restaurant.get(k) or "") for k in ("name", "description", "cuisine")).lower()
        if needle not in haystack:
            return False
    if filters.cuisine and filters.cuisine != "All" and restaurant.get("cuisine") != filters.cuisine:
        return False
    if filters.city and restaurant.get("city") != filters.city:
        return False
    if filters.price_range and restaurant.get("priceRange") != filters.price_range:
        return False
    if filters.min_rating and float(restaurant.get("rating") or 0) < filters.min_rating:
        return False
    return True


class RestaurantCatalog:
    """Read side of restaurants and menus. Remote results are cached briefly."""

    def __init__(self, resolver):
        self.resolver = resolver

    def get_all_restaurants(self, filters: RestaurantFilters | None = None) -> list[Restaurant]:
        filters = filters or RestaurantFilters()
        params = filters.to_params()
        records = self.resolver.execute(
            "get_all_restaurants",
            lambda: self.resolver.remote.list_restaurants(params),
            lambda: [r for r in self.resolver.local_records("restaurants") if _matches(r, filters)],
            cache_key="restaurants?" + "&".join(f"{k}={v}" for k, v in sorted(params.items())),
        )
        return [Restaurant.from_dict(r) for r in records or []]

    def get_restaurant(self, restaurant_id: str) -> Restaurant:
        def local():
            record = self.resolver.local_find("restaurants", restaurant_id)
            if record is None:
                raise NotFound(f"Restaurant {restaurant_id} not found.")
            return record

        record = self.resolver.execute(
            "get_restaurant",
            lambda: self.resolver.remote.get_restaurant(restaurant_id),
            local,
            cache_key=f"restaurants/{restaurant_id}",
        )
        return Restaurant.from_dict(record)

    def get_menu(self, restaurant_id: str, category: str | None = None) -> list[MenuItem]:
        if category:
            try:
                category = MenuCategory(category).value
            except ValueError:
                raise InvalidInput(f"Unknown menu category: {category!r}.", field="category")
        records = self.resolver.execute(
            "get_menu",
            lambda: self.resolver.remote.get_menu(restaurant_id),
            lambda: [m for m in self.resolver.seeds.records("menu_items") if m.get("restaurantId") == restaurant_id],
            cache_key=f"restaurants/{restaurant_id}/menu",
        )
        return [MenuItem.from_dict(m) for m in records or [] if not category or m.get("category") == category]

    def search_restaurants(self, query: str) -> list[Restaurant]:
        needle = (query or "").strip().lower()

        def local():
            fields = ("name", "description", "cuisine", "location")
            return [
                r for r in self.resolver.local_records("restaurants")
                if needle in " ".join(str(r.get(k) or "") for k in fields).lower()
            ]

        records = self.resolver.execute(
            "search_restaurants",
            lambda: self.resolver.remote.search_restaurants(query),
            local,
        )
        return [Restaurant.from_dict(r) for r in records or []]

    def get_cuisines(self) -> list[str]:
        return self.resolver.execute(
            "get_cuisines",
            self.resolver.remote.list_cuisines,
            self.resolver.seeds.cuisines,
            cache_key="restaurants/cuisines",
        )
