"""
Record types shared by the booking engine.

Records travel as camelCase dicts (the wire shape of the remote service and
of the seed/overlay tiers); the dataclasses below are the typed view the
services hand back to callers.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that hold capacity in a slot.
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value})


class RestaurantStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    BLOCKED = "blocked"


class Role(str, Enum):
    CUSTOMER = "customer"
    MANAGER = "manager"
    ADMIN = "admin"


class MenuCategory(str, Enum):
    APPETIZER = "Appetizer"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"
    DRINKS = "Drinks"


def _build_time_slots() -> tuple[str, ...]:
    # Half-hour starts from 11:00 AM to 10:30 PM.
    slots = []
    for minutes in range(11 * 60, 23 * 60, 30):
        hour, minute = divmod(minutes, 60)
        suffix = "AM" if hour < 12 else "PM"
        display_hour = hour % 12 or 12
        slots.append(f"{display_hour}:{minute:02d} {suffix}")
    return tuple(slots)


TIME_SLOTS: tuple[str, ...] = _build_time_slots()


def _snake(name: str) -> str:
    out = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class Record:
    """Mixin mapping dataclass fields to the camelCase wire shape."""

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (data or {}).items():
            name = _snake(key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            out[_camel(f.name)] = value
        return out


@dataclass
class Restaurant(Record):
    id: str
    name: str
    cuisine: str = ""
    location: str = ""
    city: str = ""
    division: str = ""
    country: str = ""
    description: str = ""
    image: str = ""
    opening_time: str = ""
    closing_time: str = ""
    total_seats: int = 0
    price_range: str = ""
    phone: str = ""
    manager_id: Optional[str] = None
    rating: float = 0.0
    total_reviews: int = 0
    status: str = RestaurantStatus.ACTIVE.value
    created_at: str = ""


@dataclass
class MenuItem(Record):
    id: str
    restaurant_id: str
    name: str
    price: float
    category: str
    description: str = ""
    image: str = ""
    available: bool = True


@dataclass
class Contact:
    name: str
    email: str
    phone: str


@dataclass
class Booking(Record):
    id: str
    restaurant_id: str
    user_id: str
    date: str
    time_slot: str
    seats: int
    status: str = BookingStatus.PENDING.value
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    special_requests: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def holds_capacity(self) -> bool:
        return self.status in ACTIVE_STATUSES


@dataclass
class Review(Record):
    id: str
    restaurant_id: str
    user_id: str
    rating: int
    comment: str = ""
    user_name: str = ""
    created_at: str = ""


@dataclass
class Favourite(Record):
    id: str
    user_id: str
    restaurant_id: str
    created_at: str = ""


@dataclass
class User(Record):
    id: str
    email: str
    name: str
    role: str = Role.CUSTOMER.value
    phone: str = ""
    profile_image: str = ""
    created_at: str = ""


@dataclass
class RestaurantFilters:
    search: Optional[str] = None
    cuisine: Optional[str] = None
    city: Optional[str] = None
    price_range: Optional[str] = None
    min_rating: Optional[float] = None

    def to_params(self) -> dict[str, Any]:
        params = {
            "search": self.search,
            "cuisine": self.cuisine,
            "city": self.city,
            "priceRange": self.price_range,
            "minRating": self.min_rating,
        }
        return {k: v for k, v in params.items() if v not in (None, "")}


@dataclass
class FavouriteState:
    is_favourite: bool

    def to_dict(self) -> dict[str, Any]:
        return {"isFavourite": self.is_favourite}


@dataclass
class SeedSnapshot:
    users: list = field(default_factory=list)
    restaurants: list = field(default_factory=list)
    menu_items: list = field(default_factory=list)
    bookings: list = field(default_factory=list)
    reviews: list = field(default_factory=list)
    favourites: list = field(default_factory=list)
