# reservex/seeds/seed_data.py
"""Bundled Tier 2 dataset served whenever the remote service is unreachable."""
import copy

from reservex.domain import SeedSnapshot

USERS = [
    {"id": "user-customer-1", "email": "customer@demo.com",  "name": "Rakib Hassan",  "role": "customer", "phone": "+880 1711-999001", "createdAt": "2024-01-15T00:00:00.000Z"},
    {"id": "user-customer-2", "email": "customer2@demo.com", "name": "Fatima Ahmed",  "role": "customer", "phone": "+880 1711-999002", "createdAt": "2024-02-01T00:00:00.000Z"},
    {"id": "user-manager-1",  "email": "manager@demo.com",   "name": "Karim Rahman",  "role": "manager",  "phone": "+880 1711-999003", "createdAt": "2023-12-01T00:00:00.000Z"},
    {"id": "user-admin-1",    "email": "admin@demo.com",     "name": "System Admin",  "role": "admin",    "phone": "+880 1711-999000", "createdAt": "2023-10-01T00:00:00.000Z"},
]

_RAJSHAHI = {"city": "Rajshahi", "division": "Rajshahi", "country": "Bangladesh", "status": "active"}

# rating/totalReviews mirror the remote service's full review history; only a
# handful of those reviews ship in REVIEWS below. The first offline review
# write recomputes from the local review set alone, so e.g. rest-1 moves from
# 4.8 over 124 reviews to a figure over its two or three local reviews.
RESTAURANTS = [
    dict(_RAJSHAHI, id="rest-1",  name="Aurora",           cuisine="Continental",    location="Shaheb Bazar, Rajshahi", openingTime="11:00 AM", closingTime="11:00 PM", totalSeats=50, priceRange="৳৳৳", phone="+880 1711-123456", managerId="user-manager-1", rating=4.8, totalReviews=124, createdAt="2023-11-01T00:00:00.000Z",
         description="Premium continental fine dining with a modern ambiance and fresh ingredients."),
    dict(_RAJSHAHI, id="rest-2",  name="Helium",           cuisine="Fusion",         location="Alokar Mor, Rajshahi",   openingTime="12:00 PM", closingTime="10:30 PM", totalSeats=40, priceRange="৳৳",  phone="+880 1711-123457", managerId="user-manager-1", rating=4.6, totalReviews=89,  createdAt="2023-11-15T00:00:00.000Z",
         description="Innovative fusion dining combining Asian and Western cuisines."),
    dict(_RAJSHAHI, id="rest-3",  name="Calisto",          cuisine="Italian",        location="Laxmipur, Rajshahi",     openingTime="1:00 PM",  closingTime="11:00 PM", totalSeats=45, priceRange="৳৳৳", phone="+880 1711-123458", rating=4.7, totalReviews=156, createdAt="2023-10-20T00:00:00.000Z",
         description="Authentic Italian cuisine with handmade pasta and wood-fired pizzas."),
    dict(_RAJSHAHI, id="rest-4",  name="Chillox",          cuisine="Fast Food",      location="Ghoda Mara, Rajshahi",   openingTime="10:00 AM", closingTime="12:00 AM", totalSeats=60, priceRange="৳",   phone="+880 1711-123459", rating=4.3, totalReviews=201, createdAt="2024-01-05T00:00:00.000Z",
         description="Burgers, wraps and shakes in a vibrant, casual setting."),
    dict(_RAJSHAHI, id="rest-5",  name="Pizza Burg",       cuisine="Pizza & Burger", location="C&B Mor, Rajshahi",      openingTime="11:00 AM", closingTime="11:30 PM", totalSeats=55, priceRange="৳৳",  phone="+880 1711-123460", rating=4.5, totalReviews=178, createdAt="2023-12-10T00:00:00.000Z",
         description="Gourmet pizzas and premium burgers with creative recipes."),
    dict(_RAJSHAHI, id="rest-6",  name="Kebab House",      cuisine="Mughlai",        location="Station Road, Rajshahi", openingTime="12:00 PM", closingTime="11:00 PM", totalSeats=48, priceRange="৳৳",  phone="+880 1711-123461", rating=4.6, totalReviews=143, createdAt="2023-11-25T00:00:00.000Z",
         description="Traditional kebabs, biryanis and curries."),
    dict(_RAJSHAHI, id="rest-7",  name="Kudos",            cuisine="Chinese",        location="Sapura, Rajshahi",       openingTime="12:00 PM", closingTime="10:00 PM", totalSeats=42, priceRange="৳৳",  phone="+880 1711-123462", rating=4.4, totalReviews=112, createdAt="2024-01-20T00:00:00.000Z",
         description="Dim sum, noodles and traditional wok dishes."),
    dict(_RAJSHAHI, id="rest-8",  name="North Burg",       cuisine="Burger",         location="Binodpur, Rajshahi",     openingTime="11:00 AM", closingTime="11:00 PM", totalSeats=50, priceRange="৳",   phone="+880 1711-123463", rating=4.5, totalReviews=167, createdAt="2023-12-15T00:00:00.000Z",
         description="Handcrafted burgers made with pure beef and fresh ingredients."),
    dict(_RAJSHAHI, id="rest-9",  name="Backyard Kitchen", cuisine="BBQ",            location="Boalia, Rajshahi",       openingTime="5:00 PM",  closingTime="12:00 AM", totalSeats=38, priceRange="৳৳৳", phone="+880 1711-123464", rating=4.7, totalReviews=134, createdAt="2023-10-30T00:00:00.000Z",
         description="Rustic BBQ with smoked meats and live outdoor cooking."),
    dict(_RAJSHAHI, id="rest-10", name="Hideout",          cuisine="Café",           location="Talaimari, Rajshahi",    openingTime="8:00 AM",  closingTime="10:00 PM", totalSeats=35, priceRange="৳৳",  phone="+880 1711-123465", rating=4.6, totalReviews=98,  createdAt="2024-01-10T00:00:00.000Z",
         description="A cozy café hideaway for coffee lovers and readers."),
]

MENU_ITEMS = [
    {"id": "menu-1-1", "restaurantId": "rest-1", "name": "Caesar Salad",         "price": 450,  "category": "Appetizer",   "available": True},
    {"id": "menu-1-2", "restaurantId": "rest-1", "name": "Mushroom Soup",        "price": 380,  "category": "Appetizer",   "available": True},
    {"id": "menu-1-3", "restaurantId": "rest-1", "name": "Grilled Salmon",       "price": 1200, "category": "Main Course", "available": True},
    {"id": "menu-1-4", "restaurantId": "rest-1", "name": "Beef Tenderloin",      "price": 1500, "category": "Main Course", "available": True},
    {"id": "menu-1-6", "restaurantId": "rest-1", "name": "Tiramisu",             "price": 480,  "category": "Dessert",     "available": True},
    {"id": "menu-1-8", "restaurantId": "rest-1", "name": "Fresh Juice",          "price": 250,  "category": "Drinks",      "available": True},
    {"id": "menu-2-1", "restaurantId": "rest-2", "name": "Asian Tapas",          "price": 680,  "category": "Appetizer",   "available": True},
    {"id": "menu-2-3", "restaurantId": "rest-2", "name": "Teriyaki Beef Bowl",   "price": 890,  "category": "Main Course", "available": True},
    {"id": "menu-2-5", "restaurantId": "rest-2", "name": "Mango Sticky Rice",    "price": 380,  "category": "Dessert",     "available": True},
    {"id": "menu-2-6", "restaurantId": "rest-2", "name": "Thai Iced Tea",        "price": 220,  "category": "Drinks",      "available": True},
    {"id": "menu-3-1", "restaurantId": "rest-3", "name": "Bruschetta",           "price": 420,  "category": "Appetizer",   "available": True},
    {"id": "menu-3-3", "restaurantId": "rest-3", "name": "Margherita Pizza",     "price": 850,  "category": "Main Course", "available": True},
    {"id": "menu-3-4", "restaurantId": "rest-3", "name": "Carbonara Pasta",      "price": 780,  "category": "Main Course", "available": True},
    {"id": "menu-3-6", "restaurantId": "rest-3", "name": "Panna Cotta",          "price": 450,  "category": "Dessert",     "available": True},
    {"id": "menu-4-1", "restaurantId": "rest-4", "name": "Classic Burger",       "price": 350,  "category": "Main Course", "available": True},
    {"id": "menu-4-4", "restaurantId": "rest-4", "name": "French Fries",         "price": 180,  "category": "Appetizer",   "available": True},
    {"id": "menu-4-5", "restaurantId": "rest-4", "name": "Chocolate Shake",      "price": 280,  "category": "Drinks",      "available": True},
    {"id": "menu-5-1", "restaurantId": "rest-5", "name": "Pepperoni Pizza",      "price": 720,  "category": "Main Course", "available": True},
    {"id": "menu-5-3", "restaurantId": "rest-5", "name": "Double Cheese Burger", "price": 580,  "category": "Main Course", "available": True},
    {"id": "menu-5-6", "restaurantId": "rest-5", "name": "Soft Drink",           "price": 120,  "category": "Drinks",      "available": False},
]

BOOKINGS = [
    {"id": "booking-1", "restaurantId": "rest-1", "userId": "user-customer-1", "date": "2024-02-25", "timeSlot": "7:00 PM", "seats": 4, "status": "confirmed",
     "customerName": "Rakib Hassan", "customerEmail": "customer@demo.com", "customerPhone": "+880 1711-999001", "specialRequests": "Window seat please",
     "createdAt": "2024-02-10T00:00:00.000Z", "updatedAt": "2024-02-10T00:00:00.000Z"},
    {"id": "booking-2", "restaurantId": "rest-3", "userId": "user-customer-1", "date": "2024-02-22", "timeSlot": "8:00 PM", "seats": 2, "status": "pending",
     "customerName": "Rakib Hassan", "customerEmail": "customer@demo.com", "customerPhone": "+880 1711-999001", "specialRequests": "Anniversary dinner",
     "createdAt": "2024-02-15T00:00:00.000Z", "updatedAt": "2024-02-15T00:00:00.000Z"},
    {"id": "booking-3", "restaurantId": "rest-5", "userId": "user-customer-1", "date": "2024-02-18", "timeSlot": "6:30 PM", "seats": 6, "status": "completed",
     "customerName": "Rakib Hassan", "customerEmail": "customer@demo.com", "customerPhone": "+880 1711-999001", "specialRequests": None,
     "createdAt": "2024-02-05T00:00:00.000Z", "updatedAt": "2024-02-18T00:00:00.000Z"},
    {"id": "booking-4", "restaurantId": "rest-9", "userId": "user-customer-2", "date": "2024-02-23", "timeSlot": "7:30 PM", "seats": 5, "status": "confirmed",
     "customerName": "Fatima Ahmed", "customerEmail": "customer2@demo.com", "customerPhone": "+880 1711-999002", "specialRequests": "Outdoor seating if available",
     "createdAt": "2024-02-12T00:00:00.000Z", "updatedAt": "2024-02-13T00:00:00.000Z"},
    {"id": "booking-5", "restaurantId": "rest-2", "userId": "user-customer-1", "date": "2024-02-15", "timeSlot": "8:00 PM", "seats": 3, "status": "cancelled",
     "customerName": "Rakib Hassan", "customerEmail": "customer@demo.com", "customerPhone": "+880 1711-999001", "specialRequests": None,
     "createdAt": "2024-02-01T00:00:00.000Z", "updatedAt": "2024-02-08T00:00:00.000Z"},
]

REVIEWS = [
    {"id": "review-1", "restaurantId": "rest-1", "userId": "user-customer-1", "userName": "Rakib Hassan", "rating": 5, "createdAt": "2024-02-01T00:00:00.000Z",
     "comment": "Excellent food and service! The beef tenderloin was cooked to perfection."},
    {"id": "review-2", "restaurantId": "rest-1", "userId": "user-customer-2", "userName": "Fatima Ahmed", "rating": 4, "createdAt": "2024-01-28T00:00:00.000Z",
     "comment": "Great ambiance and delicious food. A bit of wait time during peak hours."},
    {"id": "review-3", "restaurantId": "rest-3", "userId": "user-customer-1", "userName": "Rakib Hassan", "rating": 5, "createdAt": "2024-02-05T00:00:00.000Z",
     "comment": "Best Italian restaurant in Rajshahi! The pasta was authentic."},
    {"id": "review-4", "restaurantId": "rest-5", "userId": "user-customer-2", "userName": "Fatima Ahmed", "rating": 4, "createdAt": "2024-02-03T00:00:00.000Z",
     "comment": "Good quality pizza and burgers at reasonable prices."},
    {"id": "review-5", "restaurantId": "rest-9", "userId": "user-customer-1", "userName": "Rakib Hassan", "rating": 5, "createdAt": "2024-01-30T00:00:00.000Z",
     "comment": "Amazing BBQ experience! Must try the smoked ribs!"},
]

FAVOURITES = [
    {"id": "fav-1", "userId": "user-customer-1", "restaurantId": "rest-1",  "createdAt": "2024-01-20T00:00:00.000Z"},
    {"id": "fav-2", "userId": "user-customer-1", "restaurantId": "rest-3",  "createdAt": "2024-01-25T00:00:00.000Z"},
    {"id": "fav-3", "userId": "user-customer-1", "restaurantId": "rest-9",  "createdAt": "2024-02-01T00:00:00.000Z"},
    {"id": "fav-4", "userId": "user-customer-2", "restaurantId": "rest-10", "createdAt": "2024-02-05T00:00:00.000Z"},
]


def default_snapshot() -> SeedSnapshot:
    return SeedSnapshot(
        users=USERS,
        restaurants=RESTAURANTS,
        menu_items=MENU_ITEMS,
        bookings=BOOKINGS,
        reviews=REVIEWS,
        favourites=FAVOURITES,
    )


class SeedDataset:
    """Read-only view over a snapshot. Every query returns fresh copies."""

    def __init__(self, snapshot: SeedSnapshot | None = None):
        self._snapshot = snapshot or default_snapshot()

    def records(self, kind: str) -> list[dict]:
        return copy.deepcopy(getattr(self._snapshot, kind, []) or [])

    def find(self, kind: str, record_id: str) -> dict | None:
        for r in getattr(self._snapshot, kind, []) or []:
            if r.get("id") == record_id:
                return copy.deepcopy(r)
        return None

    def cuisines(self) -> list[str]:
        seen = []
        for r in self._snapshot.restaurants:
            if r.get("cuisine") and r["cuisine"] not in seen:
                seen.append(r["cuisine"])
        return seen

    def counts(self) -> dict[str, int]:
        return {
            kind: len(getattr(self._snapshot, kind) or [])
            for kind in ("users", "restaurants", "menu_items", "bookings", "reviews", "favourites")
        }
