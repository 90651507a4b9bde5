import logging
from datetime import date as date_type

from reservex.domain import ACTIVE_STATUSES, BookingStatus
from reservex.errors import NotFound
from reservex.utils import parse_date, parse_time_slot

logger = logging.getLogger(__name__)


def booked_seats(bookings, restaurant_id: str, date: str, time_slot: str, exclude_id: str | None = None) -> int:
    total = 0
    for b in bookings:
        if b.get("restaurantId") != restaurant_id or b.get("date") != date or b.get("timeSlot") != time_slot:
            continue
        if exclude_id and b.get("id") == exclude_id:
            continue
        if b.get("status") not in ACTIVE_STATUSES:
            continue
        total += int(b.get("seats") or 0)
    return total


def available_seats(total_seats: int, bookings, restaurant_id: str, date: str, time_slot: str,
                    exclude_id: str | None = None) -> int:
    """Seats left in a slot; pending and confirmed bookings hold capacity. Never negative."""
    return max(0, int(total_seats or 0) - booked_seats(bookings, restaurant_id, date, time_slot, exclude_id))


class AvailabilityCalculator:
    def __init__(self, resolver):
        self.resolver = resolver

    def available(self, restaurant_id: str, date, time_slot: str) -> int:
        date = parse_date(date)
        time_slot = parse_time_slot(time_slot)
        return self.resolver.execute(
            "available",
            lambda: self.resolver.remote.get_availability(restaurant_id, date, time_slot),
            lambda: self.local_available(restaurant_id, date, time_slot),
        )

    def local_available(self, restaurant_id: str, date: str, time_slot: str,
                        exclude_id: str | None = None) -> int:
        restaurant = self.resolver.local_find("restaurants", restaurant_id)
        if restaurant is None:
            raise NotFound(f"Restaurant {restaurant_id} not found.")
        bookings = self.resolver.local_records("bookings", newest_first=False)
        self._warn_future_completed(bookings, restaurant_id, date, time_slot)
        return available_seats(restaurant.get("totalSeats", 0), bookings, restaurant_id, date, time_slot, exclude_id)

    @staticmethod
    def _warn_future_completed(bookings, restaurant_id, date, time_slot):
        if date <= date_type.today().isoformat():
            return
        for b in bookings:
            if (b.get("status") == BookingStatus.COMPLETED.value and b.get("restaurantId") == restaurant_id
                    and b.get("date") == date and b.get("timeSlot") == time_slot):
                logger.warning("booking %s is completed but its slot %s %s has not happened yet",
                               b.get("id"), date, time_slot)
