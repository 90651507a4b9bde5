"""
Booking lifecycle.

States: pending -> confirmed -> completed, and pending/confirmed -> cancelled.
completed and cancelled are terminal. Capacity check and write for one
(restaurant, date, slot) run under that slot's lock so two concurrent
requests cannot both pass the check and overbook. Status changes and edits
re-read the booking and write it back under the overlay lock, so a cancel
cannot be overwritten by a confirm that read the booking earlier.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from reservex.domain import ACTIVE_STATUSES, Booking, BookingStatus, Contact, Role
from reservex.errors import CapacityExceeded, Forbidden, InvalidInput, InvalidTransition, NotFound
from reservex.utils import KeyedLocks, now_iso, parse_date, parse_seats, parse_time_slot

logger = logging.getLogger(__name__)

TRANSITIONS: dict[str, frozenset[str]] = {
    BookingStatus.PENDING.value: frozenset({BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value}),
    BookingStatus.CONFIRMED.value: frozenset({BookingStatus.COMPLETED.value, BookingStatus.CANCELLED.value}),
    BookingStatus.COMPLETED.value: frozenset(),
    BookingStatus.CANCELLED.value: frozenset(),
}

STAFF_ONLY_STATUSES = frozenset({BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value})
STAFF_ROLES = frozenset({Role.MANAGER.value, Role.ADMIN.value})

CONTACT_FIELDS = {"customerName", "customerEmail", "customerPhone", "specialRequests"}
SCHEDULE_FIELDS = {"date", "timeSlot", "seats"}


def can_transition(current: str, requested: str) -> bool:
    return requested in TRANSITIONS.get(current, frozenset())


def check_transition(current: str, requested: str) -> None:
    if not can_transition(current, requested):
        raise InvalidTransition(current, requested)


def check_role(requested: str, actor_role: str) -> None:
    if requested in STAFF_ONLY_STATUSES and actor_role not in STAFF_ROLES:
        raise Forbidden(f"Only managers and admins can mark a booking {requested}.")


def _parse_status(value) -> str:
    try:
        return BookingStatus(str(value)).value
    except ValueError:
        raise InvalidInput(f"Unknown booking status: {value!r}.", field="status")


@dataclass(frozen=True)
class BookingRequest:
    restaurant_id: str
    user_id: str
    date: str
    time_slot: str
    seats: int
    contact: Contact
    special_requests: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "restaurantId": self.restaurant_id,
            "userId": self.user_id,
            "date": self.date,
            "timeSlot": self.time_slot,
            "seats": self.seats,
            "customerName": self.contact.name,
            "customerEmail": self.contact.email,
            "customerPhone": self.contact.phone,
            "specialRequests": self.special_requests,
        }


class BookingManager:
    def __init__(self, resolver, availability, locks: KeyedLocks | None = None):
        self.resolver = resolver
        self.availability = availability
        self.locks = locks or KeyedLocks()

    # --- create ---
    def create_booking(self, restaurant_id: str, user_id: str, date, time_slot: str, seats,
                       contact: Contact, special_requests: str | None = None) -> Booking:
        if not restaurant_id or not user_id:
            raise InvalidInput("restaurantId and userId are required.")
        if contact is None or not contact.name:
            raise InvalidInput("A contact name is required.", field="customerName")
        request = BookingRequest(
            restaurant_id=restaurant_id,
            user_id=user_id,
            date=parse_date(date),
            time_slot=parse_time_slot(time_slot),
            seats=parse_seats(seats),
            contact=contact,
            special_requests=special_requests or None,
        )

        with self.locks.for_key(request.restaurant_id, request.date, request.time_slot):
            available = self.availability.available(request.restaurant_id, request.date, request.time_slot)
            if request.seats > available:
                raise CapacityExceeded(available)
            record = self.resolver.execute(
                "create_booking",
                lambda: self.resolver.remote.create_booking(request.to_payload()),
                lambda: self._local_create(request),
            )
        booking = Booking.from_dict(record)
        logger.info("booking %s created for %s on %s %s (%d seats)",
                    booking.id, booking.restaurant_id, booking.date, booking.time_slot, booking.seats)
        return booking

    def _local_create(self, request: BookingRequest) -> dict:
        stamp = now_iso()
        record = dict(request.to_payload(), status=BookingStatus.PENDING.value, createdAt=stamp, updatedAt=stamp)
        return self.resolver.local_insert("bookings", record)

    # --- reads ---
    def get_booking(self, booking_id: str) -> Booking:
        record = self.resolver.execute(
            "get_booking",
            lambda: self.resolver.remote.get_booking(booking_id),
            lambda: self._local_get(booking_id),
        )
        return Booking.from_dict(record)

    def _local_get(self, booking_id: str) -> dict:
        record = self.resolver.local_find("bookings", booking_id)
        if record is None:
            raise NotFound(f"Booking {booking_id} not found.")
        return record

    def get_all_bookings(self, status: str | None = None, restaurant_id: str | None = None,
                         user_id: str | None = None, date: str | None = None) -> list[Booking]:
        if status:
            status = _parse_status(status)
        if date:
            date = parse_date(date)
        params = {"status": status, "restaurantId": restaurant_id, "userId": user_id, "date": date}
        records = self.resolver.execute(
            "get_all_bookings",
            lambda: self.resolver.remote.list_bookings(params),
            lambda: self._local_filter(**params),
        )
        return [Booking.from_dict(r) for r in records or []]

    def get_user_bookings(self, user_id: str) -> list[Booking]:
        return self.get_all_bookings(user_id=user_id)

    def get_restaurant_bookings(self, restaurant_id: str, status: str | None = None,
                                date: str | None = None) -> list[Booking]:
        if status:
            status = _parse_status(status)
        if date:
            date = parse_date(date)
        records = self.resolver.execute(
            "get_restaurant_bookings",
            lambda: self.resolver.remote.list_restaurant_bookings(restaurant_id, {"status": status, "date": date}),
            lambda: self._local_filter(status=status, restaurantId=restaurant_id, date=date),
        )
        return [Booking.from_dict(r) for r in records or []]

    def _local_filter(self, **criteria) -> list[dict]:
        wanted = {k: v for k, v in criteria.items() if v}
        return [
            r for r in self.resolver.local_records("bookings")
            if all(r.get(k) == v for k, v in wanted.items())
        ]

    # --- transitions ---
    def cancel_booking(self, booking_id: str, actor_user_id: str) -> Booking:
        record = self.resolver.execute(
            "cancel_booking",
            lambda: self.resolver.remote.cancel_booking(booking_id),
            lambda: self._local_transition(booking_id, BookingStatus.CANCELLED.value),
        )
        logger.info("booking %s cancelled by %s", booking_id, actor_user_id)
        return Booking.from_dict(record)

    def update_booking_status(self, booking_id: str, new_status: str, actor_role: str) -> Booking:
        new_status = _parse_status(new_status)
        check_role(new_status, actor_role)
        record = self.resolver.execute(
            "update_booking_status",
            lambda: self.resolver.remote.update_booking_status(booking_id, new_status),
            lambda: self._local_transition(booking_id, new_status),
        )
        logger.info("booking %s moved to %s by %s", booking_id, new_status, actor_role)
        return Booking.from_dict(record)

    def _local_transition(self, booking_id: str, new_status: str) -> dict:
        def change(record):
            check_transition(record.get("status"), new_status)
            record.update(status=new_status, updatedAt=now_iso())
            return record

        return self.resolver.local_update("bookings", booking_id, change)

    # --- edits ---
    def update_booking(self, booking_id: str, changes: dict) -> Booking:
        """Change contact details or reschedule (date, timeSlot, seats) an active booking."""
        unknown = set(changes) - CONTACT_FIELDS - SCHEDULE_FIELDS
        if unknown:
            raise InvalidInput(f"Fields cannot be changed: {', '.join(sorted(unknown))}.")
        changes = dict(changes)
        if "date" in changes:
            changes["date"] = parse_date(changes["date"])
        if "timeSlot" in changes:
            changes["timeSlot"] = parse_time_slot(changes["timeSlot"])
        if "seats" in changes:
            changes["seats"] = parse_seats(changes["seats"])

        current = self.get_booking(booking_id)
        if not current.holds_capacity:
            raise InvalidTransition(current.status, current.status,
                                    f"A {current.status} booking can no longer be changed.")

        if not SCHEDULE_FIELDS & set(changes):
            return self._apply_update(booking_id, changes)

        date = changes.get("date", current.date)
        time_slot = changes.get("timeSlot", current.time_slot)
        seats = changes.get("seats", current.seats)
        with self.locks.for_key(current.restaurant_id, date, time_slot):
            available = self._available_excluding(current, date, time_slot)
            if seats > available:
                raise CapacityExceeded(available)
            return self._apply_update(booking_id, changes)

    def _available_excluding(self, booking: Booking, date: str, time_slot: str) -> int:
        same_slot = (date, time_slot) == (booking.date, booking.time_slot)

        def remote():
            left = self.resolver.remote.get_availability(booking.restaurant_id, date, time_slot)
            return left + booking.seats if same_slot else left

        return self.resolver.execute(
            "available",
            remote,
            lambda: self.availability.local_available(booking.restaurant_id, date, time_slot, exclude_id=booking.id),
        )

    def _apply_update(self, booking_id: str, changes: dict) -> Booking:
        def change(record):
            status = record.get("status")
            if status not in ACTIVE_STATUSES:
                raise InvalidTransition(status, status, f"A {status} booking can no longer be changed.")
            record.update(changes, updatedAt=now_iso())
            return record

        record = self.resolver.execute(
            "update_booking",
            lambda: self.resolver.remote.update_booking(booking_id, changes),
            lambda: self.resolver.local_update("bookings", booking_id, change),
        )
        logger.info("booking %s updated: %s", booking_id, ", ".join(sorted(changes)))
        return Booking.from_dict(record)
