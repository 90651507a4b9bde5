import pytest

from reservex.engine import build_engine
from reservex.errors import InvalidInput, NotFound
from reservex.services.availability import available_seats

from conftest import FakeRemote, SLOT, SLOT_DATE, contact


def _booking(seats, status, **kw):
    base = {"restaurantId": "r1", "date": SLOT_DATE, "timeSlot": SLOT, "seats": seats, "status": status}
    base.update(kw)
    return base


def test_only_pending_and_confirmed_hold_capacity():
    bookings = [
        _booking(2, "pending"),
        _booking(3, "confirmed"),
        _booking(4, "cancelled"),
        _booking(1, "completed"),
        _booking(5, "pending", timeSlot="8:00 PM"),
        _booking(5, "pending", date="2026-03-02"),
        _booking(5, "pending", restaurantId="r2"),
    ]
    assert available_seats(10, bookings, "r1", SLOT_DATE, SLOT) == 5


def test_never_negative_when_overbooked_data_exists():
    bookings = [_booking(8, "confirmed"), _booking(8, "pending")]
    assert available_seats(10, bookings, "r1", SLOT_DATE, SLOT) == 0


def test_excluding_a_booking_returns_its_seats():
    bookings = [_booking(4, "pending", id="b1"), _booking(2, "pending", id="b2")]
    assert available_seats(10, bookings, "r1", SLOT_DATE, SLOT, exclude_id="b1") == 8


def test_empty_slot_has_full_capacity(engine):
    assert engine.availability.available("r1", SLOT_DATE, SLOT) == 10


def test_unknown_restaurant_is_not_found(engine):
    with pytest.raises(NotFound):
        engine.availability.available("nope", SLOT_DATE, SLOT)


def test_malformed_date_is_rejected(engine):
    with pytest.raises(InvalidInput):
        engine.availability.available("r1", "01/03/2026", SLOT)


def test_recomputed_after_each_booking(engine):
    engine.bookings.create_booking("r1", "u1", SLOT_DATE, SLOT, 4, contact())
    assert engine.availability.available("r1", SLOT_DATE, SLOT) == 6
    engine.bookings.create_booking("r1", "u2", SLOT_DATE, SLOT, 6, contact())
    assert engine.availability.available("r1", SLOT_DATE, SLOT) == 0


def test_future_completed_booking_does_not_hold_capacity(overlay, small_seeds):
    overlay.save("bookings", [_booking(6, "completed", id="local-booking-1", date="2099-01-01")])
    engine = build_engine(overlay, seeds=small_seeds)
    assert engine.availability.available("r1", "2099-01-01", SLOT) == 10


def test_remote_answer_is_used_when_reachable(overlay, small_seeds):
    remote = FakeRemote(get_availability=3)
    engine = build_engine(overlay, remote=remote, seeds=small_seeds)
    assert engine.availability.available("r1", SLOT_DATE, SLOT) == 3
    assert remote.calls == [("get_availability", ("r1", SLOT_DATE, SLOT))]


def test_malformed_slot_is_rejected(engine):
    with pytest.raises(InvalidInput):
        engine.availability.available("r1", SLOT_DATE, "19:00")
