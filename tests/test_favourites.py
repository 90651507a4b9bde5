import pytest

from reservex.errors import InvalidInput, NotFound
from reservex.utils import is_local_id


def test_toggle_twice_restores_state(engine):
    assert engine.favourites.toggle_favourite("u1", "r1").is_favourite is True
    assert engine.favourites.is_favourite("u1", "r1")
    assert engine.favourites.toggle_favourite("u1", "r1").is_favourite is False
    assert not engine.favourites.is_favourite("u1", "r1")
    assert engine.favourites.get_user_favourites("u1") == []


def test_at_most_one_record_per_pair(engine, overlay):
    for _ in range(3):
        engine.favourites.toggle_favourite("u1", "r1")
    assert len(overlay.load("favourites")) == 1
    with pytest.raises(InvalidInput):
        engine.favourites.add_favourite("u1", "r1")


def test_seed_favourite_toggled_off_and_on(demo_engine, overlay):
    assert demo_engine.favourites.is_favourite("user-customer-1", "rest-1")

    state = demo_engine.favourites.toggle_favourite("user-customer-1", "rest-1")
    assert state.to_dict() == {"isFavourite": False}
    assert overlay.load("favourites")[0]["id"] == "fav-1"
    assert overlay.load("favourites")[0]["deleted"] is True
    ids = {f.id for f in demo_engine.favourites.get_user_favourites("user-customer-1")}
    assert ids == {"fav-2", "fav-3"}

    assert demo_engine.favourites.toggle_favourite("user-customer-1", "rest-1").is_favourite
    restored = [f for f in demo_engine.favourites.get_user_favourites("user-customer-1")
                if f.restaurant_id == "rest-1"]
    assert len(restored) == 1
    assert is_local_id(restored[0].id)


def test_remove_missing_pair_is_a_noop(engine, overlay):
    engine.favourites.remove_favourite("u1", "r1")
    assert overlay.load("favourites") == []


def test_add_then_remove(engine):
    fav = engine.favourites.add_favourite("u1", "r1")
    assert fav.restaurant_id == "r1"
    engine.favourites.remove_favourite("u1", "r1")
    assert not engine.favourites.is_favourite("u1", "r1")


def test_unknown_restaurant(engine):
    with pytest.raises(NotFound):
        engine.favourites.toggle_favourite("u1", "missing")


def test_ids_required(engine):
    with pytest.raises(InvalidInput):
        engine.favourites.toggle_favourite("", "r1")
