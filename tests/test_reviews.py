import pytest

from reservex.engine import build_engine
from reservex.errors import InvalidInput, NotFound

from conftest import FakeRemote


@pytest.mark.parametrize("rating", [0, 6, "five", 4.5, None, True])
def test_rating_must_be_one_to_five(engine, rating):
    with pytest.raises(InvalidInput):
        engine.reviews.create_review("r1", "u1", rating)


def test_review_for_unknown_restaurant(engine):
    with pytest.raises(NotFound):
        engine.reviews.create_review("missing", "u1", 4)


def test_user_name_filled_from_seed_users(demo_engine):
    review = demo_engine.reviews.create_review("rest-2", "user-customer-2", "4", "Nice fusion plates")
    assert review.user_name == "Fatima Ahmed"
    assert review.rating == 4


def test_restaurant_reviews_newest_first(demo_engine):
    review = demo_engine.reviews.create_review("rest-1", "user-customer-2", 3)
    ids = [r.id for r in demo_engine.reviews.get_restaurant_reviews("rest-1")]
    assert ids == [review.id, "review-1", "review-2"]


def test_user_reviews(demo_engine):
    ids = {r.id for r in demo_engine.reviews.get_user_reviews("user-customer-2")}
    assert ids == {"review-2", "review-4"}


def test_can_review_once_per_restaurant(demo_engine):
    assert demo_engine.reviews.can_review("user-customer-2", "rest-3")
    assert not demo_engine.reviews.can_review("user-customer-1", "rest-3")
    assert not demo_engine.reviews.can_review("", "rest-3")


def test_update_needs_changes(engine):
    review = engine.reviews.create_review("r1", "u1", 4)
    with pytest.raises(InvalidInput):
        engine.reviews.update_review(review.id)


def test_delete_unknown_review(engine):
    with pytest.raises(NotFound):
        engine.reviews.delete_review("missing")


def test_remote_review_skips_local_aggregation(overlay, small_seeds):
    created = {"id": "srv-review", "restaurantId": "r1", "userId": "u1", "rating": 5}
    engine = build_engine(overlay, remote=FakeRemote(create_review=created), seeds=small_seeds)
    review = engine.reviews.create_review("r1", "u1", 5)
    assert review.id == "srv-review"
    assert overlay.load("reviews") == []
    assert overlay.load("restaurants") == []
