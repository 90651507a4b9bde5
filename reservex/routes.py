# reservex/routes.py
from flask import Blueprint, current_app, jsonify, request

from . import get_engine
from .domain import Contact, RestaurantFilters
from .errors import InvalidInput, ReservexError, Unauthorized
from .utils import parse_float

bp = Blueprint("main", __name__, url_prefix="/api")


@bp.errorhandler(ReservexError)
def handle_engine_error(e: ReservexError):
    if isinstance(e, Unauthorized):
        current_app.logger.warning("Session rejected: %s", e.message)
        body = dict(e.to_dict(), reauthenticate=True)
        return jsonify(body), e.status_code
    return jsonify(e.to_dict()), e.status_code


def _payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidInput("Expected a JSON object.")
    return data


def _required(data: dict, key: str):
    value = data.get(key)
    if value in (None, ""):
        raise InvalidInput(f"{key} is required.", field=key)
    return value


def _dump(items):
    return jsonify([i.to_dict() for i in items])


@bp.get("/health")
def health():
    engine = get_engine()
    remote = engine.health() if engine.remote.configured else False
    return jsonify({
        "status": "OK",
        "remote": remote,
        "demoMode": engine.auth.demo_mode,
        "reauthRequired": engine.auth.session.reauth_required,
    })


# ---- auth ----
@bp.post("/auth/login")
def login():
    data = _payload()
    user = get_engine().auth.login(_required(data, "email"), _required(data, "password"))
    return jsonify(user.to_dict())


@bp.post("/auth/register")
def register():
    data = _payload()
    user = get_engine().auth.register(
        email=_required(data, "email"),
        password=_required(data, "password"),
        name=_required(data, "name"),
        role=data.get("role", "customer"),
        phone=data.get("phone", ""),
    )
    return jsonify(user.to_dict()), 201


@bp.post("/auth/logout")
def logout():
    get_engine().auth.logout()
    return ("", 204)


@bp.get("/auth/me")
def me():
    return jsonify(get_engine().auth.current_user().to_dict())


# ---- restaurants ----
@bp.get("/restaurants")
def list_restaurants():
    filters = RestaurantFilters(
        search=request.args.get("search") or None,
        cuisine=request.args.get("cuisine") or None,
        city=request.args.get("city") or None,
        price_range=request.args.get("priceRange") or None,
        min_rating=parse_float(request.args.get("minRating"), "minRating"),
    )
    return _dump(get_engine().restaurants.get_all_restaurants(filters))


@bp.get("/restaurants/search")
def search_restaurants():
    return _dump(get_engine().restaurants.search_restaurants(request.args.get("q", "")))


@bp.get("/restaurants/cuisines")
def cuisines():
    return jsonify(get_engine().restaurants.get_cuisines())


@bp.get("/restaurants/<restaurant_id>")
def get_restaurant(restaurant_id):
    return jsonify(get_engine().restaurants.get_restaurant(restaurant_id).to_dict())


@bp.get("/restaurants/<restaurant_id>/menu")
def restaurant_menu(restaurant_id):
    return _dump(get_engine().restaurants.get_menu(restaurant_id, request.args.get("category") or None))


@bp.get("/restaurants/<restaurant_id>/availability")
def restaurant_availability(restaurant_id):
    date = request.args.get("date", "")
    time_slot = request.args.get("timeSlot", "")
    if not date or not time_slot:
        raise InvalidInput("date and timeSlot are required.")
    seats = get_engine().availability.available(restaurant_id, date, time_slot)
    return jsonify({"restaurantId": restaurant_id, "date": date, "timeSlot": time_slot, "availableSeats": seats})


@bp.get("/restaurants/<restaurant_id>/bookings")
def restaurant_bookings(restaurant_id):
    return _dump(get_engine().bookings.get_restaurant_bookings(
        restaurant_id,
        status=request.args.get("status") or None,
        date=request.args.get("date") or None,
    ))


@bp.get("/restaurants/<restaurant_id>/reviews")
def restaurant_reviews(restaurant_id):
    return _dump(get_engine().reviews.get_restaurant_reviews(restaurant_id))


# ---- bookings ----
@bp.post("/bookings")
def create_booking():
    data = _payload()
    booking = get_engine().bookings.create_booking(
        restaurant_id=_required(data, "restaurantId"),
        user_id=_required(data, "userId"),
        date=_required(data, "date"),
        time_slot=_required(data, "timeSlot"),
        seats=_required(data, "seats"),
        contact=Contact(
            name=_required(data, "customerName"),
            email=data.get("customerEmail", ""),
            phone=data.get("customerPhone", ""),
        ),
        special_requests=data.get("specialRequests"),
    )
    return jsonify(booking.to_dict()), 201


@bp.get("/bookings")
def list_bookings():
    return _dump(get_engine().bookings.get_all_bookings(
        status=request.args.get("status") or None,
        restaurant_id=request.args.get("restaurantId") or None,
        user_id=request.args.get("userId") or None,
        date=request.args.get("date") or None,
    ))


@bp.get("/bookings/<booking_id>")
def get_booking(booking_id):
    return jsonify(get_engine().bookings.get_booking(booking_id).to_dict())


@bp.put("/bookings/<booking_id>")
def update_booking(booking_id):
    return jsonify(get_engine().bookings.update_booking(booking_id, _payload()).to_dict())


@bp.put("/bookings/<booking_id>/cancel")
def cancel_booking(booking_id):
    data = _payload()
    booking = get_engine().bookings.cancel_booking(booking_id, data.get("userId", ""))
    return jsonify(booking.to_dict())


@bp.put("/bookings/<booking_id>/status")
def update_booking_status(booking_id):
    data = _payload()
    booking = get_engine().bookings.update_booking_status(
        booking_id, _required(data, "status"), data.get("role", "customer"),
    )
    return jsonify(booking.to_dict())


# ---- reviews ----
@bp.post("/reviews")
def create_review():
    data = _payload()
    review = get_engine().reviews.create_review(
        restaurant_id=_required(data, "restaurantId"),
        user_id=_required(data, "userId"),
        rating=_required(data, "rating"),
        comment=data.get("comment", ""),
        user_name=data.get("userName"),
    )
    return jsonify(review.to_dict()), 201


@bp.get("/reviews")
def list_reviews():
    return _dump(get_engine().reviews.get_user_reviews(_required(request.args, "userId")))


@bp.put("/reviews/<review_id>")
def update_review(review_id):
    data = _payload()
    review = get_engine().reviews.update_review(review_id, rating=data.get("rating"), comment=data.get("comment"))
    return jsonify(review.to_dict())


@bp.delete("/reviews/<review_id>")
def delete_review(review_id):
    get_engine().reviews.delete_review(review_id)
    return ("", 204)


@bp.get("/reviews/can-review/<restaurant_id>")
def can_review(restaurant_id):
    ok = get_engine().reviews.can_review(request.args.get("userId", ""), restaurant_id)
    return jsonify({"canReview": ok})


# ---- favourites ----
@bp.get("/favourites")
def list_favourites():
    return _dump(get_engine().favourites.get_user_favourites(_required(request.args, "userId")))


@bp.post("/favourites")
def add_favourite():
    data = _payload()
    fav = get_engine().favourites.add_favourite(_required(data, "userId"), _required(data, "restaurantId"))
    return jsonify(fav.to_dict()), 201


@bp.delete("/favourites/<restaurant_id>")
def remove_favourite(restaurant_id):
    get_engine().favourites.remove_favourite(_required(request.args, "userId"), restaurant_id)
    return ("", 204)


@bp.get("/favourites/check/<restaurant_id>")
def check_favourite(restaurant_id):
    ok = get_engine().favourites.is_favourite(_required(request.args, "userId"), restaurant_id)
    return jsonify({"isFavourite": ok})


@bp.post("/favourites/toggle")
def toggle_favourite():
    data = _payload()
    state = get_engine().favourites.toggle_favourite(_required(data, "userId"), _required(data, "restaurantId"))
    return jsonify(state.to_dict())
