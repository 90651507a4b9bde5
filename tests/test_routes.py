def _book(client, **overrides):
    body = {
        "restaurantId": "rest-10", "userId": "user-customer-2", "date": "2026-03-01",
        "timeSlot": "7:00 PM", "seats": 4, "customerName": "Fatima Ahmed",
        "customerEmail": "customer2@demo.com", "customerPhone": "+880 1711-999002",
    }
    body.update(overrides)
    return client.post("/api/bookings", json=body)


def test_health_offline(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "OK", "remote": False, "demoMode": False, "reauthRequired": False}


def test_list_and_filter_restaurants(client):
    assert len(client.get("/api/restaurants").get_json()) == 10
    italian = client.get("/api/restaurants?cuisine=Italian").get_json()
    assert [r["id"] for r in italian] == ["rest-3"]
    assert italian[0]["totalSeats"] == 45


def test_bad_min_rating(client):
    resp = client.get("/api/restaurants?minRating=lots")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_input"


def test_unknown_restaurant_is_404(client):
    resp = client.get("/api/restaurants/rest-404")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


def test_booking_flow(client):
    resp = _book(client)
    assert resp.status_code == 201
    booking = resp.get_json()
    assert booking["status"] == "pending"

    avail = client.get("/api/restaurants/rest-10/availability",
                       query_string={"date": "2026-03-01", "timeSlot": "7:00 PM"}).get_json()
    assert avail["availableSeats"] == 31

    resp = client.put(f"/api/bookings/{booking['id']}/status", json={"status": "confirmed", "role": "customer"})
    assert resp.status_code == 403
    resp = client.put(f"/api/bookings/{booking['id']}/status", json={"status": "confirmed", "role": "manager"})
    assert resp.get_json()["status"] == "confirmed"

    resp = client.put(f"/api/bookings/{booking['id']}/cancel", json={"userId": "user-customer-2"})
    assert resp.get_json()["status"] == "cancelled"
    resp = client.put(f"/api/bookings/{booking['id']}/cancel", json={"userId": "user-customer-2"})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "invalid_transition"


def test_overbooking_is_409_with_seats_left(client):
    assert _book(client, seats=30).status_code == 201
    resp = _book(client, seats=6)
    assert resp.status_code == 409
    assert resp.get_json()["available"] == 5


def test_missing_booking_fields(client):
    resp = _book(client, customerName="")
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "customerName"


def test_availability_needs_date_and_slot(client):
    assert client.get("/api/restaurants/rest-1/availability?date=2026-03-01").status_code == 400


def test_user_bookings_include_seeds(client):
    bookings = client.get("/api/bookings?userId=user-customer-2").get_json()
    assert [b["id"] for b in bookings] == ["booking-4"]


def test_review_updates_rating(client):
    resp = client.post("/api/reviews", json={"restaurantId": "rest-10", "userId": "user-customer-1", "rating": 3})
    assert resp.status_code == 201
    assert resp.get_json()["userName"] == "Rakib Hassan"
    restaurant = client.get("/api/restaurants/rest-10").get_json()
    assert (restaurant["rating"], restaurant["totalReviews"]) == (3.0, 1)
    can = client.get("/api/reviews/can-review/rest-10?userId=user-customer-1").get_json()
    assert can == {"canReview": False}


def test_favourite_toggle(client):
    resp = client.post("/api/favourites/toggle", json={"userId": "user-customer-2", "restaurantId": "rest-10"})
    assert resp.get_json() == {"isFavourite": False}
    check = client.get("/api/favourites/check/rest-10?userId=user-customer-2").get_json()
    assert check == {"isFavourite": False}
    assert client.get("/api/favourites?userId=user-customer-2").get_json() == []


def test_favourites_need_user(client):
    assert client.get("/api/favourites").status_code == 400


def test_cli_availability(app):
    result = app.test_cli_runner().invoke(args=["availability", "rest-1", "2026-03-01", "7:00 PM"])
    assert result.exit_code == 0
    assert "rest-1 2026-03-01 7:00 PM: 50 seats available" in result.output


def test_cli_availability_bad_slot(app):
    result = app.test_cli_runner().invoke(args=["availability", "rest-1", "2026-03-01", "7:10 PM"])
    assert result.exit_code != 0
    assert "Invalid time slot" in result.output


def test_cli_check_remote_offline(app):
    result = app.test_cli_runner().invoke(args=["check-remote"])
    assert "running on local data only" in result.output


def test_cli_seed_summary_and_reset(app, client):
    _book(client)
    runner = app.test_cli_runner()
    assert "overlay bookings  1" in runner.invoke(args=["seed-summary"]).output
    assert "Overlay cleared: bookings" in runner.invoke(args=["reset-overlay", "--kind", "bookings"]).output
    assert "overlay bookings  0" in runner.invoke(args=["seed-summary"]).output


def test_auth_round_trip(client):
    resp = client.post("/api/auth/login", json={"email": "customer@demo.com", "password": "demo123"})
    assert resp.status_code == 200
    assert resp.get_json()["id"] == "user-customer-1"
    assert client.get("/api/health").get_json()["demoMode"] is True
    assert client.get("/api/auth/me").get_json()["name"] == "Rakib Hassan"

    assert client.post("/api/auth/logout").status_code == 204
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["reauthenticate"] is True


def test_login_needs_password(client):
    resp = client.post("/api/auth/login", json={"email": "customer@demo.com"})
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "password"


def test_register_offline(client):
    resp = client.post("/api/auth/register", json={"email": "new@demo.com", "password": "pw", "name": "Nabil"})
    assert resp.status_code == 201
    assert resp.get_json()["role"] == "customer"


def test_menu_by_category(client):
    drinks = client.get("/api/restaurants/rest-1/menu?category=Drinks").get_json()
    assert [m["name"] for m in drinks] == ["Fresh Juice"]
    assert client.get("/api/restaurants/rest-1/menu?category=Snacks").status_code == 400
