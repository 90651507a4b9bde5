import logging
import threading

import requests

from reservex.errors import (
    CapacityExceeded,
    Forbidden,
    InvalidInput,
    InvalidTransition,
    NotFound,
    RemoteUnavailable,
    Unauthorized,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
HEALTH_TIMEOUT = 5


class AuthSession:
    """Bearer credential for the remote service. A 401 wipes it."""

    def __init__(self, token: str | None = None, user: dict | None = None):
        self._lock = threading.Lock()
        self.token = token or None
        self.user = user
        self.reauth_required = False

    def sign_in(self, token: str, user: dict | None = None):
        with self._lock:
            self.token = token
            self.user = user
            self.reauth_required = False

    def invalidate(self):
        with self._lock:
            self.token = None
            self.user = None
            self.reauth_required = True
        logger.warning("Remote session expired; re-authentication required")

    def sign_out(self):
        with self._lock:
            self.token = None
            self.user = None
            self.reauth_required = False

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


def _error_message(resp) -> str:
    try:
        body = resp.json() or {}
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or f"HTTP {resp.status_code}"
    return f"HTTP {resp.status_code}"


def _body(resp) -> dict:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class ReservexApi:
    """
    Thin client for the authoritative booking service.

    One attempt per call, bounded by ``timeout``. Transport failures, timeouts
    and 5xx answers become RemoteUnavailable so the resolver can fall back;
    a 401 invalidates the session and is never a fallback trigger.
    """

    def __init__(self, base_url: str | None, auth: AuthSession | None = None,
                 timeout: float = DEFAULT_TIMEOUT, health_timeout: float = HEALTH_TIMEOUT,
                 session: requests.Session | None = None):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.auth = auth or AuthSession()
        self.timeout = timeout
        self.health_timeout = health_timeout
        self.http = session or requests.Session()
        self.http.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _request(self, method: str, path: str, *, params=None, payload=None, timeout=None):
        if not self.configured:
            raise RemoteUnavailable("No remote service configured")

        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}
        try:
            resp = self.http.request(
                method, url,
                params=params or None,
                json=payload,
                headers=self.auth.headers(),
                timeout=timeout or self.timeout,
            )
        except requests.Timeout as e:
            raise RemoteUnavailable(f"{method} {path} timed out: {e}") from e
        except requests.RequestException as e:
            raise RemoteUnavailable(f"{method} {path} failed: {e}") from e

        code = resp.status_code
        if code == 401:
            self.auth.invalidate()
            raise Unauthorized(_error_message(resp))
        if code >= 500:
            raise RemoteUnavailable(f"{method} {path} answered HTTP {code}")
        if code >= 400:
            self._raise_client_error(resp)

        if code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteUnavailable(f"{method} {path} returned a non-JSON body") from e

    @staticmethod
    def _raise_client_error(resp):
        code = resp.status_code
        message = _error_message(resp)
        body = _body(resp)
        if code == 403:
            raise Forbidden(message)
        if code == 404:
            raise NotFound(message)
        if code == 409:
            if "availableSeats" in body:
                raise CapacityExceeded(int(body["availableSeats"]), message)
            raise InvalidTransition(body.get("current", "unknown"), body.get("requested", "unknown"), message)
        raise InvalidInput(message)

    # --- health ---
    def health(self) -> bool:
        try:
            self._request("GET", "/health", timeout=self.health_timeout)
            return True
        except RemoteUnavailable as e:
            logger.warning("Remote health check failed: %s", e)
            return False

    # --- auth ---
    def login(self, email, password):
        return self._request("POST", "/auth/login", payload={"email": email, "password": password})

    def register(self, payload):
        return self._request("POST", "/auth/register", payload=payload)

    def logout(self):
        return self._request("POST", "/auth/logout")

    def me(self):
        return self._request("GET", "/auth/me")

    # --- restaurants ---
    def list_restaurants(self, params=None):
        return self._request("GET", "/restaurants", params=params)

    def get_restaurant(self, restaurant_id):
        return self._request("GET", f"/restaurants/{restaurant_id}")

    def search_restaurants(self, query):
        return self._request("GET", "/restaurants/search", params={"q": query})

    def list_cuisines(self):
        return self._request("GET", "/restaurants/cuisines")

    def get_menu(self, restaurant_id):
        return self._request("GET", f"/restaurants/{restaurant_id}/menu")

    def get_availability(self, restaurant_id, date, time_slot):
        body = self._request(
            "GET", f"/restaurants/{restaurant_id}/availability",
            params={"date": date, "timeSlot": time_slot},
        )
        return int((body or {}).get("availableSeats", 0))

    def list_restaurant_bookings(self, restaurant_id, params=None):
        return self._request("GET", f"/restaurants/{restaurant_id}/bookings", params=params)

    def list_restaurant_reviews(self, restaurant_id):
        return self._request("GET", f"/restaurants/{restaurant_id}/reviews")

    # --- bookings ---
    def create_booking(self, payload):
        return self._request("POST", "/bookings", payload=payload)

    def list_bookings(self, params=None):
        return self._request("GET", "/bookings", params=params)

    def get_booking(self, booking_id):
        return self._request("GET", f"/bookings/{booking_id}")

    def update_booking(self, booking_id, payload):
        return self._request("PUT", f"/bookings/{booking_id}", payload=payload)

    def cancel_booking(self, booking_id):
        return self._request("PUT", f"/bookings/{booking_id}/cancel")

    def update_booking_status(self, booking_id, status):
        return self._request("PUT", f"/bookings/{booking_id}/status", payload={"status": status})

    # --- reviews ---
    def create_review(self, payload):
        return self._request("POST", "/reviews", payload=payload)

    def list_reviews(self, params=None):
        return self._request("GET", "/reviews", params=params)

    def update_review(self, review_id, payload):
        return self._request("PUT", f"/reviews/{review_id}", payload=payload)

    def delete_review(self, review_id):
        return self._request("DELETE", f"/reviews/{review_id}")

    def can_review(self, restaurant_id):
        body = self._request("GET", f"/reviews/can-review/{restaurant_id}")
        return bool((body or {}).get("canReview"))

    # --- favourites ---
    def list_favourites(self, params=None):
        return self._request("GET", "/favourites", params=params)

    def add_favourite(self, restaurant_id):
        return self._request("POST", "/favourites", payload={"restaurantId": restaurant_id})

    def remove_favourite(self, restaurant_id):
        return self._request("DELETE", f"/favourites/{restaurant_id}")

    def is_favourite(self, restaurant_id):
        body = self._request("GET", f"/favourites/check/{restaurant_id}")
        return bool((body or {}).get("isFavourite"))

    def toggle_favourite(self, restaurant_id):
        body = self._request("POST", "/favourites/toggle", payload={"restaurantId": restaurant_id})
        return bool((body or {}).get("isFavourite"))
