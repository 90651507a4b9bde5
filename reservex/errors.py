class ReservexError(Exception):
    """Base error type for booking engine errors."""

    status_code = 400
    code = "error"

    def __init__(self, message: str = "", **extra):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or (self.__class__.__doc__ or self.code)
        self.extra = extra

    def to_dict(self) -> dict:
        body = {"error": self.code, "message": self.message}
        body.update(self.extra)
        return body


class InvalidInput(ReservexError):
    """The request was malformed."""

    status_code = 400
    code = "invalid_input"


class NotFound(ReservexError):
    """The entity does not exist in any tier."""

    status_code = 404
    code = "not_found"


class CapacityExceeded(ReservexError):
    """Not enough seats left for the requested slot."""

    status_code = 409
    code = "capacity_exceeded"

    def __init__(self, available: int, message: str = ""):
        super().__init__(
            message or f"Only {available} seats left for that slot.",
            available=available,
        )
        self.available = available


class InvalidTransition(ReservexError):
    """The booking cannot move to the requested status."""

    status_code = 409
    code = "invalid_transition"

    def __init__(self, current: str, requested: str, message: str = ""):
        super().__init__(
            message or f"Cannot move booking from {current} to {requested}.",
            current=current,
            requested=requested,
        )
        self.current = current
        self.requested = requested


class Forbidden(ReservexError):
    """The actor's role does not allow this operation."""

    status_code = 403
    code = "forbidden"


class Unauthorized(ReservexError):
    """The session is no longer valid; sign in again."""

    status_code = 401
    code = "unauthorized"


class RemoteUnavailable(ReservexError):
    """The remote service could not be reached."""

    status_code = 503
    code = "remote_unavailable"
