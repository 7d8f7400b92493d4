class BookingError(Exception):
    """Base class for failures the booking resolver surfaces to its caller.

    Every subclass maps onto a single HTTP status; the service's exception
    handler does the translation, the resolver itself never retries.
    """

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    status_code = 400


class NotFoundError(BookingError):
    status_code = 404


class AuthorizationError(BookingError):
    status_code = 403


class ConflictError(BookingError):
    status_code = 409
