class BookingError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def as_dict(self):
        return {'error': self.message}


class NotFound(BookingError):
    status_code = 404


class BadRequest(BookingError):
    status_code = 400


class Unauthorized(BookingError):
    status_code = 401


class PermissionDenied(BookingError):
    status_code = 403


class SeatUnavailable(BookingError):
    status_code = 409

    def __init__(self, seats, message=None):
        self.seats = sorted(seats)
        if message is None:
            message = f"Seats {', '.join(str(s) for s in self.seats)} are already booked"
        super().__init__(message)

    def as_dict(self):
        data = super().as_dict()
        data['seats'] = self.seats
        return data


class PaymentError(BookingError):
    status_code = 502
