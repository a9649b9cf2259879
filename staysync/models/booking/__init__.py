from staysync.models.booking.booking import Booking

__all__ = ["Booking"]
