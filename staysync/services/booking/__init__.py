from staysync.services.booking.booking_service import BookingService, check_booking_transition

__all__ = ["BookingService", "check_booking_transition"]
