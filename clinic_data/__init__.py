from .providers import (
    Provider,
    PROVIDERS,
    get_provider,
    find_providers_by_role,
)
from .bookings import (
    Appointment,
    BookingResult,
    active_bookings,
    create_booking,
    reschedule_booking,
    cancel_booking,
    complete_booking,
    get_booking,
    list_bookings,
    reset_bookings,
)

__all__ = [
    "Provider",
    "PROVIDERS",
    "get_provider",
    "find_providers_by_role",
    "Appointment",
    "BookingResult",
    "active_bookings",
    "create_booking",
    "reschedule_booking",
    "cancel_booking",
    "complete_booking",
    "get_booking",
    "list_bookings",
    "reset_bookings",
]
