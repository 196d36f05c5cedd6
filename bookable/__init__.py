from bookable.availability.calculate import AvailabilityCalculator
from bookable.schemas.booking_schema import BookingConfig, BusyEvent
from bookable.schemas.schedule_schema import WeeklySchedule

__all__ = ["AvailabilityCalculator", "BookingConfig", "BusyEvent", "WeeklySchedule"]
