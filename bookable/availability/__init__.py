from bookable.availability.calculate import AvailabilityCalculator, TimeSelectionError
from bookable.availability.conflict_filter import filter_available_slots, has_bookable_gap
from bookable.availability.slot_generator import Slot, generate_slots
from bookable.availability.time_conversion import ZoneLookupError, localize, shift_zone
from bookable.availability.window_bridging import CandidateWindow, candidate_windows

__all__ = [
    "AvailabilityCalculator",
    "TimeSelectionError",
    "filter_available_slots",
    "has_bookable_gap",
    "Slot",
    "generate_slots",
    "ZoneLookupError",
    "localize",
    "shift_zone",
    "CandidateWindow",
    "candidate_windows",
]
