"""
Availability checks against existing bookings.
"""
import logging
from enum import Enum
from typing import Optional, Sequence

from ..models.booking import Booking, DateRange


logger = logging.getLogger(__name__)


class ConflictPolicy(str, Enum):
    """
    How a new booking is tested against existing ones.

    GUEST_PER_PROPERTY: a guest may hold a single booking per property, no
    matter the dates. This is how the marketplace has always behaved, and it
    also means a guest can never return to the same property.

    DATE_OVERLAP: reject only stays that share a night with any existing
    booking on the property, from any guest.
    """
    GUEST_PER_PROPERTY = "guest_per_property"
    DATE_OVERLAP = "date_overlap"


class AvailabilityChecker:
    """Decides whether a candidate stay conflicts with known bookings."""

    def __init__(self, policy: ConflictPolicy = ConflictPolicy.GUEST_PER_PROPERTY):
        self.policy = ConflictPolicy(policy)

    def has_conflict(
        self,
        candidate_guest_id: str,
        property_id: str,
        existing_bookings: Sequence[Booking],
        candidate_range: Optional[DateRange] = None,
    ) -> bool:
        """
        Check a candidate stay against existing bookings.

        Args:
            candidate_guest_id: Guest asking to book
            property_id: Property being booked
            existing_bookings: Bookings known to the caller (usually the
                guest's own, as returned by ``GET /bookings/user``)
            candidate_range: Requested stay; only used by DATE_OVERLAP

        Returns:
            True if the booking must be refused
        """
        same_property = [b for b in existing_bookings if b.property_id == property_id]
        if not same_property:
            return False

        if self.policy == ConflictPolicy.GUEST_PER_PROPERTY:
            for booking in same_property:
                # An unknown guest on a booking from the user's own list is the user
                if booking.guest_id is None or booking.guest_id == candidate_guest_id:
                    logger.info(
                        f"Guest {candidate_guest_id} already holds booking {booking.id} "
                        f"on property {property_id}"
                    )
                    return True
            return False

        if candidate_range is None or not candidate_range.is_valid():
            return False
        for booking in same_property:
            if booking.date_range.overlaps(candidate_range):
                logger.info(
                    f"Stay {candidate_range} overlaps booking {booking.id} "
                    f"({booking.date_range}) on property {property_id}"
                )
                return True
        return False
