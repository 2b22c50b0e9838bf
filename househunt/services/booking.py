"""
Booking service - validates and submits bookings, deletes owned properties.
"""
import logging
from datetime import date
from typing import Callable, Optional, Sequence

from ..client.househunt import HouseHuntClient
from ..config import get_config
from ..errors import BookingError, DeleteError, ErrorCode, HouseHuntAPIError
from ..models.booking import Booking, BookingRequest, DateRange
from ..models.property import Property
from ..models.result import Result
from ..models.session import Session
from .access import PropertyAccessPolicy
from .availability import AvailabilityChecker, ConflictPolicy
from .pricing import PricingCalculator


logger = logging.getLogger(__name__)


class BookingService:
    """
    Orchestrates booking creation and property deletion.

    Every local check runs before the network is touched; the remote call is
    the only externally visible effect. A failed submission is reported, never
    replayed. Callers must not submit twice concurrently.
    """

    def __init__(
        self,
        client: HouseHuntClient,
        access_policy: Optional[PropertyAccessPolicy] = None,
        availability: Optional[AvailabilityChecker] = None,
        pricing: Optional[PricingCalculator] = None,
        enforce_min_check_in: Optional[bool] = None,
        today: Callable[[], date] = date.today,
    ):
        config = get_config()
        self.client = client
        self.access_policy = access_policy or PropertyAccessPolicy()
        self.availability = availability or AvailabilityChecker(
            ConflictPolicy(config.booking.conflict_policy)
        )
        self.pricing = pricing or PricingCalculator()
        self.enforce_min_check_in = (
            config.booking.enforce_min_check_in
            if enforce_min_check_in is None
            else enforce_min_check_in
        )
        self._today = today

    def validate(
        self,
        viewer: Optional[Session],
        property: Property,
        date_range: DateRange,
        existing_bookings: Sequence[Booking],
    ) -> Optional[BookingError]:
        """Run the local checks in order and return the first failure, if any."""
        if viewer is None:
            return BookingError(code=ErrorCode.UNAUTHENTICATED)

        if self.access_policy.is_owner(property, viewer):
            return BookingError(code=ErrorCode.OWNER_CANNOT_BOOK)

        if not date_range.is_valid():
            if date_range.start is None or date_range.end is None:
                return BookingError(
                    code=ErrorCode.INVALID_DATE_RANGE,
                    message="Please select check-in and check-out dates",
                )
            return BookingError(code=ErrorCode.INVALID_DATE_RANGE)

        if self.enforce_min_check_in and date_range.starts_before(self._today()):
            return BookingError(
                code=ErrorCode.INVALID_DATE_RANGE,
                message="Check-in date cannot be in the past",
            )

        if self.availability.has_conflict(
            viewer.user_id, property.id, existing_bookings, candidate_range=date_range
        ):
            return BookingError(code=ErrorCode.ALREADY_BOOKED)

        if self.pricing.compute_total(property.price, date_range) <= 0:
            return BookingError(code=ErrorCode.INVALID_PRICE)

        return None

    async def create_booking(
        self,
        viewer: Optional[Session],
        property: Property,
        date_range: DateRange,
        existing_bookings_for_viewer: Sequence[Booking] = (),
    ) -> Result[Booking]:
        """
        Book ``property`` for ``date_range`` on behalf of ``viewer``.

        Args:
            viewer: Logged-in session, or None
            property: Property being booked
            date_range: Requested stay
            existing_bookings_for_viewer: The viewer's known bookings

        Returns:
            Result holding the server-created Booking, or a BookingError
        """
        error = self.validate(viewer, property, date_range, existing_bookings_for_viewer)
        if error is not None:
            logger.info(f"Booking of property {property.id} refused locally: {error.code.value}")
            return Result[Booking].failure(error)

        request = BookingRequest(
            property_id=property.id,
            start_date=date_range.start,
            end_date=date_range.end,
            total_price=self.pricing.compute_total(property.price, date_range),
        )

        logger.info(
            f"Submitting booking for property {property.id} ({date_range}, "
            f"total {request.total_price})"
        )
        try:
            booking = await self.client.create_booking(viewer, request)
        except HouseHuntAPIError as e:
            logger.warning(f"Booking of property {property.id} failed: {e.code.value}")
            return Result[Booking].failure(BookingError.from_exception(e))

        return Result[Booking].success(booking)

    async def delete_property(
        self,
        viewer: Optional[Session],
        property: Property,
    ) -> Result[None]:
        """Delete a property the viewer owns. Feeds must be refreshed by the caller."""
        if not self.access_policy.is_owner(property, viewer):
            logger.info(f"Delete of property {property.id} refused: viewer is not the owner")
            return Result[None].failure(DeleteError(code=ErrorCode.NOT_OWNER))

        try:
            await self.client.delete_property(viewer, property.id)
        except HouseHuntAPIError as e:
            logger.warning(f"Delete of property {property.id} failed: {e.code.value}")
            return Result[None].failure(DeleteError.from_exception(e))

        return Result[None].success()
