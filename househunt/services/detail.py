"""
Property detail - everything the property page needs in one load.
"""
import logging
from typing import Optional

from pydantic import BaseModel, Field

from ..client.househunt import HouseHuntClient
from ..errors import HouseHuntAPIError, OperationError
from ..models.booking import Booking, DateRange, PriceQuote
from ..models.property import Property
from ..models.result import Result
from ..models.session import Session
from .access import PropertyAccessPolicy, ViewerCapabilities
from .booking import BookingService
from .pricing import PricingCalculator


logger = logging.getLogger(__name__)


class PropertyDetail(BaseModel):
    """A property as shown to one viewer."""
    property: Property
    capabilities: ViewerCapabilities
    existing_bookings: list[Booking] = Field(
        default_factory=list,
        description="The viewer's own bookings on this property",
    )

    def photo_urls(self, base_url: str) -> list[str]:
        return self.property.photo_urls(base_url)


class PropertyDetailService:
    """Loads a property page and books from it."""

    def __init__(
        self,
        client: HouseHuntClient,
        booking_service: BookingService,
        access_policy: Optional[PropertyAccessPolicy] = None,
        pricing: Optional[PricingCalculator] = None,
    ):
        self.client = client
        self.booking_service = booking_service
        self.access_policy = access_policy or booking_service.access_policy
        self.pricing = pricing or booking_service.pricing

    async def load(
        self,
        property_id: str,
        viewer: Optional[Session] = None,
    ) -> Result[PropertyDetail]:
        try:
            property = await self.client.get_property(property_id)
        except HouseHuntAPIError as e:
            logger.error(f"Loading property {property_id} failed: {e.message}")
            return Result[PropertyDetail].failure(OperationError.from_exception(e))

        bookings: list[Booking] = []
        if viewer is not None:
            try:
                bookings = await self.client.list_user_bookings_for_property(
                    viewer, property_id
                )
            except HouseHuntAPIError as e:
                # The page still renders; the server re-checks on submit
                logger.warning(f"Loading bookings for property {property_id} failed: {e.message}")

        return Result[PropertyDetail].success(
            PropertyDetail(
                property=property,
                capabilities=self.access_policy.capabilities(property, viewer),
                existing_bookings=bookings,
            )
        )

    def quote(self, detail: PropertyDetail, date_range: DateRange) -> PriceQuote:
        return self.pricing.quote(detail.property.price, date_range)

    async def book(
        self,
        detail: PropertyDetail,
        viewer: Optional[Session],
        date_range: DateRange,
    ) -> Result[Booking]:
        return await self.booking_service.create_booking(
            viewer, detail.property, date_range, detail.existing_bookings
        )

    async def delete(self, detail: PropertyDetail, viewer: Optional[Session]) -> Result[None]:
        return await self.booking_service.delete_property(viewer, detail.property)
