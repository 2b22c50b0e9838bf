"""Booking, availability and feed services."""

from .access import PropertyAccessPolicy, ViewerCapabilities
from .availability import AvailabilityChecker, ConflictPolicy
from .booking import BookingService
from .detail import PropertyDetail, PropertyDetailService
from .feed import ListingFeedService
from .feed_controller import FeedController
from .pricing import PricingCalculator

__all__ = [
    "AvailabilityChecker",
    "BookingService",
    "ConflictPolicy",
    "FeedController",
    "ListingFeedService",
    "PricingCalculator",
    "PropertyAccessPolicy",
    "PropertyDetail",
    "PropertyDetailService",
    "ViewerCapabilities",
]
