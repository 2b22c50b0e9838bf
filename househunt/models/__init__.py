"""
Pydantic models for the HouseHunt client.
All data contracts with the remote service are defined here.
"""

from .property import Property
from .booking import Booking, BookingRequest, DateRange, PriceQuote
from .session import Session
from .feed import ALL_CATEGORY, FeedState, ListingFeedQuery, QueryKind
from .result import Result

__all__ = [
    # Property
    "Property",
    # Booking
    "Booking",
    "BookingRequest",
    "DateRange",
    "PriceQuote",
    # Session
    "Session",
    # Feed
    "ALL_CATEGORY",
    "FeedState",
    "ListingFeedQuery",
    "QueryKind",
    # Result
    "Result",
]
