"""
Shared fixtures: sample properties, bookings, sessions and a fake API client.
"""
import asyncio
from typing import Optional

import pytest

from househunt.config import reset_config
from househunt.errors import HouseHuntAPIError
from househunt.models.booking import Booking, BookingRequest
from househunt.models.property import Property
from househunt.models.session import Session


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Every test starts from default configuration."""
    for name in (
        "HOUSEHUNT_API_URL",
        "HOUSEHUNT_API_TIMEOUT",
        "HOUSEHUNT_CONFLICT_POLICY",
        "HOUSEHUNT_ENFORCE_MIN_CHECK_IN",
        "HOUSEHUNT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


def build_property(
    property_id: str = "prop-1",
    creator_id: str = "owner-1",
    price=100,
    category: str = "Beachfront",
    city: str = "Goa",
) -> Property:
    return Property.model_validate({
        "_id": property_id,
        "creator": creator_id,
        "city": city,
        "province": "Goa",
        "country": "India",
        "category": category,
        "type": "An entire place",
        "price": price,
        "title": f"Stay {property_id}",
        "listingPhotoPaths": ["public/uploads/a.jpg"],
    })


def build_booking(
    booking_id: str = "bk-1",
    property_id: str = "prop-1",
    guest_id: Optional[str] = "guest-1",
    start: str = "2030-01-10",
    end: str = "2030-01-12",
    total=200,
) -> Booking:
    return Booking.model_validate({
        "_id": booking_id,
        "listingId": property_id,
        "customerId": guest_id,
        "hostId": "owner-1",
        "startDate": start,
        "endDate": end,
        "totalPrice": total,
    })


@pytest.fixture
def property_factory():
    return build_property


@pytest.fixture
def booking_factory():
    return build_booking


@pytest.fixture
def sample_property() -> Property:
    return build_property()


@pytest.fixture
def owner() -> Session:
    return Session(user_id="owner-1", token="owner-token")


@pytest.fixture
def guest() -> Session:
    return Session(user_id="guest-1", token="guest-token")


class FakeClient:
    """
    Stands in for HouseHuntClient.

    Records every call; ``fail_with`` makes the next remote call raise.
    Listing calls can be held on an ``asyncio.Event`` per query key to
    control completion order.
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_with: Optional[HouseHuntAPIError] = None
        self.listings: dict[tuple, list[Property]] = {}
        self.gates: dict[tuple, asyncio.Event] = {}
        self.properties: dict[str, Property] = {}
        self.user_bookings: list[Booking] = []
        self.next_booking_id = "bk-new"

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

    async def _listing(self, key: tuple) -> list[Property]:
        self.calls.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        self._maybe_fail()
        return list(self.listings.get(key, []))

    async def list_properties(self, category: Optional[str] = None) -> list[Property]:
        return await self._listing(("category", category))

    async def search_properties(self, term: str) -> list[Property]:
        return await self._listing(("search", term))

    async def get_property(self, property_id: str) -> Property:
        self.calls.append(("get_property", property_id))
        self._maybe_fail()
        return self.properties[property_id]

    async def create_booking(self, session: Session, request: BookingRequest) -> Booking:
        self.calls.append(("create_booking", session.user_id, request))
        self._maybe_fail()
        return Booking(
            _id=self.next_booking_id,
            listingId=request.property_id,
            customerId=session.user_id,
            startDate=request.start_date,
            endDate=request.end_date,
            totalPrice=request.total_price,
        )

    async def delete_property(self, session: Session, property_id: str) -> None:
        self.calls.append(("delete_property", session.user_id, property_id))
        self._maybe_fail()

    async def list_user_bookings_for_property(
        self, session: Session, property_id: str
    ) -> list[Booking]:
        self.calls.append(("user_bookings", session.user_id, property_id))
        self._maybe_fail()
        return [b for b in self.user_bookings if b.property_id == property_id]


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
