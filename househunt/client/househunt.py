"""
HouseHunt REST client with boundary parsing and error mapping.
"""
import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..config import get_config
from ..errors import RemoteRejectedError, ResponseParseError, TransportFailure
from ..models.booking import Booking, BookingRequest
from ..models.property import Property
from ..models.session import Session


logger = logging.getLogger(__name__)

_property_list = TypeAdapter(list[Property])
_booking_list = TypeAdapter(list[Booking])


class HouseHuntClient:
    """
    Async wrapper around the HouseHunt REST API.
    Returns validated Property/Booking models instead of raw JSON and raises
    the ``HouseHuntAPIError`` family for every failure. Never retries.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        config = get_config()
        self.base_url = (base_url or config.api.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.api.timeout_seconds

        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
        )
        logger.info(f"HouseHuntClient initialized for {self.base_url}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "HouseHuntClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_properties(self, category: Optional[str] = None) -> list[Property]:
        """``GET /properties``, optionally filtered by category label."""
        params = {"category": category} if category else None
        data = await self._request("GET", "/properties", params=params,
                                   fallback_error="Error fetching listings")
        return self._parse(_property_list, data, "property list")

    async def search_properties(self, term: str) -> list[Property]:
        """``GET /properties/search/{term}``."""
        path = f"/properties/search/{quote(term, safe='')}"
        data = await self._request("GET", path, fallback_error="Error searching listings")
        return self._parse(_property_list, data, "search results")

    async def get_property(self, property_id: str) -> Property:
        """``GET /properties/{id}``."""
        path = f"/properties/{quote(property_id, safe='')}"
        data = await self._request("GET", path, fallback_error="Error fetching property")
        return self._parse(Property, data, "property")

    async def delete_property(self, session: Session, property_id: str) -> None:
        """``DELETE /properties/{id}``; the success body is ignored."""
        path = f"/properties/{quote(property_id, safe='')}"
        await self._request(
            "DELETE",
            path,
            session=session,
            fallback_error="Error deleting property",
            expect_body=False,
        )
        logger.info(f"Deleted property {property_id}")

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def create_booking(self, session: Session, request: BookingRequest) -> Booking:
        """``POST /bookings`` on behalf of the session's user."""
        data = await self._request(
            "POST",
            "/bookings",
            session=session,
            json_body=request.to_payload(),
            fallback_error="Error creating booking",
        )
        booking = self._parse(Booking, data, "booking")
        logger.info(f"Created booking {booking.id} for property {booking.property_id}")
        return booking

    async def list_user_bookings(self, session: Session) -> list[Booking]:
        """``GET /bookings/user``: every booking of the session's user."""
        data = await self._request(
            "GET",
            "/bookings/user",
            session=session,
            fallback_error="Error fetching bookings",
        )
        return self._parse(_booking_list, data, "booking list")

    async def list_user_bookings_for_property(
        self, session: Session, property_id: str
    ) -> list[Booking]:
        """The user's bookings narrowed client-side to one property."""
        bookings = await self.list_user_bookings(session)
        return [b for b in bookings if b.property_id == property_id]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        session: Optional[Session] = None,
        params: Optional[dict[str, str]] = None,
        json_body: Optional[dict[str, Any]] = None,
        fallback_error: str = "Request failed",
        expect_body: bool = True,
    ) -> Any:
        """Send one request and return the decoded JSON body of a 2xx response."""
        headers = session.authorization_header if session else None
        try:
            response = await self._http.request(
                method, path, params=params, json=json_body, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise TransportFailure(f"Timed out: {e}") from e
        except httpx.DecodingError as e:
            logger.error(f"{method} {path} returned an undecodable body: {e}")
            raise ResponseParseError(f"Undecodable body: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportFailure(str(e)) from e

        if not response.is_success:
            message = self._error_message(response) or fallback_error
            logger.error(f"{method} {path} rejected with {response.status_code}: {message}")
            raise RemoteRejectedError(message, status_code=response.status_code)

        if not expect_body:
            return None

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"{method} {path} returned invalid JSON: {e}")
            raise ResponseParseError(f"Invalid JSON: {e}", status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        """Pull the ``error`` string out of an error body, if there is one."""
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if isinstance(data, dict):
            message = data.get("error") or data.get("message")
            if isinstance(message, str) and message:
                return message
        return None

    @staticmethod
    def _parse(schema: Any, data: Any, what: str) -> Any:
        """Validate JSON against a model class or TypeAdapter."""
        try:
            if isinstance(schema, TypeAdapter):
                return schema.validate_python(data)
            if isinstance(schema, type) and issubclass(schema, BaseModel):
                return schema.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed {what}: {e.error_count()} validation errors")
            raise ResponseParseError(f"Malformed {what}: {e}") from e
        raise TypeError(f"Unsupported schema {schema!r}")
