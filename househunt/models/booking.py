"""
Booking models - stay intervals, bookings and booking requests.
"""
import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .property import reference_id


def parse_calendar_date(v: Any) -> Optional[date]:
    """
    Best-effort conversion to a calendar date.

    Accepts ``date``, ``datetime`` (truncated), ``YYYY-MM-DD`` strings and ISO
    timestamps. Anything else, including empty strings, yields None.
    """
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        text = v.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


class DateRange(BaseModel):
    """
    Half-open stay interval ``[start, end)``.

    Either end may be missing while the user is still picking dates; such a
    range is simply invalid. Construction never fails on bad input.
    """
    model_config = ConfigDict(frozen=True)

    start: Optional[date] = None
    end: Optional[date] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Optional[date]:
        return parse_calendar_date(v)

    @classmethod
    def of(cls, start: Union[date, str, None], end: Union[date, str, None]) -> "DateRange":
        return cls(start=start, end=end)

    def nights(self) -> int:
        """Number of nights, never negative."""
        if self.start is None or self.end is None:
            return 0
        days = (self.end - self.start) / timedelta(days=1)
        return max(0, math.ceil(days))

    def is_valid(self) -> bool:
        return self.start is not None and self.end is not None and self.nights() > 0

    def overlaps(self, other: "DateRange") -> bool:
        """True when both ranges are valid and share at least one night."""
        if not (self.is_valid() and other.is_valid()):
            return False
        return self.start < other.end and other.start < self.end

    def starts_before(self, day: date) -> bool:
        return self.start is not None and self.start < day

    @staticmethod
    def min_check_in(today: Optional[date] = None) -> date:
        """Earliest selectable check-in: today."""
        return today or date.today()

    def min_check_out(self, today: Optional[date] = None) -> date:
        """Earliest selectable check-out: the chosen check-in, else today."""
        return self.start or self.min_check_in(today)

    def __str__(self) -> str:
        start = self.start.isoformat() if self.start else "?"
        end = self.end.isoformat() if self.end else "?"
        return f"{start} -> {end}"


class Booking(BaseModel):
    """A guest's reservation as returned by the remote service."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(alias="_id")
    property_id: str = Field(alias="listingId")
    guest_id: Optional[str] = Field(default=None, alias="customerId")
    host_id: Optional[str] = Field(default=None, alias="hostId")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    total_price: Decimal = Field(default=Decimal(0), alias="totalPrice")

    @field_validator("property_id", "guest_id", "host_id", mode="before")
    @classmethod
    def parse_reference(cls, v: Any) -> Any:
        """References may be populated documents or bare ids."""
        v = reference_id(v)
        return str(v) if isinstance(v, int) else v

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        parsed = parse_calendar_date(v)
        if parsed is None:
            raise ValueError(f"not a calendar date: {v!r}")
        return parsed

    @field_validator("total_price", mode="before")
    @classmethod
    def parse_total(cls, v: Any) -> Any:
        if v is None:
            return Decimal(0)
        if isinstance(v, float):
            return str(v)
        return v

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)


class BookingRequest(BaseModel):
    """Body of ``POST /bookings``."""
    property_id: str
    start_date: date
    end_date: date
    total_price: Decimal = Field(gt=0)

    def to_payload(self) -> dict[str, Any]:
        """Wire format expected by the service: camelCase keys, numeric total."""
        total = self.total_price
        if total == total.to_integral_value():
            total_json: Union[int, float] = int(total)
        else:
            total_json = float(total)
        return {
            "listingId": self.property_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "totalPrice": total_json,
        }


class PriceQuote(BaseModel):
    """Price breakdown shown before booking."""
    nightly_rate: Decimal
    nights: int = Field(ge=0)
    total: Decimal

    @property
    def is_bookable(self) -> bool:
        return self.nights > 0 and self.total > 0
