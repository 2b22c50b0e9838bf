"""
Property models - listings as returned by the remote service.
"""
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def reference_id(v: Any) -> Any:
    """Collapse an embedded document (``{"_id": ...}``) to its id string."""
    if isinstance(v, dict):
        return v.get("_id") or v.get("id")
    return v


class Property(BaseModel):
    """
    A rentable listing.

    Field aliases follow the remote JSON (``_id``, ``creator``,
    ``listingPhotoPaths``...); instances are read-only projections.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(alias="_id")
    creator_id: str = Field(alias="creator")

    # Location
    city: str = ""
    province: str = ""
    country: str = ""
    street_address: Optional[str] = Field(default=None, alias="streetAddress")
    apt_suite: Optional[str] = Field(default=None, alias="aptSuite")

    category: str = ""
    type: Optional[str] = None
    price: Decimal = Field(ge=0, description="Nightly rate")

    title: Optional[str] = None
    description: Optional[str] = None
    highlight: Optional[str] = None
    highlight_desc: Optional[str] = Field(default=None, alias="highlightDesc")

    guest_count: Optional[int] = Field(default=None, alias="guestCount")
    bedroom_count: Optional[int] = Field(default=None, alias="bedroomCount")
    bed_count: Optional[int] = Field(default=None, alias="bedCount")
    bathroom_count: Optional[int] = Field(default=None, alias="bathroomCount")
    amenities: list[str] = Field(default_factory=list)

    photo_paths: list[str] = Field(default_factory=list, alias="listingPhotoPaths")

    @field_validator("id", "creator_id", mode="before")
    @classmethod
    def parse_reference(cls, v: Any) -> Any:
        """Creator arrives either as an id or as a populated user document."""
        v = reference_id(v)
        return str(v) if isinstance(v, int) else v

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        # Floats go through str() so 99.9 stays 99.9 rather than its binary expansion
        if isinstance(v, float):
            return str(v)
        return v

    @field_validator("amenities", "photo_paths", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def location(self) -> str:
        """Human readable "city, province, country" without empty parts."""
        return ", ".join(part for part in (self.city, self.province, self.country) if part)

    def photo_urls(self, base_url: str) -> list[str]:
        """Resolve stored photo paths (``public/uploads/x.jpg``) to absolute URLs."""
        base = base_url.rstrip("/")
        urls = []
        for path in self.photo_paths:
            relative = path.replace("\\", "/").replace("public", "", 1).lstrip("/")
            urls.append(f"{base}/{relative}")
        return urls
