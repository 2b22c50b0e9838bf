"""
Property access policy - what a viewer may do with a property.
"""
from typing import Optional

from pydantic import BaseModel

from ..models.property import Property
from ..models.session import Session


class ViewerCapabilities(BaseModel):
    """Actions offered to a viewer on a property page."""
    is_authenticated: bool
    is_owner: bool
    can_book: bool
    can_delete: bool


class PropertyAccessPolicy:
    """Owner vs guest rules. Services re-check these; UI gating is not enough."""

    def is_owner(self, property: Property, viewer: Optional[Session]) -> bool:
        if viewer is None:
            return False
        return property.creator_id == viewer.user_id

    def capabilities(self, property: Property, viewer: Optional[Session]) -> ViewerCapabilities:
        owner = self.is_owner(property, viewer)
        return ViewerCapabilities(
            is_authenticated=viewer is not None,
            is_owner=owner,
            # Anonymous viewers still see the booking form and are asked to log in
            can_book=not owner,
            can_delete=owner,
        )
