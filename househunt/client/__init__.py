"""HouseHunt API client."""

from .househunt import HouseHuntClient

__all__ = ["HouseHuntClient"]
