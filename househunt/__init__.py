"""
HouseHunt rental marketplace client: listing feeds and bookings.
"""

__version__ = "1.0.0"
