"""
Pricing - stay totals from a nightly rate and a date range.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from ..models.booking import DateRange, PriceQuote


logger = logging.getLogger(__name__)

ZERO = Decimal(0)


def _to_rate(value: Any) -> Decimal:
    """Coerce a nightly rate to a finite non-negative Decimal, else zero."""
    if isinstance(value, bool) or value is None:
        return ZERO
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not rate.is_finite() or rate < 0:
        return ZERO
    return rate


class PricingCalculator:
    """
    Computes what a stay costs.
    Malformed input degrades to a zero total; callers decide whether zero is
    acceptable.
    """

    def compute_total(self, nightly_rate: Any, date_range: DateRange) -> Decimal:
        if not isinstance(date_range, DateRange) or not date_range.is_valid():
            return ZERO
        rate = _to_rate(nightly_rate)
        if rate == ZERO:
            logger.debug(f"Unusable nightly rate {nightly_rate!r}")
            return ZERO
        return rate * date_range.nights()

    def quote(self, nightly_rate: Any, date_range: DateRange) -> PriceQuote:
        """Nights and total for display next to the date picker."""
        nights = date_range.nights() if isinstance(date_range, DateRange) else 0
        return PriceQuote(
            nightly_rate=_to_rate(nightly_rate),
            nights=nights,
            total=self.compute_total(nightly_rate, date_range),
        )
