"""Booking cost arithmetic."""

from decimal import ROUND_HALF_UP, Decimal

from boxoffice.config import settings
from boxoffice.schemas.booking import BookingCostBreakdown


def round_currency(amount: Decimal) -> int:
    """Round to the nearest whole currency unit, halves rounding up."""
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_cost_breakdown(
    base_amount: float,
    fee_rate: float | None = None,
    gst_rate: float | None = None,
) -> BookingCostBreakdown:
    """
    Compute convenience fee, GST and total for a seat subtotal.

    The fee is a percentage of the base amount; GST applies to base plus fee.
    Each is rounded to the nearest unit independently before summing.

    Args:
        base_amount: Sum of seat prices
        fee_rate: Convenience fee rate (uses settings if not provided)
        gst_rate: GST rate (uses settings if not provided)

    Returns:
        BookingCostBreakdown

    Examples:
        >>> calculate_cost_breakdown(1000, 0.05, 0.18).total
        1239.0
    """
    if base_amount < 0:
        raise ValueError("base_amount must be non-negative")

    fee_rate = settings.convenience_fee_rate if fee_rate is None else fee_rate
    gst_rate = settings.gst_rate if gst_rate is None else gst_rate

    # str() keeps 0.18 from turning into 0.17999... before rounding
    base = Decimal(str(base_amount))
    convenience_fee = round_currency(base * Decimal(str(fee_rate)))
    gst = round_currency((base + convenience_fee) * Decimal(str(gst_rate)))

    return BookingCostBreakdown(
        base_amount=float(base_amount),
        convenience_fee=convenience_fee,
        gst=gst,
        total=float(base + convenience_fee + gst),
    )
