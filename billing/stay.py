"""
Bed stay proration.

A stay is billed in whole days on the tariff of the bed being vacated:
days = whole 24-hour periods between admission and transfer, minimum one.
A same-day transfer is billed as one day, and so is a transfer stamped
earlier than the admission.

Times may be timezone-aware or naive wall-clock times from a single ward
clock, but not a mix of both.
"""

from datetime import datetime, timedelta

from billing.exceptions import PricingValidationError
from billing.models import StayProration
from billing.money import require_money

_DAY = timedelta(days=1)


def days_between(admission_at: datetime, transfer_at: datetime) -> int:
    """
    Whole days elapsed, at least 1.

    Raises:
        PricingValidationError: If one datetime is naive and the other aware
    """
    if (admission_at.tzinfo is None) != (transfer_at.tzinfo is None):
        raise PricingValidationError(
            "Admission and transfer dates must both be timezone-aware or both naive"
        )

    return max(1, (transfer_at - admission_at) // _DAY)


def calculate_stay(
    from_tariff_paise: int,
    admission_at: datetime,
    transfer_at: datetime,
) -> StayProration:
    """
    Days stayed and amount owed for an occupancy ending in a transfer.

    Args:
        from_tariff_paise: Daily tariff of the bed being vacated
        admission_at: Start of the occupancy
        transfer_at: Transfer time, on the same kind of clock as admission_at

    Returns:
        StayProration with days_stayed >= 1 and total = days * tariff

    Raises:
        PricingValidationError: If the tariff is negative or the dates mix
            naive and aware datetimes
    """
    require_money(from_tariff_paise, "Tariff")
    days = days_between(admission_at, transfer_at)
    return StayProration(days_stayed=days, total_amount_paise=days * from_tariff_paise)
