"""Typed exceptions for billing failures."""


class BillingError(Exception):
    """Base class for billing errors."""


class PricingValidationError(BillingError, ValueError):
    """
    Input failed validation. No computation was performed.

    Carries every failing rule so callers can report them together.
    """

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class NotFoundError(BillingError):
    """Referenced record does not exist."""


class LineItemNotFoundError(NotFoundError):
    """Line item is not in the cart."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Line item {item_id} not found")


class StayChargeNotFoundError(NotFoundError):
    """Stay charge does not exist in the store."""

    def __init__(self, charge_id):
        self.charge_id = charge_id
        super().__init__(f"Stay charge {charge_id} not found")
