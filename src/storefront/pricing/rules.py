"""Pricing rules: the delivery and tax policy applied at checkout."""

from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String

from storefront.domain import storefront
from storefront.shared.money import from_minor_units, to_decimal, to_minor_units

DEFAULT_FREE_DELIVERY_THRESHOLD = "25.00"
DEFAULT_BASE_DELIVERY_FEE = "3.99"
DEFAULT_TAX_RATE = "0.08875"
DEFAULT_CURRENCY = "USD"


@storefront.value_object
class PricingRules:
    """Business rules consumed by the order total calculator.

    Orders at or above ``free_delivery_threshold`` ship free; smaller orders
    pay ``base_delivery_fee``. Tax is ``tax_rate`` applied to the subtotal.
    The rate is kept as a decimal string so it is never approximated.
    """

    free_delivery_threshold_cents = Integer(required=True, min_value=0)
    base_delivery_fee_cents = Integer(required=True, min_value=0)
    tax_rate = String(required=True, max_length=20)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)

    @invariant.post
    def tax_rate_must_be_a_fraction(self):
        try:
            rate = to_decimal(self.tax_rate)
        except ValueError:
            raise ValidationError({"tax_rate": [f"Tax rate must be a decimal number: {self.tax_rate!r}"]}) from None
        if not (Decimal(0) <= rate < Decimal(1)):
            raise ValidationError({"tax_rate": [f"Tax rate must be between 0 and 1: {self.tax_rate}"]})

    @classmethod
    def from_amounts(
        cls,
        free_delivery_threshold=DEFAULT_FREE_DELIVERY_THRESHOLD,
        base_delivery_fee=DEFAULT_BASE_DELIVERY_FEE,
        tax_rate=DEFAULT_TAX_RATE,
        currency=DEFAULT_CURRENCY,
    ):
        """Build rules from currency amounts rather than cents."""
        try:
            threshold_cents = to_minor_units(free_delivery_threshold)
            fee_cents = to_minor_units(base_delivery_fee)
            rate = to_decimal(tax_rate)
        except ValueError as exc:
            raise ValidationError({"pricing_rules": [str(exc)]}) from exc

        return cls(
            free_delivery_threshold_cents=threshold_cents,
            base_delivery_fee_cents=fee_cents,
            tax_rate=str(rate),
            currency=currency,
        )

    @property
    def free_delivery_threshold(self):
        return from_minor_units(self.free_delivery_threshold_cents)

    @property
    def base_delivery_fee(self):
        return from_minor_units(self.base_delivery_fee_cents)

    @property
    def tax_rate_decimal(self):
        return to_decimal(self.tax_rate)


def default_pricing_rules():
    """The storefront's standard policy: free delivery from $25, $3.99 otherwise, 8.875% tax."""
    return PricingRules.from_amounts()
