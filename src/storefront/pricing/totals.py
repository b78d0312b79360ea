"""Order total calculator: subtotal, delivery fee, tax and grand total.

``compute_totals`` is a pure function of the cart's subtotal, its item count
and the pricing rules. It keeps no state, so every call is independent.

An empty cart (no items) always totals to zero: there is nothing to deliver,
so no delivery fee is charged, even though a zero subtotal is below the
free-delivery threshold.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Integer, String

from storefront.domain import storefront
from storefront.pricing.rules import default_pricing_rules
from storefront.shared.money import format_price, from_minor_units, round_currency, to_decimal, to_minor_units


@storefront.value_object
class OrderSummary:
    """Monetary breakdown of an order, recomputed every time it is asked for."""

    item_count = Integer(default=0, min_value=0)
    subtotal_cents = Integer(default=0, min_value=0)
    delivery_fee_cents = Integer(default=0, min_value=0)
    tax_cents = Integer(default=0, min_value=0)
    total_cents = Integer(default=0, min_value=0)
    free_delivery = Boolean(default=False)
    amount_to_free_delivery_cents = Integer(default=0, min_value=0)
    currency = String(max_length=3, default="USD")

    @invariant.post
    def total_must_add_up(self):
        expected = self.subtotal_cents + self.delivery_fee_cents + self.tax_cents
        if self.total_cents != expected:
            raise ValidationError({"total": [f"Total {self.total_cents} does not equal its parts ({expected})"]})

    @property
    def subtotal(self):
        return from_minor_units(self.subtotal_cents)

    @property
    def delivery_fee(self):
        return from_minor_units(self.delivery_fee_cents)

    @property
    def tax(self):
        return from_minor_units(self.tax_cents)

    @property
    def total(self):
        return from_minor_units(self.total_cents)

    @property
    def amount_to_free_delivery(self):
        return from_minor_units(self.amount_to_free_delivery_cents)

    def to_display(self):
        """Formatted amounts for the checkout screen."""
        return {
            "subtotal": format_price(self.subtotal, self.currency),
            "delivery_fee": "FREE" if self.delivery_fee_cents == 0 else format_price(self.delivery_fee, self.currency),
            "tax": format_price(self.tax, self.currency),
            "total": format_price(self.total, self.currency),
        }


def compute_totals(subtotal, item_count, rules=None) -> OrderSummary:
    """Derive delivery fee, tax and total for an order.

    Args:
        subtotal: Order subtotal, non-negative. ``Decimal``, ``int``, ``str``
            or ``float``; rounded half-up to cents.
        item_count: Number of units in the order.
        rules: ``PricingRules`` to apply; the standard policy if omitted.
    """
    if rules is None:
        rules = default_pricing_rules()

    if item_count == 0:
        return OrderSummary(
            currency=rules.currency,
            amount_to_free_delivery_cents=rules.free_delivery_threshold_cents,
        )

    subtotal = round_currency(to_decimal(subtotal))
    subtotal_cents = to_minor_units(subtotal)

    free_delivery = subtotal_cents >= rules.free_delivery_threshold_cents
    delivery_fee_cents = 0 if free_delivery else rules.base_delivery_fee_cents

    tax_cents = to_minor_units(subtotal * rules.tax_rate_decimal)

    return OrderSummary(
        item_count=item_count,
        subtotal_cents=subtotal_cents,
        delivery_fee_cents=delivery_fee_cents,
        tax_cents=tax_cents,
        total_cents=subtotal_cents + delivery_fee_cents + tax_cents,
        free_delivery=free_delivery,
        amount_to_free_delivery_cents=max(rules.free_delivery_threshold_cents - subtotal_cents, 0),
        currency=rules.currency,
    )
