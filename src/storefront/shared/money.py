"""Currency arithmetic.

Catalog prices are kept as exact ``Decimal`` strings inside the cart, so a
price with a fraction of a cent is summed exactly and repeated add/remove
cycles never drift. Rounding to the currency's minor unit happens once, at
the edge: when a subtotal or an order summary goes out. Summary amounts are
then held as integer cents.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS_PER_UNIT = 100
CURRENCY_QUANTUM = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def to_decimal(value) -> Decimal:
    """Read a currency amount or rate as an exact ``Decimal``.

    Floats go through their shortest ``repr`` so that ``16.99`` becomes
    ``Decimal("16.99")`` rather than its binary approximation.

    Raises:
        ValueError: if the value is not numeric, or is NaN or infinite.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a currency amount: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float | str):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a currency amount: {value!r}") from None
    else:
        raise ValueError(f"Not a currency amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Currency amount must be finite: {value!r}")
    return amount


def to_minor_units(value) -> int:
    """Convert an amount to integer cents, rounding half-up."""
    amount = to_decimal(value)
    return int((amount * CENTS_PER_UNIT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> Decimal:
    """Convert integer cents to a 2-place ``Decimal``."""
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(CURRENCY_QUANTUM)


def round_currency(amount: Decimal) -> Decimal:
    """Round to the currency's minor unit, half-up."""
    return amount.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def format_price(amount, currency: str = "USD") -> str:
    """Format an amount for display, e.g. ``$1,234.50``."""
    value = round_currency(to_decimal(amount))
    symbol = CURRENCY_SYMBOLS.get(currency)
    sign = "-" if value < 0 else ""
    if symbol is None:
        return f"{sign}{abs(value):,.2f} {currency}"
    return f"{sign}{symbol}{abs(value):,.2f}"
