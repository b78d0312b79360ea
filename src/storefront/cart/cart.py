"""Cart aggregate, the ledger of line items a customer intends to buy.

Each catalog item appears at most once; adding it again bumps its quantity.
A line item never holds a quantity below one: any change that would take it
to zero removes the line instead. Prices are captured exactly, as decimal
strings, when the item is first added and are not refreshed afterwards; the
subtotal is their exact sum.
"""

from collections import Counter
from datetime import UTC, datetime
from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from storefront.cart.catalog import CatalogItem
from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.domain import storefront
from storefront.shared.money import round_currency, to_decimal


@storefront.entity(part_of="Cart")
class LineItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = String(required=True, max_length=50)
    tag = String(max_length=100)
    image_ref = String(max_length=1000)
    slug = String(max_length=200)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def unit_price(self):
        return to_decimal(self.price)

    @property
    def line_total(self):
        """Exact, unrounded ``unit_price * quantity``."""
        return self.unit_price * self.quantity


@storefront.value_object
class CartLine:
    """Read-only view of a line item, handed out for rendering."""

    product_id = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    price = String(required=True, max_length=50)
    tag = String(max_length=100)
    image_ref = String(max_length=1000)
    slug = String(max_length=200)
    quantity = Integer(required=True, min_value=1)

    @classmethod
    def of(cls, item: LineItem) -> "CartLine":
        return cls(
            product_id=str(item.product_id),
            name=item.name,
            price=item.price,
            tag=item.tag,
            image_ref=item.image_ref,
            slug=item.slug,
            quantity=item.quantity,
        )

    @property
    def unit_price(self):
        return to_decimal(self.price)

    @property
    def line_total(self):
        """Line total rounded to cents for display."""
        return round_currency(self.unit_price * self.quantity)


@storefront.aggregate
class Cart:
    session_id = String(max_length=255)
    items = HasMany(LineItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def line_items_must_be_unique_per_product(self):
        counts = Counter(str(item.product_id) for item in self.items)
        duplicates = sorted(product_id for product_id, count in counts.items() if count > 1)
        if duplicates:
            raise ValidationError({"items": [f"Duplicate line items for products: {', '.join(duplicates)}"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id=None):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        """Return the line item for a catalog id, or None."""
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    @property
    def item_count(self):
        """Total number of units across all line items."""
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self):
        """Exact sum of line totals. Callers round it when it leaves the domain."""
        return sum((item.line_total for item in self.items), Decimal(0))

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, catalog_item: CatalogItem):
        """Add one unit of a catalog item.

        An item already in the cart keeps the name and price it was first
        added with; only its quantity goes up.
        """
        existing = self.line_for(catalog_item.product_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += 1
            line = existing
        else:
            line = LineItem(
                product_id=catalog_item.product_id,
                name=catalog_item.name,
                price=catalog_item.price,
                tag=catalog_item.tag,
                image_ref=catalog_item.image_ref,
                slug=catalog_item.slug,
                quantity=1,
                added_at=now,
            )
            self.add_items(line)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(line.id),
                product_id=str(line.product_id),
                name=line.name,
                unit_price=line.price,
                quantity=line.quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove a line item. Removing an item that is not in the cart does nothing."""
        line = self.line_for(product_id)
        if line is None:
            return

        self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=line.quantity,
            )
        )

    def set_quantity(self, product_id, quantity):
        """Replace the quantity of a line item already in the cart.

        A quantity of zero or less removes the line. Unknown products are
        ignored; quantities are only set on items added through ``add_item``.
        """
        if quantity <= 0:
            self.remove_item(product_id)
            return

        line = self.line_for(product_id)
        if line is None or line.quantity == quantity:
            return

        previous_quantity = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def clear(self):
        """Remove every line item."""
        lines = list(self.items)
        for line in lines:
            self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                lines_removed=len(lines),
            )
        )
