"""Cart ledger: the session's handle on its cart.

A ``CartLedger`` is created per customer session and passed to whichever
controller needs it; there is no global cart. Every mutation and read goes
through one re-entrant lock, so UI handlers firing on different threads are
applied one at a time and a read always sees the writes before it.

Ledger calls must run inside the storefront domain context
(``storefront.domain_context()``), pushed per thread.
"""

import threading

import structlog

from storefront.cart.cart import Cart, CartLine
from storefront.cart.catalog import CatalogItem
from storefront.pricing.config import load_pricing_rules
from storefront.pricing.totals import compute_totals
from storefront.shared.money import round_currency

logger = structlog.get_logger(__name__)


class CartLedger:
    def __init__(self, cart=None, rules=None, session_id=None):
        self._cart = cart if cart is not None else Cart.create(session_id=session_id)
        self._rules = rules if rules is not None else load_pricing_rules()
        self._lock = threading.RLock()

    @property
    def cart_id(self):
        return str(self._cart.id)

    @property
    def rules(self):
        return self._rules

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, item):
        """Add one unit of a catalog item (a ``CatalogItem`` or a raw catalog record).

        Raises:
            InvalidItem: if a raw record fails validation. The cart is untouched.
        """
        catalog_item = item if isinstance(item, CatalogItem) else CatalogItem.from_record(item)

        with self._lock:
            self._cart.add_item(catalog_item)
            quantity = self._cart.line_for(catalog_item.product_id).quantity

        logger.debug(
            "Cart item added",
            cart_id=self.cart_id,
            product_id=str(catalog_item.product_id),
            quantity=quantity,
        )

    def add_items(self, item, count):
        """Add ``count`` units of the same catalog item."""
        if count < 1:
            return
        catalog_item = item if isinstance(item, CatalogItem) else CatalogItem.from_record(item)

        with self._lock:
            for _ in range(count):
                self.add_item(catalog_item)

    def remove_item(self, product_id):
        with self._lock:
            present = self._cart.line_for(product_id) is not None
            self._cart.remove_item(product_id)

        if present:
            logger.debug("Cart item removed", cart_id=self.cart_id, product_id=str(product_id))

    def set_quantity(self, product_id, quantity):
        """Set a line's quantity; zero or less removes it, unknown ids are ignored."""
        with self._lock:
            line = self._cart.line_for(product_id)
            previous = line.quantity if line else 0
            self._cart.set_quantity(product_id, quantity)

        if line is None or previous == quantity:
            return

        logger.debug(
            "Cart quantity set",
            cart_id=self.cart_id,
            product_id=str(product_id),
            previous_quantity=previous,
            quantity=max(quantity, 0),
        )

    def clear(self):
        with self._lock:
            lines_removed = len(self._cart.items)
            self._cart.clear()

        logger.info("Cart cleared", cart_id=self.cart_id, lines_removed=lines_removed)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def items(self):
        """Snapshot of the cart's lines, in the order they were first added."""
        with self._lock:
            return tuple(CartLine.of(item) for item in self._cart.items)

    def item_count(self):
        with self._lock:
            return self._cart.item_count

    def subtotal(self):
        """Subtotal rounded half-up to cents."""
        with self._lock:
            return round_currency(self._cart.subtotal)

    def quantity_of(self, product_id):
        with self._lock:
            line = self._cart.line_for(product_id)
            return line.quantity if line else 0

    def is_empty(self):
        with self._lock:
            return not self._cart.items

    def summary(self, rules=None):
        """Order totals for the cart as it is right now."""
        with self._lock:
            subtotal = self._cart.subtotal
            item_count = self._cart.item_count

        return compute_totals(subtotal, item_count, rules if rules is not None else self._rules)
