"""Storefront bounded context: Shopping Cart and Order Totals.

Owns the customer's cart (line items and quantities) and derives the
checkout totals: subtotal, delivery fee, tax and grand total.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
