"""Checkout pricing: delivery and tax rules, and the order total calculator."""
