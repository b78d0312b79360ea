"""Storefront shopping cart ledger and order total calculator."""
