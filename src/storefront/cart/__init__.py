"""Cart ledger: catalog items, line items and the session-owned cart handle."""
