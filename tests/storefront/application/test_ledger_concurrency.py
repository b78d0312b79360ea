"""Tests for serialised ledger mutations across threads."""

import threading
from decimal import Decimal

from storefront.cart.ledger import CartLedger
from storefront.domain import storefront
from storefront.pricing.rules import default_pricing_rules

SUSHI = {"id": "dish-010", "name": "Salmon Roll", "unitPrice": "8.25", "tag": "Sakura"}
MISO = {"id": "dish-011", "name": "Miso Soup", "unitPrice": "3.10", "tag": "Sakura"}


def _run_in_threads(target, count):
    errors = []

    def worker(index):
        try:
            with storefront.domain_context():
                target(index)
        except Exception as exc:  # surfaced through the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []


class TestConcurrentMutations:
    def test_concurrent_adds_of_the_same_item_merge(self):
        ledger = CartLedger(rules=default_pricing_rules())

        def add_many(_):
            for _ in range(50):
                ledger.add_item(SUSHI)

        _run_in_threads(add_many, 8)

        items = ledger.items()
        assert len(items) == 1
        assert items[0].quantity == 400
        assert ledger.subtotal() == Decimal("3300.00")

    def test_interleaved_adds_and_removes_keep_quantities_positive(self):
        ledger = CartLedger(rules=default_pricing_rules())

        def churn(index):
            for _ in range(25):
                ledger.add_item(MISO)
                if index % 2:
                    ledger.set_quantity("dish-011", ledger.quantity_of("dish-011") - 1)
                else:
                    ledger.remove_item("dish-011")

        _run_in_threads(churn, 6)

        product_ids = [line.product_id for line in ledger.items()]
        assert len(product_ids) == len(set(product_ids))
        assert all(line.quantity >= 1 for line in ledger.items())
