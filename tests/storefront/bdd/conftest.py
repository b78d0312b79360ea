"""Shared BDD fixtures and step definitions for the storefront cart."""

import pytest
from pytest_bdd import given, parsers, then
from storefront.cart.catalog import InvalidItem
from storefront.cart.ledger import CartLedger
from storefront.pricing.rules import default_pricing_rules


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="ledger")
def empty_cart():
    return CartLedger(session_id="sess-bdd", rules=default_pricing_rules())


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_lines_singular(ledger, count):
    assert len(ledger.items()) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(ledger, count):
    assert len(ledger.items()) == count


@then("the cart action fails with an invalid item error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected an invalid item error but none was raised"
    assert isinstance(error["exc"], InvalidItem)
