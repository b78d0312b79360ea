"""Pricing rules from the environment.

Each rule can be overridden with an environment variable; anything unset
falls back to the storefront's standard policy.
"""

import os

from protean.exceptions import ValidationError

from storefront.domain import logger
from storefront.pricing.rules import (
    DEFAULT_BASE_DELIVERY_FEE,
    DEFAULT_CURRENCY,
    DEFAULT_FREE_DELIVERY_THRESHOLD,
    DEFAULT_TAX_RATE,
    PricingRules,
)

ENV_FREE_DELIVERY_THRESHOLD = "STOREFRONT_FREE_DELIVERY_THRESHOLD"
ENV_BASE_DELIVERY_FEE = "STOREFRONT_BASE_DELIVERY_FEE"
ENV_TAX_RATE = "STOREFRONT_TAX_RATE"
ENV_CURRENCY = "STOREFRONT_CURRENCY"


def load_pricing_rules(environ=None) -> PricingRules:
    """Build ``PricingRules`` from environment variables.

    Raises:
        ValidationError: if a variable is set to something that is not a
            valid amount or rate. The message names the variable.
    """
    env = os.environ if environ is None else environ

    settings = {
        ENV_FREE_DELIVERY_THRESHOLD: env.get(ENV_FREE_DELIVERY_THRESHOLD, DEFAULT_FREE_DELIVERY_THRESHOLD),
        ENV_BASE_DELIVERY_FEE: env.get(ENV_BASE_DELIVERY_FEE, DEFAULT_BASE_DELIVERY_FEE),
        ENV_TAX_RATE: env.get(ENV_TAX_RATE, DEFAULT_TAX_RATE),
    }
    currency = env.get(ENV_CURRENCY, DEFAULT_CURRENCY).upper()

    try:
        rules = PricingRules.from_amounts(
            free_delivery_threshold=settings[ENV_FREE_DELIVERY_THRESHOLD],
            base_delivery_fee=settings[ENV_BASE_DELIVERY_FEE],
            tax_rate=settings[ENV_TAX_RATE],
            currency=currency,
        )
    except ValidationError as exc:
        overridden = sorted(name for name in (*settings, ENV_CURRENCY) if name in env)
        raise ValidationError(
            {"pricing_rules": [f"Invalid pricing configuration in {', '.join(overridden) or 'defaults'}: {exc.messages}"]}
        ) from exc

    logger.debug(
        "Pricing rules loaded",
        free_delivery_threshold=rules.free_delivery_threshold,
        base_delivery_fee=rules.base_delivery_fee,
        tax_rate=rules.tax_rate,
        currency=rules.currency,
    )
    return rules
