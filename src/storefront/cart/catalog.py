"""Catalog item descriptors, as the menu hands them to the cart.

The catalog lookup service sends plain records. ``CatalogItem.from_record``
is the boundary check: a record with a missing id or name, or a negative,
non-numeric or non-finite price, is rejected with ``InvalidItem`` before it
can reach a cart.
"""

from collections.abc import Mapping

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from storefront.domain import storefront
from storefront.shared.money import to_decimal

_ID_KEYS = ("id", "product_id", "productId")
_PRICE_KEYS = ("unitPrice", "unit_price", "price")
_TAG_KEYS = ("tag", "restaurantOrCategoryTag", "category", "restaurant")
_IMAGE_KEYS = ("imageRef", "image_ref", "image")


class InvalidItem(ValidationError):
    """A catalog item that cannot be placed in a cart."""


def _first(record, keys):
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


@storefront.value_object
class CatalogItem:
    """A purchasable menu item as priced by the catalog at add time."""

    product_id = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    price = String(required=True, max_length=50)
    tag = String(max_length=100)
    image_ref = String(max_length=1000)
    slug = String(max_length=200)

    @invariant.post
    def price_must_be_a_non_negative_amount(self):
        try:
            amount = to_decimal(self.price)
        except ValueError:
            raise ValidationError({"unit_price": [f"Price must be a decimal amount: {self.price!r}"]}) from None
        if amount < 0:
            raise ValidationError({"unit_price": [f"Price cannot be negative: {self.price}"]})

    @property
    def unit_price(self):
        """Exact catalog price, never rounded."""
        return to_decimal(self.price)

    @classmethod
    def from_record(cls, record: Mapping) -> "CatalogItem":
        """Build a catalog item from a raw catalog record.

        Accepts the catalog's camelCase keys as well as snake_case ones.
        The image may be a plain reference or the CMS shape ``{"url": ...}``.

        Raises:
            InvalidItem: if the record is not a usable catalog item.
        """
        if not isinstance(record, Mapping):
            raise InvalidItem({"item": [f"Catalog item must be a mapping, got {type(record).__name__}"]})

        product_id = _first(record, _ID_KEYS)
        if product_id is None or str(product_id).strip() == "":
            raise InvalidItem({"product_id": ["Catalog item is missing an id"]})

        name = record.get("name")
        if not name:
            raise InvalidItem({"name": ["Catalog item is missing a name"]})

        raw_price = _first(record, _PRICE_KEYS)
        if raw_price is None:
            raise InvalidItem({"unit_price": ["Catalog item is missing a price"]})
        try:
            price = to_decimal(raw_price)
        except ValueError as exc:
            raise InvalidItem({"unit_price": [str(exc)]}) from exc
        if price < 0:
            raise InvalidItem({"unit_price": [f"Price cannot be negative: {raw_price!r}"]})

        image = _first(record, _IMAGE_KEYS)
        if isinstance(image, Mapping):
            image = image.get("url")

        tag = _first(record, _TAG_KEYS)

        try:
            return cls(
                product_id=str(product_id),
                name=str(name),
                price=str(price),
                tag=str(tag) if tag is not None else None,
                image_ref=str(image) if image else None,
                slug=record.get("slug"),
            )
        except ValidationError as exc:
            raise InvalidItem(exc.messages) from exc
