import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture()
def margherita():
    from storefront.cart.catalog import CatalogItem

    return CatalogItem.from_record(
        {
            "id": "dish-001",
            "name": "Margherita Pizza",
            "unitPrice": 16.99,
            "tag": "Luigi's Pizzeria",
            "imageRef": "https://images.example.com/margherita.jpg",
        }
    )


@pytest.fixture()
def pad_thai():
    from storefront.cart.catalog import CatalogItem

    return CatalogItem.from_record(
        {
            "id": "dish-002",
            "name": "Pad Thai",
            "unitPrice": "12.99",
            "tag": "Bangkok Street",
        }
    )
