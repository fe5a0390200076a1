import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


@pytest.fixture(scope="session", autouse=True)
def setup_db(_marketplace_domain):
    from marketplace.utils.db import drop_db, setup_db

    setup_db(_marketplace_domain)

    yield

    drop_db(_marketplace_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
FARMER_ID = "farmer-001"
OTHER_FARMER_ID = "farmer-002"
CUSTOMER_ID = "cust-001"
OTHER_CUSTOMER_ID = "cust-002"


@pytest.fixture()
def profiles():
    """Register the usual cast: two farmers and two customers."""
    from marketplace.identity.profile import Profile, UserType
    from protean import current_domain

    repo = current_domain.repository_for(Profile)
    for user_id, user_type in (
        (FARMER_ID, UserType.FARMER),
        (OTHER_FARMER_ID, UserType.FARMER),
        (CUSTOMER_ID, UserType.CUSTOMER),
        (OTHER_CUSTOMER_ID, UserType.CUSTOMER),
    ):
        repo.add(Profile.register(user_id=user_id, email=f"{user_id}@example.com", user_type=user_type.value))

    return {
        "farmer": FARMER_ID,
        "other_farmer": OTHER_FARMER_ID,
        "customer": CUSTOMER_ID,
        "other_customer": OTHER_CUSTOMER_ID,
    }


@pytest.fixture()
def stock_product():
    """Factory that lists a product straight into the repository."""
    from marketplace.catalogue.product import Product
    from protean import current_domain

    def _make(quantity=10, price=150000, farmer_id=FARMER_ID, name="White Yam", **overrides):
        product = Product.create(
            farmer_id=farmer_id,
            name=name,
            category=overrides.pop("category", "Tubers"),
            price=price,
            quantity=quantity,
            **overrides,
        )
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _make
