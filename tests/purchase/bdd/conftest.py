"""Shared BDD fixtures and step definitions for purchase requests."""

import pytest
from marketplace.cart.management import CreateCart
from marketplace.catalogue.product import Product
from marketplace.identity.profile import Profile, UserType
from protean import current_domain
from pytest_bdd import given, parsers


@pytest.fixture()
def world():
    """Names the scenario refers to, mapped to ids, plus the last captured error."""
    return {"products": {}, "cart_id": None, "request_id": None, "customer_id": None, "error": None}


def _ensure_profile(user_id, user_type):
    repo = current_domain.repository_for(Profile)
    if repo.find_by_user_id(user_id) is None:
        repo.add(Profile.register(user_id=user_id, email=f"{user_id}@example.com", user_type=user_type.value))


@given(parsers.cfparse('farmer "{farmer_id}" has listed "{name}" at {price:d} naira with {quantity:d} in stock'))
def listed_product(world, farmer_id, name, price, quantity):
    _ensure_profile(farmer_id, UserType.FARMER)
    product = Product.create(
        farmer_id=farmer_id,
        name=name,
        category="Produce",
        price=price * 100,
        quantity=quantity,
    )
    current_domain.repository_for(Product).add(product)
    world["products"][name] = str(product.id)


@given(parsers.cfparse('customer "{customer_id}" has a cart'))
def customer_cart(world, customer_id):
    _ensure_profile(customer_id, UserType.CUSTOMER)
    world["customer_id"] = customer_id
    world["cart_id"] = current_domain.process(CreateCart(customer_id=customer_id), asynchronous=False)
