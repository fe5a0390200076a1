"""Application tests for creating, reviewing and deleting purchase requests."""

import json

import pytest
from marketplace.purchase.creation import CreatePurchaseRequest
from marketplace.purchase.removal import DeletePurchaseRequest
from marketplace.purchase.request import PurchaseRequest, PurchaseRequestStatus
from marketplace.purchase.review import AcceptPurchaseRequest, RejectPurchaseRequest
from marketplace.shared.errors import (
    AuthorizationError,
    EmptyCartError,
    InvalidStateTransitionError,
    MixedFarmerError,
    NotFoundError,
)
from protean import current_domain


def _get(request_id):
    return current_domain.repository_for(PurchaseRequest).get(request_id)


class TestCreatePurchaseRequest:
    def test_prices_come_from_catalogue(self, open_request, stock_product):
        yam = stock_product(price=150000)
        request_id = open_request([(yam, 3)], message="Before Friday")

        request = _get(request_id)
        assert request.status == PurchaseRequestStatus.PENDING.value
        assert request.total_amount == 450000
        assert request.items[0].product_name == "White Yam"
        assert request.items[0].unit_price == 150000

    def test_product_of_other_farmer_rejected(self, open_request, stock_product):
        goat = stock_product(farmer_id="farmer-002", name="Goat")
        with pytest.raises(MixedFarmerError):
            open_request([(goat, 1)])

    def test_empty_items_rejected(self, profiles):
        with pytest.raises(EmptyCartError):
            current_domain.process(
                CreatePurchaseRequest(customer_id=profiles["customer"], farmer_id=profiles["farmer"], items="[]"),
                asynchronous=False,
            )

    def test_unknown_product(self, profiles):
        with pytest.raises(NotFoundError):
            current_domain.process(
                CreatePurchaseRequest(
                    customer_id=profiles["customer"],
                    farmer_id=profiles["farmer"],
                    items=json.dumps([{"product_id": "prod-404", "quantity": 1}]),
                ),
                asynchronous=False,
            )

    def test_farmer_must_be_a_farmer(self, open_request, stock_product, profiles):
        yam = stock_product(farmer_id=profiles["other_customer"])
        with pytest.raises(AuthorizationError):
            open_request([(yam, 1)], farmer_id=profiles["other_customer"])


class TestReview:
    def test_farmer_accepts(self, open_request, stock_product, profiles):
        request_id = open_request([(stock_product(), 1)])
        current_domain.process(
            AcceptPurchaseRequest(request_id=request_id, actor_id=profiles["farmer"]),
            asynchronous=False,
        )
        assert _get(request_id).status == PurchaseRequestStatus.ACCEPTED.value

    def test_farmer_rejects(self, open_request, stock_product, profiles):
        request_id = open_request([(stock_product(), 1)])
        current_domain.process(
            RejectPurchaseRequest(request_id=request_id, actor_id=profiles["farmer"]),
            asynchronous=False,
        )
        assert _get(request_id).status == PurchaseRequestStatus.REJECTED.value

    def test_other_farmer_cannot_accept(self, open_request, stock_product, profiles):
        request_id = open_request([(stock_product(), 1)])
        with pytest.raises(AuthorizationError):
            current_domain.process(
                AcceptPurchaseRequest(request_id=request_id, actor_id=profiles["other_farmer"]),
                asynchronous=False,
            )
        assert _get(request_id).status == PurchaseRequestStatus.PENDING.value

    def test_customer_cannot_accept(self, open_request, stock_product, profiles):
        request_id = open_request([(stock_product(), 1)])
        with pytest.raises(AuthorizationError):
            current_domain.process(
                AcceptPurchaseRequest(request_id=request_id, actor_id=profiles["customer"]),
                asynchronous=False,
            )

    def test_accept_twice_rejected(self, accepted_request, stock_product, profiles):
        request_id = accepted_request([(stock_product(), 1)])
        with pytest.raises(InvalidStateTransitionError):
            current_domain.process(
                AcceptPurchaseRequest(request_id=request_id, actor_id=profiles["farmer"]),
                asynchronous=False,
            )

    def test_unknown_request(self, profiles):
        with pytest.raises(NotFoundError):
            current_domain.process(
                AcceptPurchaseRequest(request_id="req-404", actor_id=profiles["farmer"]),
                asynchronous=False,
            )


class TestDelete:
    def test_customer_deletes_pending(self, open_request, stock_product, profiles):
        request_id = open_request([(stock_product(), 1)])
        current_domain.process(
            DeletePurchaseRequest(request_id=request_id, actor_id=profiles["customer"]),
            asynchronous=False,
        )
        with pytest.raises(NotFoundError):
            current_domain.repository_for(PurchaseRequest).load(request_id)

    def test_customer_deletes_rejected(self, open_request, stock_product, profiles):
        request_id = open_request([(stock_product(), 1)])
        current_domain.process(
            RejectPurchaseRequest(request_id=request_id, actor_id=profiles["farmer"]),
            asynchronous=False,
        )
        current_domain.process(
            DeletePurchaseRequest(request_id=request_id, actor_id=profiles["customer"]),
            asynchronous=False,
        )
        assert current_domain.repository_for(PurchaseRequest).for_customer(profiles["customer"]) == []

    def test_accepted_request_is_kept(self, accepted_request, stock_product, profiles):
        request_id = accepted_request([(stock_product(), 1)])
        with pytest.raises(InvalidStateTransitionError):
            current_domain.process(
                DeletePurchaseRequest(request_id=request_id, actor_id=profiles["customer"]),
                asynchronous=False,
            )
        assert _get(request_id).status == PurchaseRequestStatus.ACCEPTED.value

    def test_farmer_cannot_delete(self, open_request, stock_product, profiles):
        request_id = open_request([(stock_product(), 1)])
        with pytest.raises(AuthorizationError):
            current_domain.process(
                DeletePurchaseRequest(request_id=request_id, actor_id=profiles["farmer"]),
                asynchronous=False,
            )
