"""Tests for the PurchaseRequest state machine and who may drive it."""

import pytest
from marketplace.purchase.events import (
    PurchaseRequestAccepted,
    PurchaseRequestCreated,
    PurchaseRequestPaid,
    PurchaseRequestRejected,
)
from marketplace.purchase.request import PurchaseRequest, PurchaseRequestStatus
from marketplace.shared.errors import (
    AuthorizationError,
    EmptyCartError,
    InvalidStateTransitionError,
    MixedFarmerError,
)
from protean.exceptions import ValidationError

CUSTOMER = "cust-001"
FARMER = "farmer-001"


def _lines():
    return [
        {
            "product_id": "prod-001",
            "product_name": "White Yam",
            "farmer_id": FARMER,
            "unit_price": 150000,
            "quantity": 2,
        },
        {
            "product_id": "prod-002",
            "product_name": "Plantain",
            "farmer_id": FARMER,
            "unit_price": 50000,
            "quantity": 1,
        },
    ]


def _make_request(**overrides):
    attrs = {"customer_id": CUSTOMER, "farmer_id": FARMER, "items": _lines(), "message": "Saturday please"}
    attrs.update(overrides)
    request = PurchaseRequest.create(**attrs)
    request._events.clear()
    return request


def _request_at_state(target_status):
    request = _make_request()
    if target_status == PurchaseRequestStatus.PENDING:
        return request
    if target_status == PurchaseRequestStatus.REJECTED:
        request.reject(actor_id=FARMER)
        return request

    request.accept(actor_id=FARMER)
    if target_status == PurchaseRequestStatus.ACCEPTED:
        return request

    request.pay(actor_id=CUSTOMER)
    return request


class TestCreation:
    def test_starts_pending_with_snapshot_total(self):
        request = PurchaseRequest.create(customer_id=CUSTOMER, farmer_id=FARMER, items=_lines())

        assert request.status == PurchaseRequestStatus.PENDING.value
        assert request.total_amount == 350000
        assert request.product_ids() == ["prod-001", "prod-002"]
        assert request.quantities() == [2, 1]
        assert request.item_count() == 3
        assert request.paid_at is None

    def test_raises_created_event(self):
        request = PurchaseRequest.create(customer_id=CUSTOMER, farmer_id=FARMER, items=_lines())
        event = request._events[-1]
        assert isinstance(event, PurchaseRequestCreated)
        assert event.total_amount == 350000

    def test_empty_items_rejected(self):
        with pytest.raises(EmptyCartError):
            PurchaseRequest.create(customer_id=CUSTOMER, farmer_id=FARMER, items=[])

    def test_item_from_other_farmer_rejected(self):
        items = _lines()
        items[1]["farmer_id"] = "farmer-002"
        with pytest.raises(MixedFarmerError):
            PurchaseRequest.create(customer_id=CUSTOMER, farmer_id=FARMER, items=items)

    def test_item_without_farmer_rejected(self):
        items = _lines()
        del items[1]["farmer_id"]
        with pytest.raises(ValidationError):
            PurchaseRequest.create(customer_id=CUSTOMER, farmer_id=FARMER, items=items)

    def test_zero_quantity_rejected(self):
        items = _lines()
        items[0]["quantity"] = 0
        with pytest.raises(ValidationError):
            PurchaseRequest.create(customer_id=CUSTOMER, farmer_id=FARMER, items=items)

    def test_duplicate_product_rejected(self):
        items = _lines()
        items[1]["product_id"] = "prod-001"
        with pytest.raises(ValidationError):
            PurchaseRequest.create(customer_id=CUSTOMER, farmer_id=FARMER, items=items)


class TestValidTransitions:
    def test_accept(self):
        request = _request_at_state(PurchaseRequestStatus.PENDING)
        request.accept(actor_id=FARMER)

        assert request.status == PurchaseRequestStatus.ACCEPTED.value
        assert isinstance(request._events[-1], PurchaseRequestAccepted)

    def test_reject(self):
        request = _request_at_state(PurchaseRequestStatus.PENDING)
        request.reject(actor_id=FARMER)

        assert request.status == PurchaseRequestStatus.REJECTED.value
        assert isinstance(request._events[-1], PurchaseRequestRejected)

    def test_pay_after_accept(self):
        request = _request_at_state(PurchaseRequestStatus.ACCEPTED)
        request.pay(actor_id=CUSTOMER)

        assert request.status == PurchaseRequestStatus.PAID.value
        assert request.paid_at is not None
        event = request._events[-1]
        assert isinstance(event, PurchaseRequestPaid)
        assert event.total_amount == 350000


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "state",
        [PurchaseRequestStatus.ACCEPTED, PurchaseRequestStatus.REJECTED, PurchaseRequestStatus.PAID],
    )
    def test_accept_only_from_pending(self, state):
        request = _request_at_state(state)
        with pytest.raises(InvalidStateTransitionError):
            request.accept(actor_id=FARMER)
        assert request.status == state.value

    @pytest.mark.parametrize(
        "state",
        [PurchaseRequestStatus.ACCEPTED, PurchaseRequestStatus.REJECTED, PurchaseRequestStatus.PAID],
    )
    def test_reject_only_from_pending(self, state):
        request = _request_at_state(state)
        with pytest.raises(InvalidStateTransitionError):
            request.reject(actor_id=FARMER)
        assert request.status == state.value

    @pytest.mark.parametrize(
        "state",
        [PurchaseRequestStatus.PENDING, PurchaseRequestStatus.REJECTED, PurchaseRequestStatus.PAID],
    )
    def test_pay_only_from_accepted(self, state):
        request = _request_at_state(state)
        with pytest.raises(InvalidStateTransitionError):
            request.pay(actor_id=CUSTOMER)
        assert request.status == state.value


class TestActors:
    def test_customer_cannot_accept(self):
        request = _request_at_state(PurchaseRequestStatus.PENDING)
        with pytest.raises(AuthorizationError):
            request.accept(actor_id=CUSTOMER)
        assert request.status == PurchaseRequestStatus.PENDING.value

    def test_other_farmer_cannot_reject(self):
        request = _request_at_state(PurchaseRequestStatus.PENDING)
        with pytest.raises(AuthorizationError):
            request.reject(actor_id="farmer-002")

    def test_farmer_cannot_pay(self):
        request = _request_at_state(PurchaseRequestStatus.ACCEPTED)
        with pytest.raises(AuthorizationError):
            request.pay(actor_id=FARMER)
        assert request.status == PurchaseRequestStatus.ACCEPTED.value

    def test_authorization_checked_before_state(self):
        request = _request_at_state(PurchaseRequestStatus.PAID)
        with pytest.raises(AuthorizationError):
            request.accept(actor_id=CUSTOMER)


class TestDeletability:
    @pytest.mark.parametrize("state", [PurchaseRequestStatus.PENDING, PurchaseRequestStatus.REJECTED])
    def test_customer_may_delete(self, state):
        _request_at_state(state).assert_deletable(actor_id=CUSTOMER)

    @pytest.mark.parametrize("state", [PurchaseRequestStatus.ACCEPTED, PurchaseRequestStatus.PAID])
    def test_accepted_and_paid_are_kept(self, state):
        with pytest.raises(InvalidStateTransitionError):
            _request_at_state(state).assert_deletable(actor_id=CUSTOMER)

    def test_farmer_cannot_delete(self):
        with pytest.raises(AuthorizationError):
            _request_at_state(PurchaseRequestStatus.PENDING).assert_deletable(actor_id=FARMER)
