"""PurchaseRequest aggregate — a customer's offer to buy from one farmer.

State Machine:
    PENDING → ACCEPTED → PAID
    PENDING → REJECTED

Only the farmer may accept or reject; only the customer may pay, and only the
customer may delete a request while it is still pending or was rejected.
The total is captured at creation and never recomputed.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.purchase.events import (
    PurchaseRequestAccepted,
    PurchaseRequestCreated,
    PurchaseRequestPaid,
    PurchaseRequestRejected,
)
from marketplace.shared.errors import (
    AuthorizationError,
    EmptyCartError,
    InvalidStateTransitionError,
    MixedFarmerError,
    NotFoundError,
)


class PurchaseRequestStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PAID = "paid"


_VALID_TRANSITIONS = {
    PurchaseRequestStatus.PENDING: {PurchaseRequestStatus.ACCEPTED, PurchaseRequestStatus.REJECTED},
    PurchaseRequestStatus.ACCEPTED: {PurchaseRequestStatus.PAID},
    PurchaseRequestStatus.REJECTED: set(),  # Terminal
    PurchaseRequestStatus.PAID: set(),  # Terminal
}

_DELETABLE_STATES = {PurchaseRequestStatus.PENDING, PurchaseRequestStatus.REJECTED}


@marketplace.entity(part_of="PurchaseRequest")
class RequestLineItem:
    """One product and the quantity requested, priced when the request was made."""

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    unit_price = Integer(required=True, min_value=0)  # kobo
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self):
        return self.unit_price * self.quantity


@marketplace.aggregate
class PurchaseRequest:
    customer_id = Identifier(required=True)
    farmer_id = Identifier(required=True)
    items = HasMany(RequestLineItem)
    total_amount = Integer(required=True, min_value=0)  # kobo
    message = Text()
    status = String(
        choices=PurchaseRequestStatus,
        default=PurchaseRequestStatus.PENDING.value,
    )
    created_at = DateTime()
    updated_at = DateTime()
    paid_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id, farmer_id, items, message=None):
        """Create a pending request.

        Args:
            customer_id: The customer sending the request.
            farmer_id: The farmer every item must belong to.
            items: List of dicts with product_id, farmer_id, quantity and
                unit_price (kobo); optionally product_name.
            message: Optional note to the farmer.
        """
        if not items:
            raise EmptyCartError({"items": ["A purchase request needs at least one item"]})

        seen = set()
        for item in items:
            item_farmer = item.get("farmer_id")
            if item_farmer is None:
                raise ValidationError({"items": [f"Product {item['product_id']} has no farmer"]})
            if str(item_farmer) != str(farmer_id):
                raise MixedFarmerError(
                    {"items": [f"Product {item['product_id']} belongs to farmer {item_farmer}, not {farmer_id}"]}
                )
            if item.get("quantity") is None or item["quantity"] < 1:
                raise ValidationError({"quantity": [f"Quantity for product {item['product_id']} must be at least 1"]})
            if str(item["product_id"]) in seen:
                raise ValidationError({"items": [f"Product {item['product_id']} appears more than once"]})
            seen.add(str(item["product_id"]))

        total_amount = sum(item["unit_price"] * item["quantity"] for item in items)
        now = datetime.now(UTC)

        request = cls(
            customer_id=customer_id,
            farmer_id=farmer_id,
            total_amount=total_amount,
            message=message,
            status=PurchaseRequestStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            request.add_items(
                RequestLineItem(
                    product_id=str(item["product_id"]),
                    product_name=item.get("product_name"),
                    unit_price=item["unit_price"],
                    quantity=item["quantity"],
                )
            )

        request.raise_(
            PurchaseRequestCreated(
                request_id=str(request.id),
                customer_id=str(customer_id),
                farmer_id=str(farmer_id),
                items=json.dumps(request.lines()),
                total_amount=total_amount,
                message=message,
                created_at=now,
            )
        )
        return request

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _assert_actor(self, actor_id, party_id, role):
        if str(actor_id) != str(party_id):
            raise AuthorizationError({"actor": [f"Only the request's {role} can do this"]})

    def _assert_can_transition(self, target_status):
        current = PurchaseRequestStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidStateTransitionError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    # -------------------------------------------------------------------
    # Line item views
    # -------------------------------------------------------------------
    def lines(self):
        return [{"product_id": str(i.product_id), "quantity": i.quantity} for i in self.items]

    def product_ids(self):
        return [str(i.product_id) for i in self.items]

    def quantities(self):
        return [i.quantity for i in self.items]

    def item_count(self):
        return sum(i.quantity for i in self.items)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def accept(self, actor_id):
        self._assert_actor(actor_id, self.farmer_id, "farmer")
        self._assert_can_transition(PurchaseRequestStatus.ACCEPTED)

        now = datetime.now(UTC)
        self.status = PurchaseRequestStatus.ACCEPTED.value
        self.updated_at = now

        self.raise_(
            PurchaseRequestAccepted(
                request_id=str(self.id),
                farmer_id=str(self.farmer_id),
                accepted_at=now,
            )
        )

    def reject(self, actor_id):
        self._assert_actor(actor_id, self.farmer_id, "farmer")
        self._assert_can_transition(PurchaseRequestStatus.REJECTED)

        now = datetime.now(UTC)
        self.status = PurchaseRequestStatus.REJECTED.value
        self.updated_at = now

        self.raise_(
            PurchaseRequestRejected(
                request_id=str(self.id),
                farmer_id=str(self.farmer_id),
                rejected_at=now,
            )
        )

    def assert_payable(self, actor_id):
        """Raise unless `actor_id` may pay the request in its current state."""
        self._assert_actor(actor_id, self.customer_id, "customer")
        self._assert_can_transition(PurchaseRequestStatus.PAID)

    def pay(self, actor_id):
        """Mark the request paid.

        Drawing stock is the job of `PaymentSettlement`, which calls this
        inside the same unit of work once every draw has succeeded.
        """
        self.assert_payable(actor_id)

        now = datetime.now(UTC)
        self.status = PurchaseRequestStatus.PAID.value
        self.paid_at = now
        self.updated_at = now

        self.raise_(
            PurchaseRequestPaid(
                request_id=str(self.id),
                customer_id=str(self.customer_id),
                farmer_id=str(self.farmer_id),
                items=json.dumps(self.lines()),
                total_amount=self.total_amount,
                paid_at=now,
            )
        )

    def undo_payment(self, updated_at):
        """Put a request whose payment could not be stored back to accepted."""
        if self.status != PurchaseRequestStatus.PAID.value:
            return

        self.status = PurchaseRequestStatus.ACCEPTED.value
        self.paid_at = None
        self.updated_at = updated_at
        self._events[:] = [e for e in self._events if not isinstance(e, PurchaseRequestPaid)]

    def assert_deletable(self, actor_id):
        """Raise unless `actor_id` may delete the request in its current state."""
        self._assert_actor(actor_id, self.customer_id, "customer")
        current = PurchaseRequestStatus(self.status)
        if current not in _DELETABLE_STATES:
            raise InvalidStateTransitionError({"status": [f"A {current.value} request cannot be deleted"]})


@marketplace.repository(part_of=PurchaseRequest)
class PurchaseRequestRepository:
    def load(self, request_id) -> PurchaseRequest:
        """Fetch a request or raise `NotFoundError`."""
        try:
            return self.get(str(request_id))
        except ObjectNotFoundError:
            raise NotFoundError({"purchase_request": [f"Purchase request {request_id} does not exist"]}) from None

    def _newest_first(self, filters, limit=None, offset=0):
        query = self._dao.query.filter(**filters).order_by("-created_at")
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all().items

    def for_customer(self, customer_id, status=None, limit=None, offset=0) -> list[PurchaseRequest]:
        filters = {"customer_id": str(customer_id)}
        if status:
            filters["status"] = status
        return self._newest_first(filters, limit, offset)

    def for_farmer(self, farmer_id, status=None, limit=None, offset=0) -> list[PurchaseRequest]:
        filters = {"farmer_id": str(farmer_id)}
        if status:
            filters["status"] = status
        return self._newest_first(filters, limit, offset)
