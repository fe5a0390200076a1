"""Domain events for the PurchaseRequest aggregate.

Events are immutable facts about the request lifecycle. Line items travel as
JSON lists of ``{product_id, quantity}``.
"""

from protean.fields import DateTime, Identifier, Integer, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="PurchaseRequest")
class PurchaseRequestCreated:
    """A customer sent a farmer a request to buy the contents of their cart."""

    __version__ = 1

    request_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    farmer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    total_amount = Integer(required=True)
    message = Text()
    created_at = DateTime(required=True)


@marketplace.event(part_of="PurchaseRequest")
class PurchaseRequestAccepted:
    """The farmer agreed to sell."""

    __version__ = 1

    request_id = Identifier(required=True)
    farmer_id = Identifier(required=True)
    accepted_at = DateTime(required=True)


@marketplace.event(part_of="PurchaseRequest")
class PurchaseRequestRejected:
    """The farmer declined the request."""

    __version__ = 1

    request_id = Identifier(required=True)
    farmer_id = Identifier(required=True)
    rejected_at = DateTime(required=True)


@marketplace.event(part_of="PurchaseRequest")
class PurchaseRequestPaid:
    """The customer paid and the purchased stock was drawn from the catalogue."""

    __version__ = 1

    request_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    farmer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    total_amount = Integer(required=True)
    paid_at = DateTime(required=True)
