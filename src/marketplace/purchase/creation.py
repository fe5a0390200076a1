"""Purchase request creation — command and handler.

Requests are opened either from a session cart (see `marketplace.cart.checkout`)
or directly from a list of product ids and quantities, in which case names,
prices and the owning farmer are taken from the catalogue.
"""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import logger, marketplace
from marketplace.identity.authorization import require_profile
from marketplace.identity.profile import UserType
from marketplace.purchase.request import PurchaseRequest
from marketplace.shared.errors import NotFoundError


@marketplace.command(part_of="PurchaseRequest")
class CreatePurchaseRequest:
    customer_id = Identifier(required=True)
    farmer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    message = Text()


def open_purchase_request(customer_id, farmer_id, items, message=None):
    """Check both parties, create the pending request and stage it for persistence."""
    require_profile(customer_id)
    require_profile(farmer_id, UserType.FARMER)

    request = PurchaseRequest.create(
        customer_id=customer_id,
        farmer_id=farmer_id,
        items=items,
        message=message,
    )
    current_domain.repository_for(PurchaseRequest).add(request)

    logger.info(
        "Purchase request created",
        request_id=str(request.id),
        customer_id=str(customer_id),
        farmer_id=str(farmer_id),
        item_count=request.item_count(),
        total_amount=request.total_amount,
    )
    return request


def _priced_lines(items):
    """Attach catalogue name, price and farmer to each requested line."""
    repo = current_domain.repository_for(Product)
    lines = []
    for item in items:
        product = repo.load(item["product_id"])
        if not product.is_active:
            raise NotFoundError({"product": [f"Product {product.id} is no longer available"]})
        lines.append(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "farmer_id": str(product.farmer_id),
                "unit_price": product.price,
                "quantity": item["quantity"],
            }
        )
    return lines


@marketplace.command_handler(part_of=PurchaseRequest)
class CreatePurchaseRequestHandler:
    @handle(CreatePurchaseRequest)
    def create_purchase_request(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items

        request = open_purchase_request(
            customer_id=command.customer_id,
            farmer_id=command.farmer_id,
            items=_priced_lines(items),
            message=command.message,
        )
        return str(request.id)
