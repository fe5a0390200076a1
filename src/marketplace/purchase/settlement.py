"""Pays a purchase request and draws its stock from the catalogue.

Settlement runs in two phases so a payment never leaves stock half drawn:

1. Every product is loaded and checked (present, listed, enough stock) before
   anything changes. Any shortfall raises `InventoryUpdateError`.
2. Stock is drawn product by product, then the request is marked paid and
   staged. If a step fails, the draws already made are restored and the
   request is put back to accepted.

Draws are recorded on the product per request, so settling the same request
again after an interrupted attempt skips products that were already drawn.
Callers serialize settlements per product with `stock_locks`.
"""

from protean.exceptions import ObjectNotFoundError

from marketplace.domain import logger
from marketplace.shared.errors import InventoryUpdateError


class PaymentSettlement:
    def __init__(self, request_repo, product_repo):
        self.request_repo = request_repo
        self.product_repo = product_repo

    def settle(self, request, actor_id):
        """Pay `request` on behalf of `actor_id` and draw its stock."""
        request.assert_payable(actor_id)
        request_id = str(request.id)
        previous_update = request.updated_at

        products = self._check_stock(request)

        drawn = []
        try:
            for line in request.items:
                product = products[str(line.product_id)]
                if product.deduct_stock(request_id=request_id, quantity=line.quantity):
                    drawn.append(product)
                    logger.info(
                        "Stock deducted",
                        request_id=request_id,
                        product_id=str(product.id),
                        quantity=line.quantity,
                        remaining=product.quantity,
                    )
                self.product_repo.add(product)
            request.pay(actor_id=actor_id)
            self.request_repo.add(request)
        except Exception as exc:
            self._restore(request_id, drawn)
            request.undo_payment(previous_update)
            if isinstance(exc, InventoryUpdateError):
                raise
            raise InventoryUpdateError(
                {"stock": [f"Stock update failed for purchase request {request_id}: {exc}"]}
            ) from exc

        logger.info(
            "Purchase request paid",
            request_id=request_id,
            customer_id=str(request.customer_id),
            farmer_id=str(request.farmer_id),
            total_amount=request.total_amount,
            products_drawn=[str(p.id) for p in drawn],
        )
        return request

    def _check_stock(self, request):
        products = {}
        for line in request.items:
            product_id = str(line.product_id)
            try:
                product = self.product_repo.get(product_id)
            except ObjectNotFoundError:
                raise InventoryUpdateError({"stock": [f"Product {product_id} no longer exists"]}) from None

            if not product.has_deduction_for(request.id) and not product.can_supply(line.quantity):
                available = product.quantity if product.is_active else 0
                raise InventoryUpdateError(
                    {"stock": [f"Only {available} of {product.name} available, {line.quantity} requested"]}
                )
            products[product_id] = product
        return products

    def _restore(self, request_id, products):
        for product in products:
            product.restore_stock(request_id)
            self.product_repo.add(product)
            logger.warning("Stock draw rolled back", request_id=request_id, product_id=str(product.id))
