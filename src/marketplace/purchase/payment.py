"""Purchase request payment — command and handler.

Payment is simulated: paying marks the request paid and draws the purchased
stock. `pay_purchase_request` is the entry point callers should use; it holds
the per-product stock locks until the unit of work has committed, so two
payments for the same product are fully serialized.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.purchase.request import PurchaseRequest
from marketplace.purchase.settlement import PaymentSettlement
from marketplace.shared.locks import stock_locks


@marketplace.command(part_of="PurchaseRequest")
class PayPurchaseRequest:
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command_handler(part_of=PurchaseRequest)
class PayPurchaseRequestHandler:
    @handle(PayPurchaseRequest)
    def pay_purchase_request(self, command):
        request_repo = current_domain.repository_for(PurchaseRequest)
        request = request_repo.load(command.request_id)

        settlement = PaymentSettlement(request_repo, current_domain.repository_for(Product))
        with stock_locks.hold(request.product_ids()):
            settlement.settle(request, actor_id=command.actor_id)


def pay_purchase_request(request_id, actor_id):
    """Pay a request while holding the locks of every product it draws from."""
    request = current_domain.repository_for(PurchaseRequest).load(request_id)

    with stock_locks.hold(request.product_ids()):
        current_domain.process(
            PayPurchaseRequest(request_id=str(request_id), actor_id=str(actor_id)),
            asynchronous=False,
        )
