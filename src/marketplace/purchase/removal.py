"""Purchase request deletion — command and handler.

A customer may withdraw a request the farmer has not accepted yet, or clear
away a rejected one. Accepted and paid requests are kept.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.purchase.request import PurchaseRequest


@marketplace.command(part_of="PurchaseRequest")
class DeletePurchaseRequest:
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command_handler(part_of=PurchaseRequest)
class DeletePurchaseRequestHandler:
    @handle(DeletePurchaseRequest)
    def delete_purchase_request(self, command):
        repo = current_domain.repository_for(PurchaseRequest)
        request = repo.load(command.request_id)
        request.assert_deletable(actor_id=command.actor_id)
        repo._dao.delete(request)

        logger.info(
            "Purchase request deleted",
            request_id=str(command.request_id),
            customer_id=str(request.customer_id),
            status=request.status,
        )
