"""Farmer review of purchase requests — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.identity.authorization import require_profile
from marketplace.identity.profile import UserType
from marketplace.purchase.request import PurchaseRequest


@marketplace.command(part_of="PurchaseRequest")
class AcceptPurchaseRequest:
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command(part_of="PurchaseRequest")
class RejectPurchaseRequest:
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command_handler(part_of=PurchaseRequest)
class ReviewPurchaseRequestHandler:
    @handle(AcceptPurchaseRequest)
    def accept_purchase_request(self, command):
        require_profile(command.actor_id, UserType.FARMER)

        repo = current_domain.repository_for(PurchaseRequest)
        request = repo.load(command.request_id)
        request.accept(actor_id=command.actor_id)
        repo.add(request)

        logger.info("Purchase request accepted", request_id=str(request.id), farmer_id=str(request.farmer_id))

    @handle(RejectPurchaseRequest)
    def reject_purchase_request(self, command):
        require_profile(command.actor_id, UserType.FARMER)

        repo = current_domain.repository_for(PurchaseRequest)
        request = repo.load(command.request_id)
        request.reject(actor_id=command.actor_id)
        repo.add(request)

        logger.info("Purchase request rejected", request_id=str(request.id), farmer_id=str(request.farmer_id))
