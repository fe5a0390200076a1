"""Cart checkout — sends the cart's contents to its farmer as a purchase request.

The request is priced from the cart (the prices seen when items were added)
and the cart is emptied once the request is created.
"""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.purchase.creation import open_purchase_request
from marketplace.shared.errors import AuthorizationError, EmptyCartError


@marketplace.command(part_of="Cart")
class SubmitCart:
    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    message = Text()


@marketplace.command_handler(part_of=Cart)
class SubmitCartHandler:
    @handle(SubmitCart)
    def submit_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.load(command.cart_id)
        if cart.customer_id and str(cart.customer_id) != str(command.customer_id):
            raise AuthorizationError({"actor": ["This cart belongs to another customer"]})
        if not cart.items:
            raise EmptyCartError({"items": ["Add something to the cart before sending a request"]})

        request = open_purchase_request(
            customer_id=command.customer_id,
            farmer_id=cart.farmer_id,
            items=cart.checkout_lines(),
            message=command.message,
        )

        cart.clear()
        repo.add(cart)
        return str(request.id)
