"""Cart management — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace


@marketplace.command(part_of="Cart")
class CreateCart:
    """Open a cart for a browsing session, optionally tied to a signed-in customer."""

    customer_id = Identifier()


@marketplace.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = Cart.create(customer_id=command.customer_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.load(command.cart_id)
        cart.clear()
        repo.add(cart)
