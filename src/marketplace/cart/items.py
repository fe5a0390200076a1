"""Cart item management — commands and handler.

Names, prices and the owning farmer come from the catalogue when an item is
added, so a client cannot choose its own price.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.shared.errors import NotFoundError


@marketplace.command(part_of="Cart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, default=1)


@marketplace.command(part_of="Cart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    new_quantity = Integer(required=True)  # 0 or less removes the item


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).load(command.product_id)
        if not product.is_active:
            raise NotFoundError({"product": [f"Product {product.id} is no longer available"]})

        repo = current_domain.repository_for(Cart)
        cart = repo.load(command.cart_id)
        cart.add_item(
            {
                "product_id": str(product.id),
                "farmer_id": str(product.farmer_id),
                "name": product.name,
                "category": product.category,
                "description": product.description,
                "image_url": product.image_url,
                "unit_price": product.price,
            },
            quantity=command.quantity,
        )
        repo.add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.load(command.cart_id)
        cart.update_quantity(command.product_id, command.new_quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.load(command.cart_id)
        cart.remove_item(command.product_id)
        repo.add(cart)
