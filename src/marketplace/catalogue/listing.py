"""Farmer listing management — commands and handler.

Only the farmer who owns a listing may change it.
"""

from protean import handle
from protean.fields import Identifier, Integer, List, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product, ProductType
from marketplace.domain import logger, marketplace
from marketplace.identity.authorization import require_profile
from marketplace.identity.profile import UserType
from marketplace.shared.errors import AuthorizationError


@marketplace.command(part_of="Product")
class ListProduct:
    farmer_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    category: String(required=True, max_length=100)
    price: Integer(required=True, min_value=0)  # kobo
    quantity: Integer(default=0, min_value=0)
    product_type: String(choices=ProductType, default=ProductType.CROP.value)
    subcategory: String(max_length=100)
    description: Text()
    image_url: String(max_length=500)
    duration: String(max_length=100)
    what_included: List(content_type=String)


@marketplace.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    farmer_id: Identifier(required=True)
    name: String(max_length=255)
    category: String(max_length=100)
    subcategory: String(max_length=100)
    description: Text()
    image_url: String(max_length=500)
    price: Integer(min_value=0)
    duration: String(max_length=100)
    what_included: List(content_type=String, default=None)


@marketplace.command(part_of="Product")
class UpdateProductQuantity:
    product_id: Identifier(required=True)
    farmer_id: Identifier(required=True)
    quantity: Integer(required=True)


@marketplace.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)
    farmer_id: Identifier(required=True)


def _owned_product(product_id, farmer_id):
    product = current_domain.repository_for(Product).load(product_id)
    if str(product.farmer_id) != str(farmer_id):
        raise AuthorizationError({"actor": [f"Product {product_id} belongs to another farmer"]})
    return product


@marketplace.command_handler(part_of=Product)
class ManageListingHandler:
    @handle(ListProduct)
    def list_product(self, command):
        require_profile(command.farmer_id, UserType.FARMER)

        product = Product.create(
            farmer_id=command.farmer_id,
            name=command.name,
            category=command.category,
            price=command.price,
            quantity=command.quantity or 0,
            product_type=command.product_type or ProductType.CROP.value,
            subcategory=command.subcategory,
            description=command.description,
            image_url=command.image_url,
            duration=command.duration,
            what_included=command.what_included,
        )
        current_domain.repository_for(Product).add(product)
        logger.info(
            "Product listed",
            product_id=str(product.id),
            farmer_id=str(product.farmer_id),
            product_type=product.product_type,
        )
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        product = _owned_product(command.product_id, command.farmer_id)
        fields = ("name", "category", "subcategory", "description", "image_url", "price", "duration")
        changes = {field: getattr(command, field) for field in fields if getattr(command, field) is not None}
        if command.what_included is not None:
            changes["what_included"] = command.what_included

        product.update_details(**changes)
        current_domain.repository_for(Product).add(product)

    @handle(UpdateProductQuantity)
    def update_product_quantity(self, command):
        product = _owned_product(command.product_id, command.farmer_id)
        product.update_quantity(command.quantity)
        current_domain.repository_for(Product).add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        product = _owned_product(command.product_id, command.farmer_id)
        product.deactivate()
        current_domain.repository_for(Product).add(product)
        logger.info("Product deactivated", product_id=str(product.id), farmer_id=str(product.farmer_id))
