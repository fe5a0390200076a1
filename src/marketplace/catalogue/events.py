"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A farmer put a new product up for sale."""

    __version__ = 1

    product_id: Identifier(required=True)
    farmer_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    product_type: String(required=True)
    price: Integer(required=True)
    quantity: Integer(required=True)
    listed_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    price: Integer(required=True)


@marketplace.event(part_of="Product")
class ProductQuantityUpdated:
    """The farmer restocked or corrected the stock level."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)


@marketplace.event(part_of="Product")
class ProductDeactivated:
    """The listing left the storefront, either removed by the farmer or sold out."""

    __version__ = 1

    product_id: Identifier(required=True)
    farmer_id: Identifier(required=True)
    reason: String()
    deactivated_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class StockDeducted:
    """Stock was drawn for a paid purchase request."""

    __version__ = 1

    product_id: Identifier(required=True)
    request_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
    deducted_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class StockRestored:
    """A stock draw was undone because its payment could not complete."""

    __version__ = 1

    product_id: Identifier(required=True)
    request_id: Identifier(required=True)
    quantity: Integer(required=True)
    new_quantity: Integer(required=True)
