"""Cart aggregate — a customer's in-progress selection from one farmer.

The cart is an explicit object owned by whoever holds it (a test, a request
handler, a session). It can be used purely in memory; the session-cart
commands additionally keep it in the cart repository between requests.

All items in a cart belong to the same farmer. Adding another farmer's
listing raises `MixedFarmerError` instead of silently re-attributing it at
checkout.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from marketplace.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from marketplace.domain import marketplace
from marketplace.shared.errors import MixedFarmerError, NotFoundError


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    farmer_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    category = String(max_length=100)
    description = Text()
    image_url = String(max_length=500)
    unit_price = Integer(required=True, min_value=0)  # kobo
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def line_total(self):
        return self.unit_price * self.quantity


@marketplace.aggregate
class Cart:
    customer_id = Identifier()  # Empty until a signed-in customer claims it
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def items_must_belong_to_one_farmer(self):
        if len({str(i.farmer_id) for i in self.items}) > 1:
            raise ValidationError({"items": ["A cart can only hold products from one farmer"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def farmer_id(self):
        """The farmer every item belongs to, or None for an empty cart."""
        return str(self.items[0].farmer_id) if self.items else None

    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def total_item_count(self):
        return sum(item.quantity for item in self.items)

    def total_price(self):
        """Sum of line totals in kobo."""
        return sum(item.line_total for item in self.items)

    def checkout_lines(self):
        """Line items in the shape `PurchaseRequest.create` expects."""
        return [
            {
                "product_id": str(item.product_id),
                "product_name": item.name,
                "farmer_id": str(item.farmer_id),
                "unit_price": item.unit_price,
                "quantity": item.quantity,
            }
            for item in self.items
        ]

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, item, quantity=1):
        """Add a product to the cart, or increase its quantity if already present.

        Args:
            item: Mapping with product_id, farmer_id, name and unit_price (kobo);
                optionally category, description and image_url.
            quantity: Units to add, at least 1.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        farmer_id = str(item["farmer_id"])
        if self.items and farmer_id != self.farmer_id:
            raise MixedFarmerError(
                {"farmer_id": [f"Cart holds products from farmer {self.farmer_id}; clear it before adding another farmer's"]}
            )

        product_id = str(item["product_id"])
        existing = self._find(product_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    farmer_id=farmer_id,
                    name=item["name"],
                    category=item.get("category"),
                    description=item.get("description"),
                    image_url=item.get("image_url"),
                    unit_price=item["unit_price"],
                    quantity=quantity,
                    added_at=now,
                )
            )

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=product_id,
                farmer_id=farmer_id,
                quantity=quantity,
            )
        )

    def update_quantity(self, product_id, new_quantity):
        """Set an item's quantity. Zero or less removes the item."""
        item = self._find(product_id)
        if item is None:
            raise NotFoundError({"product_id": [f"Product {product_id} is not in the cart"]})

        if new_quantity is None or new_quantity <= 0:
            self.remove_item(product_id)
            return

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove an item. Removing an absent product is a no-op."""
        item = self._find(product_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )

    def clear(self):
        """Empty the cart. Safe to call on an empty cart."""
        if not self.items:
            return

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id)))


@marketplace.repository(part_of=Cart)
class CartRepository:
    def load(self, cart_id) -> Cart:
        """Fetch a cart or raise `NotFoundError`."""
        try:
            return self.get(str(cart_id))
        except ObjectNotFoundError:
            raise NotFoundError({"cart": [f"Cart {cart_id} does not exist"]}) from None
