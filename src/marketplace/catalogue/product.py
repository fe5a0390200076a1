"""Product aggregate — a farmer's listing and the stock behind it.

Stock Model:
    quantity:    units the farmer still has to sell (never negative)
    is_active:   listed in the storefront; cleared when stock runs out through
                 a payment or when the farmer removes the listing
    deductions:  one record per paid purchase request that drew stock, so a
                 retried payment never draws twice
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    List,
    String,
    Text,
)

from marketplace.catalogue.events import (
    ProductDeactivated,
    ProductDetailsUpdated,
    ProductListed,
    ProductQuantityUpdated,
    StockDeducted,
    StockRestored,
)
from marketplace.domain import marketplace
from marketplace.shared.errors import InventoryUpdateError, NotFoundError

_UNSET = object()


class ProductType(Enum):
    CROP = "crop"
    LIVESTOCK = "livestock"
    SERVICE = "service"
    DEVICE = "device"


@marketplace.entity(part_of="Product")
class StockDeduction:
    """Stock drawn from the product by one paid purchase request."""

    request_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    deactivated_product: Boolean(default=False)
    deducted_at: DateTime()


@marketplace.aggregate
class Product:
    """A crop, livestock, service or device listing owned by one farmer."""

    farmer_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    category: String(required=True, max_length=100)
    subcategory: String(max_length=100)
    description: Text()
    image_url: String(max_length=500)
    product_type: String(choices=ProductType, default=ProductType.CROP.value)
    price: Integer(required=True, min_value=0)  # kobo
    quantity: Integer(default=0, min_value=0)
    duration: String(max_length=100)  # services only
    what_included: List(content_type=String)
    is_active: Boolean(default=True)
    deductions: HasMany(StockDeduction)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(
        cls,
        farmer_id,
        name,
        category,
        price,
        quantity=0,
        product_type=ProductType.CROP.value,
        subcategory=None,
        description=None,
        image_url=None,
        duration=None,
        what_included=None,
        product_id=None,
    ):
        now = datetime.now(UTC)
        attributes = {
            "farmer_id": farmer_id,
            "name": name,
            "category": category,
            "subcategory": subcategory,
            "description": description,
            "image_url": image_url,
            "product_type": product_type,
            "price": price,
            "quantity": quantity,
            "duration": duration,
            "what_included": what_included or [],
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        if product_id is not None:
            attributes["id"] = product_id

        product = cls(**attributes)
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                farmer_id=str(farmer_id),
                name=name,
                category=category,
                product_type=product.product_type,
                price=price,
                quantity=quantity,
                listed_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Farmer maintenance
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=_UNSET,
        category=_UNSET,
        subcategory=_UNSET,
        description=_UNSET,
        image_url=_UNSET,
        price=_UNSET,
        duration=_UNSET,
        what_included=_UNSET,
    ):
        changes = {
            "name": name,
            "category": category,
            "subcategory": subcategory,
            "description": description,
            "image_url": image_url,
            "price": price,
            "duration": duration,
            "what_included": what_included,
        }
        for field, value in changes.items():
            if value is not _UNSET:
                setattr(self, field, value)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                category=self.category,
                price=self.price,
            )
        )

    def update_quantity(self, new_quantity):
        """Set the stock level directly (restock or correction by the farmer)."""
        if new_quantity is None or new_quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        previous = self.quantity
        self.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductQuantityUpdated(
                product_id=str(self.id),
                previous_quantity=previous,
                new_quantity=new_quantity,
            )
        )

    def deactivate(self, reason="Removed by farmer"):
        """Withdraw the listing from the storefront. Repeated calls are no-ops."""
        if not self.is_active:
            return

        self.is_active = False
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductDeactivated(
                product_id=str(self.id),
                farmer_id=str(self.farmer_id),
                reason=reason,
                deactivated_at=now,
            )
        )

    def matches(self, search):
        """Case-insensitive match of a storefront search term."""
        if not search:
            return True
        term = search.lower()
        return any(term in (value or "").lower() for value in (self.name, self.category, self.description))

    # -------------------------------------------------------------------
    # Payment stock draws
    # -------------------------------------------------------------------
    def has_deduction_for(self, request_id):
        return any(str(d.request_id) == str(request_id) for d in self.deductions)

    def can_supply(self, quantity):
        return self.is_active and quantity <= self.quantity

    def deduct_stock(self, request_id, quantity):
        """Draw `quantity` units for a paid purchase request.

        Returns False when this request already drew its stock. The listing is
        deactivated once nothing is left.
        """
        if self.has_deduction_for(request_id):
            return False

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.can_supply(quantity):
            raise InventoryUpdateError(
                {"stock": [f"Only {self.quantity if self.is_active else 0} of {self.name} available, {quantity} requested"]}
            )

        now = datetime.now(UTC)
        self.quantity -= quantity
        sold_out = self.quantity == 0
        self.add_deductions(
            StockDeduction(
                request_id=request_id,
                quantity=quantity,
                deactivated_product=sold_out,
                deducted_at=now,
            )
        )
        self.updated_at = now

        self.raise_(
            StockDeducted(
                product_id=str(self.id),
                request_id=str(request_id),
                quantity=quantity,
                remaining=self.quantity,
                deducted_at=now,
            )
        )

        if sold_out:
            self.deactivate(reason="Sold out")

        return True

    def restore_stock(self, request_id):
        """Undo the draw made for `request_id`. Returns False if there was none."""
        deduction = next((d for d in self.deductions if str(d.request_id) == str(request_id)), None)
        if deduction is None:
            return False

        self.quantity += deduction.quantity
        if deduction.deactivated_product:
            self.is_active = True
        self.remove_deductions(deduction)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                request_id=str(request_id),
                quantity=deduction.quantity,
                new_quantity=self.quantity,
            )
        )
        return True


@marketplace.repository(part_of=Product)
class ProductRepository:
    def load(self, product_id) -> Product:
        """Fetch a product or raise `NotFoundError`."""
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            raise NotFoundError({"product": [f"Product {product_id} does not exist"]}) from None

    def find_active(self, product_type=None, search=None) -> list[Product]:
        """Storefront listings, newest first, filtered by type and search term."""
        filters = {"is_active": True}
        if product_type:
            filters["product_type"] = product_type

        products = self._dao.query.filter(**filters).order_by("-created_at").all().items
        return [p for p in products if p.matches(search)]

    def find_for_farmer(self, farmer_id, product_type=None, include_inactive=False) -> list[Product]:
        """A farmer's own listings for the dashboard, newest first."""
        filters = {"farmer_id": str(farmer_id)}
        if product_type:
            filters["product_type"] = product_type
        if not include_inactive:
            filters["is_active"] = True

        return self._dao.query.filter(**filters).order_by("-created_at").all().items

    def find_by_ids(self, product_ids) -> list[Product]:
        """Listings with the given ids, inactive ones included."""
        return self._dao.query.filter(id__in=[str(p) for p in product_ids]).all().items
