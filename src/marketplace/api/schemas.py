"""Pydantic request/response schemas for the Marketplace API.

These are external contracts (anti-corruption layer), kept apart from the
internal Protean commands. Prices enter as naira (a number or a display string
such as ``"₦1,500"``) and leave as kobo plus a formatted display string.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from marketplace.shared.money import format_price


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
class RegisterProfileRequest(BaseModel):
    user_id: str
    email: str
    full_name: str | None = None
    user_type: str = Field(default="customer", pattern="^(customer|farmer)$")
    phone: str | None = None
    address: str | None = None
    farm_name: str | None = None
    farm_location: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "farmer-001",
                    "email": "ada@greenacres.ng",
                    "full_name": "Ada Obi",
                    "user_type": "farmer",
                    "farm_name": "Green Acres",
                    "farm_location": "Enugu",
                }
            ]
        }
    }


class UpdateProfileRequest(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    farm_name: str | None = None
    farm_location: str | None = None


class ProfileResponse(BaseModel):
    user_id: str
    email: str
    full_name: str | None = None
    user_type: str
    farm_name: str | None = None
    farm_location: str | None = None

    @classmethod
    def from_profile(cls, profile):
        return cls(
            user_id=str(profile.user_id),
            email=profile.email,
            full_name=profile.full_name,
            user_type=profile.user_type,
            farm_name=profile.farm_name,
            farm_location=profile.farm_location,
        )


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ListProductRequest(BaseModel):
    name: str
    category: str
    price: float | str  # naira
    quantity: int = Field(ge=0, default=0)
    product_type: str = Field(default="crop", pattern="^(crop|livestock|service|device)$")
    subcategory: str | None = None
    description: str | None = None
    image_url: str | None = None
    duration: str | None = None
    what_included: list[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "White Yam",
                    "category": "Tubers",
                    "price": "₦1,500",
                    "quantity": 40,
                    "product_type": "crop",
                }
            ]
        }
    }


class UpdateProductDetailsRequest(BaseModel):
    name: str | None = None
    category: str | None = None
    subcategory: str | None = None
    description: str | None = None
    image_url: str | None = None
    price: float | str | None = None  # naira
    duration: str | None = None
    what_included: list[str] | None = None


class UpdateProductQuantityRequest(BaseModel):
    quantity: int = Field(ge=0)


class ProductResponse(BaseModel):
    id: str
    farmer_id: str
    name: str
    category: str
    subcategory: str | None = None
    description: str | None = None
    image_url: str | None = None
    product_type: str
    price: int
    price_display: str
    quantity: int
    duration: str | None = None
    what_included: list[str] = Field(default_factory=list)
    is_active: bool

    @classmethod
    def from_product(cls, product):
        return cls(
            id=str(product.id),
            farmer_id=str(product.farmer_id),
            name=product.name,
            category=product.category,
            subcategory=product.subcategory,
            description=product.description,
            image_url=product.image_url,
            product_type=product.product_type,
            price=product.price,
            price_display=format_price(product.price),
            quantity=product.quantity,
            duration=product.duration,
            what_included=list(product.what_included or []),
            is_active=product.is_active,
        )


class ProductIdResponse(BaseModel):
    product_id: str


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str | None = None


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    new_quantity: int  # 0 or less removes the item


class SubmitCartRequest(BaseModel):
    message: str | None = None


class CartItemResponse(BaseModel):
    product_id: str
    name: str
    category: str | None = None
    image_url: str | None = None
    unit_price: int
    price_display: str
    quantity: int
    line_total: int


class CartResponse(BaseModel):
    cart_id: str
    customer_id: str | None = None
    farmer_id: str | None = None
    items: list[CartItemResponse]
    total_item_count: int
    total_price: int
    total_display: str

    @classmethod
    def from_cart(cls, cart):
        return cls(
            cart_id=str(cart.id),
            customer_id=str(cart.customer_id) if cart.customer_id else None,
            farmer_id=cart.farmer_id,
            items=[
                CartItemResponse(
                    product_id=str(item.product_id),
                    name=item.name,
                    category=item.category,
                    image_url=item.image_url,
                    unit_price=item.unit_price,
                    price_display=format_price(item.unit_price),
                    quantity=item.quantity,
                    line_total=item.line_total,
                )
                for item in cart.items
            ],
            total_item_count=cart.total_item_count(),
            total_price=cart.total_price(),
            total_display=format_price(cart.total_price()),
        )


class CartIdResponse(BaseModel):
    cart_id: str


# ---------------------------------------------------------------------------
# Purchase requests
# ---------------------------------------------------------------------------
class LineItemSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class CreatePurchaseRequestRequest(BaseModel):
    farmer_id: str
    items: list[LineItemSchema]
    message: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "farmer_id": "farmer-001",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "message": "Please deliver on Saturday",
                }
            ]
        }
    }


class RequestLineItemResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    category: str | None = None
    image_url: str | None = None
    unit_price: int
    quantity: int
    line_total: int


class PurchaseRequestResponse(BaseModel):
    id: str
    customer_id: str
    customer_name: str | None = None
    customer_email: str | None = None
    farmer_id: str
    farmer_name: str | None = None
    farmer_email: str | None = None
    farm_name: str | None = None
    items: list[RequestLineItemResponse]
    total_amount: int
    total_display: str
    message: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    paid_at: datetime | None = None

    @classmethod
    def from_request(cls, request, profiles=None, products=None):
        """Build the response, adding party and product details when given.

        ``profiles`` and ``products`` are the maps returned by
        `marketplace.purchase.queries.request_details`.
        """
        profiles = profiles or {}
        products = products or {}
        customer = profiles.get(str(request.customer_id))
        farmer = profiles.get(str(request.farmer_id))

        items = []
        for item in request.items:
            product = products.get(str(item.product_id))
            items.append(
                RequestLineItemResponse(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    category=product.category if product else None,
                    image_url=product.image_url if product else None,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=item.line_total,
                )
            )

        return cls(
            id=str(request.id),
            customer_id=str(request.customer_id),
            customer_name=customer.full_name if customer else None,
            customer_email=customer.email if customer else None,
            farmer_id=str(request.farmer_id),
            farmer_name=farmer.full_name if farmer else None,
            farmer_email=farmer.email if farmer else None,
            farm_name=farmer.farm_name if farmer else None,
            items=items,
            total_amount=request.total_amount,
            total_display=format_price(request.total_amount),
            message=request.message,
            status=request.status,
            created_at=request.created_at,
            updated_at=request.updated_at,
            paid_at=request.paid_at,
        )


class PurchaseRequestIdResponse(BaseModel):
    request_id: str


class SalesSummaryResponse(BaseModel):
    farmer_id: str
    request_counts: dict[str, int]
    revenue: int
    revenue_display: str
    units_sold: int
    top_products: list[dict]


class StatusResponse(BaseModel):
    status: str = "ok"
