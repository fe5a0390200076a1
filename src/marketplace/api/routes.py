"""FastAPI routes for profiles, products, carts and purchase requests.

The acting user is identified by the ``X-User-Id`` header, set by the gateway
after authentication.
"""

import json

from fastapi import APIRouter, Header, Query
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AddToCartRequest,
    CartIdResponse,
    CartResponse,
    CreateCartRequest,
    CreatePurchaseRequestRequest,
    ListProductRequest,
    ProductIdResponse,
    ProductResponse,
    ProfileResponse,
    PurchaseRequestIdResponse,
    PurchaseRequestResponse,
    RegisterProfileRequest,
    SalesSummaryResponse,
    StatusResponse,
    SubmitCartRequest,
    UpdateCartQuantityRequest,
    UpdateProductDetailsRequest,
    UpdateProductQuantityRequest,
    UpdateProfileRequest,
)
from marketplace.cart.cart import Cart
from marketplace.cart.checkout import SubmitCart
from marketplace.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from marketplace.cart.management import ClearCart, CreateCart
from marketplace.catalogue.listing import (
    DeactivateProduct,
    ListProduct,
    UpdateProductDetails,
    UpdateProductQuantity,
)
from marketplace.catalogue.product import Product
from marketplace.identity.authorization import require_profile
from marketplace.identity.profile import Profile, UserType
from marketplace.identity.registration import RegisterProfile, UpdateProfile
from marketplace.purchase.creation import CreatePurchaseRequest
from marketplace.purchase.payment import pay_purchase_request
from marketplace.purchase.queries import list_for_customer, list_for_farmer, request_details, sales_summary
from marketplace.purchase.removal import DeletePurchaseRequest
from marketplace.purchase.request import PurchaseRequest
from marketplace.purchase.review import AcceptPurchaseRequest, RejectPurchaseRequest
from marketplace.shared.errors import AuthorizationError
from marketplace.shared.money import format_price, to_minor_units

# ---------------------------------------------------------------------------
# Profile Router
# ---------------------------------------------------------------------------
profile_router = APIRouter(prefix="/profiles", tags=["profiles"])


@profile_router.post("", status_code=201)
async def register_profile(body: RegisterProfileRequest) -> dict:
    command = RegisterProfile(
        user_id=body.user_id,
        email=body.email,
        full_name=body.full_name,
        user_type=body.user_type,
        phone=body.phone,
        address=body.address,
        farm_name=body.farm_name,
        farm_location=body.farm_location,
    )
    result = current_domain.process(command, asynchronous=False)
    return {"user_id": result}


@profile_router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: str) -> ProfileResponse:
    profile = current_domain.repository_for(Profile).load(user_id)
    return ProfileResponse.from_profile(profile)


@profile_router.put("/{user_id}", response_model=StatusResponse)
async def update_profile(
    user_id: str,
    body: UpdateProfileRequest,
    x_user_id: str = Header(default=""),
) -> StatusResponse:
    if x_user_id != user_id:
        raise AuthorizationError({"actor": ["Users can only update their own profile"]})

    command = UpdateProfile(user_id=user_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def list_product(body: ListProductRequest, x_user_id: str = Header(default="")) -> ProductIdResponse:
    command = ListProduct(
        farmer_id=x_user_id or None,
        name=body.name,
        category=body.category,
        price=to_minor_units(body.price),
        quantity=body.quantity,
        product_type=body.product_type,
        subcategory=body.subcategory,
        description=body.description,
        image_url=body.image_url,
        duration=body.duration,
        what_included=body.what_included,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("", response_model=list[ProductResponse])
async def browse_products(
    product_type: str | None = Query(default=None, alias="type"),
    search: str | None = None,
    farmer_id: str | None = None,
    include_inactive: bool = False,
) -> list[ProductResponse]:
    """Storefront listing, or one farmer's listings when ``farmer_id`` is given."""
    repo = current_domain.repository_for(Product)
    if farmer_id:
        products = repo.find_for_farmer(farmer_id, product_type=product_type, include_inactive=include_inactive)
    else:
        products = repo.find_active(product_type=product_type, search=search)
    return [ProductResponse.from_product(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).load(product_id)
    return ProductResponse.from_product(product)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product_details(
    product_id: str,
    body: UpdateProductDetailsRequest,
    x_user_id: str = Header(default=""),
) -> StatusResponse:
    changes = body.model_dump(exclude_none=True)
    if "price" in changes:
        changes["price"] = to_minor_units(changes["price"])

    command = UpdateProductDetails(product_id=product_id, farmer_id=x_user_id or None, **changes)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/quantity", response_model=StatusResponse)
async def update_product_quantity(
    product_id: str,
    body: UpdateProductQuantityRequest,
    x_user_id: str = Header(default=""),
) -> StatusResponse:
    command = UpdateProductQuantity(product_id=product_id, farmer_id=x_user_id or None, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def deactivate_product(product_id: str, x_user_id: str = Header(default="")) -> StatusResponse:
    command = DeactivateProduct(product_id=product_id, farmer_id=x_user_id or None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(customer_id=body.customer_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    cart = current_domain.repository_for(Cart).load(cart_id)
    return CartResponse.from_cart(cart)


@cart_router.post("/{cart_id}/items", response_model=StatusResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> StatusResponse:
    command = AddToCart(cart_id=cart_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def update_cart_quantity(cart_id: str, product_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(cart_id=cart_id, product_id=product_id, new_quantity=body.new_quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, product_id: str) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/submit", status_code=201, response_model=PurchaseRequestIdResponse)
async def submit_cart(
    cart_id: str,
    body: SubmitCartRequest,
    x_user_id: str = Header(default=""),
) -> PurchaseRequestIdResponse:
    command = SubmitCart(cart_id=cart_id, customer_id=x_user_id or None, message=body.message)
    result = current_domain.process(command, asynchronous=False)
    return PurchaseRequestIdResponse(request_id=result)


# ---------------------------------------------------------------------------
# Purchase Request Router
# ---------------------------------------------------------------------------
purchase_router = APIRouter(prefix="/purchase-requests", tags=["purchase-requests"])


@purchase_router.post("", status_code=201, response_model=PurchaseRequestIdResponse)
async def create_purchase_request(
    body: CreatePurchaseRequestRequest,
    x_user_id: str = Header(default=""),
) -> PurchaseRequestIdResponse:
    command = CreatePurchaseRequest(
        customer_id=x_user_id or None,
        farmer_id=body.farmer_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        message=body.message,
    )
    result = current_domain.process(command, asynchronous=False)
    return PurchaseRequestIdResponse(request_id=result)


@purchase_router.get("", response_model=list[PurchaseRequestResponse])
async def list_purchase_requests(
    role: str = Query(default="customer", pattern="^(customer|farmer)$"),
    status: str | None = None,
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    x_user_id: str = Header(default=""),
) -> list[PurchaseRequestResponse]:
    """Requests the acting user sent (``role=customer``) or received (``role=farmer``)."""
    if role == "farmer":
        require_profile(x_user_id, UserType.FARMER)
        requests = list_for_farmer(x_user_id, status=status, limit=limit, offset=offset)
    else:
        require_profile(x_user_id)
        requests = list_for_customer(x_user_id, status=status, limit=limit, offset=offset)

    profiles, products = request_details(requests)
    return [PurchaseRequestResponse.from_request(r, profiles, products) for r in requests]


@purchase_router.get("/sales-summary", response_model=SalesSummaryResponse)
async def get_sales_summary(x_user_id: str = Header(default="")) -> SalesSummaryResponse:
    require_profile(x_user_id, UserType.FARMER)
    summary = sales_summary(x_user_id)
    return SalesSummaryResponse(revenue_display=format_price(summary["revenue"]), **summary)


@purchase_router.get("/{request_id}", response_model=PurchaseRequestResponse)
async def get_purchase_request(request_id: str, x_user_id: str = Header(default="")) -> PurchaseRequestResponse:
    request = current_domain.repository_for(PurchaseRequest).load(request_id)
    if x_user_id not in (str(request.customer_id), str(request.farmer_id)):
        raise AuthorizationError({"actor": ["Only the customer or farmer on a request can view it"]})

    profiles, products = request_details([request])
    return PurchaseRequestResponse.from_request(request, profiles, products)


@purchase_router.post("/{request_id}/accept", response_model=StatusResponse)
async def accept_purchase_request(request_id: str, x_user_id: str = Header(default="")) -> StatusResponse:
    command = AcceptPurchaseRequest(request_id=request_id, actor_id=x_user_id or None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@purchase_router.post("/{request_id}/reject", response_model=StatusResponse)
async def reject_purchase_request(request_id: str, x_user_id: str = Header(default="")) -> StatusResponse:
    command = RejectPurchaseRequest(request_id=request_id, actor_id=x_user_id or None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@purchase_router.post("/{request_id}/pay", response_model=StatusResponse)
async def pay_for_purchase_request(request_id: str, x_user_id: str = Header(default="")) -> StatusResponse:
    if not x_user_id:
        raise AuthorizationError({"actor": ["An acting user is required"]})
    pay_purchase_request(request_id, actor_id=x_user_id)
    return StatusResponse()


@purchase_router.delete("/{request_id}", response_model=StatusResponse)
async def delete_purchase_request(request_id: str, x_user_id: str = Header(default="")) -> StatusResponse:
    command = DeletePurchaseRequest(request_id=request_id, actor_id=x_user_id or None)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
