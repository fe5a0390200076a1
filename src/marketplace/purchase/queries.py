"""Read-side views over purchase requests.

Customers see the requests they sent, farmers the requests they received,
newest first in both cases.
"""

from collections import Counter

from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.identity.profile import Profile
from marketplace.purchase.request import PurchaseRequest, PurchaseRequestStatus


def list_for_customer(customer_id, status=None, limit=None, offset=0):
    repo = current_domain.repository_for(PurchaseRequest)
    return repo.for_customer(customer_id, status=status, limit=limit, offset=offset)


def list_for_farmer(farmer_id, status=None, limit=None, offset=0):
    repo = current_domain.repository_for(PurchaseRequest)
    return repo.for_farmer(farmer_id, status=status, limit=limit, offset=offset)


def request_details(requests):
    """Profiles and listings referenced by `requests`.

    Returns ``(profiles, products)`` keyed by user id and product id, for
    showing who is on each request and what the products look like. Parties
    or products that no longer exist are simply absent.
    """
    user_ids = {str(r.customer_id) for r in requests} | {str(r.farmer_id) for r in requests}
    product_ids = {str(item.product_id) for r in requests for item in r.items}
    if not user_ids:
        return {}, {}

    profiles = current_domain.repository_for(Profile).find_by_user_ids(user_ids)
    products = current_domain.repository_for(Product).find_by_ids(product_ids)
    return (
        {str(p.user_id): p for p in profiles},
        {str(p.id): p for p in products},
    )


def sales_summary(farmer_id):
    """Figures for a farmer's sales page.

    Revenue and units only count paid requests. ``top_products`` ranks the
    farmer's products by units sold.
    """
    requests = list_for_farmer(farmer_id)
    by_status = Counter(r.status for r in requests)
    paid = [r for r in requests if r.status == PurchaseRequestStatus.PAID.value]

    units = Counter()
    names = {}
    for request in paid:
        for item in request.items:
            units[str(item.product_id)] += item.quantity
            names[str(item.product_id)] = item.product_name

    return {
        "farmer_id": str(farmer_id),
        "request_counts": {status.value: by_status.get(status.value, 0) for status in PurchaseRequestStatus},
        "revenue": sum(r.total_amount for r in paid),
        "units_sold": sum(units.values()),
        "top_products": [
            {"product_id": product_id, "product_name": names[product_id], "quantity": quantity}
            for product_id, quantity in units.most_common()
        ],
    }
