import json

import pytest
from marketplace.purchase.creation import CreatePurchaseRequest
from marketplace.purchase.review import AcceptPurchaseRequest
from protean import current_domain


@pytest.fixture()
def open_request(profiles):
    """Factory that sends a purchase request for ``[(product, quantity), ...]``."""

    def _open(lines, customer_id=None, farmer_id=None, message=None):
        return current_domain.process(
            CreatePurchaseRequest(
                customer_id=customer_id or profiles["customer"],
                farmer_id=farmer_id or profiles["farmer"],
                items=json.dumps([{"product_id": str(p.id), "quantity": q} for p, q in lines]),
                message=message,
            ),
            asynchronous=False,
        )

    return _open


@pytest.fixture()
def accepted_request(open_request, profiles):
    """Factory that sends a request and has the farmer accept it."""

    def _accepted(lines, **kwargs):
        request_id = open_request(lines, **kwargs)
        current_domain.process(
            AcceptPurchaseRequest(request_id=request_id, actor_id=kwargs.get("farmer_id") or profiles["farmer"]),
            asynchronous=False,
        )
        return request_id

    return _accepted
