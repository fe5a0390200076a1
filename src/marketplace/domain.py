"""Marketplace bounded context.

Customers collect listings from a single farmer in a cart and send the farmer a
purchase request. The farmer accepts or rejects it, and once the customer pays
the purchased stock is drawn from the farmer's catalogue.
"""

from protean.domain import Domain

from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")
