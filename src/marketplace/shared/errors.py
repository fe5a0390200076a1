"""Domain errors raised by the marketplace.

Rule violations extend Protean's ``ValidationError`` so they carry the same
``{field: [message, ...]}`` payload as field validation failures. Missing
records extend ``ObjectNotFoundError``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class EmptyCartError(ValidationError):
    """A purchase request was submitted without any items."""


class MixedFarmerError(ValidationError):
    """Items from more than one farmer were combined in a cart or request."""


class InvalidStateTransitionError(ValidationError):
    """The purchase request is not in a state that allows the operation."""


class AuthorizationError(ValidationError):
    """The acting user is not the party allowed to perform the operation."""


class InventoryUpdateError(ValidationError):
    """Stock could not be drawn for one of the purchased products."""


class NotFoundError(ObjectNotFoundError):
    """A purchase request, product, cart or profile does not exist."""
