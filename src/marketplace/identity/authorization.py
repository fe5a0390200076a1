"""Authorization checks backed by user profiles."""

from protean.utils.globals import current_domain

from marketplace.identity.profile import Profile, UserType
from marketplace.shared.errors import AuthorizationError, NotFoundError


def require_profile(user_id, user_type: UserType | None = None) -> Profile:
    """Return the acting user's profile, or raise `AuthorizationError`.

    A user without a profile, or with a profile of the wrong type, is not
    allowed to act.
    """
    if not user_id:
        raise AuthorizationError({"actor": ["An acting user is required"]})

    try:
        profile = current_domain.repository_for(Profile).load(user_id)
    except NotFoundError:
        raise AuthorizationError({"actor": [f"User {user_id} has no marketplace profile"]}) from None

    if user_type is not None and profile.user_type != user_type.value:
        raise AuthorizationError({"actor": [f"User {user_id} is not a {user_type.value}"]})

    return profile
